# Copyright 2025 Multikernel Technologies, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
Structural normalization of DTS text.

Segments preprocessed text into a tree of ``Node`` records by brace counting
rather than a grammar, then re-emits it with properties and child nodes
sorted at every level and property values canonicalized. Two documents that
differ only in sibling order or value spelling normalize to the same text.

The pass is a pure function of (text, options). Nodes are built bottom-up
from matched line ranges and discarded after rendering.
"""

import logging
import re
from operator import attrgetter
from typing import List

from ..models import FilterOptions, LineKind, Node, Property
from .values import normalize_hex_values, normalize_arrays


logger = logging.getLogger(__name__)

# Nodes nested deeper than this are emitted verbatim. Guarantees termination
# on mis-lexed input with unbalanced braces.
MAX_DEPTH = 5

# Sort key for openers whose name cannot be extracted; sorts after real names.
UNKNOWN_SORT_KEY = 'zzz_unknown'

PROPERTY_INDENT = '    '

_NODE_OPENER = re.compile(r'^[A-Za-z0-9_-]+(@[0-9A-Fa-f]+)?\s*\{')
_LABELED_OPENER = re.compile(r'^[A-Za-z0-9_-]+\s*:\s*.+\{')
_NODE_LABEL = re.compile(r'^\s*([A-Za-z0-9_-]+)\s*:')
_NODE_NAME = re.compile(r'^\s*([A-Za-z0-9_-]+(?:@[0-9A-Fa-f]+)?)\s*\{')
_PROPERTY_NAME = re.compile(r'^([^=;:]+)')
_LEADING_WS = re.compile(r'^(\s*)')


def classify_line(line: str) -> LineKind:
    """Classify one line as a node opener, a blank line or a property line."""
    trimmed = line.strip()
    if not trimmed:
        return LineKind.BLANK
    if _NODE_OPENER.match(trimmed) or _LABELED_OPENER.match(trimmed):
        return LineKind.NODE_OPENER
    return LineKind.PROPERTY


def node_sort_key(declaration_line: str) -> str:
    """
    Derive the ordering key of a node from its declaration line.

    The label wins when present (``cpuapp_data: memory@2f000000 {`` sorts as
    ``cpuapp_data``), otherwise the node name with its unit address
    (``memory@2f0b3000``).
    """
    match = _NODE_LABEL.match(declaration_line) or _NODE_NAME.match(declaration_line)
    if not match:
        return UNKNOWN_SORT_KEY
    return match.group(1).strip()


def property_sort_key(text: str) -> str:
    """Return the text before the first ``=``, ``:`` or ``;``."""
    match = _PROPERTY_NAME.match(text)
    if not match:
        return text
    return match.group(1).strip()


def brace_delta(line: str) -> int:
    return line.count('{') - line.count('}')


def extract_block(lines: List[str], start: int) -> int:
    """
    Find the end of the brace-balanced block opened at ``lines[start]``.

    Returns the index one past the line where the open-minus-close count
    returns to zero. Unbalanced input runs to the end of ``lines``.
    """
    balance = 0
    index = start
    while True:
        balance += brace_delta(lines[index])
        index += 1
        if balance <= 0 or index >= len(lines):
            return index


def merge_property_lines(lines: List[str]) -> List[str]:
    """
    Join continuation lines into logical properties.

    A line without a trailing ``;`` or ``,`` continues onto the next one. A
    line ending in ``,`` also continues when the next line starts with a quote
    or has no ``=``. Known limitation: a value legitimately ending in ``,``
    followed by an unrelated property without ``=`` is merged with it.
    """
    merged = []
    current = ''
    for index, line in enumerate(lines):
        text = line.strip()
        if not text:
            continue

        current = f'{current} {text}' if current else text
        if not text.endswith((';', ',')):
            continue

        if text.endswith(',') and index + 1 < len(lines):
            following = lines[index + 1].strip()
            if following.startswith('"') or '=' not in following:
                continue

        merged.append(current)
        current = ''

    if current.strip():
        merged.append(current)
    return merged


def build_property(text: str, options: FilterOptions) -> Property:
    normalized = text
    if options.normalize_hex_values:
        normalized = normalize_hex_values(normalized)
    if options.normalize_arrays:
        normalized = normalize_arrays(normalized)
    return Property(
        original_text=text,
        normalized_text=normalized,
        sort_key=property_sort_key(text)
    )


def build_node(lines: List[str], options: FilterOptions, depth: int = 0) -> Node:
    """
    Build a ``Node`` from the line range of one brace-balanced block.

    Child blocks are built first at ``depth + 1``. Blocks shorter than two
    lines or deeper than ``MAX_DEPTH`` are kept as opaque raw lines.
    """
    declaration = lines[0]
    sort_key = node_sort_key(declaration)

    if len(lines) < 2 or depth > MAX_DEPTH:
        if depth > MAX_DEPTH:
            logger.debug("Depth %d exceeds ceiling, keeping %r verbatim", depth, declaration.strip())
        return Node(
            declaration_line=declaration,
            closing_line=lines[-1],
            depth=depth,
            sort_key=sort_key,
            raw_lines=list(lines)
        )

    body = lines[1:-1]
    candidates = []
    children = []
    index = 0
    while index < len(body):
        kind = classify_line(body[index])
        if kind is LineKind.BLANK:
            index += 1
        elif kind is LineKind.NODE_OPENER:
            end = extract_block(body, index)
            children.append(build_node(body[index:end], options, depth + 1))
            index = end
        else:
            candidates.append(body[index])
            index += 1

    properties = [
        build_property(text, options)
        for text in merge_property_lines(candidates)
        if text.strip() not in ('', '}', '};')
    ]

    if options.sort_properties:
        properties.sort(key=attrgetter('sort_key'))
        if len(children) > 1:
            children.sort(key=attrgetter('sort_key'))

    return Node(
        declaration_line=declaration,
        closing_line=lines[-1],
        depth=depth,
        sort_key=sort_key,
        properties=properties,
        children=children
    )


def render_node(node: Node) -> List[str]:
    """
    Serialize a node back into lines.

    Properties are re-indented one unit past the declaration line. Children
    keep the indentation of their own declaration lines.
    """
    if node.is_opaque:
        return list(node.raw_lines)

    indent = _LEADING_WS.match(node.declaration_line).group(1) + PROPERTY_INDENT
    result = [node.declaration_line]
    for prop in node.properties:
        result.append(indent + prop.normalized_text.strip())
    for child in node.children:
        result.extend(render_node(child))
    result.append(node.closing_line)
    return result


def finalize_node(lines: List[str], options: FilterOptions, depth: int = 0) -> List[str]:
    """Normalize the lines of a single node block."""
    return render_node(build_node(lines, options, depth))


def normalize_document(content: str, options: FilterOptions) -> str:
    """
    Normalize a whole preprocessed document.

    Top-level nodes are sorted by key. Free lines (anything that is not part
    of a node block) stay in their original slot: lines before the first
    node come first, the lines between the k-th and (k+1)-th original nodes
    follow the k-th emitted node, and trailing lines come last.

    Identity when ``options.sort_properties`` is false.
    """
    if not options.sort_properties:
        return content

    lines = content.split('\n')
    leading: List[str] = []
    nodes: List[Node] = []
    gaps: List[List[str]] = []

    index = 0
    while index < len(lines):
        if classify_line(lines[index]) is LineKind.NODE_OPENER:
            end = extract_block(lines, index)
            logger.debug("Top-level node %r spans lines %d-%d", lines[index].strip(), index, end - 1)
            nodes.append(build_node(lines[index:end], options))
            gaps.append([])
            index = end
        else:
            (gaps[-1] if gaps else leading).append(lines[index])
            index += 1

    ordered = sorted(nodes, key=attrgetter('sort_key'))
    logger.debug("Top-level order: %s", [node.sort_key for node in ordered])

    output = list(leading)
    for node, gap in zip(ordered, gaps):
        output.extend(render_node(node))
        output.extend(gap)
    return '\n'.join(output)
