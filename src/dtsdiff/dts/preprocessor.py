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
Lexical preprocessing of DTS text.

Strips ``//`` and ``/* */`` comments while respecting string literals and
optionally canonicalizes indentation and spacing. This runs before the node
normalizer, which never sees comments.
"""

import re
from typing import List

from ..models import FilterOptions


INDENT_WIDTH = 4
TAB_WIDTH = 4

_HORIZONTAL_WS = ' \t'
_BLANK_RUNS = re.compile(r'\n{3,}')


def _is_escaped(content: str, pos: int) -> bool:
    """Whether the character at pos is preceded by an odd run of backslashes."""
    count = 0
    pos -= 1
    while pos >= 0 and content[pos] == '\\':
        count += 1
        pos -= 1
    return count % 2 == 1


def _measure_whitespace(content: str, pos: int):
    """Return (end, columns) for the run of tabs/spaces starting at pos."""
    columns = 0
    while pos < len(content) and content[pos] in _HORIZONTAL_WS:
        columns += TAB_WIDTH if content[pos] == '\t' else 1
        pos += 1
    return pos, columns


def strip_comments(content: str, options: FilterOptions) -> str:
    """
    Remove comments from DTS content and normalize whitespace.

    Args:
        content: Raw DTS document text
        options: Filter options; only the lexical flags are consulted

    Returns:
        Preprocessed text. Unterminated block comments consume the rest of
        the input.
    """
    out: List[str] = []
    i = 0
    length = len(content)
    in_block_comment = False
    in_line_comment = False
    in_string = False
    delimiter = ''
    line_start = True

    while i < length:
        char = content[i]
        next_char = content[i + 1] if i + 1 < length else ''

        if not in_block_comment and not in_line_comment and options.preserve_string_literals:
            if char in ('"', "'") and not _is_escaped(content, i):
                if not in_string:
                    in_string = True
                    delimiter = char
                elif char == delimiter:
                    in_string = False
                    delimiter = ''
                out.append(char)
                i += 1
                line_start = False
                continue

        if in_string:
            # Inside a literal everything is copied verbatim
            out.append(char)
            line_start = char == '\n'
            i += 1
            continue

        if not in_line_comment and options.strip_block_comments and char == '/' and next_char == '*':
            in_block_comment = True
            i += 2
            continue

        if in_block_comment:
            if char == '*' and next_char == '/':
                in_block_comment = False
                i += 2
                while i < length and content[i] in _HORIZONTAL_WS:
                    i += 1
            else:
                i += 1
            continue

        if not in_line_comment and options.strip_line_comments and char == '/' and next_char == '/':
            in_line_comment = True
            i += 2
            continue

        if in_line_comment:
            if char == '\r' and next_char != '\n':
                # A lone CR ends the comment and is kept as is
                in_line_comment = False
                out.append(char)
                line_start = True
                i += 1
                continue
            if char in ('\n', '\r'):
                in_line_comment = False
                line_start = True
                # the terminating newline is handled as normal text below
            else:
                i += 1
                continue

        if options.normalize_whitespace:
            if char in ('\n', '\r'):
                out.append('\n')
                i += 2 if char == '\r' and next_char == '\n' else 1
                line_start = True
                continue

            if char in _HORIZONTAL_WS:
                i, columns = _measure_whitespace(content, i)
                if line_start:
                    if columns > 0 and i < length:
                        out.append(' ' * INDENT_WIDTH * (columns // INDENT_WIDTH))
                        out.append(' ' * (columns % INDENT_WIDTH))
                    line_start = False
                elif columns > 0 and i < length:
                    out.append(' ')
                continue

        out.append(char)
        line_start = char == '\n'
        i += 1

    return _cleanup(''.join(out))


def _cleanup(text: str) -> str:
    """Strip trailing whitespace and collapse runs of blank lines."""
    lines = [line.rstrip() for line in text.split('\n')]
    last = len(lines) - 1
    kept = []
    for index, line in enumerate(lines):
        if not line:
            keep = (
                index == 0 or index == last
                or bool(lines[index - 1]) or bool(lines[index + 1])
            )
            if not keep:
                continue
        kept.append(line)
    return _BLANK_RUNS.sub('\n\n', '\n'.join(kept))
