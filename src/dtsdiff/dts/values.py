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
Stateless rewrite rules applied to individual property lines.
"""

import re


_HEX_LITERAL = re.compile(r'0x([0-9a-fA-F]+)')
_CELL_ARRAY = re.compile(r'<\s*([^>]+)\s*>')
_STRING_LIST = re.compile(r'\s*=\s*("[^"]*"(?:\s*,\s*"[^"]*")*)\s*;')


def _canonical_hex(match: re.Match) -> str:
    digits = match.group(1).lower()
    if len(digits) % 2 == 1:
        digits = '0' + digits
    return f'0x{digits}'


def normalize_hex_values(line: str) -> str:
    """Lower-case hex literals and pad them to an even digit count.

    ``0x2F`` becomes ``0x2f`` and ``0x1`` becomes ``0x01``; decimal literals
    are left alone.
    """
    return _HEX_LITERAL.sub(_canonical_hex, line)


def _canonical_cells(match: re.Match) -> str:
    tokens = [token for token in match.group(1).split() if token]
    if not tokens:
        return '< >'
    return f"< {' '.join(tokens)} >"


def split_string_list(content: str):
    """Split a comma separated list of quoted strings on top-level commas.

    Commas inside a quoted string are part of the element.
    """
    elements = []
    current = []
    in_quotes = False
    for char in content:
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == ',' and not in_quotes:
            elements.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
    tail = ''.join(current).strip()
    if tail:
        elements.append(tail)
    return elements


def _canonical_string_list(match: re.Match) -> str:
    content = match.group(1)
    elements = split_string_list(content)
    if len(elements) > 1:
        return f" = {', '.join(elements)};"
    return f' = {content.strip()};'


def normalize_arrays(line: str) -> str:
    """Canonicalize ``< ... >`` cell arrays and quoted string lists.

    ``<0x1   0x2>`` becomes ``< 0x1 0x2 >`` and ``compatible="a","b";``
    becomes ``compatible = "a", "b";``.
    """
    line = _CELL_ARRAY.sub(_canonical_cells, line)
    return _STRING_LIST.sub(_canonical_string_list, line)
