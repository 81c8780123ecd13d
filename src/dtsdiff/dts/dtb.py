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
Flattened device tree (DTB) to DTS text conversion.

Lets a compiled blob be compared against DTS source: the decompiled text is
fed through the same preprocessing and normalization as hand-written DTS.
"""

from typing import List

import libfdt

from ..exceptions import ParseError


FDT_MAGIC = 0xD00DFEED


def is_dtb(data: bytes) -> bool:
    """Whether data starts with the FDT magic number."""
    return len(data) >= 4 and int.from_bytes(data[:4], byteorder='big') == FDT_MAGIC


class DtbDecompiler:
    """Renders a DTB blob as DTS source text.

    Holds no per-blob state, so one instance can be shared between callers.
    """

    INDENT = '    '

    def decompile(self, dtb_data: bytes) -> str:
        """Convert DTB bytes to DTS text."""
        try:
            fdt = libfdt.Fdt(dtb_data)
            root = fdt.path_offset('/')
            lines = ['/dts-v1/;', '']
            lines.extend(self._node_to_dts(fdt, root, 0))
        except libfdt.FdtException as e:
            error_msg = f"FDT error: {e}"
            if hasattr(e, 'err'):
                error_msg += f" (error code: {e.err})"
            raise ParseError(f"Failed to decompile DTB: {error_msg}")
        except (ValueError, TypeError) as e:
            raise ParseError(f"Failed to decompile DTB: {e}")
        return '\n'.join(lines) + '\n'

    def _node_to_dts(self, fdt: libfdt.Fdt, node_offset: int, indent_level: int) -> List[str]:
        """Recursively convert one FDT node and its subnodes."""
        indent = self.INDENT * indent_level
        name = fdt.get_name(node_offset)
        lines = [f'{indent}{name or "/"} {{']

        prop_offset = fdt.first_property_offset(node_offset, libfdt.QUIET_NOTFOUND)
        while prop_offset >= 0:
            prop = fdt.get_property_by_offset(prop_offset)
            lines.append(property_to_dts(prop.name, bytes(prop), indent + self.INDENT))
            prop_offset = fdt.next_property_offset(prop_offset, libfdt.QUIET_NOTFOUND)

        child_offset = fdt.first_subnode(node_offset, libfdt.QUIET_NOTFOUND)
        while child_offset >= 0:
            lines.extend(self._node_to_dts(fdt, child_offset, indent_level + 1))
            child_offset = fdt.next_subnode(child_offset, libfdt.QUIET_NOTFOUND)

        lines.append(f'{indent}}};')
        return lines


def _is_printable(data: bytes) -> bool:
    return all(32 <= b < 127 or b in (9, 10, 13) for b in data)


def _as_strings(data: bytes):
    """Return the strings of a NUL-terminated string list, or None."""
    if not data.endswith(b'\x00'):
        return None
    parts = data[:-1].split(b'\x00')
    if not all(parts) or not all(_is_printable(part) for part in parts):
        return None
    try:
        return [part.decode('utf-8') for part in parts]
    except UnicodeDecodeError:
        return None


def property_to_dts(name: str, data: bytes, indent: str = '') -> str:
    """
    Format one FDT property as a DTS assignment.

    Printable NUL-terminated data becomes a string list, data whose length is
    a multiple of four becomes a cell array, anything else a byte string.
    """
    if not data:
        return f'{indent}{name};'

    strings = _as_strings(data)
    if strings is not None:
        quoted = ', '.join(f'"{s}"' for s in strings)
        return f'{indent}{name} = {quoted};'

    if len(data) % 4 == 0:
        cells = [
            hex(int.from_bytes(data[i:i + 4], byteorder='big'))
            for i in range(0, len(data), 4)
        ]
        return f'{indent}{name} = <{" ".join(cells)}>;'

    hex_data = ' '.join(f'{b:02x}' for b in data)
    return f'{indent}{name} = [{hex_data}];'
