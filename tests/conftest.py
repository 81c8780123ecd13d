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
Pytest configuration and fixtures for dtsdiff tests.
"""

import struct
import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

import libfdt
from dtsdiff.models import FilterOptions


BOARD_DTS = """/dts-v1/; // Board description
/ {
\tmodel = "Test Board";   /* marketing name */
\tcompatible = "vendor,board","vendor,soc";

\tchosen {
\t\tzephyr,console = &uart0;
\t};

\tsoc {
\t\t#address-cells = <1>;
\t\t#size-cells = <1>;

\t\tuart0: serial@40002000 {
\t\t\tcompatible = "nordic,nrf-uarte";
\t\t\treg = <0x40002000 0x1000>;
\t\t\tstatus = "okay";
\t\t};

\t\tgpio0: gpio@50000000 {
\t\t\treg = <0x50000000 0x200
\t\t\t       0x50000500 0x300>;
\t\t\tgpio-controller;
\t\t\t#gpio-cells = <2>;
\t\t};
\t};
};
"""

# Same board with sibling order, spacing, hex spelling and comments changed
BOARD_DTS_REORDERED = """/dts-v1/;
/ {
    model = "Test Board";
    compatible = "vendor,board","vendor,soc";

    chosen {
        zephyr,console = &uart0;
    };

    soc {
        #size-cells = <1>;
        #address-cells = <1>;

        gpio0: gpio@50000000 {
            #gpio-cells = <2>;
            gpio-controller;
            reg = <0x50000000 0x200 0x50000500 0x300>;
        };

        /* the console */
        uart0: serial@40002000 {
            status = "okay";
            reg = <0x40002000   0x1000>; // 4 KiB
            compatible = "nordic,nrf-uarte";
        };
    };
};
"""

RESERVED_MEMORY_DTS = """reserved-memory {
    #address-cells = <1>;
    #size-cells = <1>;

    cpuapp_data: memory@2f000000 {
        #address-cells = <1>;
        #size-cells = <1>;

        memory@2f0ba000 {
            reg = <0x2f0ba000 0x1000>;
        };
        memory@2f0b3000 {
            reg = <0x2f0b3000 0x7000>;
        };
    };

    cpurad_data: memory@1f000000 {
        reg = <0x1f000000 0x7000>;
    };
};"""


@pytest.fixture
def semantic_options():
    """Options with every normalization enabled."""
    return FilterOptions.semantic()


@pytest.fixture
def lexical_options():
    """Default options: comment and whitespace filtering only."""
    return FilterOptions()


@pytest.fixture
def board_dts():
    return BOARD_DTS


@pytest.fixture
def board_dts_reordered():
    return BOARD_DTS_REORDERED


@pytest.fixture
def reserved_memory_dts():
    return RESERVED_MEMORY_DTS


@pytest.fixture
def sample_dtb():
    """Build a small DTB with libfdt's sequential writer."""
    fdt_sw = libfdt.FdtSw()
    fdt_sw.finish_reservemap()

    fdt_sw.begin_node('')
    fdt_sw.property_string('compatible', 'vendor,board')
    fdt_sw.property_u32('#address-cells', 1)

    fdt_sw.begin_node('memory@80000000')
    fdt_sw.property_string('device_type', 'memory')
    fdt_sw.property('reg', struct.pack('>II', 0x80000000, 0x20000000))
    fdt_sw.end_node()

    fdt_sw.begin_node('chosen')
    fdt_sw.property('ranges', b'')
    fdt_sw.end_node()

    fdt_sw.end_node()

    dtb = fdt_sw.as_fdt()
    dtb.pack()
    return bytes(dtb.as_bytearray())


@pytest.fixture
def write_file(tmp_path):
    """Write text or bytes into tmp_path and return the path."""
    def _write(name, content):
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding='utf-8')
        return path
    return _write
