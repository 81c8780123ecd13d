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
Tests for the brace-matching node normalizer.
"""

import pytest

from dtsdiff.dts.normalizer import (
    classify_line, node_sort_key, property_sort_key, extract_block,
    merge_property_lines, build_node, finalize_node, normalize_document,
    MAX_DEPTH, UNKNOWN_SORT_KEY
)
from dtsdiff.models import FilterOptions, LineKind


class TestLineClassification:
    """Test the per-line classifier."""

    @pytest.mark.parametrize("line", [
        "memory@2f0b3000 {",
        "    reserved-memory {",
        "cpuapp_data: memory@2f000000 {",
        "cpus{",
    ])
    def test_node_openers(self, line):
        """Test plain, addressed and labeled openers."""
        assert classify_line(line) is LineKind.NODE_OPENER

    @pytest.mark.parametrize("line", [
        "/ {",
        "&uart0 {",
        "#address-cells = <1>;",
        "reg = <0x1000 0x100>;",
        "};",
        "node@1,2 {",
    ])
    def test_non_openers(self, line):
        """Test root, references, properties and closers are not openers."""
        assert classify_line(line) is LineKind.PROPERTY

    def test_blank(self):
        """Test whitespace-only lines."""
        assert classify_line("   \t") is LineKind.BLANK


class TestSortKeys:
    """Test sort key extraction."""

    def test_label_wins(self):
        """Test a label is used as the node key."""
        assert node_sort_key("    cpuapp_data: memory@2f000000 {") == "cpuapp_data"

    def test_name_with_unit_address(self):
        """Test the unit address is part of the node key."""
        assert node_sort_key("    memory@2f0b3000 {") == "memory@2f0b3000"

    def test_hyphenated_name(self):
        """Test hyphens are part of node names."""
        assert node_sort_key("reserved-memory {") == "reserved-memory"

    def test_unknown_node(self):
        """Test unparsable declarations fall back to the sentinel."""
        assert node_sort_key("&uart0 {") == UNKNOWN_SORT_KEY

    @pytest.mark.parametrize("text,expected", [
        ('compatible = "a";', "compatible"),
        ("status;", "status"),
        ("#address-cells = <1>;", "#address-cells"),
        ("= <1>;", "= <1>;"),
    ])
    def test_property_keys(self, text, expected):
        """Test property keys stop at the first '=', ':' or ';'."""
        assert property_sort_key(text) == expected


class TestBlockExtraction:
    """Test brace-balanced span detection."""

    def test_nested_block(self):
        """Test the span ends where braces balance."""
        lines = ["a {", "  b {", "  };", "};", "c;"]

        assert extract_block(lines, 0) == 4

    def test_single_line_block(self):
        """Test an opener closed on the same line is one line long."""
        assert extract_block(["empty { };", "x;"], 0) == 1

    def test_unbalanced_runs_to_end(self):
        """Test a block missing its closer runs to the end of input."""
        assert extract_block(["a {", "x;", "y;"], 0) == 3


class TestPropertyMerging:
    """Test multi-line property joining."""

    def test_continuation_without_terminator(self):
        """Test a line without ';' or ',' continues."""
        lines = ["pinctrl-0 = <&a", "             &b>;"]

        assert merge_property_lines(lines) == ["pinctrl-0 = <&a &b>;"]

    def test_string_list_continuation(self):
        """Test a trailing ',' followed by a quoted line continues."""
        lines = ['compatible = "v,board",', '             "v,soc";']

        assert merge_property_lines(lines) == ['compatible = "v,board", "v,soc";']

    def test_comma_before_assignment_ends_property(self):
        """Test a trailing ',' followed by an assignment does not continue."""
        lines = ["a = <1>,", "b = <2>;"]

        assert merge_property_lines(lines) == ["a = <1>,", "b = <2>;"]

    def test_comma_before_boolean_property_merges(self):
        """Test the known ambiguity: a following line without '=' is merged."""
        lines = ['x = "a",', "y;"]

        assert merge_property_lines(lines) == ['x = "a", y;']

    def test_unterminated_tail_kept(self):
        """Test a dangling continuation at the end is still emitted."""
        assert merge_property_lines(["a = <1>;", "b = <2"]) == ["a = <1>;", "b = <2"]


class TestNodeFinalization:
    """Test recursive node normalization."""

    def test_properties_sorted_and_normalized(self, semantic_options):
        """Test properties are sorted, re-indented and value-normalized."""
        lines = [
            "node {",
            '  status = "okay";',
            "      reg = <0x1   0x2F>;",
            '  compatible = "a","b";',
            "};",
        ]

        assert finalize_node(lines, semantic_options) == [
            "node {",
            '    compatible = "a", "b";',
            "    reg = < 0x01 0x2f >;",
            '    status = "okay";',
            "};",
        ]

    def test_children_sorted_after_properties(self, semantic_options):
        """Test child nodes follow properties and are sorted by key."""
        lines = [
            "parent {",
            "    zeta {",
            "        a = <1>;",
            "    };",
            "    x = <2>;",
            "    alpha {",
            "        b = <3>;",
            "    };",
            "};",
        ]

        assert finalize_node(lines, semantic_options) == [
            "parent {",
            "    x = < 2 >;",
            "    alpha {",
            "        b = < 3 >;",
            "    };",
            "    zeta {",
            "        a = < 1 >;",
            "    };",
            "};",
        ]

    def test_short_node_unchanged(self, semantic_options):
        """Test a single-line node is returned verbatim."""
        assert finalize_node(["empty {};"], semantic_options) == ["empty {};"]

    def test_node_record(self, semantic_options):
        """Test the node tree built for a block."""
        lines = [
            "cpuapp_data: memory@2f000000 {",
            "    memory@2f0ba000 {",
            "    };",
            "    reg = <0x1>;",
            "};",
        ]

        node = build_node(lines, semantic_options)

        assert node.sort_key == "cpuapp_data"
        assert node.depth == 0
        assert [p.sort_key for p in node.properties] == ["reg"]
        assert node.properties[0].original_text == "reg = <0x1>;"
        assert node.properties[0].normalized_text == "reg = < 0x01 >;"
        assert [c.sort_key for c in node.children] == ["memory@2f0ba000"]
        assert node.children[0].depth == 1

    def test_values_untouched_without_value_options(self):
        """Test sorting alone does not rewrite values."""
        options = FilterOptions(semantic_comparison=True, sort_properties=True)
        lines = ["n {", "    b = <0xA>;", "    a = <1   2>;", "};"]

        assert finalize_node(lines, options) == ["n {", "    a = <1   2>;", "    b = <0xA>;", "};"]

    def test_depth_ceiling(self, semantic_options):
        """Test nodes nested past the ceiling are kept verbatim."""
        levels = MAX_DEPTH + 3
        lines = []
        for depth in range(levels):
            indent = "    " * depth
            lines.append(f"{indent}n{depth} {{")
            lines.append(f"{indent}    v = <0xA>;")
        for depth in reversed(range(levels)):
            lines.append(f"{'    ' * depth}}};")

        result = finalize_node(lines, semantic_options)

        assert len(result) == len(lines)
        assert sum(1 for line in result if line.strip() == "v = < 0x0a >;") == MAX_DEPTH + 1
        assert sum(1 for line in result if line.strip() == "v = <0xA>;") == levels - MAX_DEPTH - 1


class TestDocumentNormalization:
    """Test whole-document normalization."""

    def test_identity_without_sorting(self):
        """Test the structural pass is skipped unless sorting is enabled."""
        options = FilterOptions(semantic_comparison=True, normalize_hex_values=True)
        text = "b {\n    x = <0xA>;\n};\na {\n};"

        assert normalize_document(text, options) == text

    def test_nested_addresses_sorted(self, semantic_options, reserved_memory_dts):
        """Test sibling nodes sort by name including unit address."""
        result = normalize_document(reserved_memory_dts, semantic_options)

        assert result.index("memory@2f0b3000 {") < result.index("memory@2f0ba000 {")
        assert result.count("memory@2f0b3000 {") == 1
        assert result.count("memory@2f0ba000 {") == 1

    def test_labeled_children_sorted_by_label(self, semantic_options, reserved_memory_dts):
        """Test labeled nodes sort by label rather than by name."""
        result = normalize_document(reserved_memory_dts, semantic_options)

        assert result.index("cpuapp_data:") < result.index("cpurad_data:")

    def test_no_lines_lost_or_duplicated(self, semantic_options, reserved_memory_dts):
        """Test every opener and closer survives exactly once."""
        result = normalize_document(reserved_memory_dts, semantic_options)

        for marker in ("{", "};", "reg =", "#address-cells", "#size-cells"):
            assert result.count(marker) == reserved_memory_dts.count(marker)

    def test_exact_output(self, semantic_options):
        """Test the full canonical form of a small document."""
        text = "\n".join([
            "reserved-memory {",
            "    #size-cells = <1>;",
            "    #address-cells = <1>;",
            "",
            "    memory@2f0ba000 {",
            "        reg = <0x2f0ba000 0x1000>;",
            "    };",
            "    memory@2f0b3000 {",
            "        reg = <0x2F0B3000 0x7000>;",
            "    };",
            "};",
        ])

        assert normalize_document(text, semantic_options) == "\n".join([
            "reserved-memory {",
            "    #address-cells = < 1 >;",
            "    #size-cells = < 1 >;",
            "    memory@2f0b3000 {",
            "        reg = < 0x2f0b3000 0x7000 >;",
            "    };",
            "    memory@2f0ba000 {",
            "        reg = < 0x2f0ba000 0x1000 >;",
            "    };",
            "};",
        ])

    def test_top_level_sorted_and_free_lines_keep_slots(self, semantic_options):
        """Test top-level nodes sort while free lines stay in position."""
        text = "\n".join([
            "/dts-v1/;",
            "",
            "zeta {",
            "    a = <1>;",
            "};",
            "",
            "alpha {",
            "    b = <2>;",
            "};",
        ])

        assert normalize_document(text, semantic_options) == "\n".join([
            "/dts-v1/;",
            "",
            "alpha {",
            "    b = < 2 >;",
            "};",
            "",
            "zeta {",
            "    a = < 1 >;",
            "};",
        ])

    def test_top_level_order(self, semantic_options):
        """Test several top-level nodes come out in key order."""
        text = "\n".join([
            "reserved-memory {", "    x;", "};",
            "cpus {", "    y;", "};",
            "aliases {", "    serial0 = &uart0;", "};",
            "chosen {", "    z;", "};",
            "memory@80000000 {", '    device_type = "memory";', "}",
        ])

        result = normalize_document(text, semantic_options)
        order = [line for line in result.split("\n") if line.endswith("{")]

        assert order == [
            "aliases {", "chosen {", "cpus {", "memory@80000000 {", "reserved-memory {"
        ]

    def test_unbalanced_input_does_not_raise(self, semantic_options):
        """Test a node missing its closer degrades to a partial node."""
        result = normalize_document("broken {\n    a = <1>;\n", semantic_options)

        assert result == "broken {\n    a = < 1 >;\n"
