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
Tests for dtsdiff data models.
"""

from dtsdiff.models import (
    FilterOptions, ComparisonProfile, ComparisonResult, Node, Property
)


class TestFilterOptions:
    """Test FilterOptions defaults and conversion."""

    def test_defaults(self):
        """Test lexical filtering is on and semantic normalization off."""
        options = FilterOptions()

        assert options.strip_line_comments
        assert options.strip_block_comments
        assert options.preserve_string_literals
        assert options.normalize_whitespace
        assert not options.semantic_comparison
        assert not options.sort_properties

    def test_semantic(self):
        """Test the all-on preset."""
        options = FilterOptions.semantic()

        assert options.semantic_comparison
        assert options.normalize_hex_values
        assert options.normalize_arrays
        assert options.sort_properties

    def test_from_dict_ignores_unknown_keys(self):
        """Test stored options from other versions still load."""
        options = FilterOptions.from_dict({'sort_properties': True, 'watch': True})

        assert options.sort_properties
        assert options.strip_line_comments

    def test_from_empty(self):
        """Test missing options fall back to defaults."""
        assert FilterOptions.from_dict(None) == FilterOptions()


class TestComparisonProfile:
    """Test ComparisonProfile serialization."""

    def test_dict_conversion(self):
        """Test to_dict/from_dict preserve every field."""
        profile = ComparisonProfile(
            id='abc123', name='board', left='/a.dts', right='/b.dts',
            options=FilterOptions.semantic(), auto_refresh=True, created=1.5
        )

        data = profile.to_dict()

        assert data['options']['normalize_arrays'] is True
        assert ComparisonProfile.from_dict(data) == profile

    def test_optional_fields(self):
        """Test older entries without optional fields."""
        profile = ComparisonProfile.from_dict(
            {'id': 'x', 'name': 'n', 'left': 'l', 'right': 'r'}
        )

        assert not profile.auto_refresh
        assert profile.options == FilterOptions()


class TestComparisonResult:
    """Test ComparisonResult properties."""

    def test_changed_lines_skips_headers(self):
        """Test file headers are not counted as changes."""
        result = ComparisonResult(
            left_label='a', right_label='b', left_text='x', right_text='y',
            options=FilterOptions(),
            diff=['--- a', '+++ b', '@@ -1 +1 @@', '-x', '+y', ' z']
        )

        assert not result.identical
        assert result.changed_lines == 2


class TestNode:
    """Test Node records."""

    def test_opaque(self):
        """Test a node with raw lines is opaque."""
        raw = Node('n {', '};', 6, 'n', raw_lines=['n {', '};'])
        parsed = Node('n {', '};', 0, 'n', properties=[Property('a;', 'a;', 'a')])

        assert raw.is_opaque
        assert not parsed.is_opaque
