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
Data models for DTS normalization and comparison.
"""

from dataclasses import dataclass, field, fields, asdict
from typing import List, Dict, Optional, Any
from enum import Enum


class LineKind(Enum):
    """Classification of a single DTS line inside a node body."""
    NODE_OPENER = "node-opener"
    PROPERTY = "property"
    BLANK = "blank"


@dataclass
class FilterOptions:
    """
    Options controlling preprocessing and semantic normalization.

    The lexical flags drive the comment/whitespace preprocessor. The semantic
    flags gate the structural pass: ``semantic_comparison`` enables it at all,
    and ``sort_properties`` is the trigger for the whole node pass (property
    and node sorting, value normalization).
    """
    strip_line_comments: bool = True
    strip_block_comments: bool = True
    preserve_string_literals: bool = True
    normalize_whitespace: bool = True
    semantic_comparison: bool = False
    normalize_hex_values: bool = False
    normalize_arrays: bool = False
    sort_properties: bool = False

    @classmethod
    def semantic(cls) -> 'FilterOptions':
        """Options with every lexical and semantic normalization enabled."""
        return cls(
            semantic_comparison=True,
            normalize_hex_values=True,
            normalize_arrays=True,
            sort_properties=True
        )

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'FilterOptions':
        """Build options from a mapping, ignoring unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: bool(v) for k, v in data.items() if k in known})


@dataclass
class Property:
    """A logical property line (possibly merged from several source lines)."""
    original_text: str
    normalized_text: str
    sort_key: str


@dataclass
class Node:
    """
    A brace-delimited DTS node parsed from a contiguous range of lines.

    Nodes are rebuilt on every normalization pass and never mutated after
    construction. When ``raw_lines`` is set the node was not parsed (too short
    or past the recursion ceiling) and is emitted verbatim.
    """
    declaration_line: str
    closing_line: str
    depth: int
    sort_key: str
    properties: List[Property] = field(default_factory=list)
    children: List['Node'] = field(default_factory=list)
    raw_lines: Optional[List[str]] = None

    @property
    def is_opaque(self) -> bool:
        """Whether this node is carried through without structural processing."""
        return self.raw_lines is not None


@dataclass
class ComparisonProfile:
    """A saved, named comparison between two source files."""
    id: str
    name: str
    left: str
    right: str
    options: FilterOptions
    auto_refresh: bool = False
    created: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['options'] = self.options.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ComparisonProfile':
        return cls(
            id=str(data['id']),
            name=str(data['name']),
            left=str(data['left']),
            right=str(data['right']),
            options=FilterOptions.from_dict(data.get('options')),
            auto_refresh=bool(data.get('auto_refresh', False)),
            created=float(data.get('created', 0.0))
        )


@dataclass
class ComparisonResult:
    """Result of comparing two processed DTS sources."""
    left_label: str
    right_label: str
    left_text: str
    right_text: str
    options: FilterOptions
    diff: List[str] = field(default_factory=list)

    @property
    def identical(self) -> bool:
        return self.left_text == self.right_text

    @property
    def changed_lines(self) -> int:
        """Number of added plus removed lines in the diff body."""
        return sum(
            1 for line in self.diff
            if line[:1] in ('+', '-') and not line.startswith(('+++', '---'))
        )
