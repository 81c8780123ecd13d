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
Shared helpers for the dtsdiff subcommands.

This module provides the click option set that maps command-line flags onto
FilterOptions, plus small display helpers.
"""

from typing import Optional
from pathlib import Path

import click

from .models import FilterOptions


STDIN_SOURCE = "-"


def filter_options(func):
    """Attach the filter option flags to a click command."""
    decorators = [
        click.option('--strip-line-comments/--keep-line-comments', 'strip_line_comments',
                     default=True, show_default=True, help='Remove // comments'),
        click.option('--strip-block-comments/--keep-block-comments', 'strip_block_comments',
                     default=True, show_default=True, help='Remove /* */ comments'),
        click.option('--preserve-strings/--no-preserve-strings', 'preserve_string_literals',
                     default=True, show_default=True,
                     help='Do not treat comment markers inside quotes as comments'),
        click.option('--normalize-whitespace/--keep-whitespace', 'normalize_whitespace',
                     default=True, show_default=True,
                     help='Canonicalize indentation and collapse blank lines'),
        click.option('--semantic', is_flag=True,
                     help='Sort properties and nodes and normalize values'),
        click.option('--hex/--no-hex', 'normalize_hex_values', default=None,
                     help='Normalize hex literals; only takes effect with --sort '
                          '(default: follows --semantic)'),
        click.option('--arrays/--no-arrays', 'normalize_arrays', default=None,
                     help='Normalize <...> arrays and string lists; only takes effect with --sort '
                          '(default: follows --semantic)'),
        click.option('--sort/--no-sort', 'sort_properties', default=None,
                     help='Sort properties and nodes; required for any structural normalization '
                          '(default: follows --semantic)'),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def build_filter_options(strip_line_comments: bool = True,
                         strip_block_comments: bool = True,
                         preserve_string_literals: bool = True,
                         normalize_whitespace: bool = True,
                         semantic: bool = False,
                         normalize_hex_values: Optional[bool] = None,
                         normalize_arrays: Optional[bool] = None,
                         sort_properties: Optional[bool] = None) -> FilterOptions:
    """
    Build FilterOptions from the values collected by ``filter_options``.

    The semantic sub-flags default to the value of ``semantic``. Explicitly
    enabling any of them turns on the semantic stage as well.
    """
    def resolve(value: Optional[bool]) -> bool:
        return semantic if value is None else value

    hex_values = resolve(normalize_hex_values)
    arrays = resolve(normalize_arrays)
    sort = resolve(sort_properties)

    return FilterOptions(
        strip_line_comments=strip_line_comments,
        strip_block_comments=strip_block_comments,
        preserve_string_literals=preserve_string_literals,
        normalize_whitespace=normalize_whitespace,
        semantic_comparison=semantic or hex_values or arrays or sort,
        normalize_hex_values=hex_values,
        normalize_arrays=arrays,
        sort_properties=sort
    )


def short_path(full_path: str) -> str:
    """Shorten a path to its last two components for display."""
    parts = Path(full_path).parts
    if len(parts) <= 3:
        return str(Path(*parts)) if parts else full_path
    return ".../" + "/".join(parts[-2:])
