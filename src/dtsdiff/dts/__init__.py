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
DTS text engine: comment preprocessing, value canonicalization and
structural normalization.
"""

from .preprocessor import strip_comments
from .values import normalize_hex_values, normalize_arrays
from .normalizer import normalize_document, finalize_node, classify_line, MAX_DEPTH, UNKNOWN_SORT_KEY

__all__ = [
    'strip_comments',
    'normalize_hex_values',
    'normalize_arrays',
    'normalize_document',
    'finalize_node',
    'classify_line',
    'MAX_DEPTH',
    'UNKNOWN_SORT_KEY',
]
