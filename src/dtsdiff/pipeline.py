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
Single entry point of the DTS text engine.
"""

from typing import Optional

from .models import FilterOptions
from .dts.preprocessor import strip_comments
from .dts.normalizer import normalize_document


def process(raw_text: str, options: Optional[FilterOptions] = None) -> str:
    """
    Preprocess DTS text and, when enabled, normalize its structure.

    The result of ``process`` is canonical: processing it again with the same
    options returns it unchanged.

    Args:
        raw_text: DTS document text
        options: Filter options, defaults to ``FilterOptions()``

    Returns:
        Processed text
    """
    if options is None:
        options = FilterOptions()

    text = strip_comments(raw_text, options)
    if not options.semantic_comparison:
        return text
    return normalize_document(text, options)
