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
Comparison of two DTS sources after filtering and normalization.
"""

import difflib
import logging
from pathlib import Path
from typing import Optional, Union

from .models import FilterOptions, ComparisonResult
from .exceptions import SourceError
from .pipeline import process
from .dts.dtb import DtbDecompiler, is_dtb


logger = logging.getLogger(__name__)


class DtsComparator:
    """
    Loads DTS/DTSI/DTB sources, runs them through ``process`` and diffs them.

    Attributes:
        options: FilterOptions applied to both sides
        decompiler: DtbDecompiler used for ``.dtb`` inputs
        context_lines: Number of context lines in the unified diff
    """

    DTB_SUFFIX = '.dtb'

    def __init__(self, options: Optional[FilterOptions] = None, context_lines: int = 3):
        self.options = options or FilterOptions()
        self.context_lines = context_lines
        self.decompiler = DtbDecompiler()

    def load_source(self, path: Union[str, Path]) -> str:
        """
        Read a source file as DTS text.

        Binary blobs (``.dtb`` suffix or FDT magic) are decompiled first.

        Raises:
            SourceError: If the file does not exist or cannot be read
            ParseError: If a DTB blob cannot be decoded
        """
        source_path = Path(path)
        if not source_path.is_file():
            raise SourceError(f"Input file '{source_path}' does not exist")

        try:
            data = source_path.read_bytes()
        except OSError as e:
            raise SourceError(f"Failed to read {source_path}: {e}")

        if source_path.suffix == self.DTB_SUFFIX or is_dtb(data):
            logger.debug("Decompiling %s as DTB", source_path)
            return self.decompiler.decompile(data)

        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise SourceError(f"{source_path} is not a UTF-8 text file: {e}")

    def compare_texts(self, left_text: str, right_text: str,
                      left_label: str = 'left', right_label: str = 'right') -> ComparisonResult:
        """Process both texts and compute their unified diff."""
        left_processed = process(left_text, self.options)
        right_processed = process(right_text, self.options)

        diff = []
        if left_processed != right_processed:
            diff = list(difflib.unified_diff(
                left_processed.splitlines(),
                right_processed.splitlines(),
                fromfile=f"{left_label} (filtered)",
                tofile=f"{right_label} (filtered)",
                n=self.context_lines,
                lineterm=''
            ))

        logger.debug("Compared %s (%d chars) with %s (%d chars): identical=%s",
                     left_label, len(left_processed), right_label, len(right_processed),
                     left_processed == right_processed)

        return ComparisonResult(
            left_label=left_label,
            right_label=right_label,
            left_text=left_processed,
            right_text=right_processed,
            options=self.options,
            diff=diff
        )

    def compare_files(self, left: Union[str, Path], right: Union[str, Path]) -> ComparisonResult:
        """Load and compare two source files."""
        return self.compare_texts(
            self.load_source(left),
            self.load_source(right),
            left_label=str(left),
            right_label=str(right)
        )
