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
Exception classes for dtsdiff input and persistence errors.

The normalization core is total over arbitrary text and raises none of these;
they are used by the comparison and profile layers only.
"""


class DtsDiffError(Exception):
    """Base exception for all dtsdiff errors."""


class SourceError(DtsDiffError):
    """Raised when an input source cannot be read or has an unsupported format."""


class ParseError(DtsDiffError):
    """Raised when decoding a DTB blob fails."""


class ProfileError(DtsDiffError):
    """Raised when a saved comparison profile cannot be found or stored."""
