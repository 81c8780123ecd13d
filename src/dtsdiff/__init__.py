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
dtsdiff: Device Tree Source comparison

Strips comments from DTS documents and normalizes their structure (sorted
properties and nodes, canonical hex and array values) so that semantically
equivalent documents compare as textually identical.
"""

__version__ = "0.1.0"

# Export main components for easy access
from .pipeline import process
from .models import FilterOptions, ComparisonProfile, ComparisonResult
from .comparator import DtsComparator
from .profiles import ProfileStore
from .exceptions import (
    DtsDiffError,
    SourceError,
    ParseError,
    ProfileError,
)

__all__ = [
    # Core entry point
    'process',
    # Models
    'FilterOptions',
    'ComparisonProfile',
    'ComparisonResult',
    # Orchestration
    'DtsComparator',
    'ProfileStore',
    # Exceptions
    'DtsDiffError',
    'SourceError',
    'ParseError',
    'ProfileError',
]
