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
Persistence of named comparison profiles.

This module provides the ProfileStore class, which keeps saved comparisons
(two source paths plus the filter options to compare them with) in a JSON
file. Profiles only feed options into the comparison layer; the text engine
never sees them.
"""

import json
import os
import time
import uuid
from pathlib import Path
from typing import List, Optional, Union

import click

from .models import ComparisonProfile, FilterOptions
from .exceptions import ProfileError


class ProfileStore:
    """
    Manages saved comparison profiles on disk.

    Attributes:
        path: Location of the JSON profile file
    """

    ENV_VAR = "DTSDIFF_PROFILES"
    FILENAME = "profiles.json"

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Initialize ProfileStore.

        Args:
            path: Profile file location. Defaults to $DTSDIFF_PROFILES, then to
                  profiles.json in the dtsdiff application directory.
        """
        if path is None:
            path = os.environ.get(self.ENV_VAR) or Path(click.get_app_dir("dtsdiff")) / self.FILENAME
        self.path = Path(path)

    def load(self) -> List[ComparisonProfile]:
        """
        Read all profiles.

        Returns:
            Profiles in creation order; empty if the store does not exist yet

        Raises:
            ProfileError: If the store exists but cannot be read or decoded
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise ProfileError(f"Failed to read profiles from {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ProfileError(f"Profile store {self.path} is corrupt: {e}") from e

        try:
            return [ComparisonProfile.from_dict(entry) for entry in data.get('profiles', [])]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ProfileError(f"Profile store {self.path} has an invalid entry: {e}") from e

    def save(self, profiles: List[ComparisonProfile]) -> None:
        """Write all profiles, replacing the store."""
        payload = {'profiles': [profile.to_dict() for profile in profiles]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix('.tmp')
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise ProfileError(f"Failed to write profiles to {self.path}: {e}") from e

    def get(self, key: str) -> ComparisonProfile:
        """
        Look up a profile by name or id.

        Raises:
            ProfileError: If no profile matches
        """
        for profile in self.load():
            if profile.name == key or profile.id == key:
                return profile
        raise ProfileError(f"Comparison profile '{key}' not found")

    def add(self, name: str, left: Union[str, Path], right: Union[str, Path],
            options: Optional[FilterOptions] = None, auto_refresh: bool = False) -> ComparisonProfile:
        """
        Create and persist a new profile.

        Source paths are stored absolute so the profile can be run from any
        working directory.

        Raises:
            ProfileError: If the name is empty or already taken
        """
        if not name or not name.strip():
            raise ProfileError("Profile name must not be empty")

        profiles = self.load()
        if any(profile.name == name for profile in profiles):
            raise ProfileError(f"Comparison profile '{name}' already exists")

        profile = ComparisonProfile(
            id=uuid.uuid4().hex[:12],
            name=name,
            left=str(Path(left).resolve()),
            right=str(Path(right).resolve()),
            options=options or FilterOptions(),
            auto_refresh=auto_refresh,
            created=time.time()
        )
        profiles.append(profile)
        self.save(profiles)
        return profile

    def delete(self, key: str) -> ComparisonProfile:
        """Remove a profile by name or id and return it."""
        profile = self.get(key)
        self.save([p for p in self.load() if p.id != profile.id])
        return profile

    def toggle_auto_refresh(self, key: str) -> ComparisonProfile:
        """Flip the auto-refresh flag of a profile and return the updated profile."""
        profiles = self.load()
        for profile in profiles:
            if profile.name == key or profile.id == key:
                profile.auto_refresh = not profile.auto_refresh
                self.save(profiles)
                return profile
        raise ProfileError(f"Comparison profile '{key}' not found")

    def auto_refresh_profiles(self) -> List[ComparisonProfile]:
        return [profile for profile in self.load() if profile.auto_refresh]
