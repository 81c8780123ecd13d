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
Saved comparison profile commands.

Profiles pair two source files with the filter options to compare them
with, so a recurring comparison (e.g. source tree vs. build output) can be
re-run by name.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import click

from ..comparator import DtsComparator
from ..exceptions import ParseError, ProfileError, SourceError
from ..models import ComparisonProfile
from ..profiles import ProfileStore
from ..utils import filter_options, build_filter_options, short_path
from ..compare.main import emit_result


@click.group()
@click.option('--store', type=click.Path(dir_okay=False), envvar=ProfileStore.ENV_VAR,
              help='Profile store file (default: per-user application directory)')
@click.pass_context
def profile(ctx, store: Optional[str]):
    """Manage saved comparison profiles."""
    ctx.ensure_object(dict)
    ctx.obj["store"] = ProfileStore(store)


def _store(ctx) -> ProfileStore:
    return ctx.obj["store"]


def _describe(item: ComparisonProfile) -> str:
    refresh = "auto-refresh" if item.auto_refresh else "manual"
    return f"{item.name}  {short_path(item.left)} ↔ {short_path(item.right)}  [{refresh}]"


def _run_profile(item: ComparisonProfile, format: str, quiet: bool, verbose: bool) -> int:
    """Run one profile and return its exit code."""
    if not Path(item.left).is_file() or not Path(item.right).is_file():
        click.echo(f"Error: One or both files in comparison '{item.name}' no longer exist", err=True)
        return 3

    comparator = DtsComparator(item.options)
    result = comparator.compare_files(item.left, item.right)
    return emit_result(result, format, quiet, verbose)


@profile.command('save')
@click.argument('name')
@click.argument('left', type=click.Path(exists=True, dir_okay=False))
@click.argument('right', type=click.Path(exists=True, dir_okay=False))
@click.option('--auto-refresh', is_flag=True, help='Include this profile in "profile refresh"')
@filter_options
@click.pass_context
def save(ctx, name: str, left: str, right: str, auto_refresh: bool, **filter_flags):
    """Save a named comparison of LEFT and RIGHT."""
    try:
        options = build_filter_options(**filter_flags)
        item = _store(ctx).add(name, left, right, options, auto_refresh)
        click.echo(f"✓ Comparison profile \"{item.name}\" saved (id: {item.id})")
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@profile.command('list')
@click.pass_context
def list_profiles(ctx):
    """List saved comparison profiles."""
    try:
        profiles = _store(ctx).load()
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not profiles:
        click.echo("No saved comparison profiles found")
        return

    for item in profiles:
        click.echo(_describe(item))


@profile.command('show')
@click.argument('name')
@click.pass_context
def show(ctx, name: str):
    """Show full details of a profile."""
    try:
        item = _store(ctx).get(name)
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    created = datetime.fromtimestamp(item.created).strftime("%Y-%m-%d %H:%M:%S")
    click.echo(f"Comparison: {item.name}")
    click.echo(f"  ID: {item.id}")
    click.echo(f"  Left file: {item.left}")
    click.echo(f"  Right file: {item.right}")
    click.echo(f"  Auto-refresh: {'Enabled' if item.auto_refresh else 'Disabled'}")
    click.echo(f"  Created: {created}")
    click.echo("  Options:")
    for option, enabled in item.options.to_dict().items():
        click.echo(f"    {option}: {'yes' if enabled else 'no'}")


@profile.command('run')
@click.argument('name')
@click.option('--format', type=click.Choice(['diff', 'text', 'json', 'yaml']),
              default='diff', help='Output format (default: unified diff)')
@click.option('--quiet', '-q', is_flag=True, help='Only report through the exit status')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.pass_context
def run(ctx, name: str, format: str, quiet: bool, verbose: bool):
    """Run a saved comparison."""
    try:
        item = _store(ctx).get(name)
        sys.exit(_run_profile(item, format, quiet, verbose))
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except SourceError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(3)
    except ParseError as e:
        click.echo(f"Parse error: {e}", err=True)
        sys.exit(4)


@profile.command('delete')
@click.argument('name')
@click.pass_context
def delete(ctx, name: str):
    """Delete a saved comparison profile."""
    try:
        item = _store(ctx).delete(name)
        click.echo(f"✓ Deleted comparison profile \"{item.name}\"")
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@profile.command('toggle')
@click.argument('name')
@click.pass_context
def toggle(ctx, name: str):
    """Toggle auto-refresh for a profile."""
    try:
        item = _store(ctx).toggle_auto_refresh(name)
        status = "enabled" if item.auto_refresh else "disabled"
        click.echo(f"✓ Auto-refresh {status} for \"{item.name}\"")
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@profile.command('refresh')
@click.option('--verbose', '-v', is_flag=True, help='Print diffs of differing comparisons')
@click.pass_context
def refresh(ctx, verbose: bool):
    """
    Re-run every profile with auto-refresh enabled.

    Exits 0 only if every comparison is identical after filtering.
    """
    try:
        profiles = _store(ctx).auto_refresh_profiles()
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not profiles:
        click.echo("No profiles with auto-refresh enabled")
        return

    click.echo(f"Refreshing {len(profiles)} comparison(s)...")
    failures = 0
    for item in profiles:
        try:
            if not Path(item.left).is_file() or not Path(item.right).is_file():
                click.echo(f"  ✗ {item.name}: one or both files no longer exist")
                failures += 1
                continue
            result = DtsComparator(item.options).compare_files(item.left, item.right)
        except (SourceError, ParseError) as e:
            click.echo(f"  ✗ {item.name}: {e}")
            failures += 1
            continue

        if result.identical:
            click.echo(f"  ✓ {item.name}: identical")
        else:
            click.echo(f"  ✗ {item.name}: {result.changed_lines} changed lines")
            failures += 1
            if verbose:
                for line in result.diff:
                    click.echo(f"    {line}")

    sys.exit(1 if failures else 0)
