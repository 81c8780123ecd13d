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
Compare subcommand implementation.
"""

import sys

import click

from ..comparator import DtsComparator
from ..exceptions import ParseError, SourceError
from ..models import ComparisonResult
from ..reporter import ComparisonReporter
from ..utils import STDIN_SOURCE, filter_options, build_filter_options


def read_stdin() -> str:
    return click.get_text_stream('stdin').read()


def emit_result(result: ComparisonResult, format: str, quiet: bool = False, verbose: bool = False) -> int:
    """
    Print a comparison result and return the exit code.

    Returns:
        0 if both sides are identical after filtering, 1 otherwise
    """
    if format != 'diff':
        reporter = ComparisonReporter()
        click.echo(reporter.generate_report(result, verbose, format))
        return 0 if result.identical else 1

    if result.identical:
        if not quiet:
            click.echo("✓ The files are identical after filtering")
        return 0

    if not quiet:
        for line in result.diff:
            click.echo(line)
        if verbose:
            click.echo(f"\n{result.changed_lines} changed lines", err=True)
    return 1


@click.command()
@click.argument('left', type=click.Path(dir_okay=False, allow_dash=True))
@click.argument('right', type=click.Path(dir_okay=False, allow_dash=True))
@filter_options
@click.option('--format', type=click.Choice(['diff', 'text', 'json', 'yaml']),
              default='diff', help='Output format (default: unified diff)')
@click.option('--context', '-U', type=int, default=3, help='Lines of diff context')
@click.option('--quiet', '-q', is_flag=True, help='Only report through the exit status')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def compare(left: str, right: str, format: str, context: int, quiet: bool, verbose: bool, **filter_flags):
    """
    Compare two DTS sources after comment filtering and normalization.

    Either side may be '-' to read from standard input, and .dtb blobs are
    decompiled before comparison. Exits 0 when the sources are identical
    after filtering and 1 when they differ.

    Example:

        # Ignore comments and formatting only
        dtsdiff compare board.dts build/zephyr.dts

        # Also ignore property/node order and value spelling
        dtsdiff compare --semantic board.dts build/zephyr.dts
    """
    try:
        if left == STDIN_SOURCE and right == STDIN_SOURCE:
            click.echo("Error: only one side can be read from standard input", err=True)
            sys.exit(2)

        options = build_filter_options(**filter_flags)
        comparator = DtsComparator(options, context_lines=context)

        left_text = _load(comparator, left)
        right_text = _load(comparator, right)

        result = comparator.compare_texts(
            left_text, right_text,
            left_label=_label(left), right_label=_label(right)
        )
        sys.exit(emit_result(result, format, quiet, verbose))

    except SourceError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(3)  # File I/O error
    except ParseError as e:
        click.echo(f"Parse error: {e}", err=True)
        sys.exit(4)  # DTB parsing error
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


def _load(comparator: DtsComparator, source: str) -> str:
    if source != STDIN_SOURCE:
        return comparator.load_source(source)

    text = read_stdin()
    if not text.strip():
        raise SourceError("Standard input is empty")
    return text


def _label(source: str) -> str:
    return "<stdin>" if source == STDIN_SOURCE else source
