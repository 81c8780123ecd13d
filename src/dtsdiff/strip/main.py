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
Strip subcommand implementation.

Runs a single source through the filter pipeline and prints or saves the
result, e.g. to inspect what the comparison actually sees.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from ..comparator import DtsComparator
from ..exceptions import ParseError, SourceError
from ..pipeline import process
from ..utils import STDIN_SOURCE, filter_options, build_filter_options


@click.command()
@click.argument('source', type=click.Path(dir_okay=False, allow_dash=True))
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output file (default: stdout)')
@filter_options
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def strip(source: str, output: Optional[str], verbose: bool, **filter_flags):
    """
    Strip comments from a DTS source and print the filtered text.

    With --semantic the text is also normalized (sorted properties and
    nodes, canonical hex and array values).
    """
    try:
        options = build_filter_options(**filter_flags)

        if source == STDIN_SOURCE:
            raw_text = click.get_text_stream('stdin').read()
        else:
            raw_text = DtsComparator(options).load_source(source)

        filtered = process(raw_text, options)

        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(filtered)
            click.echo(f"Generated: {output_path}")
        else:
            click.echo(filtered)

        if verbose:
            click.echo(
                f"✓ {len(raw_text.splitlines())} lines in, {len(filtered.splitlines())} lines out",
                err=True
            )

    except SourceError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(3)
    except ParseError as e:
        click.echo(f"Parse error: {e}", err=True)
        sys.exit(4)
    except OSError as e:
        click.echo(f"Error: Failed to write output: {e}", err=True)
        sys.exit(3)
