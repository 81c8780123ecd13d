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
Command-line interface for dtsdiff.
"""

import logging

import click
from . import __version__
from .compare.main import compare
from .strip.main import strip
from .profile.main import profile


@click.group()
@click.version_option(version=__version__, prog_name="dtsdiff")
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.pass_context
def main(ctx, debug):
    """dtsdiff: comment-insensitive, order-insensitive Device Tree Source comparison."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Add subcommands
main.add_command(compare)
main.add_command(strip)
main.add_command(profile)


if __name__ == "__main__":
    main()
