# Copyright 2026 Firefly Software Solutions Inc.
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
"""unitorder CLI — sort and check configuration unit metadata."""

from __future__ import annotations

import click

from unitorder import __version__
from unitorder.cli.console import print_banner


class UnitOrderCLI(click.Group):
    """Custom Click group that shows the banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=UnitOrderCLI)
@click.version_option(version=__version__, prog_name="unitorder")
def cli() -> None:
    """unitorder — deterministic ordering of configuration units."""


from unitorder.cli.sort import check_command, sort_command  # noqa: E402

cli.add_command(sort_command, name="sort")
cli.add_command(check_command, name="check")
