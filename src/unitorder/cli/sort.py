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
"""'unitorder sort' and 'unitorder check' — order units from a metadata file."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.table import Table

from unitorder.cli.console import console, print_error
from unitorder.core.config import Config
from unitorder.kernel.exceptions import UnitOrderException
from unitorder.logging import StructlogAdapter
from unitorder.ordering.metadata import MappingMetadataProvider
from unitorder.ordering.sorter import PrioritySorter, SortReport

_EXISTING_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _load(
    metadata_file: Path,
    config_file: Path | None,
    profiles: tuple[str, ...],
) -> tuple[Config, MappingMetadataProvider, PrioritySorter]:
    config = Config.from_file(config_file, list(profiles)) if config_file else Config.defaults()
    StructlogAdapter().configure(config)
    provider = MappingMetadataProvider.from_file(metadata_file)
    return config, provider, PrioritySorter.from_config(provider, config)


@click.command()
@click.argument("metadata_file", type=_EXISTING_FILE)
@click.option("--unit", "units", multiple=True, help="Unit to sort (repeatable). Defaults to every unit in the file.")
@click.option("--config", "config_file", type=_EXISTING_FILE, default=None, help="unitorder configuration file.")
@click.option("--profile", "profiles", multiple=True, help="Configuration profile overlay (repeatable).")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["plain", "table", "json"]),
    default="plain",
    show_default=True,
)
@click.option("--explain", is_flag=True, help="Show the priority seed, constraints and dropped references.")
def sort_command(
    metadata_file: Path,
    units: tuple[str, ...],
    config_file: Path | None,
    profiles: tuple[str, ...],
    output_format: str,
    explain: bool,
) -> None:
    """Print the units of METADATA_FILE in application order."""
    try:
        config, provider, sorter = _load(metadata_file, config_file, profiles)
        report = sorter.sort_with_report(units or provider.units)
    except UnitOrderException as exc:
        print_error(str(exc))
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(_report_to_dict(report), indent=2))
    elif output_format == "table":
        table = Table(title="Application order", border_style="dim")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Unit", style="info")
        table.add_column("Priority")
        for position, unit in enumerate(report.order, start=1):
            priority = provider.priority_of(unit)
            table.add_row(str(position), unit, "default" if priority is None else str(priority))
        console.print(table)
    else:
        for unit in report.order:
            click.echo(unit)

    if explain:
        _print_explanation(report, config)


@click.command()
@click.argument("metadata_file", type=_EXISTING_FILE)
@click.option("--config", "config_file", type=_EXISTING_FILE, default=None, help="unitorder configuration file.")
def check_command(metadata_file: Path, config_file: Path | None) -> None:
    """Report cycles and dangling references in METADATA_FILE."""
    try:
        _, provider, sorter = _load(metadata_file, config_file, ())
    except UnitOrderException as exc:
        print_error(str(exc))
        sys.exit(1)

    graph = sorter.constraint_graph(provider.units)
    cycles = graph.find_cycles()

    console.print(f"\n[unitorder]Checked {len(graph.units)} units[/unitorder]\n")

    if graph.dropped:
        console.print("  [info]Dangling references (ignored):[/info]")
        for reference in graph.dropped:
            console.print(
                f"    [dim]-[/dim] {reference.declared_by} {reference.kind.value} {reference.target}",
                markup=False,
            )
        console.print()

    if not cycles:
        console.print("  [success]✓[/success] No ordering cycles\n")
        return

    for cycle in cycles:
        members = ", ".join(unit for unit in graph.units if unit in cycle)
        console.print("  [error]✗[/error] Cycle: ", end="")
        console.print(members, markup=False, highlight=False, soft_wrap=True)
    console.print()
    sys.exit(1)


def _report_to_dict(report: SortReport) -> dict:
    return {
        "order": list(report.order),
        "dropped": [
            {"unit": ref.declared_by, "kind": ref.kind.value, "target": ref.target}
            for ref in report.dropped
        ],
        "fixes": report.fixes,
    }


def _print_explanation(report: SortReport, config: Config) -> None:
    console.print("\n[info]Configuration:[/info]")
    for source in config.loaded_sources:
        console.print(f"  {source}", markup=False, soft_wrap=True)

    console.print("[info]Priority order:[/info]")
    console.print("  " + ", ".join(report.seed), markup=False, soft_wrap=True)

    console.print("[info]Constraints:[/info]")
    if not report.edges:
        console.print("  [dim]none[/dim]")
    for edge in report.edges:
        console.print(
            f"  {edge.predecessor} -> {edge.successor}  ({edge.declared_by} {edge.kind.value} {edge.target})",
            markup=False,
            soft_wrap=True,
        )

    console.print("[info]Dropped references:[/info]")
    if not report.dropped:
        console.print("  [dim]none[/dim]")
    for ref in report.dropped:
        console.print(f"  {ref.declared_by} {ref.kind.value} {ref.target}", markup=False, soft_wrap=True)

    console.print(f"[info]Reordering steps:[/info] {report.fixes}")
