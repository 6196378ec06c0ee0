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
"""Priority sorter — merge explicit priorities with before/after constraints.

Sorting runs in two phases over a fact table built fresh for every call:

1. **Priority**: a stable sort by explicit priority (lower runs earlier;
   units without one share ``default_order``). Declaration order breaks
   ties.
2. **Refinement**: the priority order is adjusted, one move at a time,
   until every retained before/after edge is satisfied (see
   :mod:`unitorder.ordering.refinement`).

Cycles are detected up front from the strongly connected components of the
constraint graph, so a contradictory configuration is always reported and
never silently reordered.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from unitorder.config.properties import SorterProperties, UnresolvedReferencePolicy
from unitorder.core.config import Config
from unitorder.ordering.exceptions import OrderingCycleError, UnresolvedReferenceWarning
from unitorder.ordering.graph import ConstraintGraph, DroppedReference, OrderingEdge
from unitorder.ordering.metadata import MetadataProvider, UnitMetadata, snapshot
from unitorder.ordering.refinement import refine

logger = structlog.get_logger("unitorder.ordering.sorter")


@dataclass(frozen=True)
class SortReport:
    """Everything a caller needs to explain a computed order."""

    order: tuple[str, ...]
    seed: tuple[str, ...]
    edges: tuple[OrderingEdge, ...]
    dropped: tuple[DroppedReference, ...]
    fixes: int


class PrioritySorter:
    """Compute a deterministic application order for configuration units.

    The sorter keeps no state between calls; it is safe to share one
    instance across threads as long as the provider supports concurrent
    reads.

    Usage::

        sorter = PrioritySorter(ClassMetadataProvider([DataConfig, WebConfig]))
        ordered = sorter.sort(["app.WebConfig", "app.DataConfig"])
    """

    def __init__(
        self,
        provider: MetadataProvider,
        properties: SorterProperties | None = None,
    ) -> None:
        self._provider = provider
        self._properties = properties if properties is not None else SorterProperties()

    @classmethod
    def from_config(cls, provider: MetadataProvider, config: Config) -> PrioritySorter:
        """Create a sorter bound to the ``unitorder.sorter`` section of *config*."""
        return cls(provider, config.bind(SorterProperties))

    @property
    def properties(self) -> SorterProperties:
        return self._properties

    def sort(self, units: Iterable[str]) -> list[str]:
        """Return *units* in application order.

        Raises ``OrderingCycleError`` when the before/after constraints
        cannot all be satisfied.
        """
        return list(self.sort_with_report(units).order)

    def sort_with_report(self, units: Iterable[str]) -> SortReport:
        """Sort *units* and return the order together with how it was derived."""
        ordered_units, facts, graph = self._prepare(units)
        self._report_dropped(graph.dropped)

        cycles = graph.find_cycles()
        if cycles:
            members = [[unit for unit in ordered_units if unit in cycle] for cycle in cycles]
            logger.warning("ordering_cycle_detected", cycles=members)
            raise OrderingCycleError(members)

        seed = tuple(sorted(ordered_units, key=lambda unit: self._effective_order(facts[unit])))
        result = refine(seed, graph, self._properties.max_fix_iterations)

        logger.debug(
            "units_sorted",
            count=len(result.order),
            edges=len(graph.edges),
            dropped=len(graph.dropped),
            fixes=result.fixes,
        )
        return SortReport(
            order=result.order,
            seed=seed,
            edges=graph.edges,
            dropped=graph.dropped,
            fixes=result.fixes,
        )

    def find_cycles(self, units: Iterable[str]) -> list[frozenset[str]]:
        """Return every cycle among *units* without attempting to sort them."""
        _, _, graph = self._prepare(units)
        return graph.find_cycles()

    def constraint_graph(self, units: Iterable[str]) -> ConstraintGraph:
        """Build the constraint graph the sorter would use for *units*."""
        _, _, graph = self._prepare(units)
        return graph

    def _prepare(self, units: Iterable[str]) -> tuple[tuple[str, ...], dict[str, UnitMetadata], ConstraintGraph]:
        requested = list(units)
        ordered_units = tuple(dict.fromkeys(requested))
        if len(ordered_units) != len(requested):
            logger.debug("duplicate_units_ignored", duplicates=len(requested) - len(ordered_units))

        facts = {unit: snapshot(self._provider, unit) for unit in ordered_units}
        return ordered_units, facts, ConstraintGraph.build(ordered_units, facts)

    def _effective_order(self, metadata: UnitMetadata) -> int:
        return metadata.order if metadata.order is not None else self._properties.default_order

    def _report_dropped(self, dropped: tuple[DroppedReference, ...]) -> None:
        policy = self._properties.unresolved_references
        if policy is UnresolvedReferencePolicy.IGNORE:
            return
        for reference in dropped:
            if policy is UnresolvedReferencePolicy.WARN:
                warnings.warn(
                    f"{reference.declared_by} declares {reference.kind.value} "
                    f"'{reference.target}', which is not being sorted; constraint ignored",
                    UnresolvedReferenceWarning,
                    stacklevel=3,
                )
            else:
                logger.debug(
                    "unresolved_reference_dropped",
                    unit=reference.declared_by,
                    target=reference.target,
                    kind=reference.kind.value,
                )
