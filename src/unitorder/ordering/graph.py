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
"""Constraint graph — before/after declarations normalized to ``precedes`` edges."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from unitorder.ordering.metadata import UnitMetadata
from unitorder.ordering.precedence import Target, qualified_name


class EdgeKind(str, enum.Enum):
    """Direction of a declared ordering constraint."""

    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class OrderingEdge:
    """A constraint declared by ``declared_by`` naming ``target``.

    ``BEFORE`` means the declaring unit precedes the target; ``AFTER`` means
    the target precedes the declaring unit.
    """

    declared_by: str
    target: str
    kind: EdgeKind

    @property
    def predecessor(self) -> str:
        return self.declared_by if self.kind is EdgeKind.BEFORE else self.target

    @property
    def successor(self) -> str:
        return self.target if self.kind is EdgeKind.BEFORE else self.declared_by


@dataclass(frozen=True)
class DroppedReference:
    """A before/after target that named no unit in the current sort."""

    declared_by: str
    target: str
    kind: EdgeKind


def target_name(target: Target) -> str:
    """Identifier named by a declared target."""
    return qualified_name(target) if isinstance(target, type) else str(target)


class TargetResolver:
    """Resolve declared targets against the units of one sort call.

    Classes resolve through their qualified name, strings by exact match.
    """

    def __init__(self, units: Iterable[str]) -> None:
        self._units = frozenset(units)

    def __call__(self, target: Target) -> str | None:
        name = target_name(target)
        return name if name in self._units else None


class ConstraintGraph:
    """Directed graph of ``precedes(X, Y)`` edges between units.

    Built fresh for every sort call. Node iteration always follows the
    input order of the units so that every derived result is deterministic.
    """

    def __init__(
        self,
        units: Sequence[str],
        edges: Iterable[OrderingEdge] = (),
        dropped: Iterable[DroppedReference] = (),
    ) -> None:
        self._units: tuple[str, ...] = tuple(units)
        self._position: dict[str, int] = {unit: i for i, unit in enumerate(self._units)}
        self._edges: tuple[OrderingEdge, ...] = tuple(edges)
        self._dropped: tuple[DroppedReference, ...] = tuple(dropped)
        self._predecessors: dict[str, set[str]] = {unit: set() for unit in self._units}
        self._successors: dict[str, set[str]] = {unit: set() for unit in self._units}

        for edge in self._edges:
            if edge.predecessor not in self._position or edge.successor not in self._position:
                raise ValueError(f"Edge {edge} references a unit outside the graph")
            self._predecessors[edge.successor].add(edge.predecessor)
            self._successors[edge.predecessor].add(edge.successor)

    @classmethod
    def build(cls, units: Sequence[str], facts: Mapping[str, UnitMetadata]) -> ConstraintGraph:
        """Build the graph from each unit's before/after declarations.

        Targets that do not resolve to one of *units* are recorded as
        :class:`DroppedReference` entries instead of edges.
        """
        resolve = TargetResolver(units)
        edges: list[OrderingEdge] = []
        dropped: list[DroppedReference] = []

        for unit in units:
            metadata = facts.get(unit, UnitMetadata())
            declared = [(t, EdgeKind.BEFORE) for t in metadata.before]
            declared += [(t, EdgeKind.AFTER) for t in metadata.after]
            for raw_target, kind in declared:
                target = resolve(raw_target)
                if target is None:
                    dropped.append(DroppedReference(unit, target_name(raw_target), kind))
                else:
                    edges.append(OrderingEdge(unit, target, kind))

        return cls(units, edges, dropped)

    @property
    def units(self) -> tuple[str, ...]:
        return self._units

    @property
    def edges(self) -> tuple[OrderingEdge, ...]:
        """Retained edges, in declaration order."""
        return self._edges

    @property
    def dropped(self) -> tuple[DroppedReference, ...]:
        """Declared targets that did not resolve, in declaration order."""
        return self._dropped

    def predecessors(self, unit: str) -> frozenset[str]:
        """Units that must precede *unit*."""
        return frozenset(self._predecessors.get(unit, ()))

    def successors(self, unit: str) -> frozenset[str]:
        """Units that *unit* must precede."""
        return frozenset(self._successors.get(unit, ()))

    def precedes(self, first: str, second: str) -> bool:
        """True when a retained edge requires *first* before *second*."""
        return first in self._predecessors.get(second, ())

    def strongly_connected_components(self) -> list[tuple[str, ...]]:
        """Tarjan's algorithm, iterative to stay clear of the recursion limit.

        Components are returned in completion order; members of each
        component are listed in input order.
        """
        index: dict[str, int] = {}
        lowlink: dict[str, int] = {}
        stack: list[str] = []
        on_stack: set[str] = set()
        components: list[tuple[str, ...]] = []
        counter = 0

        for root in self._units:
            if root in index:
                continue

            index[root] = lowlink[root] = counter
            counter += 1
            stack.append(root)
            on_stack.add(root)
            work = [(root, iter(self._ordered(self._successors[root])))]

            while work:
                node, successors = work[-1]
                descended = False
                for succ in successors:
                    if succ not in index:
                        index[succ] = lowlink[succ] = counter
                        counter += 1
                        stack.append(succ)
                        on_stack.add(succ)
                        work.append((succ, iter(self._ordered(self._successors[succ]))))
                        descended = True
                        break
                    if succ in on_stack:
                        lowlink[node] = min(lowlink[node], index[succ])
                if descended:
                    continue

                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])

                if lowlink[node] == index[node]:
                    members: list[str] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        members.append(member)
                        if member == node:
                            break
                    components.append(tuple(self._ordered(members)))

        return components

    def find_cycles(self) -> list[frozenset[str]]:
        """Every component of more than one unit, plus self-referencing units."""
        cycles: list[frozenset[str]] = []
        for component in self.strongly_connected_components():
            if len(component) > 1 or self.precedes(component[0], component[0]):
                cycles.append(frozenset(component))
        cycles.sort(key=lambda cycle: min(self._position[unit] for unit in cycle))
        return cycles

    def _ordered(self, units: Iterable[str]) -> list[str]:
        return sorted(units, key=self._position.__getitem__)
