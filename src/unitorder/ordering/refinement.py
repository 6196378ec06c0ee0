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
"""Constraint-driven refinement of a priority-ordered sequence.

The refinement never rebuilds the order from scratch. It looks for the
first unit that has a required predecessor somewhere after it, pulls that
predecessor forward to the unit's position, and repeats. Every other unit
keeps its relative position, which preserves the priority and declaration
order tie-break for all pairs that are not directly constrained.

Each fix leaves the already-scanned prefix untouched and replaces the unit
at the current position with one of its ancestors, so on an acyclic graph
the number of fixes is bounded by ``len(sequence) ** 2``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

import structlog

from unitorder.ordering.exceptions import OrderingCycleError
from unitorder.ordering.graph import ConstraintGraph

logger = structlog.get_logger("unitorder.ordering.refinement")


class Violation(NamedTuple):
    """``sequence[offender]`` must precede ``sequence[position]`` but sits after it."""

    position: int
    offender: int


class RefinementResult(NamedTuple):
    order: tuple[str, ...]
    fixes: int


def find_violation(
    sequence: Sequence[str],
    graph: ConstraintGraph,
    start: int = 0,
) -> Violation | None:
    """Return the first violated edge at or after *start*, or ``None``."""
    for position in range(start, len(sequence)):
        required = graph.predecessors(sequence[position])
        if not required:
            continue
        for offender in range(position + 1, len(sequence)):
            if sequence[offender] in required:
                return Violation(position, offender)
    return None


def apply_fix(sequence: Sequence[str], violation: Violation) -> tuple[str, ...]:
    """Move the offending unit to just before the unit it must precede."""
    position, offender = violation
    items = tuple(sequence)
    return (
        items[:position]
        + (items[offender],)
        + items[position:offender]
        + items[offender + 1 :]
    )


def default_bound(size: int) -> int:
    return max(size * size, 1)


def refine(
    sequence: Sequence[str],
    graph: ConstraintGraph,
    max_fixes: int | None = None,
) -> RefinementResult:
    """Apply fixes until no edge is violated.

    *max_fixes* may raise the bound above ``len(sequence) ** 2`` but never
    lowers it, so an acyclic graph always refines. Raises
    ``OrderingCycleError`` if the order is still inconsistent once the
    bound is spent.
    """
    current = tuple(sequence)
    bound = max(max_fixes or 0, default_bound(len(current)))
    fixes = 0
    start = 0

    while True:
        violation = find_violation(current, graph, start)
        if violation is None:
            break
        if fixes >= bound:
            stuck = _violating_units(current, graph, violation.position)
            logger.warning("refinement_bound_exceeded", bound=bound, units=list(stuck))
            raise OrderingCycleError(
                [stuck],
                detail=f"Constraints still violated after {bound} reordering steps",
            )
        current = apply_fix(current, violation)
        fixes += 1
        start = violation.position

    return RefinementResult(current, fixes)


def _violating_units(sequence: tuple[str, ...], graph: ConstraintGraph, start: int) -> tuple[str, ...]:
    involved: list[str] = []
    for position in range(start, len(sequence)):
        unit = sequence[position]
        required = graph.predecessors(unit)
        for candidate in sequence[position + 1 :]:
            if candidate in required:
                involved.extend((unit, candidate))
    return tuple(dict.fromkeys(involved))
