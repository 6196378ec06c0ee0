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
"""Ordering errors and warnings raised by the priority sorter."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from unitorder.kernel.exceptions import OrderingException


class OrderingCycleError(OrderingException):
    """Before/after constraints form a cycle, so no valid order exists.

    ``cycles`` holds each offending group of units; ``units`` is their union.
    Members are reported in the order the caller supplied them.
    """

    def __init__(self, cycles: Iterable[Sequence[str]], *, detail: str | None = None) -> None:
        ordered = [tuple(cycle) for cycle in cycles]
        self.cycles: tuple[frozenset[str], ...] = tuple(frozenset(cycle) for cycle in ordered)
        self.units: frozenset[str] = frozenset().union(*self.cycles)

        listed = list(dict.fromkeys(unit for cycle in ordered for unit in cycle))
        headline = f"Ordering cycle detected between units: {', '.join(listed)}"

        lines = [f"OrderingCycleError: {headline}"]
        if detail:
            lines.append(f"  {detail}")
        lines.append("")
        for number, cycle in enumerate(ordered, start=1):
            if len(cycle) == 1:
                lines.append(f"  Cycle {number}: {cycle[0]} must run before itself")
            else:
                lines.append(f"  Cycle {number}: {', '.join(cycle)}")
        lines.append("")
        lines.append("  Fix: Remove one of the before/after declarations that close the cycle")

        super().__init__(
            message="\n".join(lines),
            code="ORDERING_CYCLE",
            context={"units": listed},
        )


class UnresolvedReferenceWarning(UserWarning):
    """A before/after target names a unit that is not part of the sort.

    Informational only: the constraint is dropped and sorting continues.
    """
