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
"""Typed configuration property classes for the sorter and logging."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from unitorder.core.config import config_properties
from unitorder.ordering.precedence import DEFAULT_ORDER, HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE


class UnresolvedReferencePolicy(str, enum.Enum):
    """What the sorter does with a before/after target that names no unit."""

    IGNORE = "ignore"
    LOG = "log"
    WARN = "warn"


@config_properties(prefix="unitorder.sorter")
class SorterProperties(BaseModel):
    """Configuration for the priority sorter (unitorder.sorter.*).

    ``default_order`` is the rank of units without an explicit priority and
    must stay strictly between the highest and lowest precedence.
    ``max_fix_iterations`` raises the cap on constraint refinement steps.
    The cap never drops below the square of the number of units, which
    every acyclic input fits within.
    """

    model_config = ConfigDict(frozen=True)

    default_order: int = Field(default=DEFAULT_ORDER, gt=HIGHEST_PRECEDENCE, lt=LOWEST_PRECEDENCE)
    max_fix_iterations: int | None = Field(default=None, ge=1)
    unresolved_references: UnresolvedReferencePolicy = UnresolvedReferencePolicy.LOG


@config_properties(prefix="unitorder.logging")
@dataclass
class LoggingProperties:
    """Configuration for logging (unitorder.logging.*).

    ``level`` maps logger names to levels, with ``root`` for the root
    logger. A single level string is shorthand for ``{"root": level}``.
    """

    format: str = "console"
    level: dict = field(default_factory=lambda: {"root": "INFO"})

    def __post_init__(self) -> None:
        if isinstance(self.level, str):
            self.level = {"root": self.level}
        elif not isinstance(self.level, dict):
            raise ValueError(f"logging level must be a level name or a mapping, got {self.level!r}")
