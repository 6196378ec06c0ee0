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
"""Unit metadata — the provider contract and its built-in implementations.

The sorter never inspects classes or files itself. It asks a
:class:`MetadataProvider` for each unit's priority and before/after
targets, and snapshots the answers into :class:`UnitMetadata` records for
the duration of a single sort call.
"""

from __future__ import annotations

import importlib
import tomllib
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog
import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from unitorder.core.config import load_document
from unitorder.kernel.exceptions import InvalidMetadataException
from unitorder.ordering.precedence import (
    Target,
    get_after,
    get_before,
    get_order,
    qualified_name,
)

logger = structlog.get_logger("unitorder.ordering.metadata")


@dataclass(frozen=True)
class UnitMetadata:
    """Declared ordering facts for one unit."""

    order: int | None = None
    before: tuple[Target, ...] = ()
    after: tuple[Target, ...] = ()


EMPTY_METADATA = UnitMetadata()


@runtime_checkable
class MetadataProvider(Protocol):
    """Source of per-unit ordering metadata.

    Lookups must be side-effect free and return the same answer for the
    same unit while a sort is running.
    """

    def priority_of(self, unit: str) -> int | None: ...

    def before_targets(self, unit: str) -> Sequence[Target]: ...

    def after_targets(self, unit: str) -> Sequence[Target]: ...


def snapshot(provider: MetadataProvider, unit: str) -> UnitMetadata:
    """Query *provider* once for every fact about *unit*."""
    return UnitMetadata(
        order=provider.priority_of(unit),
        before=tuple(provider.before_targets(unit)),
        after=tuple(provider.after_targets(unit)),
    )


# =============================================================================
# Pre-resolved fact table
# =============================================================================


class _UnitDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid")

    order: int | None = None
    before: list[str] = Field(default_factory=list)
    after: list[str] = Field(default_factory=list)


class _MetadataDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    units: dict[str, _UnitDeclaration | None] = Field(default_factory=dict)


class MappingMetadataProvider:
    """Metadata provider backed by an in-memory fact table.

    Units missing from the table have no explicit priority and no
    constraints.

    Usage::

        provider = MappingMetadataProvider({
            "app.WebConfig": UnitMetadata(after=("app.DataConfig",)),
            "app.DataConfig": UnitMetadata(order=10),
        })
    """

    def __init__(self, facts: Mapping[str, UnitMetadata] | None = None) -> None:
        self._facts: dict[str, UnitMetadata] = dict(facts or {})

    @property
    def units(self) -> tuple[str, ...]:
        """Unit identifiers in declaration order."""
        return tuple(self._facts)

    def priority_of(self, unit: str) -> int | None:
        return self._facts.get(unit, EMPTY_METADATA).order

    def before_targets(self, unit: str) -> Sequence[Target]:
        return self._facts.get(unit, EMPTY_METADATA).before

    def after_targets(self, unit: str) -> Sequence[Target]:
        return self._facts.get(unit, EMPTY_METADATA).after

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: str = "<dict>") -> MappingMetadataProvider:
        """Build a provider from a ``{"units": {...}}`` document.

        Raises ``InvalidMetadataException`` when the document does not match
        the expected shape.
        """
        try:
            document = _MetadataDocument.model_validate(data)
        except ValidationError as exc:
            raise InvalidMetadataException(source, str(exc)) from exc

        facts: dict[str, UnitMetadata] = {}
        for unit, declaration in document.units.items():
            if declaration is None:
                facts[unit] = EMPTY_METADATA
                continue
            facts[unit] = UnitMetadata(
                order=declaration.order,
                before=tuple(declaration.before),
                after=tuple(declaration.after),
            )
        return cls(facts)

    @classmethod
    def from_file(cls, path: str | Path) -> MappingMetadataProvider:
        """Load a YAML or TOML metadata document.

        Expected layout::

            units:
              app.DataConfig:
                order: 10
              app.WebConfig:
                after: [app.DataConfig]
        """
        path = Path(path)
        if not path.is_file():
            raise InvalidMetadataException(str(path), "file not found")
        try:
            data = load_document(path)
        except (OSError, UnicodeDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
            raise InvalidMetadataException(str(path), f"cannot parse document: {exc}") from exc
        if not isinstance(data, Mapping):
            raise InvalidMetadataException(str(path), "top-level value must be a mapping")

        provider = cls.from_dict(data, source=str(path))
        logger.debug("metadata_loaded", source=str(path), units=len(provider.units))
        return provider


# =============================================================================
# Decorator-based metadata
# =============================================================================


class ClassMetadataProvider:
    """Metadata provider that reads ordering decorators from classes.

    Classes passed to the constructor are looked up by their qualified
    name. With ``import_missing=True`` any other identifier is treated as a
    dotted import path; otherwise, or if it cannot be imported, the unit
    simply has no metadata.
    """

    def __init__(self, classes: Iterable[type] = (), import_missing: bool = False) -> None:
        self._classes: dict[str, type] = {qualified_name(cls): cls for cls in classes}
        self._import_missing = import_missing

    @property
    def units(self) -> tuple[str, ...]:
        """Identifiers of the registered classes, in registration order."""
        return tuple(self._classes)

    def priority_of(self, unit: str) -> int | None:
        cls = self._resolve(unit)
        return get_order(cls) if cls is not None else None

    def before_targets(self, unit: str) -> Sequence[Target]:
        cls = self._resolve(unit)
        return get_before(cls) if cls is not None else ()

    def after_targets(self, unit: str) -> Sequence[Target]:
        cls = self._resolve(unit)
        return get_after(cls) if cls is not None else ()

    def _resolve(self, unit: str) -> type | None:
        cls = self._classes.get(unit)
        if cls is not None or not self._import_missing:
            return cls
        cls = import_class(unit)
        if cls is None:
            logger.debug("unit_class_unresolved", unit=unit)
        return cls


def import_class(dotted_name: str) -> type | None:
    """Import a class from a dotted path such as ``pkg.module.Outer.Inner``.

    Returns ``None`` for malformed paths (relative or with empty segments),
    when no prefix of the path is importable, or when the remaining
    attributes do not lead to a class.
    """
    parts = dotted_name.split(".")
    if not all(part.isidentifier() for part in parts):
        return None
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError:
            continue
        for attr in parts[split:]:
            obj = getattr(obj, attr, None)
            if obj is None:
                return None
        return obj if isinstance(obj, type) else None
    return None
