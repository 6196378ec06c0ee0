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
"""Unit precedence — ordering decorators and precedence constants."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T", bound=type)

HIGHEST_PRECEDENCE: int = -(2**31)
LOWEST_PRECEDENCE: int = 2**31 - 1
DEFAULT_ORDER: int = 0

Target = type | str

_ORDER_ATTR = "__unitorder_order__"
_BEFORE_ATTR = "__unitorder_before__"
_AFTER_ATTR = "__unitorder_after__"


def qualified_name(cls: type) -> str:
    """Return the dotted identifier of a configuration class."""
    return f"{cls.__module__}.{cls.__qualname__}"


def auto_configure_order(value: int) -> Callable[[T], T]:
    """Set the explicit priority of a configuration class.

    Lower value = higher priority (applied first). Classes without this
    decorator share ``DEFAULT_ORDER``.
    """

    def decorator(cls: T) -> T:
        setattr(cls, _ORDER_ATTR, value)
        return cls

    return decorator


def auto_configure_before(*targets: Target) -> Callable[[T], T]:
    """Declare that a configuration class must be applied before *targets*.

    Each target is either a class or the dotted name of one. Names are
    matched exactly against the units being sorted; targets that are not
    part of the sort are ignored.
    """

    def decorator(cls: T) -> T:
        _extend(cls, _BEFORE_ATTR, targets)
        return cls

    return decorator


def auto_configure_after(*targets: Target) -> Callable[[T], T]:
    """Declare that a configuration class must be applied after *targets*."""

    def decorator(cls: T) -> T:
        _extend(cls, _AFTER_ATTR, targets)
        return cls

    return decorator


def get_order(cls: type) -> int | None:
    """Get the explicit order value for a class, or ``None`` if unset."""
    return cls.__dict__.get(_ORDER_ATTR)


def get_before(cls: type) -> tuple[Target, ...]:
    return tuple(cls.__dict__.get(_BEFORE_ATTR, ()))


def get_after(cls: type) -> tuple[Target, ...]:
    return tuple(cls.__dict__.get(_AFTER_ATTR, ()))


def _extend(cls: type, attr: str, targets: tuple[Target, ...]) -> None:
    # Own namespace only: subclasses start with no ordering edges.
    existing = list(cls.__dict__.get(attr, ()))
    existing.extend(targets)
    setattr(cls, attr, existing)
