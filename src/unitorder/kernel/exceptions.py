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
"""Unified exception hierarchy for unitorder.

All package exceptions inherit from UnitOrderException, so callers can
catch one type to handle every failure raised while loading metadata or
computing an order.

Categories:
- ConfigurationException: invalid configuration values or metadata documents
- OrderingException: before/after constraints that cannot be satisfied
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class UnitOrderException(Exception):
    """Base exception for all unitorder errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "ORDERING_CYCLE").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(UnitOrderException):
    """Configuration or metadata could not be loaded or validated."""


class InvalidMetadataException(ConfigurationException):
    """A unit metadata document is malformed."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(
            message=f"Invalid unit metadata in {source}: {reason}",
            code="INVALID_METADATA",
            context={"source": source},
        )


# =============================================================================
# Ordering Exceptions
# =============================================================================


class OrderingException(UnitOrderException):
    """The requested units cannot be placed in a consistent order."""
