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
"""Ordering — priority sorting of configuration units."""

from unitorder.ordering.exceptions import OrderingCycleError, UnresolvedReferenceWarning
from unitorder.ordering.graph import ConstraintGraph, DroppedReference, EdgeKind, OrderingEdge
from unitorder.ordering.metadata import (
    ClassMetadataProvider,
    MappingMetadataProvider,
    MetadataProvider,
    UnitMetadata,
)
from unitorder.ordering.precedence import (
    DEFAULT_ORDER,
    HIGHEST_PRECEDENCE,
    LOWEST_PRECEDENCE,
    auto_configure_after,
    auto_configure_before,
    auto_configure_order,
    qualified_name,
)
from unitorder.ordering.sorter import PrioritySorter, SortReport

__all__ = [
    "DEFAULT_ORDER",
    "HIGHEST_PRECEDENCE",
    "LOWEST_PRECEDENCE",
    "ClassMetadataProvider",
    "ConstraintGraph",
    "DroppedReference",
    "EdgeKind",
    "MappingMetadataProvider",
    "MetadataProvider",
    "OrderingCycleError",
    "OrderingEdge",
    "PrioritySorter",
    "SortReport",
    "UnitMetadata",
    "UnresolvedReferenceWarning",
    "auto_configure_after",
    "auto_configure_before",
    "auto_configure_order",
    "qualified_name",
]
