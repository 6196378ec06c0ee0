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
"""unitorder — deterministic ordering of configuration units.

Quick start::

    from unitorder import PrioritySorter, MappingMetadataProvider, UnitMetadata

    provider = MappingMetadataProvider({
        "app.WebConfig": UnitMetadata(after=("app.DataConfig",)),
    })
    PrioritySorter(provider).sort(["app.WebConfig", "app.DataConfig"])
    # ['app.DataConfig', 'app.WebConfig']
"""

__version__ = "0.1.0"

from unitorder.kernel.exceptions import UnitOrderException
from unitorder.ordering import (
    DEFAULT_ORDER,
    HIGHEST_PRECEDENCE,
    LOWEST_PRECEDENCE,
    ClassMetadataProvider,
    MappingMetadataProvider,
    MetadataProvider,
    OrderingCycleError,
    PrioritySorter,
    SortReport,
    UnitMetadata,
    UnresolvedReferenceWarning,
    auto_configure_after,
    auto_configure_before,
    auto_configure_order,
)

__all__ = [
    "DEFAULT_ORDER",
    "HIGHEST_PRECEDENCE",
    "LOWEST_PRECEDENCE",
    "ClassMetadataProvider",
    "MappingMetadataProvider",
    "MetadataProvider",
    "OrderingCycleError",
    "PrioritySorter",
    "SortReport",
    "UnitMetadata",
    "UnitOrderException",
    "UnresolvedReferenceWarning",
    "__version__",
    "auto_configure_after",
    "auto_configure_before",
    "auto_configure_order",
]
