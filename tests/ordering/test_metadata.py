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
"""Tests for metadata providers and metadata document loading."""

from __future__ import annotations

from collections import OrderedDict
from pathlib import Path

import pytest

from unitorder.kernel.exceptions import ConfigurationException, InvalidMetadataException
from unitorder.ordering.metadata import (
    ClassMetadataProvider,
    MappingMetadataProvider,
    MetadataProvider,
    UnitMetadata,
    import_class,
    snapshot,
)
from unitorder.ordering.precedence import (
    auto_configure_after,
    auto_configure_before,
    auto_configure_order,
    qualified_name,
)


class CacheConfig:
    pass


@auto_configure_order(-10)
@auto_configure_before("app.WebConfig")
@auto_configure_after(CacheConfig)
class DataConfig:
    pass


class TestMappingMetadataProvider:
    def test_implements_protocol(self):
        assert isinstance(MappingMetadataProvider(), MetadataProvider)

    def test_returns_declared_facts(self):
        provider = MappingMetadataProvider({"a": UnitMetadata(order=3, before=("b",), after=("c",))})

        assert provider.priority_of("a") == 3
        assert provider.before_targets("a") == ("b",)
        assert provider.after_targets("a") == ("c",)

    def test_unknown_unit_has_empty_metadata(self):
        provider = MappingMetadataProvider()

        assert provider.priority_of("nope") is None
        assert provider.before_targets("nope") == ()
        assert provider.after_targets("nope") == ()

    def test_units_in_declaration_order(self):
        provider = MappingMetadataProvider({"z": UnitMetadata(), "a": UnitMetadata()})
        assert provider.units == ("z", "a")

    def test_snapshot(self):
        provider = MappingMetadataProvider({"a": UnitMetadata(order=1, before=("b",))})
        assert snapshot(provider, "a") == UnitMetadata(order=1, before=("b",), after=())


class TestFromDict:
    def test_parses_units(self):
        provider = MappingMetadataProvider.from_dict({
            "units": {
                "app.DataConfig": {"order": 10},
                "app.WebConfig": {"after": ["app.DataConfig"]},
                "app.Plain": None,
            }
        })

        assert provider.units == ("app.DataConfig", "app.WebConfig", "app.Plain")
        assert provider.priority_of("app.DataConfig") == 10
        assert provider.after_targets("app.WebConfig") == ("app.DataConfig",)
        assert provider.priority_of("app.Plain") is None

    def test_empty_document(self):
        assert MappingMetadataProvider.from_dict({}).units == ()

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidMetadataException) as exc_info:
            MappingMetadataProvider.from_dict({"units": {"a": {"priority": 1}}})

        assert exc_info.value.code == "INVALID_METADATA"
        assert isinstance(exc_info.value, ConfigurationException)

    def test_wrong_type_rejected(self):
        with pytest.raises(InvalidMetadataException):
            MappingMetadataProvider.from_dict({"units": {"a": {"order": "first"}}})


class TestFromFile:
    def test_yaml(self, tmp_path: Path):
        path = tmp_path / "units.yaml"
        path.write_text(
            "units:\n"
            "  app.WebConfig:\n"
            "    after: [app.DataConfig]\n"
            "  app.DataConfig:\n"
            "    order: -5\n"
            "    before: [app.Missing]\n"
        )
        provider = MappingMetadataProvider.from_file(path)

        assert provider.units == ("app.WebConfig", "app.DataConfig")
        assert provider.priority_of("app.DataConfig") == -5
        assert provider.before_targets("app.DataConfig") == ("app.Missing",)

    def test_toml(self, tmp_path: Path):
        path = tmp_path / "units.toml"
        path.write_text(
            '[units."app.DataConfig"]\n'
            "order = 1\n"
            '[units."app.WebConfig"]\n'
            'after = ["app.DataConfig"]\n'
        )
        provider = MappingMetadataProvider.from_file(path)

        assert provider.priority_of("app.DataConfig") == 1
        assert provider.after_targets("app.WebConfig") == ("app.DataConfig",)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(InvalidMetadataException, match="file not found"):
            MappingMetadataProvider.from_file(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path: Path):
        path = tmp_path / "units.yaml"
        path.write_text("units: [unclosed\n")
        with pytest.raises(InvalidMetadataException, match="cannot parse"):
            MappingMetadataProvider.from_file(path)

    def test_top_level_must_be_mapping(self, tmp_path: Path):
        path = tmp_path / "units.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(InvalidMetadataException, match="mapping"):
            MappingMetadataProvider.from_file(path)


class TestClassMetadataProvider:
    def test_implements_protocol(self):
        assert isinstance(ClassMetadataProvider(), MetadataProvider)

    def test_reads_decorators(self):
        provider = ClassMetadataProvider([DataConfig, CacheConfig])
        unit = qualified_name(DataConfig)

        assert provider.units == (unit, qualified_name(CacheConfig))
        assert provider.priority_of(unit) == -10
        assert tuple(provider.before_targets(unit)) == ("app.WebConfig",)
        assert tuple(provider.after_targets(unit)) == (CacheConfig,)

    def test_undecorated_class(self):
        provider = ClassMetadataProvider([CacheConfig])
        unit = qualified_name(CacheConfig)

        assert provider.priority_of(unit) is None
        assert tuple(provider.before_targets(unit)) == ()

    def test_unresolvable_unit_has_no_metadata(self):
        provider = ClassMetadataProvider(import_missing=True)

        assert provider.priority_of("no.such.module.Config") is None
        assert tuple(provider.after_targets("no.such.module.Config")) == ()

    def test_falls_back_to_import_when_enabled(self):
        provider = ClassMetadataProvider(import_missing=True)
        assert provider._resolve("collections.OrderedDict") is OrderedDict

    def test_does_not_import_unregistered_units_by_default(self, monkeypatch):
        def fail_import(name):
            raise AssertionError(f"unexpected import of {name}")

        monkeypatch.setattr("importlib.import_module", fail_import)
        provider = ClassMetadataProvider()

        assert provider.priority_of("collections.OrderedDict") is None
        assert tuple(provider.before_targets("collections.OrderedDict")) == ()

    def test_malformed_identifiers_have_no_metadata(self):
        provider = ClassMetadataProvider(import_missing=True)

        for unit in (".Config", "..pkg.Config", "pkg..Config", "", "pkg."):
            assert provider.priority_of(unit) is None
            assert tuple(provider.after_targets(unit)) == ()


class TestImportClass:
    def test_imports_class(self):
        assert import_class("collections.OrderedDict") is OrderedDict

    def test_imports_package_class(self):
        from unitorder.ordering.refinement import Violation

        assert import_class("unitorder.ordering.refinement.Violation") is Violation

    def test_missing_attribute(self):
        assert import_class("collections.NoSuchThing") is None

    def test_not_a_class(self):
        assert import_class("os.path.join") is None

    def test_bare_module_name(self):
        assert import_class("collections") is None

    def test_missing_module(self):
        assert import_class("no_such_package_xyz.Config") is None

    def test_relative_path(self):
        assert import_class(".Config") is None
        assert import_class("..pkg.Config") is None

    def test_empty_segment(self):
        assert import_class("collections..OrderedDict") is None
