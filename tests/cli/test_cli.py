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
"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from unitorder import __version__
from unitorder.cli.main import cli

_METADATA = """\
units:
  app.A:
    after: [app.B]
  app.B:
    after: [app.C, app.D, app.E]
  app.C: {}
  app.W:
    before: [app.B]
  app.X: {}
"""

_CYCLIC = """\
units:
  app.A:
    after: [app.B]
  app.B:
    after: [app.C, app.D]
  app.C: {}
  app.D:
    after: [app.A]
"""


@pytest.fixture
def metadata_file(tmp_path: Path) -> Path:
    path = tmp_path / "units.yaml"
    path.write_text(_METADATA)
    return path


@pytest.fixture
def cyclic_file(tmp_path: Path) -> Path:
    path = tmp_path / "cyclic.yaml"
    path.write_text(_CYCLIC)
    return path


class TestCLI:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "unitorder" in result.output
        assert "sort" in result.output
        assert "check" in result.output

    def test_help_shows_copyright(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert "Apache 2.0 License" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestSortCommand:
    def test_plain_output(self, metadata_file: Path):
        result = CliRunner().invoke(cli, ["sort", str(metadata_file)])

        assert result.exit_code == 0, result.output
        assert result.output.split() == ["app.C", "app.W", "app.B", "app.A", "app.X"]

    def test_selected_units(self, metadata_file: Path):
        result = CliRunner().invoke(cli, ["sort", str(metadata_file), "--unit", "app.A", "--unit", "app.B"])

        assert result.exit_code == 0, result.output
        assert result.output.split() == ["app.B", "app.A"]

    def test_json_output(self, metadata_file: Path):
        result = CliRunner().invoke(cli, ["sort", str(metadata_file), "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["order"] == ["app.C", "app.W", "app.B", "app.A", "app.X"]
        assert {"unit": "app.B", "kind": "after", "target": "app.D"} in payload["dropped"]

    def test_table_output(self, metadata_file: Path):
        result = CliRunner().invoke(cli, ["sort", str(metadata_file), "--format", "table"])

        assert result.exit_code == 0, result.output
        assert "Application order" in result.output
        assert "app.W" in result.output

    def test_explain(self, metadata_file: Path):
        result = CliRunner().invoke(cli, ["sort", str(metadata_file), "--explain"])

        assert result.exit_code == 0, result.output
        assert "Constraints:" in result.output
        assert "app.W -> app.B" in result.output
        assert "Dropped references:" in result.output

    def test_cycle_exits_with_error(self, cyclic_file: Path):
        result = CliRunner().invoke(cli, ["sort", str(cyclic_file)])

        assert result.exit_code == 1
        assert "Ordering cycle detected between units: app.A, app.B, app.D" in result.output

    def test_invalid_metadata_exits_with_error(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("units:\n  app.A:\n    order: soon\n")
        result = CliRunner().invoke(cli, ["sort", str(path)])

        assert result.exit_code == 1
        assert "Invalid unit metadata" in result.output

    def test_missing_file(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["sort", str(tmp_path / "absent.yaml")])
        assert result.exit_code != 0

    def test_config_file_applies(self, metadata_file: Path, tmp_path: Path):
        config_file = tmp_path / "unitorder.yaml"
        config_file.write_text("unitorder:\n  sorter:\n    max-fix-iterations: 1\n")
        result = CliRunner().invoke(cli, ["sort", str(metadata_file), "--config", str(config_file), "--explain"])

        assert result.exit_code == 0, result.output
        assert result.output.split()[:5] == ["app.C", "app.W", "app.B", "app.A", "app.X"]
        assert "Configuration:" in result.output
        assert str(config_file) in result.output

    def test_unreadable_config_exits_with_error(self, metadata_file: Path, tmp_path: Path):
        config_file = tmp_path / "unitorder.yaml"
        config_file.write_bytes(b"unitorder: \xff\xfe\n")
        result = CliRunner().invoke(cli, ["sort", str(metadata_file), "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Cannot read configuration file" in result.output

    def test_root_level_from_environment(self, metadata_file: Path, monkeypatch):
        monkeypatch.setenv("UNITORDER_LOGGING_LEVEL", "DEBUG")
        result = CliRunner().invoke(cli, ["sort", str(metadata_file)])

        assert result.exit_code == 0, result.output
        units = [line for line in result.output.splitlines() if line.startswith("app.")]
        assert units == ["app.C", "app.W", "app.B", "app.A", "app.X"]

    def test_invalid_logging_level_exits_with_error(self, metadata_file: Path, tmp_path: Path):
        config_file = tmp_path / "unitorder.yaml"
        config_file.write_text("unitorder:\n  logging:\n    level: [DEBUG]\n")
        result = CliRunner().invoke(cli, ["sort", str(metadata_file), "--config", str(config_file)])

        assert result.exit_code == 1
        assert "LoggingProperties" in result.output


class TestCheckCommand:
    def test_clean_metadata(self, metadata_file: Path):
        result = CliRunner().invoke(cli, ["check", str(metadata_file)])

        assert result.exit_code == 0, result.output
        assert "Checked 5 units" in result.output
        assert "No ordering cycles" in result.output
        assert "app.B after app.E" in result.output

    def test_reports_cycle(self, cyclic_file: Path):
        result = CliRunner().invoke(cli, ["check", str(cyclic_file)])

        assert result.exit_code == 1
        assert "Cycle: app.A, app.B, app.D" in result.output
