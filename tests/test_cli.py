# tests/test_cli.py
"""Tests for the typesynth CLI."""

import json

import pytest
import yaml
from click.testing import CliRunner

CATALOG = """
types:
  - name: Shape
    kind: variant_set
    variants:
      - name: Circle
        fields: [{name: radius, type: double}]
      - name: Square
        fields: [{name: side, type: double}]
  - name: Color
    kind: enumeration
    constants: [RED, GREEN]
  - name: Matrix
    fields:
      - {name: rows, type: "list[list[int]]"}
"""


@pytest.fixture()
def catalog_file(tmp_path):
    path = tmp_path / "types.yaml"
    path.write_text(CATALOG, encoding="utf-8")
    return path


class TestCLISkeleton:

    def test_cli_group_exists(self):
        from typesynth.cli import cli

        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output

    def test_version_flag(self):
        from typesynth import __version__
        from typesynth.cli import cli

        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.parametrize("command", ["generate", "inspect", "config"])
    def test_command_registered(self, command):
        from typesynth.cli import cli

        runner = CliRunner()
        result = runner.invoke(cli, [command, "--help"])
        assert result.exit_code == 0


class TestGenerate:

    def test_writes_json_by_suffix(self, catalog_file, tmp_path):
        from typesynth.cli import cli

        out = tmp_path / "out" / "api.json"
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", str(catalog_file), "-o", str(out), "--title", "Shapes"])
        assert result.exit_code == 0, result.output

        doc = json.loads(out.read_text(encoding="utf-8"))
        assert doc["info"] == {"title": "Shapes", "version": "1.0.0"}
        assert set(doc["components"]["schemas"]) == {"Shape", "Circle", "Square", "Color", "Matrix"}
        assert doc["components"]["schemas"]["Shape"]["discriminator"]["propertyName"] == "type"

    def test_yaml_to_file_with_flags(self, catalog_file, tmp_path):
        from typesynth.cli import cli

        out = tmp_path / "api.yaml"
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "generate", str(catalog_file),
                "--type", "Shape", "--type", "Color", "--type", "Matrix",
                "--discriminator", "kind",
                "--no-enum-values", "--no-array-items",
                "-o", str(out),
            ],
        )
        assert result.exit_code == 0, result.output

        schemas = yaml.safe_load(out.read_text(encoding="utf-8"))["components"]["schemas"]
        assert schemas["Shape"]["discriminator"]["propertyName"] == "kind"
        assert schemas["Color"] == {"type": "string"}
        assert schemas["Matrix"]["properties"]["rows"] == {"type": "array"}

    def test_explicit_format_overrides_suffix(self, catalog_file, tmp_path):
        from typesynth.cli import cli

        out = tmp_path / "api.txt"
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", str(catalog_file), "--format", "json", "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text(encoding="utf-8"))["openapi"] == "3.1.0"

    def test_stdout(self, catalog_file):
        from typesynth.cli import cli

        runner = CliRunner()
        result = runner.invoke(cli, ["generate", str(catalog_file), "--type", "Color"])
        assert result.exit_code == 0, result.output
        assert "components:" in result.output
        assert "- RED" in result.output

    def test_unknown_type_warns(self, catalog_file, tmp_path):
        from typesynth.cli import cli

        out = tmp_path / "api.yaml"
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", str(catalog_file), "--type", "Ghost", "-o", str(out)])
        assert result.exit_code == 0
        assert "not in the type catalog" in result.output

    def test_requires_exactly_one_source(self, catalog_file):
        from typesynth.cli import cli

        runner = CliRunner()
        assert runner.invoke(cli, ["generate"]).exit_code == 2
        result = runner.invoke(cli, ["generate", str(catalog_file), "--module", "json"])
        assert result.exit_code == 2

    def test_invalid_catalog(self, tmp_path):
        from typesynth.cli import cli

        bad = tmp_path / "bad.yaml"
        bad.write_text("types: [unclosed", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", str(bad)])
        assert result.exit_code == 1
        assert "Invalid yaml catalog" in result.output

    def test_from_module(self, tmp_path, monkeypatch):
        from typesynth.cli import cli

        (tmp_path / "cli_sample_models.py").write_text(
            "from dataclasses import dataclass\n"
            "from typing import Optional\n"
            "\n"
            "@dataclass\n"
            "class Node:\n"
            "    value: int\n"
            "    next: Optional['Node'] = None\n",
            encoding="utf-8",
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        out = tmp_path / "api.json"
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", "--module", "cli_sample_models", "-o", str(out)])
        assert result.exit_code == 0, result.output
        node = json.loads(out.read_text(encoding="utf-8"))["components"]["schemas"]["Node"]
        assert node["properties"]["next"] == {"$ref": "#/components/schemas/Node"}
        assert node["required"] == ["value"]

    def test_missing_module(self):
        from typesynth.cli import cli

        runner = CliRunner()
        result = runner.invoke(cli, ["generate", "--module", "no_such_module_for_typesynth"])
        assert result.exit_code == 1
        assert "Cannot import module" in result.output

    def test_session_log_written(self, catalog_file, tmp_path, isolated_home):
        from typesynth.cli import cli

        runner = CliRunner()
        result = runner.invoke(cli, ["generate", str(catalog_file), "-o", str(tmp_path / "a.yaml")])
        assert result.exit_code == 0
        logs = list((isolated_home / "logs").glob("typesynth_*.log"))
        assert len(logs) == 1


class TestInspectAndConfig:

    def test_inspect_lists_types(self, catalog_file):
        from typesynth.cli import cli

        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", str(catalog_file)])
        assert result.exit_code == 0, result.output
        for name in ("Shape", "Circle", "Square", "Color", "Matrix"):
            assert name in result.output
        assert "5 types" in result.output

    def test_config_show(self):
        from typesynth.cli import cli

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0, result.output
        assert "discriminator_property_name" in result.output
        assert "3.1.0" in result.output


class TestLoadSource:

    def test_no_source_is_usage_error(self):
        import click

        from typesynth.cli import _load_source

        with pytest.raises(click.UsageError):
            _load_source(None, None)
