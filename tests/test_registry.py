"""Tests for the exporter registry."""

import json

import pytest

from collurgy.palette import ExporterNotFoundError, ExporterRegistry, export
from collurgy.palette.registry import ExporterFormatError, load_exporter_file

BUILTIN_NAMES = {"Alacritty", "JSON", "Kitty", "Vim", "Xresources"}


class TestBuiltins:
    """Test the shipped exporter presets."""

    def test_builtins_present(self):
        registry = ExporterRegistry()
        assert BUILTIN_NAMES <= set(registry.names())
        assert registry.source("Vim") == "builtin"

    def test_vim_default_extras(self):
        vim = ExporterRegistry().get("Vim")
        assert vim.extras["CONSTANT"] == 3
        assert vim.extras["TODO"] == 9

    def test_json_exporter_output_parses(self, default_theme):
        output = export(ExporterRegistry().get("JSON"), default_theme, "plain")
        data = json.loads(output)
        assert data["name"] == "plain"
        assert len(data["colors"]) == 16
        assert data["colors"][15]["hex"] == "#FFFFFF"
        assert data["colors"][0]["rgb"] == [0, 0, 0]
        assert data["accent"] == data["colors"][11]

    def test_unknown_name(self):
        registry = ExporterRegistry()
        with pytest.raises(ExporterNotFoundError):
            registry.get("Nope")
        with pytest.raises(KeyError):
            registry.get("Nope")

    def test_read_only_view(self):
        registry = ExporterRegistry()
        with pytest.raises(TypeError):
            registry.exporters["Vim"] = None


class TestUserExporters:
    """Test loading exporter documents from a directory."""

    def test_user_overrides_builtin(self, tmp_path):
        (tmp_path / "vim.toml").write_text('name = "Vim"\nformatter = "custom {HEX0}"\n')
        registry = ExporterRegistry(tmp_path)
        assert registry.get("Vim").formatter == "custom {HEX0}"
        assert registry.source("Vim") == str(tmp_path / "vim.toml")
        assert registry.list_exporters()[registry.names().index("Vim")]["type"] == "user"

    def test_last_file_wins(self, tmp_path):
        (tmp_path / "a.json").write_text(json.dumps({"name": "X", "formatter": "a"}))
        (tmp_path / "b.yaml").write_text("name: X\nformatter: b\n")
        registry = ExporterRegistry(tmp_path, include_builtins=False)
        assert registry.get("X").formatter == "b"
        assert len(registry) == 1

    def test_invalid_documents_skipped(self, tmp_path):
        (tmp_path / "broken.toml").write_text("name = \n")
        (tmp_path / "incomplete.yaml").write_text("name: NoTemplate\n")
        (tmp_path / "good.yaml").write_text("name: Good\nformatter: '{HEX0}'\nextras:\n  CURSOR: 4\n")
        (tmp_path / "notes.txt").write_text("ignored")

        registry = ExporterRegistry(tmp_path, include_builtins=False)
        assert registry.names() == ["Good"]
        assert registry.get("Good").extras == {"CURSOR": 4}
        assert sorted(p.name for p, _ in registry.load_errors) == ["broken.toml", "incomplete.yaml"]

    def test_missing_directory(self, tmp_path):
        registry = ExporterRegistry(tmp_path / "absent", include_builtins=False)
        assert len(registry) == 0
        assert registry.default_name() is None

    def test_reload_picks_up_new_files(self, tmp_path):
        registry = ExporterRegistry(tmp_path, include_builtins=False)
        assert "Late" not in registry
        (tmp_path / "late.yaml").write_text("name: Late\nformatter: x\n")
        registry.reload()
        assert "Late" in registry

    def test_default_name(self, tmp_path):
        registry = ExporterRegistry(tmp_path)
        assert registry.default_name("Kitty") == "Kitty"
        assert registry.default_name("Nope") == "Alacritty"

    def test_from_config(self, isolated_config):
        exporters_dir = isolated_config.get_exporters_path()
        exporters_dir.mkdir()
        (exporters_dir / "mine.yaml").write_text("name: Mine\nformatter: x\n")
        registry = ExporterRegistry.from_config(isolated_config)
        assert "Mine" in registry
        assert "Vim" in registry

    def test_load_exporter_file_error(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"name": ""}')
        with pytest.raises(ExporterFormatError):
            load_exporter_file(path)
