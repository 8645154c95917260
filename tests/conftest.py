"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from collurgy.config import Config  # noqa: E402
from collurgy.palette import ColorModel, ExporterRecord, ThemeRecord  # noqa: E402


@pytest.fixture
def default_theme():
    """The theme a fresh editor starts with."""
    return ThemeRecord()


@pytest.fixture
def spectrum_theme():
    """A chromatic theme with distinct base colors and compensation."""
    return ThemeRecord(
        model=ColorModel.OKLCH,
        high2023=0.5,
        foreground=(90.0, 5.0, 80.0),
        background=(12.0, 4.0, 260.0),
        spectrum=(60.0, 70.0, 25.0),
        spectrum_bright=(75.0, 60.0, 30.0),
        accent=4,
        extras={"Vim": {"CONSTANT": 9}},
    )


@pytest.fixture
def simple_exporter():
    return ExporterRecord(
        name="Simple",
        formatter="bg={HEX0} fg={HEX15} cursor={CURSORHEX}",
        extras={"CURSOR": 5},
    )


@pytest.fixture
def isolated_config(tmp_path):
    """Point the config singleton at a temporary directory."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        f"data_dir: {tmp_path}\n"
        f"exporters_dir: {tmp_path / 'exporters'}\n"
        f"theme_file: {tmp_path / 'theme.toml'}\n",
        encoding="utf-8",
    )
    config = Config.reload(config_path)
    yield config
    Config._instance = None
