"""Configuration management for the Collurgy application."""

import os
import logging
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Optional
import yaml

from .palette.schema import DocumentFormat, RGBSpace

logger = logging.getLogger(__name__)


@dataclass
class ConfigModel:
    """Global configuration model for Collurgy."""

    # File paths
    data_dir: str = "~/.collurgy"
    exporters_dir: str = "~/.collurgy/exporters"
    theme_file: str = "~/.collurgy/theme.toml"

    # Export defaults
    default_exporter: str = "Vim"
    default_format: DocumentFormat = DocumentFormat.TOML
    target_space: RGBSpace = RGBSpace.SRGB

    def __post_init__(self):
        """Post-initialization setup."""
        # Expand user paths
        self.data_dir = os.path.expanduser(self.data_dir)
        self.exporters_dir = os.path.expanduser(self.exporters_dir)
        self.theme_file = os.path.expanduser(self.theme_file)

        self.default_format = DocumentFormat(self.default_format)
        self.target_space = RGBSpace(self.target_space)

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {
            "data_dir": self.data_dir,
            "exporters_dir": self.exporters_dir,
            "theme_file": self.theme_file,
            "default_exporter": self.default_exporter,
            "default_format": self.default_format.value,
            "target_space": self.target_space.value,
        }
        return yaml.dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML.

        Unknown keys are ignored; invalid enum values fall back to defaults.
        """
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping")

        known = {f.name for f in fields(cls)}
        data = {key: value for key, value in data.items() if key in known}

        if "default_format" in data:
            try:
                data["default_format"] = DocumentFormat(str(data["default_format"]).lower())
            except ValueError:
                data["default_format"] = DocumentFormat.TOML
        if "target_space" in data:
            try:
                data["target_space"] = RGBSpace(str(data["target_space"]).lower())
            except ValueError:
                data["target_space"] = RGBSpace.SRGB

        return cls(**data)

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"

    def get_exporters_path(self) -> Path:
        return Path(self.exporters_dir)

    def get_theme_path(self) -> Path:
        return Path(self.theme_file)


class Config:
    """Configuration manager for Collurgy."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Load configuration from file or fall back to defaults."""
        if cls._instance is not None:
            return cls._instance

        config = ConfigModel()

        if config_path is None:
            config_path = config.get_config_path()

        if config_path.exists():
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    yaml_content = f.read()
                config = ConfigModel.from_yaml(yaml_content)
                logger.debug(f"Loaded configuration from {config_path}")
            except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {config_path}: {e}")
                logger.warning("Using default configuration.")
        else:
            logger.debug(f"No configuration at {config_path}, using defaults")

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = config.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            f.write(config.to_yaml())
        logger.info(f"Configuration saved to {config_path}")

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load(config_path)


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    Config.save(config, config_path)
