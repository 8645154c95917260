"""Exporter registry for built-in and user exporter definitions.

This module provides the ExporterRegistry class, which merges the exporter
presets shipped with the package and user-supplied exporter documents into a
single read-only catalog keyed by exporter name.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Tuple, Any
from functools import lru_cache
import logging

from pydantic import ValidationError

from .schema import ExporterRecord
from .persistence import SUFFIX_FORMATS, ThemeFormatError, format_for_path, parse_document

logger = logging.getLogger(__name__)

BUILTIN_PRESETS_DIR = Path(__file__).parent.parent / "exporter_presets"
BUILTIN_SOURCE = "builtin"


class ExporterNotFoundError(KeyError):
    """Raised when an exporter name is not in the catalog."""


class ExporterFormatError(ValueError):
    """Raised when an exporter document cannot be loaded."""


def load_exporter_file(file_path: Path) -> ExporterRecord:
    """Load one exporter document.

    Args:
        file_path: TOML, YAML or JSON exporter document

    Returns:
        ExporterRecord instance

    Raises:
        ExporterFormatError: If the file is unreadable or invalid
    """
    try:
        fmt = format_for_path(file_path)
        with open(file_path, 'r', encoding='utf-8') as f:
            data = parse_document(f.read(), fmt)
        return ExporterRecord(**data)
    except (ThemeFormatError, ValidationError, TypeError) as e:
        raise ExporterFormatError(f"Invalid exporter definition in {file_path}: {e}") from e
    except OSError as e:
        raise ExporterFormatError(f"Error reading {file_path}: {e}") from e


def _exporter_files(directory: Path) -> List[Path]:
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in SUFFIX_FORMATS
    )


@lru_cache(maxsize=1)
def builtin_exporters() -> Tuple[ExporterRecord, ...]:
    """Exporter presets shipped with the package, parsed once per process."""
    if not BUILTIN_PRESETS_DIR.exists():
        logger.warning(f"Built-in exporters directory not found: {BUILTIN_PRESETS_DIR}")
        return ()

    exporters = []
    for preset_file in _exporter_files(BUILTIN_PRESETS_DIR):
        exporters.append(load_exporter_file(preset_file))
        logger.debug(f"Found built-in exporter: {preset_file.stem}")
    return tuple(exporters)


class ExporterRegistry:
    """Catalog of exporters: built-ins first, then user documents, last wins."""

    def __init__(self, exporters_dir: Optional[Path] = None, include_builtins: bool = True):
        """Initialize the exporter registry.

        Args:
            exporters_dir: Optional directory of user exporter documents
            include_builtins: Whether to load the shipped presets
        """
        self.exporters_dir = Path(exporters_dir).expanduser() if exporters_dir else None
        self.include_builtins = include_builtins

        self._exporters: Dict[str, ExporterRecord] = {}
        self._sources: Dict[str, str] = {}
        self.load_errors: List[Tuple[Path, str]] = []

        self._scan()

    @classmethod
    def from_config(cls, config) -> 'ExporterRegistry':
        """Create a registry from application config.

        Args:
            config: Application configuration object

        Returns:
            ExporterRegistry instance
        """
        exporters_dir = Path(config.exporters_dir) if hasattr(config, 'exporters_dir') else None
        return cls(exporters_dir)

    def _add(self, exporter: ExporterRecord, source: str) -> None:
        if exporter.name in self._exporters:
            logger.debug(f"Exporter '{exporter.name}' from {source} replaces {self._sources[exporter.name]}")
        self._exporters[exporter.name] = exporter
        self._sources[exporter.name] = source

    def _scan(self) -> None:
        self._exporters.clear()
        self._sources.clear()
        self.load_errors.clear()

        if self.include_builtins:
            for exporter in builtin_exporters():
                self._add(exporter, BUILTIN_SOURCE)

        if self.exporters_dir is None:
            return
        if not self.exporters_dir.is_dir():
            logger.debug(f"User exporters directory not found: {self.exporters_dir}")
            return

        for exporter_file in _exporter_files(self.exporters_dir):
            try:
                exporter = load_exporter_file(exporter_file)
            except ExporterFormatError as e:
                logger.warning(str(e))
                self.load_errors.append((exporter_file, str(e)))
                continue
            self._add(exporter, str(exporter_file))
            logger.debug(f"Found user exporter: {exporter.name}")

    @property
    def exporters(self) -> MappingProxyType:
        """Read-only view of name -> ExporterRecord."""
        return MappingProxyType(self._exporters)

    def names(self) -> List[str]:
        return sorted(self._exporters)

    def get(self, name: str) -> ExporterRecord:
        """Look up an exporter by name.

        Raises:
            ExporterNotFoundError: If no exporter has that name
        """
        try:
            return self._exporters[name]
        except KeyError:
            raise ExporterNotFoundError(f"Exporter '{name}' not found") from None

    def source(self, name: str) -> str:
        """'builtin' or the path of the user document that defined ``name``."""
        self.get(name)
        return self._sources[name]

    def default_name(self, preferred: Optional[str] = None) -> Optional[str]:
        """``preferred`` when available, otherwise the first name alphabetically."""
        if preferred and preferred in self._exporters:
            return preferred
        names = self.names()
        return names[0] if names else None

    def list_exporters(self) -> List[Dict[str, Any]]:
        """List all exporters with metadata.

        Returns:
            List of exporter info dictionaries sorted by name
        """
        return [
            {
                'name': name,
                'type': BUILTIN_SOURCE if self._sources[name] == BUILTIN_SOURCE else 'user',
                'source': self._sources[name],
                'path': self._exporters[name].path,
                'extras': dict(self._exporters[name].extras),
            }
            for name in self.names()
        ]

    def reload(self) -> None:
        """Rescan the user exporters directory."""
        self._scan()

    def __contains__(self, name: object) -> bool:
        return name in self._exporters

    def __len__(self) -> int:
        return len(self._exporters)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
