"""Serialization of theme records to TOML, JSON and YAML documents."""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

import tomli_w
import yaml
from pydantic import ValidationError

from .schema import DocumentFormat, ThemeRecord

logger = logging.getLogger(__name__)

SUFFIX_FORMATS = {
    ".toml": DocumentFormat.TOML,
    ".json": DocumentFormat.JSON,
    ".yaml": DocumentFormat.YAML,
    ".yml": DocumentFormat.YAML,
}


class ThemeFormatError(ValueError):
    """Raised when a document cannot be read as a theme."""


def format_for_path(path: Union[str, Path]) -> DocumentFormat:
    """Infer the document format from a file suffix.

    Raises:
        ThemeFormatError: If the suffix is not a supported format
    """
    suffix = Path(path).suffix.lower()
    try:
        return SUFFIX_FORMATS[suffix]
    except KeyError:
        raise ThemeFormatError(f"Unsupported file format: {suffix or '(none)'}") from None


def parse_document(text: str, fmt: DocumentFormat) -> Dict[str, Any]:
    """Parse document text into a mapping.

    Raises:
        ThemeFormatError: If the text is not valid ``fmt`` or not a mapping
    """
    fmt = DocumentFormat(fmt)
    try:
        if fmt is DocumentFormat.TOML:
            data = tomllib.loads(text)
        elif fmt is DocumentFormat.JSON:
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except tomllib.TOMLDecodeError as e:
        raise ThemeFormatError(f"Invalid TOML: {e}") from e
    except json.JSONDecodeError as e:
        raise ThemeFormatError(f"Invalid JSON: {e}") from e
    except yaml.YAMLError as e:
        raise ThemeFormatError(f"Invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ThemeFormatError(f"Expected a {fmt.value.upper()} mapping, got {type(data).__name__}")
    return data


def dump_document(data: Dict[str, Any], fmt: DocumentFormat) -> str:
    fmt = DocumentFormat(fmt)
    if fmt is DocumentFormat.TOML:
        return tomli_w.dumps(data)
    if fmt is DocumentFormat.JSON:
        return json.dumps(data, indent=2) + "\n"
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def dumps(theme: ThemeRecord, fmt: DocumentFormat = DocumentFormat.TOML) -> str:
    """Serialize a theme. The model is written as its string tag."""
    return dump_document(theme.model_dump(mode="json"), fmt)


def loads(text: str, fmt: DocumentFormat = DocumentFormat.TOML) -> ThemeRecord:
    """Deserialize a theme document.

    Documents missing ``model`` or ``high2023`` load as CIELCH without
    compensation, matching themes saved before those fields existed.

    Raises:
        ThemeFormatError: If the document is malformed or fails validation
    """
    data = parse_document(text, fmt)
    try:
        return ThemeRecord(**data)
    except ValidationError as e:
        raise ThemeFormatError(f"Invalid theme document: {e}") from e
    except TypeError as e:
        raise ThemeFormatError(f"Invalid theme document: {e}") from e


def try_loads(text: str, fmt: DocumentFormat = DocumentFormat.TOML) -> Optional[ThemeRecord]:
    """Like :func:`loads` but returns None on rejection so callers keep their last good theme."""
    try:
        return loads(text, fmt)
    except ThemeFormatError as e:
        logger.warning(f"Rejected theme document: {e}")
        return None


def load_theme(path: Union[str, Path]) -> ThemeRecord:
    """Load a theme file, format chosen by suffix.

    Raises:
        FileNotFoundError: If the file does not exist
        ThemeFormatError: If the file cannot be parsed
    """
    path = Path(path)
    fmt = format_for_path(path)
    with open(path, 'r', encoding='utf-8') as f:
        text = f.read()
    try:
        theme = loads(text, fmt)
    except ThemeFormatError as e:
        raise ThemeFormatError(f"{path}: {e}") from e
    logger.debug(f"Loaded {theme.model.value} theme from {path}")
    return theme


def save_theme(theme: ThemeRecord, path: Union[str, Path],
               fmt: Optional[DocumentFormat] = None) -> Path:
    """Write a theme file, format chosen by suffix unless given."""
    path = Path(path)
    fmt = fmt or format_for_path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(dumps(theme, fmt))
    logger.info(f"Saved theme to {path}")
    return path
