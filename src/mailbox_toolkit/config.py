"""
Module: config

Purpose:
    Application configuration: where residents come from and how documents
    are produced. Immutable, validated on construction.

Key Classes:
    - AppConfig: Main configuration
    - ConfigError: Invalid configuration value

Key Functions:
    - load_config(): Defaults < JSON file < environment variables

Environment variables:
    MAILBOX_CONFIG            Path to a JSON config file
    MAILBOX_SUPABASE_URL      Hosted backend URL
    MAILBOX_SUPABASE_KEY      Hosted backend anonymous key
    MAILBOX_SHEETS_ID         Spreadsheet id
    MAILBOX_SHEETS_API_KEY    Spreadsheet API key
    MAILBOX_SOURCE            "supabase" or "sheets"
    MAILBOX_LOCALE            Collation locale (default "is")
    MAILBOX_LABELS_PER_PAGE   Labels per sheet (default 6)
    MAILBOX_OUTPUT_DIR        Where PDFs are written
    MAILBOX_REQUEST_TIMEOUT   HTTP timeout in seconds

Used By:
    - cli
    - gui.app
    - controller (via stores built from it)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

SOURCES = ("supabase", "sheets")

CONFIG_PATH_ENV = "MAILBOX_CONFIG"

# field name -> environment variable
_ENV_FIELDS = {
    "supabase_url": "MAILBOX_SUPABASE_URL",
    "supabase_key": "MAILBOX_SUPABASE_KEY",
    "sheets_id": "MAILBOX_SHEETS_ID",
    "sheets_api_key": "MAILBOX_SHEETS_API_KEY",
    "source": "MAILBOX_SOURCE",
    "locale": "MAILBOX_LOCALE",
    "labels_per_page": "MAILBOX_LABELS_PER_PAGE",
    "output_dir": "MAILBOX_OUTPUT_DIR",
    "request_timeout": "MAILBOX_REQUEST_TIMEOUT",
}


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


@dataclass(frozen=True)
class AppConfig:
    """
    Application configuration (immutable).

    Attributes:
        supabase_url: Hosted backend URL
        supabase_key: Hosted backend anonymous key
        sheets_id: Spreadsheet id for the read-only source
        sheets_api_key: Spreadsheet API key
        source: "supabase" or "sheets"
        locale: Collation locale for names and apartment codes
        labels_per_page: Labels per sheet
        request_timeout: HTTP timeout in seconds
        output_dir: Where generated PDFs are written

    Example:
        >>> config = load_config(environ={"MAILBOX_LABELS_PER_PAGE": "8"})
        >>> config.labels_per_page
        8
    """

    supabase_url: str = ""
    supabase_key: str = ""
    sheets_id: str = ""
    sheets_api_key: str = ""
    source: str = "supabase"
    locale: str = "is"
    labels_per_page: int = 6
    request_timeout: float = 10.0
    output_dir: Path = Path("output")

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.source not in SOURCES:
            raise ConfigError(f"source must be one of {SOURCES}: {self.source!r}")
        if isinstance(self.labels_per_page, bool) or not isinstance(self.labels_per_page, int):
            raise ConfigError(f"labels_per_page must be an int: {self.labels_per_page!r}")
        if self.labels_per_page <= 0:
            raise ConfigError(f"labels_per_page must be positive: {self.labels_per_page}")
        if self.request_timeout <= 0:
            raise ConfigError(f"request_timeout must be positive: {self.request_timeout}")
        if not self.locale:
            raise ConfigError("locale cannot be empty")

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def has_sheets(self) -> bool:
        return bool(self.sheets_id and self.sheets_api_key)

    def require_source(self) -> None:
        """
        Check that the selected source has its credentials.

        Raises:
            ConfigError: If the credentials are missing
        """
        if self.source == "supabase" and not self.has_supabase:
            raise ConfigError(
                "Supabase source needs MAILBOX_SUPABASE_URL and MAILBOX_SUPABASE_KEY"
            )
        if self.source == "sheets" and not self.has_sheets:
            raise ConfigError(
                "Sheets source needs MAILBOX_SHEETS_ID and MAILBOX_SHEETS_API_KEY"
            )


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw file/env value to the field's type."""
    try:
        if name == "labels_per_page":
            if isinstance(value, bool):
                raise ValueError(value)
            return int(value)
        if name == "request_timeout":
            return float(value)
        if name == "output_dir":
            return Path(value).expanduser()
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from e
    return str(value).strip()


def _read_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """
    Load configuration.

    Precedence: environment variables > JSON file > defaults. Unknown keys
    in the file are ignored with a warning.

    Args:
        path: JSON config file; defaults to $MAILBOX_CONFIG if set
        environ: Environment mapping (defaults to os.environ)

    Raises:
        ConfigError: If the file cannot be read or a value is invalid
    """
    environ = os.environ if environ is None else environ
    known = {f.name for f in fields(AppConfig)}
    values: dict[str, Any] = {}

    if path is None and environ.get(CONFIG_PATH_ENV):
        path = Path(environ[CONFIG_PATH_ENV])
    if path is not None:
        for key, value in _read_file(Path(path)).items():
            if key not in known:
                logger.warning(f"Ignoring unknown config key {key!r} in {path}")
                continue
            values[key] = _coerce(key, value)
        logger.info(f"Loaded config file {path}")

    for name, variable in _ENV_FIELDS.items():
        raw = environ.get(variable)
        if raw is not None and raw.strip() != "":
            values[name] = _coerce(name, raw)

    return AppConfig(**values)
