"""Configuration management utilities for the IPEDS comps tools.

Provides:
- A small Config base class (dict round-tripping)
- AppConfig, the environment-driven application settings
- ColumnMapping, the prioritized header spellings accepted per field
"""

import os as _os
from pathlib import Path
from typing import Any, Dict, Optional


class Config:
    """Base configuration class for organizing application settings."""

    def __init__(self):
        """Initialize configuration with default values."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary.

        Starts from the class defaults and overrides only the keys given.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance with values from dictionary
        """
        config = cls()
        for key, value in data.items():
            setattr(config, key, value)
        return config


# ── Header spellings ─────────────────────────────────────────────────────────
# IPEDS has renamed and re-cased columns across survey vintages, and local
# exports sometimes lower-case everything.  Each logical field lists the
# accepted headers in priority order; the first one present in a row wins.


class ColumnMapping:
    """Maps logical fields to the CSV headers that may carry them."""

    # Completions (C) survey files
    COMPLETIONS: Dict[str, tuple[str, ...]] = {
        "unitid": ("UNITID", "unitid", "UnitID"),
        "cipcode": ("CIPCODE", "cipcode", "CIP", "cip"),
        "awlevel": ("AWLEVEL", "awlevel"),
        "count": ("CTOTALT", "ctotalt", "CTOTAL", "TOTAL", "count"),
    }

    # Institutional characteristics directory (HD) file
    DIRECTORY: Dict[str, tuple[str, ...]] = {
        "unitid": ("UNITID", "unitid", "UnitID"),
        "instnm": ("INSTNM", "instnm"),
        "stabbr": ("STABBR", "stabbr"),
        "control": ("CONTROL", "control", "SECTOR", "sector"),
        "webaddr": ("WEBADDR", "webaddr"),
        "carnegie": ("C21BASIC", "C18BASIC", "C15BASIC", "CCBASIC"),
    }

    @classmethod
    def resolve(cls, fieldnames, aliases: tuple[str, ...]) -> Optional[str]:
        """Return the first alias present in *fieldnames*, or None.

        Args:
            fieldnames: Header row of a CSV file (may be None for empty files)
            aliases: Accepted spellings, highest priority first
        """
        if not fieldnames:
            return None
        present = set(fieldnames)
        for alias in aliases:
            if alias in present:
                return alias
        return None


# ── Consolidated application configuration ───────────────────────────────────


def _parse_completions_files(raw: str) -> Dict[int, str]:
    """Parse ``"2019=C_2019.csv,2020=C_2020.csv"`` into ``{2019: "C_2019.csv", ...}``.

    Raises:
        ValueError: If an entry is not ``year=filename`` with an integer year.
    """
    mapping: Dict[int, str] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        year, sep, filename = entry.partition("=")
        if not sep or not filename.strip():
            raise ValueError(
                f"APP_COMPLETIONS_FILES entry {entry!r} must look like 2019=C_2019.csv"
            )
        mapping[int(year.strip())] = filename.strip()
    return mapping


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the application works out of the
    box given a ``data/ipeds`` directory.

    Environment variables:
        PORT: API server port (default: 3000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_DATA_DIR: Directory holding the HD and C files (default: data/ipeds)
        APP_DIRECTORY_FILE: HD file name inside APP_DATA_DIR; when unset the
            newest HD*.csv file found there is used
        APP_COMPLETIONS_FILES: Declared year→file mapping, e.g.
            "2019=C_2019.csv,2020=C_2020.csv"; when unset, completions files
            are discovered by name in APP_DATA_DIR
        APP_CACHE_SIZE: Max cached query responses (default: 100)
        APP_LOG_FORMAT: Logging format — "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
    """

    def __init__(self) -> None:
        super().__init__()
        self.api_port = int(_os.getenv("PORT", "3000"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.data_dir = Path(_os.getenv("APP_DATA_DIR", "data/ipeds"))
        self.directory_file: Optional[str] = _os.getenv("APP_DIRECTORY_FILE") or None
        self.completions_files: Dict[int, str] = _parse_completions_files(
            _os.getenv("APP_COMPLETIONS_FILES", "")
        )
        self.cache_size = int(_os.getenv("APP_CACHE_SIZE", "100"))
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
