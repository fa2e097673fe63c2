"""Shared utilities for the IPEDS comps tools."""

# Patterns
from utils.patterns import (
    CIP_CANONICAL,
    CIP_STRIP_CHARS,
    COMPLETIONS_FILE,
    DIRECTORY_FILE,
)

# Strings
from utils.strings import first_present, optional_str, safe_int

# Caching
from utils.cache import FIFOCache

# Configuration
from utils.config import AppConfig, ColumnMapping, Config

__all__ = [
    # Patterns
    "CIP_CANONICAL",
    "CIP_STRIP_CHARS",
    "COMPLETIONS_FILE",
    "DIRECTORY_FILE",
    # Strings
    "safe_int",
    "first_present",
    "optional_str",
    # Caching
    "FIFOCache",
    # Config
    "Config",
    "AppConfig",
    "ColumnMapping",
]
