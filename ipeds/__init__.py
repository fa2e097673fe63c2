"""IPEDS completions comps engine.

Modules:
  - cip:        CIP code normalization (``NN.NNNN``)
  - directory:  in-memory institution directory loaded from the HD file
  - years:      year → completions resource registry (declared or discovered)
  - reader:     lazy CSV row streaming for completions resources
  - aggregator: single-pass streaming fold of completions rows
  - report:     per-scan accounting (rows read/matched, failed years)
  - service:    query orchestration, directory join, shaping, caching
  - errors:     exception hierarchy mapped to HTTP statuses by the API
"""

from ipeds.cip import normalize_cip
from ipeds.directory import InstitutionDirectory, InstitutionRecord
from ipeds.errors import (
    CompsError,
    DirectoryLoadError,
    MissingParameterError,
    QueryCancelled,
    ResourceUnavailableError,
    ScanError,
)
from ipeds.service import CompsKey, CompsService
from ipeds.years import CsvResource, YearRegistry

__all__ = [
    "normalize_cip",
    "InstitutionDirectory",
    "InstitutionRecord",
    "CompsError",
    "DirectoryLoadError",
    "MissingParameterError",
    "QueryCancelled",
    "ResourceUnavailableError",
    "ScanError",
    "CompsKey",
    "CompsService",
    "CsvResource",
    "YearRegistry",
]
