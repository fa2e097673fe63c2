"""
Comps query service.

Ties the pieces together for one request::

    cip → normalize → cache lookup ─hit──────────────────────────→ payload
                                    └miss→ aggregate → join → shape → cache

The directory, registry and cache are constructor-injected so tests (and
the CLI) can substitute fixtures.  Payloads are built once per cache miss
and never mutated afterwards; a cache hit returns the very same object.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, NamedTuple

from ipeds.aggregator import aggregate
from ipeds.cip import normalize_cip
from ipeds.directory import InstitutionDirectory, find_directory_file
from ipeds.errors import MissingParameterError
from ipeds.years import YearRegistry
from utils.cache import FIFOCache
from utils.config import AppConfig
from utils.patterns import INTEGER

logger = logging.getLogger(__name__)

UNKNOWN_INSTITUTION = "Unknown institution"


class CompsKey(NamedTuple):
    """Cache key: normalized CIP, award-level filter, response shape."""

    cip: str
    awlevel: int | None
    by_award: bool = False


def parse_awlevel(raw: Any) -> int | None:
    """Parse an optional award-level parameter; invalid values mean "no filter".

    Only plain integers are accepted: ``7.9``, ``1,000`` and ``7e0`` are
    ignored rather than coerced.
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not INTEGER.match(text):
        return None
    return int(text)


def _year_map(cell: dict[int, int]) -> dict[int, int]:
    return {year: cell[year] for year in sorted(cell)}


class CompsService:
    """Answers "who awarded completions in this CIP, per year?" queries."""

    def __init__(
        self,
        directory: InstitutionDirectory,
        registry: YearRegistry,
        cache: FIFOCache | None = None,
    ) -> None:
        self.directory = directory
        self.registry = registry
        self.cache = cache if cache is not None else FIFOCache()

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "CompsService":
        """Load the directory and register completions years per *cfg*.

        Uses the declared year mapping when APP_COMPLETIONS_FILES is set,
        otherwise discovers completions files in the data directory.

        Raises:
            DirectoryLoadError: The HD file is missing or unusable (fatal).
        """
        if cfg.directory_file:
            directory_path = cfg.data_dir / cfg.directory_file
        else:
            directory_path = find_directory_file(cfg.data_dir)
        directory = InstitutionDirectory.load(directory_path)

        if cfg.completions_files:
            registry = YearRegistry.from_mapping(cfg.completions_files, base_dir=cfg.data_dir)
        else:
            registry = YearRegistry.discover(cfg.data_dir)
        if not len(registry):
            logger.warning("No completions years registered under %s", cfg.data_dir)

        return cls(directory, registry, FIFOCache(cfg.cache_size))

    # ── public API ────────────────────────────────────────────────────────

    def query(
        self,
        cip: str | None,
        awlevel: int | None = None,
        *,
        cancelled: Callable[[], bool] | None = None,
    ) -> dict[str, Any]:
        """Per-institution completions by year, sorted by descending total.

        Ties keep first-encountered order.

        Raises:
            MissingParameterError: *cip* is missing or blank.
            ScanError: A completions resource failed (nothing is cached).
            QueryCancelled: *cancelled* fired mid-scan (nothing is cached).
        """
        code = self._require_cip(cip)
        key = CompsKey(code, awlevel)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("cache hit %s", key)
            return cached

        result = aggregate(self.registry, code, awlevel, cancelled=cancelled)
        results = []
        for unitid, groups in result.accumulator.items():
            cell = groups.get(None, {})
            entry = self._institution_fields(unitid)
            entry["completions"] = _year_map(cell)
            entry["total"] = sum(cell.values())
            results.append(entry)
        results.sort(key=lambda r: -r["total"])

        payload: dict[str, Any] = {"cip": code}
        if awlevel is not None:
            payload["awlevel"] = awlevel
        payload["years"] = self.registry.years()
        payload["results"] = results
        self._store(key, payload)
        return payload

    def query_by_award(
        self,
        cip: str | None,
        *,
        cancelled: Callable[[], bool] | None = None,
    ) -> dict[str, Any]:
        """Per-institution completions grouped by award level.

        Institutions and award levels appear in accumulation order (first
        encountered while scanning years ascending).

        Raises:
            Same as :meth:`query`.
        """
        code = self._require_cip(cip)
        key = CompsKey(code, None, by_award=True)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("cache hit %s", key)
            return cached

        result = aggregate(self.registry, code, by_award=True, cancelled=cancelled)
        results = []
        for unitid, groups in result.accumulator.items():
            entry = self._institution_fields(unitid)
            awards = {}
            for level, cell in groups.items():
                awards[level] = {"completions": _year_map(cell), "total": sum(cell.values())}
            entry["awards"] = awards
            entry["total"] = sum(a["total"] for a in awards.values())
            results.append(entry)

        payload = {"cip": code, "years": self.registry.years(), "results": results}
        self._store(key, payload)
        return payload

    def health(self) -> dict[str, Any]:
        return {
            "ok": True,
            "years": self.registry.years(),
            "institutionsLoaded": len(self.directory),
        }

    # ── helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _require_cip(cip: str | None) -> str:
        if cip is None or not str(cip).strip():
            raise MissingParameterError("cip")
        return normalize_cip(cip)

    def _institution_fields(self, unitid: str) -> dict[str, Any]:
        record = self.directory.lookup(unitid)
        if record is None:
            return {
                "unitid": unitid,
                "instnm": UNKNOWN_INSTITUTION,
                "stabbr": None,
                "control": None,
                "carnegie": None,
                "webaddr": None,
            }
        return record.to_dict()

    def _store(self, key: CompsKey, payload: dict[str, Any]) -> None:
        if self.cache.set(key, payload):
            logger.debug("cached %s (%d results)", key, len(payload["results"]))
        else:
            # A concurrent request for the same key cached an identical payload first.
            logger.debug("cache already held %s", key)
