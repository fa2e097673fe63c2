"""
Streaming completions aggregator.

For one normalized CIP code (and optional award-level filter), every year's
completions resource is read exactly once, row by row, and matching rows are
folded into an accumulator::

    {unitid: {group: {year: count}}}

``group`` is the row's award level when grouping by award, else ``None``;
that key is the only difference between the flat and award-grouped shapes.
Counts are summed (duplicate unitid/year rows add) and are never clamped.

Failure policy:
  - A resource that cannot be opened aborts the whole query
    (ResourceUnavailableError).
  - A csv parse error mid-file aborts that year only; the remaining years are
    still scanned, then a ScanError naming every failed year is raised.
  - ``cancelled()`` is polled at each row; a True result raises
    QueryCancelled.  Nothing partial ever leaves this module.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Callable, Iterable, Mapping
from contextlib import ExitStack
from dataclasses import dataclass

from ipeds.cip import normalize_cip
from ipeds.errors import QueryCancelled, ResourceUnavailableError, ScanError
from ipeds.report import ScanReport, YearScan
from ipeds.years import YearRegistry
from utils.config import ColumnMapping
from utils.strings import first_present, safe_int

logger = logging.getLogger(__name__)

# unitid -> group key (award level or None) -> year -> summed count
Accumulator = dict[str, dict[int | None, dict[int, int]]]

# Errors that abort one year's scan but not the query
_ROW_ERRORS = (csv.Error, OSError)


@dataclass
class AggregationResult:
    accumulator: Accumulator
    report: ScanReport


def fold_rows(
    acc: Accumulator,
    year: int,
    rows: Iterable[Mapping[str, str]],
    cip: str,
    awlevel: int | None = None,
    *,
    by_award: bool = False,
    cancelled: Callable[[], bool] | None = None,
    scan: YearScan | None = None,
) -> int:
    """Fold one year's rows into *acc* and return the number of matched rows.

    *cip* must already be normalized.  Rows are consumed lazily and never
    retained.
    """
    cols = ColumnMapping.COMPLETIONS
    unitid_keys = cols["unitid"]
    cip_keys = cols["cipcode"]
    awlevel_keys = cols["awlevel"]
    count_keys = cols["count"]

    matched = 0
    for row in rows:
        if scan is not None:
            scan.rows_read += 1
        if cancelled is not None and cancelled():
            raise QueryCancelled(f"Query for {cip} cancelled while scanning {year}")

        unitid = first_present(row, unitid_keys)
        if not unitid:
            continue
        row_cip = first_present(row, cip_keys)
        if not row_cip or normalize_cip(row_cip) != cip:
            continue

        row_awlevel = safe_int(first_present(row, awlevel_keys), default=None)
        if awlevel is not None and row_awlevel != awlevel:
            continue
        if by_award and row_awlevel is None:
            continue
        group = row_awlevel if by_award else None

        count = safe_int(first_present(row, count_keys), default=0)
        cell = acc.setdefault(unitid, {}).setdefault(group, {})
        cell[year] = cell.get(year, 0) + count
        matched += 1

    if scan is not None:
        scan.rows_matched += matched
    return matched


def aggregate(
    registry: YearRegistry,
    cip: str,
    awlevel: int | None = None,
    *,
    by_award: bool = False,
    cancelled: Callable[[], bool] | None = None,
) -> AggregationResult:
    """Scan every registered year once and accumulate matching completions.

    Years are scanned in ascending order.

    Raises:
        ResourceUnavailableError: A year's resource could not be opened.
        ScanError: One or more years failed mid-stream.
        QueryCancelled: ``cancelled()`` returned True.
    """
    acc: Accumulator = {}
    report = ScanReport(cip=cip, awlevel=awlevel)

    for year in registry.years():
        resource = registry.resource_for(year)
        scan = report.start_year(year, getattr(resource, "name", repr(resource)))
        with ExitStack() as stack:
            try:
                rows = stack.enter_context(resource.open_rows())
            except OSError as exc:
                report.fail_year(scan, str(exc))
                logger.error("Cannot open completions for %d (%s): %s",
                             year, scan.resource, exc)
                raise ResourceUnavailableError(year, scan.resource, str(exc)) from exc
            except csv.Error as exc:
                report.fail_year(scan, f"unreadable header: {exc}")
                logger.warning("Skipping %d (%s): unreadable header: %s",
                               year, scan.resource, exc)
                continue

            try:
                fold_rows(acc, year, rows, cip, awlevel,
                          by_award=by_award, cancelled=cancelled, scan=scan)
            except _ROW_ERRORS as exc:
                report.fail_year(
                    scan,
                    f"{type(exc).__name__} after {scan.rows_read} rows: {exc}",
                )
                logger.warning("Aborted scan of %d (%s): %s",
                               year, scan.resource, scan.error)
                continue

        report.finish_year(scan)
        logger.debug("Scanned %d (%s): %d rows, %d matched in %.2fs",
                     year, scan.resource, scan.rows_read, scan.rows_matched,
                     scan.elapsed_seconds)

    logger.info("scan %s", report.console_summary())
    if report.failed:
        raise ScanError(report.failure_message(), report.failures)
    return AggregationResult(accumulator=acc, report=report)
