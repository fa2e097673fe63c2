"""
Scan accounting — what one aggregation pass read, matched, and failed on.

Provides:
  - YearScan: per-year counters for one completions resource.
  - ScanReport: the whole multi-year scan; collects YearScans and failures
    and renders a one-line summary for the log.

Usage inside the aggregator::

    report = ScanReport(cip="51.2001", awlevel=7)
    scan = report.start_year(2019, "C_2019.csv")
    ...                                  # fold rows, bump scan counters
    report.finish_year(scan)             # or report.fail_year(scan, "...")
    if report.failed:
        raise ScanError(report.failure_message(), report.failures)
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class YearScan:
    """Counters for scanning one year's completions resource."""

    year: int
    resource: str
    status: str = "started"                    # started | completed | failed
    rows_read: int = 0
    rows_matched: int = 0
    elapsed_seconds: float = 0.0
    error: str = ""
    _started: float = field(default_factory=time.monotonic, repr=False)


@dataclass
class ScanReport:
    """Structured summary of one multi-year aggregation scan."""

    cip: str
    awlevel: int | None = None
    years: list[YearScan] = field(default_factory=list)

    # ── year lifecycle ────────────────────────────────────────────────────

    def start_year(self, year: int, resource: str) -> YearScan:
        scan = YearScan(year=year, resource=resource)
        self.years.append(scan)
        return scan

    def finish_year(self, scan: YearScan) -> None:
        scan.elapsed_seconds = time.monotonic() - scan._started
        scan.status = "completed"

    def fail_year(self, scan: YearScan, message: str) -> None:
        scan.elapsed_seconds = time.monotonic() - scan._started
        scan.status = "failed"
        scan.error = message

    # ── aggregates ────────────────────────────────────────────────────────

    @property
    def rows_read(self) -> int:
        return sum(s.rows_read for s in self.years)

    @property
    def rows_matched(self) -> int:
        return sum(s.rows_matched for s in self.years)

    @property
    def failures(self) -> dict[int, str]:
        return {s.year: s.error for s in self.years if s.status == "failed"}

    @property
    def failed(self) -> bool:
        return any(s.status == "failed" for s in self.years)

    def failure_message(self) -> str:
        parts = [f"{year}: {err}" for year, err in self.failures.items()]
        return "Completions scan failed for " + "; ".join(parts)

    def console_summary(self) -> str:
        """One-line summary suitable for the log."""
        parts = [
            f"cip={self.cip}",
            f"awlevel={self.awlevel if self.awlevel is not None else 'all'}",
            f"{len(self.years)} year(s)",
            f"{self.rows_read:,} rows read",
            f"{self.rows_matched:,} matched",
        ]
        if self.failed:
            parts.append(f"failed years: {sorted(self.failures)}")
        return " | ".join(parts)
