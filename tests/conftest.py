"""
Pytest fixtures for the IPEDS comps tests.

Provides small on-disk HD/C fixture files (written to tmp_path so every test
gets a fresh copy), an in-memory completions resource that counts how often
it is opened, and a ready CompsService wired to both.
"""

import csv
import sys
from contextlib import contextmanager
from pathlib import Path

import pytest

_PROJECT_ROOT = str(Path(__file__).resolve().parent.parent)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from ipeds.directory import InstitutionDirectory  # noqa: E402
from ipeds.service import CompsService  # noqa: E402
from ipeds.years import YearRegistry  # noqa: E402
from utils.cache import FIFOCache  # noqa: E402


# ── Helpers ───────────────────────────────────────────────────────────────────

def write_csv(path: Path, header: list[str], rows: list[tuple]) -> Path:
    """Write a CSV fixture with *header* and *rows*; returns *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(header)
        writer.writerows(rows)
    return path


def comp_row(unitid: str, cip: str, awlevel, count) -> dict[str, str]:
    """One completions row keyed by the current NCES header spellings."""
    return {
        "UNITID": unitid,
        "CIPCODE": cip,
        "MAJORNUM": "1",
        "AWLEVEL": str(awlevel),
        "CTOTALT": str(count),
    }


class MemoryResource:
    """In-memory completions resource that counts opens and rows served.

    ``fail_after=n`` raises csv.Error when the n-th row (0-based) is reached,
    simulating a file that is corrupt part-way through.
    """

    def __init__(self, name: str, rows: list[dict], fail_after: int | None = None):
        self.name = name
        self.rows = rows
        self.fail_after = fail_after
        self.opens = 0
        self.rows_served = 0

    @contextmanager
    def open_rows(self):
        self.opens += 1
        yield self._iter()

    def _iter(self):
        for i, row in enumerate(self.rows):
            if self.fail_after is not None and i == self.fail_after:
                raise csv.Error("unexpected end of data")
            self.rows_served += 1
            yield dict(row)


HD_HEADER = ["UNITID", "INSTNM", "STABBR", "CONTROL", "WEBADDR", "C21BASIC"]
HD_ROWS = [
    ("100654", "Acme University", "AL", "1", "www.acme.edu/", "16"),
    ("100663", "Beta College", "AL", "2", "", "21"),
    ("100690", "Gamma Institute", "AZ", "3", "www.gamma.edu/", ""),
    ("", "Row Without Id", "TX", "1", "", ""),
]

# 2019 uses the current NCES spellings, 2020 an all-lowercase export with
# run-together CIP codes.
C2019_HEADER = ["UNITID", "CIPCODE", "MAJORNUM", "AWLEVEL", "CTOTALT"]
C2019_ROWS = [
    ("100654", "51.2001", "1", "7", "10"),
    ("100663", "51.2001", "1", "5", "4"),
    ("100663", "51.2001", "1", "7", "3"),
    ("100690", "11.0701", "1", "5", "8"),
    ("999999", "51.2001", "1", "7", "2"),
]
C2020_HEADER = ["unitid", "cipcode", "awlevel", "ctotalt"]
C2020_ROWS = [
    ("100654", "512001", "7", "5"),
    ("100663", "51.2001", "7", "3"),
    ("100663", "51.2001", "7", "n/a"),
    ("100690", "11.0701", "5", "2"),
]


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture()
def data_dir(tmp_path) -> Path:
    """A data directory with HD_2023.csv, C_2019.csv and c2020_a.csv."""
    root = tmp_path / "ipeds"
    write_csv(root / "HD_2023.csv", HD_HEADER, HD_ROWS)
    write_csv(root / "C_2019.csv", C2019_HEADER, C2019_ROWS)
    write_csv(root / "c2020_a.csv", C2020_HEADER, C2020_ROWS)
    return root


@pytest.fixture()
def directory(data_dir) -> InstitutionDirectory:
    return InstitutionDirectory.load(data_dir / "HD_2023.csv")


@pytest.fixture()
def memory_resources() -> dict[int, MemoryResource]:
    """Counting in-memory resources mirroring the on-disk fixture files."""
    return {
        2019: MemoryResource("C_2019", [
            comp_row(u, c, a, n) for u, c, _, a, n in C2019_ROWS
        ]),
        2020: MemoryResource("C_2020", [
            comp_row(u, c, a, n) for u, c, a, n in C2020_ROWS
        ]),
    }


@pytest.fixture()
def service(directory, memory_resources) -> CompsService:
    """CompsService over the fixture directory and counting resources."""
    registry = YearRegistry.from_mapping(memory_resources)
    return CompsService(directory, registry, FIFOCache(maxsize=4))
