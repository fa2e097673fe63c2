"""Institution directory loaded once from the IPEDS HD file.

The directory is built by a single full pass at startup and is read-only
afterwards, so concurrent request threads read it without locking.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from pathlib import Path

from ipeds.errors import DirectoryLoadError
from ipeds.reader import CsvResource
from utils.config import ColumnMapping
from utils.patterns import DIRECTORY_FILE
from utils.strings import first_present, optional_str

logger = logging.getLogger(__name__)

_CONTROL_LABELS = {
    "1": "Public",
    "2": "Private nonprofit",
    "3": "Private for-profit",
}


def control_label(code: str | None) -> str:
    """Map an HD CONTROL/SECTOR code to its display label.

    Only the first character is significant (SECTOR 1/2/3 share CONTROL's
    leading digit).  Missing → "Unknown"; any other code → "Other".
    """
    code = (code or "").strip()
    if not code:
        return "Unknown"
    return _CONTROL_LABELS.get(code[0], "Other")


@dataclass(frozen=True)
class InstitutionRecord:
    """One directory entry."""

    unitid: str
    instnm: str
    stabbr: str
    control: str
    carnegie: str | None = None
    webaddr: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)


def find_directory_file(data_dir: Path) -> Path:
    """Return the newest ``HD<year>.csv`` file in *data_dir*.

    Raises:
        DirectoryLoadError: If no HD file is present.
    """
    candidates: list[tuple[int, Path]] = []
    if data_dir.is_dir():
        for path in data_dir.iterdir():
            match = DIRECTORY_FILE.match(path.name)
            if match and path.is_file():
                candidates.append((int(match.group(1)), path))
    if not candidates:
        raise DirectoryLoadError(f"No HD directory file found in {data_dir}")
    return max(candidates)[1]


class InstitutionDirectory:
    """Read-only UNITID → :class:`InstitutionRecord` mapping."""

    def __init__(self, records: Mapping[str, InstitutionRecord] | None = None) -> None:
        self._records: dict[str, InstitutionRecord] = dict(records or {})

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, str]]) -> "InstitutionDirectory":
        """Build from header-keyed rows; rows without a UNITID are skipped."""
        cols = ColumnMapping.DIRECTORY
        records: dict[str, InstitutionRecord] = {}
        skipped = 0
        for row in rows:
            unitid = first_present(row, cols["unitid"])
            if not unitid:
                skipped += 1
                continue
            records[unitid] = InstitutionRecord(
                unitid=unitid,
                instnm=first_present(row, cols["instnm"]),
                stabbr=first_present(row, cols["stabbr"]),
                control=control_label(first_present(row, cols["control"])),
                carnegie=optional_str(first_present(row, cols["carnegie"])),
                webaddr=optional_str(first_present(row, cols["webaddr"])),
            )
        if skipped:
            logger.debug("Skipped %d directory row(s) without a UNITID", skipped)
        return cls(records)

    @classmethod
    def load(cls, path: Path | str) -> "InstitutionDirectory":
        """Load the HD file at *path*.

        Raises:
            DirectoryLoadError: If the file is missing, unreadable, malformed,
                or has no UNITID column.  Callers treat this as fatal.
        """
        resource = CsvResource(path)
        try:
            with resource.open_rows() as rows:
                fieldnames = rows.fieldnames
                if ColumnMapping.resolve(fieldnames, ColumnMapping.DIRECTORY["unitid"]) is None:
                    raise DirectoryLoadError(
                        f"{resource.name} has no UNITID column (headers: {fieldnames})"
                    )
                directory = cls.from_rows(rows)
        except (OSError, csv.Error) as exc:
            raise DirectoryLoadError(f"Cannot load directory {resource.path}: {exc}") from exc
        logger.info("Loaded %d institutions from %s", len(directory), resource.name)
        return directory

    def lookup(self, unitid: str) -> InstitutionRecord | None:
        """Return the record for *unitid*, or None if it is not in the directory."""
        return self._records.get(unitid)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, unitid: object) -> bool:
        return unitid in self._records
