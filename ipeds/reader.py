"""Lazy CSV row streaming for IPEDS files.

The only contract the engine relies on: given an open text handle, produce
header-keyed field mappings one record at a time, in file order, without
buffering the file.  ``csv.DictReader`` already does exactly that; this
module adds header cleanup and a file-backed resource wrapper.
"""

from __future__ import annotations

import csv
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

# NCES ships UTF-8 with a BOM on some vintages and cp1252 on others; BOM is
# stripped by utf-8-sig and stray bytes are replaced rather than fatal.
DEFAULT_ENCODING = "utf-8-sig"


class RowStream:
    """Iterator of ``{header: value}`` dicts over one CSV handle.

    The header line is read on construction so :attr:`fieldnames` is
    available before the first row.  Header names are whitespace-stripped,
    blank lines are skipped, and short rows carry ``None`` for missing
    trailing fields.

    Raises:
        csv.Error: On malformed input, at the row where it is detected.
    """

    def __init__(self, handle: IO[str]) -> None:
        self._reader = csv.DictReader(handle)
        if self._reader.fieldnames is not None:
            self._reader.fieldnames = [name.strip() for name in self._reader.fieldnames]

    @property
    def fieldnames(self) -> list[str] | None:
        return self._reader.fieldnames

    def __iter__(self) -> "RowStream":
        return self

    def __next__(self) -> dict[str, str]:
        return next(self._reader)


def iter_rows(handle: IO[str]) -> RowStream:
    """Return a lazy row stream over an open CSV text handle."""
    return RowStream(handle)


class CsvResource:
    """A completions or directory file on disk, reopened for every scan."""

    def __init__(self, path: Path | str, encoding: str = DEFAULT_ENCODING) -> None:
        self.path = Path(path)
        self.encoding = encoding

    @property
    def name(self) -> str:
        return self.path.name

    @contextmanager
    def open_rows(self) -> Iterator[RowStream]:
        """Open the file and yield a lazy row stream; closes on exit.

        Raises:
            OSError: If the file cannot be opened.
            csv.Error: If the header line is malformed.
        """
        with open(self.path, newline="", encoding=self.encoding, errors="replace") as fh:
            yield iter_rows(fh)

    def __repr__(self) -> str:
        return f"CsvResource({str(self.path)!r})"
