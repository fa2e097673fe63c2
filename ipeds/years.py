"""Year registry: which dataset years exist and where their rows live.

Two ways to build one:

    YearRegistry.from_mapping({2019: "C_2019.csv", 2020: "C_2020.csv"},
                              base_dir=Path("data/ipeds"))
    YearRegistry.discover(Path("data/ipeds"))   # C_2019.csv, c2020_a.csv, ...

Discovery is preferred when the deployment's coverage is not known ahead of
time.  Either way, years are always exposed in ascending order.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from ipeds.reader import CsvResource
from utils.patterns import COMPLETIONS_FILE

logger = logging.getLogger(__name__)


class YearRegistry:
    """Ordered, read-only mapping of dataset year → completions resource.

    A resource is anything with a ``name`` attribute and an ``open_rows()``
    context manager yielding header-keyed row dicts (see
    :class:`ipeds.reader.CsvResource`).
    """

    def __init__(self, resources: Mapping[int, Any]) -> None:
        self._resources: dict[int, Any] = {
            int(year): resources[year] for year in sorted(resources, key=int)
        }

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[int, Any],
        base_dir: Path | None = None,
    ) -> "YearRegistry":
        """Build from a declared year → file (or resource) mapping.

        String and Path values are wrapped in :class:`CsvResource`, resolved
        against *base_dir* when relative.  Files are not checked here; a
        missing file fails the query that needs it.
        """
        resources: dict[int, Any] = {}
        for year, target in mapping.items():
            if isinstance(target, (str, Path)):
                path = Path(target)
                if base_dir is not None and not path.is_absolute():
                    path = base_dir / path
                target = CsvResource(path)
            resources[int(year)] = target
        return cls(resources)

    @classmethod
    def discover(
        cls,
        data_dir: Path,
        pattern: re.Pattern[str] = COMPLETIONS_FILE,
    ) -> "YearRegistry":
        """Build by scanning *data_dir* for files whose name matches *pattern*.

        The year is taken from the pattern's first group.  When two files
        claim the same year the first in sorted-name order wins.
        """
        resources: dict[int, CsvResource] = {}
        if not data_dir.is_dir():
            logger.warning("Completions directory not found: %s", data_dir)
            return cls(resources)
        for path in sorted(data_dir.iterdir()):
            match = pattern.match(path.name)
            if not match or not path.is_file():
                continue
            year = int(match.group(1))
            if year in resources:
                logger.warning(
                    "Ignoring %s: year %d already provided by %s",
                    path.name, year, resources[year].name,
                )
                continue
            resources[year] = CsvResource(path)
        logger.info(
            "Discovered %d completions file(s) in %s: %s",
            len(resources), data_dir, sorted(resources),
        )
        return cls(resources)

    def years(self) -> list[int]:
        """Return registered years, ascending."""
        return list(self._resources)

    def resource_for(self, year: int) -> Any:
        """Return the resource registered for *year*.

        Raises:
            KeyError: If *year* is not registered.
        """
        return self._resources[year]

    def __iter__(self) -> Iterator[int]:
        return iter(self._resources)

    def __len__(self) -> int:
        return len(self._resources)

    def __contains__(self, year: object) -> bool:
        return year in self._resources

    def __repr__(self) -> str:
        return f"YearRegistry({self.years()})"
