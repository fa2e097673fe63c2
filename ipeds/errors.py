"""Exception hierarchy for the comps engine.

The API layer maps each class to a status code (see ``api/app.py``):

    MissingParameterError     → 400
    ScanError                 → 500
    ResourceUnavailableError  → 500
    QueryCancelled            → 499 (client went away; nothing is cached)

DirectoryLoadError is only raised at startup and is fatal.
"""


class CompsError(Exception):
    """Base class for all comps engine errors."""


class MissingParameterError(CompsError):
    """A required query parameter was absent or blank."""

    def __init__(self, param: str) -> None:
        self.param = param
        super().__init__(f"Missing required query param: {param}")


class DirectoryLoadError(CompsError):
    """The institution directory could not be loaded."""


class ScanError(CompsError):
    """One or more completions resources failed during a scan.

    Attributes:
        failures: year → error message for each failed year
    """

    def __init__(self, message: str, failures: dict[int, str] | None = None) -> None:
        self.failures = dict(failures or {})
        super().__init__(message)


class ResourceUnavailableError(ScanError):
    """A year's completions resource could not be opened at all."""

    def __init__(self, year: int, resource: str, reason: str) -> None:
        self.year = year
        self.resource = resource
        super().__init__(
            f"Completions file for {year} unavailable ({resource}): {reason}",
            {year: reason},
        )


class QueryCancelled(CompsError):
    """The caller abandoned the query mid-scan."""
