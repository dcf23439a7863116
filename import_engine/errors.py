"""
import_engine.errors - Exceptions raised by the import pipeline.

Only ParseError escapes a run; the rest are caught and folded into the
ImportResult / PersistResult.
"""


class ParseError(Exception):
    """The uploaded file cannot be used at all (undecodable, empty, missing headers)."""


class ReportMonthError(ValueError):
    """Month/year cells cannot be turned into a report month."""


class InvalidMonthError(ReportMonthError):
    pass


class InvalidYearError(ReportMonthError):
    pass


class StoreError(Exception):
    """A center/report store call failed."""


class RowRejected(Exception):
    """
    Raised while building one report; the row is skipped.

    ``unmatched`` carries the raw center name when the row failed
    because no known center matched it.
    """

    def __init__(self, message: str, *, unmatched: str | None = None):
        super().__init__(message)
        self.unmatched = unmatched
