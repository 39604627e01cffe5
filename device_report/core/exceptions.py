"""
Exception hierarchy for the device health report.

Everything the job raises on purpose descends from ``ReportError`` so the
CLI can tell expected failures apart from bugs. Library errors are wrapped
at the boundary where they occur.
"""

from typing import Optional


class ReportError(Exception):
    """Root of the report exception hierarchy."""


class DataSourceConnectionError(ReportError):
    """A database could not be reached. Fatal, no report is written."""


class QueryError(ReportError):
    """A query for one device failed."""

    def __init__(self, message: str, udid: Optional[str] = None):
        super().__init__(message)
        self.udid = udid


class BatchTimeoutError(ReportError):
    """The per-device batch did not finish within its wall-clock budget."""

    def __init__(self, timeout_ms: int):
        super().__init__(f"Batch did not finish within {timeout_ms} ms")
        self.timeout_ms = timeout_ms


class ReportWriteError(ReportError):
    """The report file could not be written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class MailError(ReportError):
    """The report was written but could not be delivered."""
