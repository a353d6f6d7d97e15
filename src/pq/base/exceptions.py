"""
PQ (Prefix Query) Exceptions

Errors raised by the query helpers and the table store adapters.
"""

from typing import Optional

from src.pq.base.err_code import ErrCode


class PQException(Exception):
    """
    Base exception class for all PQ errors.

    Every exception carries an ErrCode so callers (and the query service)
    can map it without inspecting the concrete type.
    """

    def __init__(
        self,
        message: str,
        err: ErrCode = ErrCode.UNKNOWN_ERROR,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.err = err
        self.details = details

    def to_dict(self) -> dict:
        """Convert exception to dict for JSON response."""
        result = {
            "error": self.message,
            "code": self.err.name,
        }
        if self.details:
            result["details"] = self.details
        return result


class InvalidArgument(PQException):
    """Raised synchronously when an argument is null, empty or malformed."""

    def __init__(self, name: str, details: Optional[str] = None):
        super().__init__(
            message=f"Invalid argument: {name}",
            err=ErrCode.INVALID_ARGUMENT,
            details=details,
        )
        self.name = name


class StoreError(PQException):
    """
    Raised by a table store when executing a query fails.

    The core helpers never raise this; it only comes out of adapters.
    """

    def __init__(
        self,
        store: str,
        message: str = "Table store query failed",
        details: Optional[str] = None,
    ):
        super().__init__(
            message=f"{message}: {store}",
            err=ErrCode.IO_ERROR,
            details=details,
        )
        self.store = store
