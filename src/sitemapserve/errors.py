from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_BASE = "INVALID_BASE"
    INVALID_SIZE = "INVALID_SIZE"
    INVALID_ENTRY = "INVALID_ENTRY"
    SOURCE_FAILED = "SOURCE_FAILED"
    SOURCE_NOT_SEQUENCE = "SOURCE_NOT_SEQUENCE"


class SitemapError(Exception):
    """Raised for all expected failure conditions.

    Construction errors (bad arguments, base, or size) are raised at setup
    time. Source and entry errors are raised from the build/refresh pipeline
    and propagate out of the middleware to the enclosing ASGI server.
    Never catch this inside business logic.
    """

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }
