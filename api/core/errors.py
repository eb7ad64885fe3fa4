"""
Error taxonomy shared by every feature package.

Services raise these; `api/main.py` renders them into the response
envelope. Anything else that escapes a handler is a 500.
"""

from __future__ import annotations


class ApiError(RuntimeError):
    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(ApiError):
    """Missing required field or file, or a value the resource rejects."""

    status_code = 400
    default_message = "Invalid request."


class UploadTooLargeError(ValidationError):
    status_code = 413
    default_message = "File too large."


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found."


class StorageError(ApiError):
    """Disk write, move or read failure under the upload root."""

    default_message = "File storage failed."


class PersistenceError(ApiError):
    """Query failure. The driver message is logged, never returned."""

    default_message = "Database operation failed."
