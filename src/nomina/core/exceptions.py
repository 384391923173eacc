"""Nomina exception hierarchy."""

from __future__ import annotations


class NominaError(Exception):
    """Base exception for all nomina errors."""


class UploadError(NominaError):
    """No file was attached to the upload request."""


class ReadError(NominaError):
    """The stored upload could not be read back."""


class ValidationError(NominaError):
    """The file is well formed but a required record is missing."""


class ParseError(NominaError):
    """The file content could not be tokenized or turned into records."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class StorageError(NominaError):
    """A storage backend operation failed."""


class PersistenceError(NominaError):
    """Persisting a batch failed during one of its phases."""

    def __init__(self, phase: str, message: str, batch_id: int | None = None) -> None:
        self.phase = phase
        self.message = message
        self.batch_id = batch_id
        super().__init__(f"{phase} failed: {message}")
