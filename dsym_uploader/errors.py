"""User-facing errors raised by an upload run."""
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import UploadResult


class DSymUploadError(RuntimeError):
    """Base error that halts an upload run."""


class ConfigurationError(DSymUploadError):
    """Raised when required credentials or options are missing or invalid."""


class MissingFileError(DSymUploadError):
    """Raised when a resolved dSYM path does not exist on disk."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"dSYM does not exist at path: {path}")


class UploadError(DSymUploadError):
    """Raised for the first upload that did not succeed."""

    def __init__(self, result: "UploadResult"):
        self.result = result
        super().__init__(result.error or f"Upload failed: {result.path}")
