"""Orchestrator package - coordinates dSYM upload runs."""
from .core import UploadOrchestrator, validate_credentials
from .models import RunSummary
from .path_resolver import resolve_paths, validate_paths
from .single_upload import upload_one

__all__ = [
    "UploadOrchestrator",
    "RunSummary",
    "resolve_paths",
    "validate_credentials",
    "validate_paths",
    "upload_one",
]
