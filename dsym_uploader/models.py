"""
Models for dsym_uploader.

Immutable dataclasses built once per run.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Tuple


DEFAULT_API_HOST = "https://api.eum-appdynamics.com"
DEFAULT_TIMEOUT = 300.0
DEFAULT_MAX_REDIRECTS = 5


class UploadStatus(Enum):
    """Upload operation status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadResult:
    """Immutable result of a single dSYM upload."""
    path: Path
    status: UploadStatus = UploadStatus.SUCCESS
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.SUCCESS

    @property
    def filename(self) -> str:
        return self.path.name

    @classmethod
    def ok(cls, path: Path, status_code: Optional[int] = None):
        return cls(path=path, status=UploadStatus.SUCCESS, status_code=status_code)

    @classmethod
    def fail(cls, path: Path, error: str, status_code: Optional[int] = None):
        return cls(
            path=path,
            status=UploadStatus.FAILED,
            status_code=status_code,
            error=error
        )


@dataclass(frozen=True)
class UploadConfig:
    """
    Immutable configuration for one upload run.

    ``license_key`` is kept out of ``repr`` so the config can be logged.
    ``dsym_zip_path`` is the archive produced by an earlier build step.
    """
    account_name: str = ""
    license_key: str = field(default="", repr=False)
    api_host: str = DEFAULT_API_HOST
    dsym_path: Optional[str] = None
    dsym_paths: Optional[Tuple[str, ...]] = None
    dsym_zip_path: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS

    def __post_init__(self):
        # Accept any sequence (lists from CLI/env parsing) but store a tuple.
        if self.dsym_paths is not None and not isinstance(self.dsym_paths, tuple):
            paths: Sequence[str] = self.dsym_paths
            object.__setattr__(self, "dsym_paths", tuple(paths))

    @property
    def has_credentials(self) -> bool:
        return bool(self.account_name) and bool(self.license_key)
