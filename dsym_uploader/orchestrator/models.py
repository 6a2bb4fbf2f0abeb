"""Orchestrator data models."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from ..models import UploadResult


@dataclass
class RunSummary:
    """Result of a full upload run."""
    paths: List[Path] = field(default_factory=list)
    results: List[UploadResult] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.paths)

    @property
    def uploaded_files(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def success(self) -> bool:
        return self.uploaded_files == self.total_files
