"""dSYM path resolution and validation."""
import os
from pathlib import Path
from typing import List, Sequence

from ..errors import MissingFileError
from ..models import UploadConfig


def resolve_paths(config: UploadConfig) -> List[Path]:
    """
    Collect the dSYM paths of a run, in upload order.

    Order is ``dsym_path``, then ``dsym_zip_path``, then ``dsym_paths``;
    absent sources are skipped. Relative entries are made absolute against
    the current working directory. Duplicates are kept.
    """
    raw: List[str] = []
    if config.dsym_path is not None:
        raw.append(config.dsym_path)
    if config.dsym_zip_path is not None:
        raw.append(config.dsym_zip_path)
    if config.dsym_paths is not None:
        raw.extend(config.dsym_paths)
    return [Path(os.path.abspath(p)) for p in raw]


def validate_paths(paths: Sequence[Path]) -> None:
    """Raise MissingFileError for the first path that is not a regular file."""
    for path in paths:
        if not path.is_file():
            raise MissingFileError(path)
