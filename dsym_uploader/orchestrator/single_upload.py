"""Single dSYM upload."""
import logging
from pathlib import Path
from typing import Optional

import httpx

from ..models import UploadResult
from ..protocols import IConnection, ProgressCallback

logger = logging.getLogger(__name__)

UPLOAD_FAILED_MESSAGE = "Failed uploading dSYM to AppDynamics"
UPLOAD_ERROR_PREFIX = "Error while trying to upload dSYM to AppDynamics: "


def upload_one(
    path: Path,
    connection: IConnection,
    progress_callback: Optional[ProgressCallback] = None
) -> UploadResult:
    """
    PUT one file through ``connection`` and translate the outcome.

    Transport, URL and filesystem errors are returned as failed results; they
    never escape this function.
    """
    try:
        with connection:
            response = connection.put_file(path, progress_callback)
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
        cause = str(exc) or exc.__class__.__name__
        logger.debug("Upload of %s raised %s", path, exc.__class__.__name__)
        return UploadResult.fail(path, f"{UPLOAD_ERROR_PREFIX}{cause}")

    if not response.is_success:
        logger.debug("Upload of %s answered HTTP %s", path, response.status_code)
        return UploadResult.fail(
            path,
            f"{UPLOAD_FAILED_MESSAGE} (HTTP {response.status_code})",
            status_code=response.status_code,
        )

    return UploadResult.ok(path, status_code=response.status_code)
