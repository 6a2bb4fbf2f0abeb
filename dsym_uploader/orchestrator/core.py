"""Core orchestrator - validates configuration and uploads each dSYM."""
import logging
from pathlib import Path
from typing import Callable, Optional

from ..errors import ConfigurationError, UploadError
from ..models import UploadConfig, UploadResult
from ..protocols import ConnectionFactory
from ..services.api_client import build_connection

from .models import RunSummary
from .path_resolver import resolve_paths, validate_paths
from .single_upload import upload_one

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS_MESSAGE = (
    "No account name or license key found for AppDynamics, pass using "
    "`api_account_name: 'name'` and `api_license_key: 'key'`"
)

FileProgressCallback = Callable[[Path, int, int], None]
FileStartCallback = Callable[[Path], None]


def validate_credentials(config: UploadConfig) -> None:
    """Raise ConfigurationError unless both account name and license key are set."""
    if not config.has_credentials:
        raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)


class UploadOrchestrator:
    """
    Runs a dSYM upload: credentials, paths, then one PUT per file.

    Every phase either passes or raises a DSymUploadError subclass. Uploads
    are sequential and the first failed upload ends the run.

    Usage:
        orchestrator = UploadOrchestrator()
        summary = orchestrator.run(config)
    """

    def __init__(self, connection_factory: ConnectionFactory = build_connection):
        """
        Args:
            connection_factory: Builds a fresh connection per file, called as
                ``factory(host, account_name, license_key, timeout=..., max_redirects=...)``
        """
        self._connection_factory = connection_factory

    def run(
        self,
        config: UploadConfig,
        progress_callback: Optional[FileProgressCallback] = None,
        file_start_callback: Optional[FileStartCallback] = None
    ) -> RunSummary:
        validate_credentials(config)

        paths = resolve_paths(config)
        validate_paths(paths)

        summary = RunSummary(paths=list(paths))
        if not paths:
            logger.info("No dSYM paths configured, nothing to upload")
            return summary

        for path in paths:
            if file_start_callback:
                file_start_callback(path)
            result = self.upload(config, path, progress_callback)
            summary.results.append(result)
            if not result.success:
                raise UploadError(result)

        logger.info("Uploaded %d dSYM file(s) to %s", summary.uploaded_files, config.api_host)
        return summary

    def upload(
        self,
        config: UploadConfig,
        path: Path,
        progress_callback: Optional[FileProgressCallback] = None
    ) -> UploadResult:
        """Upload one file over a connection built just for it."""
        logger.info("Uploading %s", path)
        connection = self._connection_factory(
            config.api_host,
            config.account_name,
            config.license_key,
            timeout=config.timeout,
            max_redirects=config.max_redirects,
        )

        callback = None
        if progress_callback:
            def callback(sent: int, total: int) -> None:
                progress_callback(path, sent, total)

        return upload_one(path, connection, callback)
