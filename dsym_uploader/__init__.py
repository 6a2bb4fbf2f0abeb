"""
dsym_uploader - Upload dSYM symbolication files to AppDynamics.

Usage:
    from dsym_uploader import UploadOrchestrator, load_upload_config

    config = load_upload_config(
        account_name="my-account",
        license_key="...",
        dsym_path="./App.dSYM.zip",
    )
    summary = UploadOrchestrator().run(config)
"""
__version__ = "0.1.0"

from .config import BuildContext, load_upload_config
from .errors import ConfigurationError, DSymUploadError, MissingFileError, UploadError
from .models import UploadConfig, UploadResult, UploadStatus
from .orchestrator import RunSummary, UploadOrchestrator
from .services import DSymAPIClient, build_connection

__all__ = [
    # Main
    "UploadOrchestrator",
    "RunSummary",
    # Config
    "BuildContext",
    "load_upload_config",
    # Models
    "UploadConfig",
    "UploadResult",
    "UploadStatus",
    # Errors
    "DSymUploadError",
    "ConfigurationError",
    "MissingFileError",
    "UploadError",
    # Services
    "DSymAPIClient",
    "build_connection",
]
