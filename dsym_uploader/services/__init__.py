"""Services - HTTP adapters used by the orchestrator."""
from .api_client import DSymAPIClient, build_connection, DSYM_ENDPOINT

__all__ = [
    "DSymAPIClient",
    "build_connection",
    "DSYM_ENDPOINT",
]
