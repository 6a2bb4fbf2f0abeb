"""
Protocols (Interfaces) for Dependency Inversion.

The orchestrator only depends on these, so tests and alternative transports
can be injected.
"""
from pathlib import Path
from typing import Any, Callable, Optional, Protocol, runtime_checkable


ProgressCallback = Callable[[int, int], None]


@runtime_checkable
class IConnection(Protocol):
    """Interface for an authenticated dSYM upload connection."""

    base_url: str

    def __enter__(self) -> "IConnection":
        ...

    def __exit__(self, *args) -> None:
        ...

    def put_file(
        self,
        path: Path,
        progress_callback: Optional[ProgressCallback] = None
    ) -> Any:
        """PUT the file body to ``base_url`` and return the final response."""
        ...


ConnectionFactory = Callable[..., IConnection]
