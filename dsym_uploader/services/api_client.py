"""HTTP adapter for the AppDynamics dSYM ingestion endpoint."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

import httpx

from ..models import DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT
from ..protocols import ProgressCallback

logger = logging.getLogger(__name__)

DSYM_ENDPOINT = "/eumaggregator/crash-reports/iOSDSym"
CONTENT_TYPE = "application/octet-stream"
CHUNK_SIZE = 1024 * 1024


def _iter_chunks(
    handle: BinaryIO,
    total: int,
    progress_callback: Optional[ProgressCallback] = None,
) -> Iterator[bytes]:
    sent = 0
    while True:
        chunk = handle.read(CHUNK_SIZE)
        if not chunk:
            break
        sent += len(chunk)
        if progress_callback:
            progress_callback(sent, total)
        yield chunk


class DSymAPIClient:
    """
    HTTP client adapter for dSYM uploads.

    Implements IConnection protocol. Redirects are followed here instead of by
    httpx so the file body and Basic credentials are replayed on every hop,
    whatever host the ``Location`` points to.
    """

    def __init__(
        self,
        base_url: str,
        account_name: str,
        license_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self._auth = httpx.BasicAuth(account_name, license_key)
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self):
        self._client = httpx.Client(
            auth=self._auth,
            timeout=self._timeout,
            follow_redirects=False,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args):
        if self._client:
            self._client.close()
            self._client = None

    def put_file(
        self,
        path: Path,
        progress_callback: Optional[ProgressCallback] = None
    ) -> httpx.Response:
        if not self._client:
            raise RuntimeError("DSymAPIClient not initialized. Use 'with' context.")

        size = path.stat().st_size
        headers = {
            "Content-Type": CONTENT_TYPE,
            "Content-Length": str(size),
        }
        url = httpx.URL(self.base_url)

        for _ in range(self._max_redirects + 1):
            with path.open("rb") as handle:
                response = self._client.put(
                    url,
                    content=_iter_chunks(handle, size, progress_callback),
                    headers=headers,
                )
            if not response.is_redirect:
                return response

            url = response.url.join(response.headers["Location"])
            logger.debug("Following %s redirect to %s", response.status_code, url)

        raise httpx.TooManyRedirects(
            f"Exceeded maximum allowed redirects ({self._max_redirects})",
            request=response.request,
        )


def build_connection(
    host: str,
    account_name: str,
    license_key: str,
    timeout: float = DEFAULT_TIMEOUT,
    max_redirects: int = DEFAULT_MAX_REDIRECTS,
    transport: Optional[httpx.BaseTransport] = None,
) -> DSymAPIClient:
    """
    Build an upload connection for ``host``.

    No network activity happens until ``put_file`` is called.

    Args:
        host: API host URL, e.g. https://api.eum-appdynamics.com
        account_name: AppDynamics account name (Basic auth user)
        license_key: AppDynamics license key (Basic auth password)
        timeout: Per-request timeout in seconds
        max_redirects: Redirect hops followed before giving up
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """
    base_url = f"{host.rstrip('/')}{DSYM_ENDPOINT}"
    return DSymAPIClient(
        base_url,
        account_name,
        license_key,
        timeout=timeout,
        max_redirects=max_redirects,
        transport=transport,
    )
