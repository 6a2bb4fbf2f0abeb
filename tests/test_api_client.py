"""Tests for the dSYM HTTP adapter."""
import base64
from pathlib import Path

import httpx
import pytest

from dsym_uploader.services.api_client import DSymAPIClient, build_connection


def _basic(user, password):
    token = base64.b64encode(f"{user}:{password}".encode()).decode()
    return f"Basic {token}"


@pytest.fixture
def dsym_file(tmp_path):
    path = tmp_path / "App.dSYM.zip"
    path.write_bytes(b"\x00\x01dsym-bytes" * 100)
    return path


def test_build_connection_base_url():
    connection = build_connection("https://api.eum-appdynamics.com", "acme", "key")
    assert isinstance(connection, DSymAPIClient)
    assert connection.base_url == "https://api.eum-appdynamics.com/eumaggregator/crash-reports/iOSDSym"


def test_build_connection_strips_trailing_slash():
    connection = build_connection("https://host.example.com/", "acme", "key")
    assert connection.base_url == "https://host.example.com/eumaggregator/crash-reports/iOSDSym"


def test_build_connection_does_no_network_io():
    def handler(request):
        raise AssertionError("no request expected")

    build_connection("https://host.example.com", "acme", "key", transport=httpx.MockTransport(handler))


def test_put_requires_context(dsym_file):
    connection = build_connection("https://host.example.com", "acme", "key")
    with pytest.raises(RuntimeError, match="not initialized"):
        connection.put_file(dsym_file)


def test_put_sends_headers_auth_and_body(dsym_file):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200)

    connection = build_connection(
        "https://host.example.com", "acme", "key", transport=httpx.MockTransport(handler)
    )
    with connection:
        response = connection.put_file(dsym_file)

    assert response.status_code == 200
    assert len(requests) == 1
    request = requests[0]
    assert request.method == "PUT"
    assert str(request.url) == "https://host.example.com/eumaggregator/crash-reports/iOSDSym"
    assert request.headers["Content-Type"] == "application/octet-stream"
    assert request.headers["Content-Length"] == str(dsym_file.stat().st_size)
    assert "Transfer-Encoding" not in request.headers
    assert request.headers["Authorization"] == _basic("acme", "key")
    assert request.content == dsym_file.read_bytes()


def test_put_reports_progress(dsym_file):
    seen = []
    transport = httpx.MockTransport(lambda request: httpx.Response(200))
    connection = build_connection("https://host.example.com", "acme", "key", transport=transport)

    with connection:
        connection.put_file(dsym_file, lambda sent, total: seen.append((sent, total)))

    size = dsym_file.stat().st_size
    assert seen[-1] == (size, size)


def test_redirect_replays_method_body_and_auth(dsym_file):
    requests = []

    def handler(request):
        requests.append(request)
        if request.url.host == "host.example.com":
            return httpx.Response(307, headers={"Location": "https://other.example.com/ingest"})
        return httpx.Response(201)

    connection = build_connection(
        "https://host.example.com", "acme", "key", transport=httpx.MockTransport(handler)
    )
    with connection:
        response = connection.put_file(dsym_file)

    assert response.status_code == 201
    assert [str(r.url) for r in requests] == [
        "https://host.example.com/eumaggregator/crash-reports/iOSDSym",
        "https://other.example.com/ingest",
    ]
    second = requests[1]
    assert second.method == "PUT"
    assert second.headers["Authorization"] == _basic("acme", "key")
    assert second.headers["Content-Length"] == str(dsym_file.stat().st_size)
    assert second.content == dsym_file.read_bytes()


def test_relative_redirect_is_resolved(dsym_file):
    requests = []

    def handler(request):
        requests.append(request)
        if len(requests) == 1:
            return httpx.Response(302, headers={"Location": "/v2/iOSDSym"})
        return httpx.Response(200)

    connection = build_connection(
        "https://host.example.com", "acme", "key", transport=httpx.MockTransport(handler)
    )
    with connection:
        connection.put_file(dsym_file)

    assert str(requests[1].url) == "https://host.example.com/v2/iOSDSym"
    assert requests[1].method == "PUT"


def test_redirect_loop_is_bounded(dsym_file):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(301, headers={"Location": "https://host.example.com/loop"})

    connection = build_connection(
        "https://host.example.com",
        "acme",
        "key",
        max_redirects=3,
        transport=httpx.MockTransport(handler),
    )
    with connection:
        with pytest.raises(httpx.TooManyRedirects):
            connection.put_file(dsym_file)

    assert len(requests) == 4


def test_file_handle_closed_when_request_fails(dsym_file, monkeypatch):
    opened = []
    real_open = Path.open

    def tracking_open(self, *args, **kwargs):
        handle = real_open(self, *args, **kwargs)
        opened.append(handle)
        return handle

    monkeypatch.setattr(Path, "open", tracking_open)

    def handler(request):
        request.read()
        raise httpx.ConnectError("Connection reset by peer", request=request)

    connection = build_connection(
        "https://host.example.com", "acme", "key", transport=httpx.MockTransport(handler)
    )
    with connection:
        with pytest.raises(httpx.ConnectError):
            connection.put_file(dsym_file)

    assert len(opened) == 1
    assert opened[0].closed is True


def test_file_handles_closed_across_redirects(dsym_file, monkeypatch):
    opened = []
    real_open = Path.open

    def tracking_open(self, *args, **kwargs):
        handle = real_open(self, *args, **kwargs)
        opened.append(handle)
        return handle

    monkeypatch.setattr(Path, "open", tracking_open)

    def handler(request):
        if request.url.path.endswith("iOSDSym"):
            return httpx.Response(308, headers={"Location": "/moved"})
        return httpx.Response(200)

    connection = build_connection(
        "https://host.example.com", "acme", "key", transport=httpx.MockTransport(handler)
    )
    with connection:
        connection.put_file(dsym_file)

    assert len(opened) == 2
    assert all(handle.closed for handle in opened)
