from __future__ import annotations

import http.client
import logging
from unittest import mock
from urllib.error import HTTPError, URLError

import pytest

from zerobug_core.http import MAX_BODY_BYTES, USER_AGENT, TransportError, http_get


def test_http_get_returns_status_and_body():
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        mock_response = mock.Mock()
        mock_response.status = 200
        mock_response.read.return_value = "olá".encode()
        mock_response.__enter__ = mock.Mock(return_value=mock_response)
        mock_response.__exit__ = mock.Mock(return_value=None)
        mock_urlopen.return_value = mock_response

        response = http_get("http://zerobug.example/notify", timeout=3)

    assert response.ok
    assert response.body == "olá"
    mock_response.__exit__.assert_called_once()
    req = mock_urlopen.call_args.args[0]
    assert req.get_header("User-agent") == USER_AGENT


def test_http_get_closes_response_when_read_fails():
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        mock_response = mock.Mock()
        mock_response.status = 200
        mock_response.read.side_effect = ConnectionResetError("reset")
        mock_response.__enter__ = mock.Mock(return_value=mock_response)
        mock_response.__exit__ = mock.Mock(return_value=None)
        mock_urlopen.return_value = mock_response

        with pytest.raises(TransportError):
            http_get("http://zerobug.example/notify", timeout=3)

    mock_response.__exit__.assert_called_once()


def test_http_error_becomes_response():
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        mock_urlopen.side_effect = HTTPError("url", 404, "Not Found", {}, None)
        response = http_get("http://zerobug.example/notify", timeout=3)

    assert response.status == 404
    assert not response.ok


@pytest.mark.parametrize(
    ("error", "timed_out"),
    [
        (URLError(TimeoutError()), True),
        (URLError(ConnectionRefusedError(111, "Connection refused")), False),
        (TimeoutError("read timed out"), True),
    ],
)
def test_network_failures_raise_transport_error(error, timed_out):
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        mock_urlopen.side_effect = error
        with pytest.raises(TransportError) as excinfo:
            http_get("http://zerobug.example/notify", timeout=3)

    assert excinfo.value.timed_out is timed_out
    assert excinfo.value.url == "http://zerobug.example/notify"


@pytest.mark.parametrize(
    "error",
    [
        http.client.BadStatusLine("SSH-2.0-OpenSSH"),
        http.client.IncompleteRead(b"partial"),
        http.client.RemoteDisconnected("closed without response"),
    ],
)
def test_protocol_errors_raise_transport_error(error):
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        mock_urlopen.side_effect = error
        with pytest.raises(TransportError) as excinfo:
            http_get("http://zerobug.example/notify", timeout=3)

    assert excinfo.value.timed_out is False


@pytest.mark.parametrize("url", ["zerobug.example/notify", ""])
def test_malformed_url_raises_transport_error(url):
    with pytest.raises(TransportError) as excinfo:
        http_get(url, timeout=3)
    assert excinfo.value.url == url


def test_oversized_body_is_cut_with_warning(caplog):
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        mock_response = mock.Mock()
        mock_response.status = 200
        mock_response.read.return_value = b"x" * (MAX_BODY_BYTES + 10)
        mock_response.__enter__ = mock.Mock(return_value=mock_response)
        mock_response.__exit__ = mock.Mock(return_value=None)
        mock_urlopen.return_value = mock_response

        with caplog.at_level(logging.WARNING):
            response = http_get("http://zerobug.example/sites", timeout=3)

    assert len(response.body) == MAX_BODY_BYTES
    assert "cut at" in caplog.text
    mock_response.read.assert_called_once_with(MAX_BODY_BYTES + 1)
