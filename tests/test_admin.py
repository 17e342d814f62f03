from __future__ import annotations

from unittest import mock
from urllib.error import HTTPError, URLError

import pytest

from zerobug_core.admin import (
    PLACEHOLDER_SITES,
    AdminPermissionError,
    check_token,
    check_website,
    list_sites,
    validate_connection,
)
from zerobug_core.config import ZeroBugConfig
from zerobug_core.http import HttpResponse, TransportError


@pytest.fixture
def config():
    return ZeroBugConfig(
        request_url="http://zerobug.example/notify",
        list_site_url="http://zerobug.example/sites",
    )


def _response(status=200, body=b""):
    mock_response = mock.Mock()
    mock_response.status = status
    mock_response.read.return_value = body
    mock_response.__enter__ = mock.Mock(return_value=mock_response)
    mock_response.__exit__ = mock.Mock(return_value=None)
    return mock_response


# --- form checks ---
@pytest.mark.parametrize("value", [None, "", "   "])
def test_check_token_blank(value):
    validation = check_token(value)
    assert validation.kind == "error"
    assert "token" in validation.message


def test_check_token_ok():
    assert check_token("abc").is_ok


@pytest.mark.parametrize(("value", "ok"), [("", False), ("http://www.java.com", True)])
def test_check_website(value, ok):
    assert check_website(value).is_ok is ok


# --- validate connection ---
def test_validate_connection_http_200(config):
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        mock_urlopen.return_value = _response(200)
        validation = validate_connection(config, is_admin=True)

    assert validation.is_ok
    args, _ = mock_urlopen.call_args
    assert args[0].full_url == "http://zerobug.example/sites"


def test_validate_connection_http_500(config):
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        mock_urlopen.side_effect = HTTPError("url", 500, "Server Error", {}, None)
        validation = validate_connection(config, is_admin=True)

    assert validation.kind == "error"
    assert "500" in validation.message


def test_validate_connection_non_200_success_status_is_error(config):
    fake_http = mock.Mock(return_value=HttpResponse(status=204, body=""))
    validation = validate_connection(config, is_admin=True, http=fake_http)
    assert validation.kind == "error"
    assert "204" in validation.message


def test_validate_connection_thrown_error(config):
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        mock_urlopen.side_effect = URLError("Name or service not known")
        validation = validate_connection(config, is_admin=True)

    assert validation.kind == "error"
    assert "Name or service not known" in validation.message


def test_validate_connection_requires_admin(config):
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        with pytest.raises(AdminPermissionError) as excinfo:
            validate_connection(config, is_admin=False)
    assert excinfo.value.code == "admin_required"
    mock_urlopen.assert_not_called()


# --- list sites ---
def test_list_sites_appends_remote_body(config):
    with mock.patch("urllib.request.urlopen") as mock_urlopen:
        mock_urlopen.return_value = _response(200, b"http://www.zerobug.io\n")
        sites = list_sites(config, is_admin=True)

    assert sites == [*PLACEHOLDER_SITES, "http://www.zerobug.io"]


def test_list_sites_placeholders_order():
    assert PLACEHOLDER_SITES == (
        "http://www.google.com",
        "http://www.globo.com",
        "http://www.jenkins.com",
        "http://www.java.com",
    )


@pytest.mark.parametrize(
    "fake_http",
    [
        mock.Mock(side_effect=TransportError(url="u", message="refused")),
        mock.Mock(return_value=HttpResponse(status=404, body="not found")),
        mock.Mock(return_value=HttpResponse(status=200, body="   ")),
    ],
)
def test_list_sites_falls_back_to_placeholders(config, fake_http):
    assert list_sites(config, is_admin=True, http=fake_http) == list(PLACEHOLDER_SITES)


def test_list_sites_requires_admin(config):
    with pytest.raises(AdminPermissionError):
        list_sites(config, is_admin=False)
