"""Admin-facing helpers behind the publisher configuration form.

These are the site dropdown, the "validate connection" button and the
per-field checks. The dropdown and the connection check need administrator
rights.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel

from .config import ZeroBugConfig
from .http import HttpResponse, TransportError, http_get

logger = logging.getLogger(__name__)

PLACEHOLDER_SITES: tuple[str, ...] = (
    "http://www.google.com",
    "http://www.globo.com",
    "http://www.jenkins.com",
    "http://www.java.com",
)

MISSING_TOKEN_MESSAGE = "Please set a ZeroBug token"
MISSING_WEBSITE_MESSAGE = "Please select a website"


class AdminPermissionError(PermissionError):
    def __init__(self, *, operation: str):
        message = f"admin_required: {operation}"
        super().__init__(message)
        self.code = "admin_required"
        self.message = message


class FormValidation(BaseModel):
    kind: Literal["ok", "error"]
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> FormValidation:
        return cls(kind="ok", message=message)

    @classmethod
    def error(cls, message: str) -> FormValidation:
        return cls(kind="error", message=message)

    @property
    def is_ok(self) -> bool:
        return self.kind == "ok"


def _require_admin(is_admin: bool, operation: str) -> None:
    if not is_admin:
        raise AdminPermissionError(operation=operation)


def check_token(value: str | None) -> FormValidation:
    if value is None or not value.strip():
        return FormValidation.error(MISSING_TOKEN_MESSAGE)
    return FormValidation.ok()


def check_website(value: str | None) -> FormValidation:
    if value is None or not value.strip():
        return FormValidation.error(MISSING_WEBSITE_MESSAGE)
    return FormValidation.ok()


def list_sites(
    config: ZeroBugConfig,
    *,
    is_admin: bool,
    http: Callable[[str, float], HttpResponse] = http_get,
) -> list[str]:
    """
    Options for the website dropdown.

    The four placeholder sites always come first. The body of
    ``GET url.get.list.site`` is appended as a single opaque option when the
    call succeeds with a non-blank body.

    Raises:
        AdminPermissionError: caller is not an administrator
    """
    _require_admin(is_admin, "list_sites")
    options = list(PLACEHOLDER_SITES)
    try:
        response = http(config.list_site_url, config.timeout_seconds)
    except TransportError as e:
        logger.warning(f"Site list unavailable: {e.message}")
        return options

    if not response.ok:
        logger.warning(f"Site list returned HTTP {response.status}")
        return options
    if response.body.strip():
        options.append(response.body.strip())
    return options


def validate_connection(
    config: ZeroBugConfig,
    *,
    is_admin: bool,
    http: Callable[[str, float], HttpResponse] = http_get,
) -> FormValidation:
    """Succeeds only when the site list endpoint answers HTTP 200."""
    _require_admin(is_admin, "validate_connection")
    try:
        response = http(config.list_site_url, config.timeout_seconds)
    except TransportError as e:
        logger.warning(f"Connection check failed: {e.message}")
        return FormValidation.error(f"Client error: {e.message}")

    if response.status == 200:
        return FormValidation.ok("Success")
    return FormValidation.error(f"Server returned status {response.status}")
