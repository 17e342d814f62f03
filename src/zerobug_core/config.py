from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
)

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_IDENTIFIER_TZ = "UTC"

_HTTP_URL = TypeAdapter(AnyHttpUrl)

# property key -> (config field, environment override)
PROPERTY_KEYS: dict[str, tuple[str, str]] = {
    "url.request": ("request_url", "ZEROBUG_URL_REQUEST"),
    "url.get.list.site": ("list_site_url", "ZEROBUG_URL_GET_LIST_SITE"),
    "timeout.seconds": ("timeout_seconds", "ZEROBUG_TIMEOUT_SECONDS"),
    "identifier.timezone": ("identifier_timezone", "ZEROBUG_IDENTIFIER_TZ"),
}
REQUIRED_KEYS = ("url.request", "url.get.list.site")


class ConfigError(ValueError):
    def __init__(self, *, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class ZeroBugConfig(BaseModel):
    """Endpoints and policies for talking to the ZeroBug service.

    Resolved once at startup and passed by value to everything that makes a
    request.
    """

    model_config = ConfigDict(frozen=True)

    request_url: str = Field(..., min_length=1, description="Notification endpoint")
    list_site_url: str = Field(..., min_length=1, description="Site list endpoint")
    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)
    identifier_timezone: str = DEFAULT_IDENTIFIER_TZ

    @field_validator("request_url", "list_site_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        # checked as http(s) URL but kept verbatim, no trailing-slash normalisation
        try:
            _HTTP_URL.validate_python(v)
        except ValueError as exc:
            raise ValueError(f"not an http(s) URL: {v}") from exc
        return v

    @field_validator("identifier_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        if v == "UTC":
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
            raise ValueError(f"unknown timezone: {v}") from exc
        return v

    def get_by_key(self, key: str) -> str:
        """Look up a value by its properties-file key (e.g. ``url.request``)."""
        if key not in PROPERTY_KEYS:
            raise ConfigError(code="unknown_key", message=f"unknown_key: {key}")
        field_name, _ = PROPERTY_KEYS[key]
        return str(getattr(self, field_name))


def parse_properties(text: str) -> dict[str, str]:
    """Parse a minimal Java-style .properties document.

    Supports ``#``/``!`` comments and ``=`` or ``:`` separators. Line
    continuations and unicode escapes are not supported.
    """
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line[0] in "#!":
            continue
        positions = [i for i in (line.find("="), line.find(":")) if i != -1]
        if not positions:
            values[line] = ""
            continue
        sep = min(positions)
        values[line[:sep].strip()] = line[sep + 1 :].strip()
    return values


def load_config(
    properties_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ZeroBugConfig:
    """
    Build a ZeroBugConfig from an optional properties file plus environment overrides.

    Args:
        properties_path: path to a ``config.properties`` file, or None
        environ: environment mapping (defaults to os.environ)

    Returns:
        ZeroBugConfig: validated, frozen configuration

    Raises:
        ConfigError: code='missing_key' when a required endpoint is absent,
            code='invalid_config' when a value fails validation
    """
    env = os.environ if environ is None else environ
    raw: dict[str, str] = {}

    if properties_path is not None:
        try:
            text = properties_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(
                code="file_not_found",
                message=f"Cannot read properties file {properties_path}: {exc}",
            ) from exc
        raw.update(parse_properties(text))

    for key, (_, env_var) in PROPERTY_KEYS.items():
        value = env.get(env_var)
        if value is not None and value.strip():
            raw[key] = value.strip()

    missing = [key for key in REQUIRED_KEYS if not raw.get(key, "").strip()]
    if missing:
        raise ConfigError(
            code="missing_key",
            message=f"missing_key: {', '.join(missing)}",
        )

    fields = {
        PROPERTY_KEYS[key][0]: value
        for key, value in raw.items()
        if key in PROPERTY_KEYS
    }
    try:
        return ZeroBugConfig(**fields)
    except ValueError as exc:
        raise ConfigError(code="invalid_config", message=str(exc)) from exc
