from __future__ import annotations

import http.client
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass

logger = logging.getLogger(__name__)

USER_AGENT = "ZeroBugNotifier/1.0"
MAX_BODY_BYTES = 64 * 1024


class TransportError(Exception):
    """Network failure talking to a ZeroBug endpoint (no HTTP status available)."""

    def __init__(self, *, url: str, message: str, timed_out: bool = False):
        super().__init__(message)
        self.url = url
        self.message = message
        self.timed_out = timed_out


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def http_get(url: str, timeout: float) -> HttpResponse:
    """
    Issue a single GET request. No retries.

    HTTP error statuses are returned as responses; only failures that leave
    no status (bad URL, DNS, refused connection, timeout, protocol garbage)
    raise TransportError. Bodies longer than MAX_BODY_BYTES are cut, with a
    warning.
    """
    try:
        req = urllib.request.Request(
            url, headers={"User-Agent": USER_AGENT}, method="GET"
        )
        with urllib.request.urlopen(req, timeout=timeout) as response:
            raw = response.read(MAX_BODY_BYTES + 1)
            return HttpResponse(
                status=response.status,
                body=_decode(_bounded(url, raw)),
            )
    except urllib.error.HTTPError as e:
        body = ""
        if getattr(e, "fp", None) is not None:
            with e:
                body = _decode(_bounded(url, e.read(MAX_BODY_BYTES + 1)))
        logger.debug(f"GET {url} returned HTTP {e.code}")
        return HttpResponse(status=e.code, body=body)
    except urllib.error.URLError as e:
        timed_out = isinstance(e.reason, TimeoutError)
        raise TransportError(url=url, message=str(e.reason), timed_out=timed_out) from e
    except (TimeoutError, OSError) as e:
        raise TransportError(
            url=url, message=str(e), timed_out=isinstance(e, TimeoutError)
        ) from e
    except http.client.HTTPException as e:
        raise TransportError(
            url=url, message=f"{type(e).__name__}: {e}"
        ) from e
    except ValueError as e:
        # urllib rejects malformed URLs (no scheme, bad port) with ValueError
        raise TransportError(url=url, message=f"invalid URL: {e}") from e


def _bounded(url: str, raw: bytes | str | None) -> bytes | str | None:
    if raw is not None and len(raw) > MAX_BODY_BYTES:
        logger.warning(f"GET {url}: response body cut at {MAX_BODY_BYTES} bytes")
        return raw[:MAX_BODY_BYTES]
    return raw


def _decode(raw: bytes | str | None) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    return raw.decode("utf-8", errors="replace")
