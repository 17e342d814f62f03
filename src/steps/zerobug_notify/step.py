from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import SecretStr

from zerobug_core.build import BuildRecord, BuildResult, ZeroBugAction
from zerobug_core.config import ZeroBugConfig
from zerobug_core.http import HttpResponse, TransportError, http_get
from zerobug_core.identifier import build_identifier, calendar_day
from zerobug_core.secrets import is_blank, redact_token, resolve_token

from .model import (
    REASON_MESSAGES,
    ConfigurationReason,
    GlobalSettings,
    NotificationRequest,
    NotificationResult,
    PublisherSettings,
)
from .redact import redact_url

logger = logging.getLogger(__name__)

MAX_LOGGED_BODY_CHARS = 500

HttpGet = Callable[[str, float], HttpResponse]


class ConfigurationError(Exception):
    """Raised when the publisher is missing its token and/or website. Fails the build."""

    def __init__(self, *, reasons: list[ConfigurationReason]):
        self.reasons = list(reasons)
        self.code = "invalid_configuration"
        self.message = "; ".join(REASON_MESSAGES[r] for r in self.reasons)
        super().__init__(self.message)


def _get_utc_now() -> datetime:
    return datetime.now(UTC)


class ZeroBugNotifier:
    """Decides whether a finished build is reported and makes the single GET call."""

    def __init__(
        self,
        config: ZeroBugConfig,
        *,
        clock: Callable[[], datetime] = _get_utc_now,
        http: HttpGet = http_get,
    ) -> None:
        self.config = config
        self._clock = clock
        self._http = http

    def identifier_for(self, token: SecretStr | str, site: str) -> str:
        day = calendar_day(self._clock(), self.config.identifier_timezone)
        return build_identifier(token, site, day)

    def notify(
        self,
        secret_token: SecretStr | str | None,
        target_site: str | None,
        build_result: BuildResult,
        only_on_success: bool,
    ) -> NotificationResult:
        """
        Notify ZeroBug about a finished build.

        Both required inputs are checked before failing, so a caller sees every
        missing value at once.

        Raises:
            ConfigurationError: token and/or website blank
        """
        reasons: list[ConfigurationReason] = []
        if is_blank(secret_token):
            reasons.append(ConfigurationReason.MISSING_TOKEN)
        if target_site is None or not target_site.strip():
            reasons.append(ConfigurationReason.MISSING_WEBSITE)
        if reasons:
            logger.error(f"ZeroBug publisher misconfigured: {[r.value for r in reasons]}")
            raise ConfigurationError(reasons=reasons)

        token = resolve_token(secret_token)
        # form input whitespace is not part of the hashed site
        site = target_site.strip()
        request = NotificationRequest(
            secret_token=token,
            target_site=site,
            build_succeeded=build_result == BuildResult.SUCCESS,
            only_on_success=only_on_success,
            timestamp=calendar_day(self._clock(), self.config.identifier_timezone),
        )
        identifier = build_identifier(
            request.secret_token, request.target_site, request.timestamp
        )

        if not request.should_notify:
            line = (
                f"ZeroBug: skipped, build result {build_result.value} "
                "and notification limited to successful builds"
            )
            logger.info(line)
            return NotificationResult(
                attempted=False, succeeded=None, identifier=identifier, log_lines=[line]
            )

        return self._dispatch(identifier)

    def _dispatch(self, identifier: str) -> NotificationResult:
        endpoint = self.config.request_url
        shown = redact_url(endpoint)
        log_lines = [f"ZeroBug: notifying {shown} (id {identifier})"]

        try:
            response = self._http(endpoint, self.config.timeout_seconds)
        except TransportError as e:
            kind = "timed out" if e.timed_out else "failed"
            line = f"ZeroBug: request to {shown} {kind}: {e.message}"
            logger.warning(line)
            log_lines.append(line)
            return NotificationResult(
                attempted=True,
                succeeded=False,
                identifier=identifier,
                log_lines=log_lines,
            )

        if response.ok:
            log_lines.append(f"ZeroBug: HTTP {response.status}")
        else:
            line = f"ZeroBug: request to {shown} returned HTTP {response.status}"
            logger.warning(line)
            log_lines.append(line)
        if response.body:
            log_lines.append(response.body[:MAX_LOGGED_BODY_CHARS])

        return NotificationResult(
            attempted=True,
            succeeded=response.ok,
            identifier=identifier,
            http_status=response.status,
            log_lines=log_lines,
        )


def run_zerobug_publisher(
    build: BuildRecord,
    settings: PublisherSettings,
    config: ZeroBugConfig,
    *,
    global_settings: GlobalSettings | None = None,
    notifier: ZeroBugNotifier | None = None,
) -> bool:
    """
    Post-build publisher entrypoint.

    Returns True when a notification was attempted and a ZeroBug action was
    attached, False when skipped or misconfigured. Only a misconfiguration
    changes the build result (to FAILURE); network trouble never does.
    """
    notifier = notifier or ZeroBugNotifier(config)
    default_token = global_settings.default_token if global_settings else None
    token = resolve_token(settings.token, default_token)

    try:
        result = notifier.notify(
            token,
            settings.target_site,
            build.result,
            settings.only_build_success,
        )
    except ConfigurationError as exc:
        for reason in exc.reasons:
            build.log_line(f"ERROR: {REASON_MESSAGES[reason]}")
        build.mark_failed()
        return False

    for line in result.log_lines:
        build.log_line(line)

    if not result.attempted:
        return False

    build.add_action(
        ZeroBugAction(
            token_redacted=redact_token(token),
            target_site=settings.target_site.strip(),
            identifier=result.identifier,
            build_url=build.url,
            attempted=result.attempted,
            succeeded=result.succeeded,
            http_status=result.http_status,
            log_lines=list(result.log_lines),
        )
    )
    return True
