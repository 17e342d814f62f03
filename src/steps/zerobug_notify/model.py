from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from zerobug_core.admin import MISSING_TOKEN_MESSAGE, MISSING_WEBSITE_MESSAGE


class ConfigurationReason(str, Enum):
    MISSING_TOKEN = "missing_token"
    MISSING_WEBSITE = "missing_website"


REASON_MESSAGES = {
    ConfigurationReason.MISSING_TOKEN: MISSING_TOKEN_MESSAGE,
    ConfigurationReason.MISSING_WEBSITE: MISSING_WEBSITE_MESSAGE,
}


class PublisherSettings(BaseModel):
    """Per-job publisher configuration as saved by the CI system."""

    token: SecretStr | None = None
    target_site: str = ""
    only_build_success: bool = False


class GlobalSettings(BaseModel):
    default_token: SecretStr | None = None


class NotificationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    secret_token: SecretStr
    target_site: str
    build_succeeded: bool
    only_on_success: bool
    timestamp: date

    @property
    def should_notify(self) -> bool:
        return self.build_succeeded or not self.only_on_success


class NotificationResult(BaseModel):
    """Outcome of one notification attempt. Lives only as long as the build record."""

    attempted: bool
    succeeded: bool | None = Field(
        None, description="None when no request was attempted"
    )
    identifier: str
    http_status: int | None = None
    log_lines: list[str] = Field(default_factory=list)
