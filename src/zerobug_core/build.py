from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BuildResult(str, Enum):
    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"


class ZeroBugAction(BaseModel):
    """Display record attached to a build after a ZeroBug notification."""

    model_config = ConfigDict(frozen=True)

    schema_version: str = "v1"
    token_redacted: str = Field(..., description="Token as shown to users, never cleartext")
    target_site: str
    identifier: str = Field(..., min_length=32, max_length=32)
    build_url: str
    # outcome of the notification this action records
    attempted: bool = True
    succeeded: bool | None = None
    http_status: int | None = None
    log_lines: list[str] = Field(default_factory=list)


class BuildRecord(BaseModel):
    """In-memory view of a CI build as seen by the publisher."""

    number: int = 0
    url: str = ""
    result: BuildResult = BuildResult.SUCCESS
    actions: list[ZeroBugAction] = Field(default_factory=list)
    log: list[str] = Field(default_factory=list)

    def add_action(self, action: ZeroBugAction) -> None:
        self.actions.append(action)

    def log_line(self, line: str) -> None:
        self.log.append(line)

    def mark_failed(self) -> None:
        self.result = BuildResult.FAILURE
