from __future__ import annotations

import hashlib
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from pydantic import SecretStr

IDENTIFIER_LENGTH = 32


def calendar_day(moment: datetime, timezone: str = "UTC") -> date:
    """Calendar date of ``moment`` in ``timezone``. Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    if timezone == "UTC":
        return moment.astimezone(UTC).date()
    return moment.astimezone(ZoneInfo(timezone)).date()


def build_identifier(token: SecretStr | str, site: str, day: date) -> str:
    """
    Derive the daily build identifier for a (token, site, day) triple.

    The identifier is the uppercase MD5 hex digest of ``token + site + day``
    with the day in ISO format. It is stable for the whole calendar day, so
    every build of the same site with the same token on one day shares it.

    Returns:
        str: 32 uppercase hexadecimal characters
    """
    raw_token = token.get_secret_value() if isinstance(token, SecretStr) else token
    material = f"{raw_token}{site}{day.isoformat()}"
    return hashlib.md5(material.encode("utf-8")).hexdigest().upper()
