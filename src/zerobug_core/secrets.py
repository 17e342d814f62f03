from __future__ import annotations

from pydantic import SecretStr


def is_blank(value: SecretStr | str | None) -> bool:
    if value is None:
        return True
    if isinstance(value, SecretStr):
        value = value.get_secret_value()
    return not value.strip()


def resolve_token(
    per_build: SecretStr | str | None,
    global_default: SecretStr | str | None = None,
) -> SecretStr | None:
    """Pick the per-build token, falling back to the saved global default."""
    for candidate in (per_build, global_default):
        if is_blank(candidate):
            continue
        if isinstance(candidate, SecretStr):
            return candidate
        return SecretStr(candidate)
    return None


def redact_token(token: SecretStr | None) -> str:
    """
    Redacts a token for display: ``***`` followed by its last 4 characters.

    Tokens of 8 characters or fewer are fully masked.
    """
    if is_blank(token):
        return ""
    raw = token.get_secret_value().strip()
    if len(raw) <= 8:
        return "***"
    return f"***{raw[-4:]}"
