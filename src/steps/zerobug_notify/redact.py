from urllib.parse import urlsplit


def redact_url(url: str) -> str:
    """
    Redacts an endpoint URL for logs: <scheme>://<host>/***<last4chars>
    Example: https://zerobug.io/api/notify?key=abc123 -> https://zerobug.io/***c123

    Query strings often carry API keys, so only the host and a short suffix
    survive. Unparseable input falls back to ``***`` plus the last 4 characters.
    """
    if not url:
        return ""

    full_str = url.strip()
    last4 = full_str[-4:] if len(full_str) > 4 else full_str
    try:
        parsed = urlsplit(full_str)
    except ValueError:
        return f"***{last4}" if len(full_str) > 4 else "***"

    if not parsed.netloc:
        return f"***{last4}" if len(full_str) > 4 else "***"
    scheme = parsed.scheme or "http"
    # drop user:password@ if present
    host = parsed.netloc.rsplit("@", 1)[-1]
    return f"{scheme}://{host}/***{last4}"
