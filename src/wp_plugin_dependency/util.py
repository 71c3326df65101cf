import re
from functools import lru_cache
from typing import List, Tuple
from urllib.parse import urlsplit

_DEFAULT_PATTERNS = (
    (r"(?i)\b(Basic|Bearer)\s+[A-Za-z0-9\-._~+/]+=*", r"\1 REDACTED"),
    (
        r"(?i)\b([A-Z0-9_]*(?:app[_-]?password|password|token|secret))\b\s*[:=]\s*([^\s,;]+)",
        r"\1=REDACTED",
    ),
    (r"(https?://)[^/\s:@]+:[^/\s@]+@", r"\1REDACTED@"),
)


def redact(text: str) -> str:
    value = text or ""
    for regex, replacement in _compiled_patterns():
        value = regex.sub(replacement, value)
    return value


@lru_cache(maxsize=1)
def _compiled_patterns() -> List[Tuple[re.Pattern, str]]:
    return [(re.compile(pattern), replacement) for pattern, replacement in _DEFAULT_PATTERNS]


def is_valid_url(value: str) -> bool:
    """True for absolute URLs with a scheme and a host, e.g. ``https://example.com/x.zip``."""
    raw = str(value or "").strip()
    if not raw or any(ch.isspace() for ch in raw):
        return False
    try:
        parts = urlsplit(raw)
    except ValueError:
        return False
    if not parts.scheme or not re.match(r"^[A-Za-z][A-Za-z0-9+.-]*$", parts.scheme):
        return False
    if parts.scheme.lower() in {"http", "https", "ftp", "ftps"}:
        return bool(parts.hostname)
    return bool(parts.netloc)
