import re
from urllib.parse import urlparse

_KEY_PATTERNS = {
    "openai": re.compile(r"^sk-[a-zA-Z0-9]{48,}$"),
    "anthropic": re.compile(r"^sk-ant-[a-zA-Z0-9-]{95,}$"),
}


def validate_api_key(key: str | None, provider_name: str) -> bool:
    """Loose shape check for a vendor API key.

    Only OpenAI and Anthropic publish a recognisable key format; for every
    other vendor any non-blank value is accepted.
    """
    if not key:
        return False
    trimmed = key.strip()
    if not trimmed:
        return False
    pattern = _KEY_PATTERNS.get(provider_name)
    if pattern is not None:
        return bool(pattern.match(trimmed))
    return True


def validate_url(url: str | None) -> bool:
    if not url:
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def sanitize_input(text: str, max_length: int = 10_000) -> str:
    return text.strip()[:max_length]
