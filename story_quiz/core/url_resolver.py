"""Single rule for resolving backend and audio URLs against a base location."""

from __future__ import annotations

import re
from urllib.parse import urljoin

_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def is_absolute_url(url: str) -> bool:
    """Return True when ``url`` starts with a scheme such as ``https:`` or ``file:``."""
    return bool(_SCHEME_PATTERN.match(url))


def resolve_url(url: str | None, base_url: str) -> str | None:
    """Resolve ``url`` against ``base_url`` unless it is already absolute.

    Every place that references a backend or audio URL goes through this
    function; callers never join URLs themselves.
    """
    if url is None:
        return None
    cleaned = url.strip()
    if not cleaned:
        return None
    if is_absolute_url(cleaned):
        return cleaned
    base = base_url if base_url.endswith("/") else base_url + "/"
    return urljoin(base, cleaned)
