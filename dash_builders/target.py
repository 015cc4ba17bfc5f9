"""Resolve a user-supplied webhook URL into the URL we actually POST to.

Pure helpers -- malformed input never raises, it degrades to "no target".
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ._constants import (
    LEGACY_WEBHOOK_PREFIX,
    QUERY_THREAD_ID,
    QUERY_WITH_COMPONENTS,
    VERSIONED_WEBHOOK_PREFIX,
    WEBHOOK_HOST,
)


@dataclass(frozen=True)
class ResolvedTarget:
    """Request URL plus the thread the message will be posted into."""
    url: str | None = None
    thread_id: str | None = None

    def __bool__(self) -> bool:
        return self.url is not None


def _split(webhook_url):
    """Split *webhook_url*, returning ``None`` for anything unparsable."""
    if not isinstance(webhook_url, str):
        return None
    try:
        parts = urlsplit(webhook_url.strip())
        # Accessing .port validates it (raises ValueError when out of range)
        parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc or not parts.hostname:
        return None
    return parts


def get_thread_id(webhook_url) -> str | None:
    """Return the ``thread_id`` query parameter of *webhook_url*, if any."""
    parts = _split(webhook_url)
    if parts is None:
        return None
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key == QUERY_THREAD_ID:
            return value or None
    return None


def normalize_webhook_url(webhook_url) -> str | None:
    """Return the versioned request URL for *webhook_url*, or ``None``.

    Legacy ``https://discord.com/api/webhooks/...`` URLs are moved to the
    versioned API path.  ``with_components=true`` is always set so that
    webhooks accept Components V2 payloads.
    """
    parts = _split(webhook_url)
    if parts is None:
        return None

    scheme, netloc, path = parts.scheme, parts.netloc, parts.path
    if parts.hostname == WEBHOOK_HOST and path.startswith(LEGACY_WEBHOOK_PREFIX):
        scheme = "https"
        path = VERSIONED_WEBHOOK_PREFIX + path[len(LEGACY_WEBHOOK_PREFIX):]

    # Overwrite in place (first occurrence keeps its position), drop duplicates
    query = []
    replaced = False
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key != QUERY_WITH_COMPONENTS:
            query.append((key, value))
        elif not replaced:
            query.append((key, "true"))
            replaced = True
    if not replaced:
        query.append((QUERY_WITH_COMPONENTS, "true"))

    return urlunsplit((scheme, netloc, path, urlencode(query), parts.fragment))


def resolve_target(webhook_url) -> ResolvedTarget:
    """Derive the request target and thread id from the current webhook URL.

    Recompute this on every send; the result is never cached.
    """
    url = normalize_webhook_url(webhook_url)
    if url is None:
        return ResolvedTarget()
    return ResolvedTarget(url=url, thread_id=get_thread_id(webhook_url))
