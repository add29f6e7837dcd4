"""
URL canonicalization used to compare feed links with existing submissions.

Links pointing at Reddit itself collapse to the submission id so that
``old.``/``www.`` hosts, slugs, trailing slashes and tracking parameters of
the same thread share one key. Every other URL gets a light scheme/host/path
normalization that keeps the query string intact.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

COMMUNITY_DOMAINS = ("reddit.com", "redd.it")

DISCUSSION_THREAD_PATTERN = re.compile(
    r"(?:reddit\.com/r/[^/]+/comments/|redd\.it/)([a-zA-Z0-9]+)", re.IGNORECASE
)
SHARE_LINK_PATTERN = re.compile(r"/s/([a-zA-Z0-9]+)")


def is_community_url(url: str) -> bool:
    """Return True when ``url`` points at one of the community domains."""

    lowered = url.lower()
    return any(domain in lowered for domain in COMMUNITY_DOMAINS)


def match_discussion_thread(url: str) -> str | None:
    """Return the submission id of a ``/r/<sub>/comments/<id>`` or ``redd.it/<id>`` link."""

    match = DISCUSSION_THREAD_PATTERN.search(url)
    return match.group(1) if match else None


def match_share_link(url: str) -> str | None:
    """Return the share id of a ``/s/<id>`` link."""

    match = SHARE_LINK_PATTERN.search(url)
    return match.group(1) if match else None


def normalize_community_url(url: str) -> str:
    """Collapse a Reddit link to a key built from its submission or share id."""

    if not url:
        return url

    clean_url = url.split("?", 1)[0]

    # Submission ids are base36; share ids below are case-sensitive.
    thread_id = match_discussion_thread(clean_url)
    if thread_id is not None:
        return f"reddit.com/comments/{thread_id.lower()}"

    # Share links do not carry the thread id, so they stay in their own bucket.
    share_id = match_share_link(clean_url)
    if share_id is not None:
        return f"reddit.com/s/{share_id}"

    return clean_url


def normalize_url(url: str) -> str:
    """Return the canonical comparison key for ``url``.

    Unparseable input and URLs without a host are returned unchanged.
    """

    if not url:
        return url

    if is_community_url(url):
        return normalize_community_url(url)

    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    if not parts.netloc:
        return url

    scheme = parts.scheme.lower()
    if scheme in ("", "http"):
        scheme = "https"

    netloc = parts.netloc.lower()
    if netloc.startswith("www."):
        netloc = netloc[len("www."):]

    path = parts.path
    if path.endswith("/"):
        path = path[:-1]
    if not path:
        path = "/"

    return urlunsplit((scheme, netloc, path, parts.query, ""))


__all__ = [
    "COMMUNITY_DOMAINS",
    "is_community_url",
    "match_discussion_thread",
    "match_share_link",
    "normalize_community_url",
    "normalize_url",
]
