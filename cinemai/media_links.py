"""Helpers that turn trailer and artwork references into renderable URLs."""

from __future__ import annotations

import re
from urllib.parse import quote

EMBED_ID_LENGTH = 11
FALLBACK_TRAILER_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
EMBED_URL_TEMPLATE = "https://www.youtube.com/embed/{video_id}?autoplay=1&controls=1"
PLACEHOLDER_URL_TEMPLATE = "https://placehold.co/{size}/{background}/{foreground}?text={text}"

# Short links, watch?v=, embed/, v/ and the channel user form (/u/x/).
YOUTUBE_ID_RE = re.compile(
    r"^.*((youtu\.be/)|(v/)|(/u/\w/)|(embed/)|(watch\?))\??v?=?([^#&?]*).*"
)


def extract_embed_id(url: str | None) -> str | None:
    """Return the video identifier embedded in ``url`` or ``None``."""

    if not url:
        return None
    match = YOUTUBE_ID_RE.match(url)
    if not match:
        return None
    candidate = match.group(7)
    if len(candidate) != EMBED_ID_LENGTH:
        return None
    return candidate


def build_embed_url(url: str | None) -> str | None:
    """Return an autoplaying embed URL for ``url`` when it can be resolved."""

    video_id = extract_embed_id(url)
    if video_id is None:
        return None
    return EMBED_URL_TEMPLATE.format(video_id=video_id)


def resolve_poster_fallback(
    title: str,
    *,
    size: str = "400x600",
    background: str = "18181b",
    foreground: str = "404040",
) -> str:
    """Return a deterministic placeholder artwork URL for ``title``."""

    return PLACEHOLDER_URL_TEMPLATE.format(
        size=size,
        background=background,
        foreground=foreground,
        text=quote(title, safe="-_.!~*'()"),
    )


def poster_or_fallback(poster_url: str | None, title: str) -> str:
    """Prefer the supplied artwork and fall back to a placeholder."""

    if poster_url and poster_url.strip():
        return poster_url
    return resolve_poster_fallback(title)
