"""Variation tags, tagged prompts and output filenames.

Each generation request gets a fresh variation tag.  The tag is appended to
the prompt sent upstream so identical prompts do not come back as cached
duplicates, and it is reused in the suggested download filename.
"""

from __future__ import annotations

import re
import time
import uuid

# 16 hex characters = 64 random bits, plenty for per-process uniqueness.
TAG_LENGTH = 16

FILE_NAME_PREFIX = "ai-photo"

# Whitespace plus U+FEFF, which browsers also treat as trimmable.
_EDGE_SPACE = re.compile(r"\A[\s\ufeff]+|[\s\ufeff]+\Z")


def new_variation_tag() -> str:
    """Return a short random identifier for one request."""
    return uuid.uuid4().hex[:TAG_LENGTH]


def trim_prompt(prompt: str) -> str:
    """Strip leading and trailing whitespace, including U+FEFF."""
    return _EDGE_SPACE.sub("", prompt)


def tag_prompt(prompt: str, tag: str) -> str:
    """Append the variation marker to the trimmed prompt.

    Args:
        prompt: User prompt as received (surrounding whitespace is removed).
        tag: Variation tag from :func:`new_variation_tag`.

    Returns:
        ``"<prompt>\\n\\n[variation:<tag>]"``
    """
    return f"{trim_prompt(prompt)}\n\n[variation:{tag}]"


def build_file_name(tag: str, now_ms: int | None = None) -> str:
    """Build the suggested filename ``ai-photo-<epoch-millis>-<tag>.png``.

    Args:
        tag: Variation tag of the request.
        now_ms: Epoch milliseconds.  Defaults to the current time.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{FILE_NAME_PREFIX}-{now_ms}-{tag}.png"
