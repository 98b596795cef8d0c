"""Bangla script detection.

The server always returns both English and Bangla messages; this check only
decides which language is marked as preferred on an error envelope.  The
browser page applies the same rule to pick the message it shows.
"""

from __future__ import annotations

import re
from typing import Literal

# Unicode block "Bengali" (U+0980-U+09FF), used for Bangla text.
BANGLA_PATTERN = re.compile("[\u0980-\u09FF]")


def is_bangla(text: str | None) -> bool:
    """Return ``True`` if *text* contains any Bangla code point.

    Args:
        text: Text to scan.  ``None`` and non-strings count as not Bangla.

    Returns:
        Whether at least one character falls in U+0980-U+09FF.
    """
    if not isinstance(text, str):
        return False
    return BANGLA_PATTERN.search(text) is not None


def preferred_language(text: str | None) -> Literal["bn", "en"]:
    """Return ``"bn"`` for Bangla text and ``"en"`` otherwise."""
    return "bn" if is_bangla(text) else "en"
