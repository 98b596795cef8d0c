"""Error taxonomy for the AI Photo Generator.

Every failure the relay reports is a :class:`PhotogenError` subclass.  Each
one knows its machine-readable ``code``, its HTTP status, and carries both an
English and a Bangla message so the browser can show either without a second
round trip.  FastAPI exception handlers in :mod:`photogen.api.main` turn them
into the JSON envelope::

    {"ok": false, "error": {"code": ..., "message_en": ..., "message_bn": ..., "lang": ...}}

========================  ======  ==========================================
Code                      Status  Trigger
========================  ======  ==========================================
``BAD_REQUEST``           400     missing, empty or non-string prompt
``PAYLOAD_TOO_LARGE``     413     request body above ``max_body_bytes``
``NOT_FOUND``             404     ``index.html`` missing for ``GET /``
``OPENAI_ERROR``          500     upstream non-2xx or transport failure
``NO_IMAGE``              502     upstream success without image data
``SERVER_ERROR``          500     any other unexpected failure
========================  ======  ==========================================

:class:`UpstreamError` is not an envelope error itself.  The image client
raises it and the route handler re-raises it as :class:`OpenAIError` once the
prompt language is known.
"""

from __future__ import annotations

from typing import Any, Literal


class PhotogenError(Exception):
    """Base class for errors reported to callers as a JSON envelope.

    Attributes:
        code: Stable machine-readable error code.
        status_code: HTTP status returned with the envelope.
        message_en: English message.
        message_bn: Bangla message.
        lang: Preferred display language, or ``None`` to leave it unset.
    """

    code: str = "SERVER_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message_en: str,
        message_bn: str,
        lang: Literal["bn", "en"] | None = None,
    ) -> None:
        super().__init__(message_en)
        self.message_en = message_en
        self.message_bn = message_bn
        self.lang = lang

    def to_envelope(self) -> dict[str, Any]:
        """Return the ``{"ok": false, "error": {...}}`` response body."""
        error: dict[str, Any] = {
            "code": self.code,
            "message_en": self.message_en,
            "message_bn": self.message_bn,
        }
        if self.lang is not None:
            error["lang"] = self.lang
        return {"ok": False, "error": error}


class BadRequestError(PhotogenError):
    """The prompt is missing, not a string, or blank."""

    code = "BAD_REQUEST"
    status_code = 400

    def __init__(self) -> None:
        super().__init__(
            "Please provide a valid script (prompt).",
            "দয়া করে একটি বৈধ স্ক্রিপ্ট দিন।",
        )


class PayloadTooLargeError(PhotogenError):
    """The request body exceeds the configured size cap."""

    code = "PAYLOAD_TOO_LARGE"
    status_code = 413

    def __init__(self, limit: int) -> None:
        super().__init__(
            f"Request body is too large (limit {limit} bytes).",
            f"অনুরোধটি খুব বড় (সীমা {limit} বাইট)।",
        )
        self.limit = limit


class PageNotFoundError(PhotogenError):
    """The static client page is missing from the templates directory."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self) -> None:
        super().__init__(
            "Page not found.",
            "পৃষ্ঠাটি পাওয়া যায়নি।",
        )


class OpenAIError(PhotogenError):
    """The upstream image API failed or could not be reached.

    Reported as 500 even when the upstream answered with a 4xx status.
    """

    code = "OPENAI_ERROR"
    status_code = 500

    def __init__(self, reason: str, lang: Literal["bn", "en"] = "en") -> None:
        super().__init__(
            f"Image generation failed. Reason: {reason}",
            f"ইমেজ জেনারেশন ব্যর্থ হয়েছে। কারণ: {reason}",
            lang=lang,
        )
        self.reason = reason


class NoImageError(PhotogenError):
    """The upstream answered successfully but returned no image."""

    code = "NO_IMAGE"
    status_code = 502

    def __init__(self) -> None:
        super().__init__(
            "No image returned. Try again.",
            "কোনো ইমেজ ফেরত দেয়নি। আবার চেষ্টা করুন।",
        )


class ServerError(PhotogenError):
    """Any unexpected failure while handling a request."""

    code = "SERVER_ERROR"
    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(
            f"Server error: {detail}",
            f"সার্ভারে সমস্যা হয়েছে: {detail}",
        )
        self.detail = detail


class UpstreamError(Exception):
    """Raised by an image client on transport failure or a non-2xx response.

    Attributes:
        reason: Human-readable reason, taken from the upstream error body
            when available.
        status_code: Upstream HTTP status, or ``None`` for transport failures.
    """

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code
