"""Pydantic request and response models for the AI Photo Generator API.

FastAPI uses these models for request validation, serialisation, and the
OpenAPI schema.  Validation failures on :class:`GenerateRequest` are not
returned as FastAPI's default 422 body; :mod:`photogen.api.main` maps them to
the ``BAD_REQUEST`` envelope.

Models
------
GenerateRequest
    Payload for ``POST /api/generate``.
GenerateResponse
    Success envelope ``{ok: true, fileName, b64}``.
ErrorDetail / ErrorResponse
    Failure envelope ``{ok: false, error: {...}}``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, StrictStr, field_validator

from photogen.core.variation import trim_prompt


class GenerateRequest(BaseModel):
    """Request body for the ``POST /api/generate`` endpoint.

    Attributes:
        prompt: Bangla or English description of the desired image.  Must be
            a JSON string with at least one non-whitespace character.  The
            value is kept as sent; trimming happens when the upstream prompt
            is built.
    """

    prompt: StrictStr = Field(
        ...,
        description="Image description in Bangla or English.",
    )

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        if not trim_prompt(value):
            raise ValueError("prompt must not be blank")
        return value


class GenerateResponse(BaseModel):
    """Success envelope for ``POST /api/generate``.

    Attributes:
        ok: Always ``True``.
        fileName: Suggested download name, ``ai-photo-<millis>-<tag>.png``.
        b64: Base64-encoded PNG data.
    """

    ok: Literal[True] = True
    fileName: str = Field(..., description="Suggested download filename.")
    b64: str = Field(..., description="Base64-encoded image payload.")


class ErrorDetail(BaseModel):
    """Bilingual error description inside :class:`ErrorResponse`."""

    code: str
    message_en: str
    message_bn: str
    lang: Literal["bn", "en"] | None = None


class ErrorResponse(BaseModel):
    """Failure envelope returned for every error."""

    ok: Literal[False] = False
    error: ErrorDetail
