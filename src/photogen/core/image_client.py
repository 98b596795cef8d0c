"""Upstream image-generation clients.

The route handler only talks to :class:`ImageClientBase`, a one-method
interface.  :class:`OpenAIImageClient` implements it against the OpenAI
``/images/generations`` endpoint with :mod:`httpx`; tests substitute a stub
or drive the real client through ``httpx.MockTransport``.

Contract
--------
``generate_image(prompt)`` makes exactly one upstream call and:

- returns the base64 payload of the first result, or ``None`` if the
  response carries no image at ``data[0].b64_json``;
- raises :class:`~photogen.core.errors.UpstreamError` when the call cannot
  be made (transport failure, timeout) or the status is not 2xx;
- lets anything else propagate (e.g. a 2xx with a malformed JSON body).

Usage
-----
::

    from photogen.core.config import load_config
    from photogen.core.image_client import OpenAIImageClient

    client = OpenAIImageClient(load_config())
    b64 = await client.generate_image("a lighthouse at dusk")
    await client.aclose()
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from photogen.core.config import PhotogenConfig
from photogen.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class ImageClientBase(ABC):
    """Interface for anything that turns a prompt into a base64 image."""

    @abstractmethod
    async def generate_image(self, prompt: str) -> str | None:
        """Generate one image for *prompt*.

        Args:
            prompt: Prompt text exactly as it should be sent upstream.

        Returns:
            Base64-encoded image data, or ``None`` if the upstream returned
            no image.

        Raises:
            UpstreamError: On transport failure or a non-2xx response.
        """

    async def aclose(self) -> None:
        """Release any resources held by the client."""


def extract_b64(payload: Any) -> str | None:
    """Return ``payload["data"][0]["b64_json"]`` or ``None`` if absent/empty."""
    if not isinstance(payload, dict):
        return None
    results = payload.get("data")
    if not isinstance(results, list) or not results:
        return None
    first = results[0]
    if not isinstance(first, dict):
        return None
    b64 = first.get("b64_json")
    if not isinstance(b64, str) or not b64:
        return None
    return b64


def extract_error_reason(response: httpx.Response) -> str:
    """Return the upstream error message, or the HTTP status line.

    The message is read from ``{"error": {"message": ...}}``.  Any body that
    is not JSON or lacks the field falls back to ``"<status> <reason>"``.
    """
    reason = f"{response.status_code} {response.reason_phrase}".strip()
    try:
        payload = response.json()
    except ValueError:
        return reason

    error_obj = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error_obj, dict):
        message = error_obj.get("message")
        if isinstance(message, str) and message:
            return message
    return reason


class OpenAIImageClient(ImageClientBase):
    """Image client for the OpenAI image generation API.

    Attributes:
        config: Configuration supplying the key, model, size and base URL.
    """

    def __init__(
        self,
        config: PhotogenConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client.

        Args:
            config: Application configuration.
            http_client: Optional pre-built ``httpx.AsyncClient``.  When given,
                the caller owns it and :meth:`aclose` leaves it open.
        """
        self.config = config
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.upstream_timeout)

    def build_payload(self, prompt: str) -> dict[str, Any]:
        """Return the JSON body for ``POST /images/generations``."""
        return {
            "model": self.config.openai_image_model,
            "prompt": prompt,
            "size": self.config.image_size,
            "n": 1,
            "response_format": "b64_json",
        }

    async def generate_image(self, prompt: str) -> str | None:
        try:
            response = await self._http.post(
                self.config.generations_url,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.config.openai_api_key}",
                },
                json=self.build_payload(prompt),
            )
        except httpx.RequestError as exc:
            logger.warning(f"Image API request failed: {exc!r}")
            raise UpstreamError(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            reason = extract_error_reason(response)
            logger.warning(f"Image API returned {response.status_code}: {reason}")
            raise UpstreamError(reason, status_code=response.status_code)

        return extract_b64(response.json())

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()
