"""AI Photo Generator — FastAPI Application.

This module defines the application factory, the REST routes, and the
``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The relay is stateless.  Each ``POST /api/generate`` request validates the
prompt, tags it with a fresh variation tag, makes exactly one call to the
upstream image API through an :class:`~photogen.core.image_client.ImageClientBase`,
and answers with a JSON envelope.  Nothing is stored between requests.

- **Configuration** is built once by :func:`main` and passed into
  :func:`create_app`; there is no import-time global.
- **The upstream client** lives on ``app.state.image_client``.  Tests inject
  a fake; otherwise the lifespan creates an
  :class:`~photogen.core.image_client.OpenAIImageClient` and closes it on
  shutdown.
- **Errors** are :class:`~photogen.core.errors.PhotogenError` subclasses,
  rendered by an exception handler as ``{"ok": false, "error": {...}}``.
- **The HTML page** is read from ``templates/index.html`` and returned as a
  raw ``HTMLResponse``.

Endpoints
---------
========  ==================  ==========================================
Method    Path                Purpose
========  ==================  ==========================================
GET       ``/``               Serve the static client page
POST      ``/api/generate``   Generate one image from a prompt
========  ==================  ==========================================

Usage
-----
CLI (installed entry point)::

    photogen

Direct invocation::

    python -m photogen.api.main
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send
from pydantic import ValidationError

from photogen import __version__
from photogen.api.models import ErrorResponse, GenerateRequest, GenerateResponse
from photogen.core.config import PhotogenConfig, load_config
from photogen.core.errors import (
    BadRequestError,
    NoImageError,
    OpenAIError,
    PageNotFoundError,
    PayloadTooLargeError,
    PhotogenError,
    ServerError,
    UpstreamError,
)
from photogen.core.image_client import ImageClientBase, OpenAIImageClient
from photogen.core.language import preferred_language
from photogen.core.variation import build_file_name, new_variation_tag, tag_prompt

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    """Serve the static client page.

    Returns:
        The HTML content of ``templates/index.html``.

    Raises:
        PageNotFoundError: 404 if ``index.html`` is not found.
    """
    config: PhotogenConfig = request.app.state.config
    index_path = config.templates_dir / "index.html"
    if index_path.exists():
        return HTMLResponse(content=index_path.read_text(encoding="utf-8"))
    raise PageNotFoundError()


@router.post(
    "/api/generate",
    response_model=GenerateResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def generate_image(req: GenerateRequest, request: Request) -> GenerateResponse:
    """Generate one image from a Bangla or English prompt.

    This endpoint:

    1. Detects whether the prompt contains Bangla script.
    2. Draws a fresh variation tag and appends it to the trimmed prompt.
    3. Calls the upstream image API once, asking for base64 output.
    4. Returns ``{ok: true, fileName, b64}``.

    Args:
        req: Validated :class:`GenerateRequest` payload.
        request: Incoming request, used to reach ``app.state``.

    Returns:
        The success envelope.

    Raises:
        OpenAIError: 500 when the upstream call fails or answers non-2xx.
        NoImageError: 502 when the upstream returns no image data.
        ServerError: 500 for anything unexpected.
    """
    client: ImageClientBase = request.app.state.image_client
    lang = preferred_language(req.prompt)

    try:
        tag = new_variation_tag()
        upstream_prompt = tag_prompt(req.prompt, tag)
        logger.info(f"Generating image (lang={lang}, tag={tag}, chars={len(upstream_prompt)})")

        try:
            b64 = await client.generate_image(upstream_prompt)
        except UpstreamError as exc:
            raise OpenAIError(exc.reason, lang=lang) from exc

        if not b64:
            logger.warning(f"Upstream returned no image (tag={tag})")
            raise NoImageError()

        file_name = build_file_name(tag)
    except PhotogenError:
        raise
    except Exception as exc:
        logger.exception("Unexpected error during image generation")
        raise ServerError(str(exc)) from exc

    logger.info(f"Image generated: {file_name}")
    return GenerateResponse(fileName=file_name, b64=b64)


# ---------------------------------------------------------------------------
# Exception handlers and middleware.
# ---------------------------------------------------------------------------


async def photogen_error_handler(request: Request, exc: PhotogenError) -> JSONResponse:
    """Render a :class:`PhotogenError` as its JSON envelope."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map request validation failures to the ``BAD_REQUEST`` envelope."""
    logger.info(f"Rejected request to {request.url.path}: {len(exc.errors())} validation error(s)")
    error = BadRequestError()
    return JSONResponse(status_code=error.status_code, content=error.to_envelope())


class BodySizeLimitMiddleware:
    """Reject request bodies larger than *max_body_bytes* with a 413 envelope.

    A declared ``Content-Length`` above the cap is refused before anything is
    read.  Otherwise the body is read and counted as it arrives, so chunked
    uploads are held to the same cap.  Bodies within the cap are buffered and
    replayed to the application unchanged.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        declared = headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.max_body_bytes:
            await self._reject(scope, receive, send, int(declared))
            return

        chunks: list[bytes] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # Client went away before the body was complete.
                return
            chunk = message.get("body", b"")
            received += len(chunk)
            if received > self.max_body_bytes:
                await self._reject(scope, receive, send, received)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        body = b"".join(chunks)
        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        error = PayloadTooLargeError(self.max_body_bytes)
        logger.info(f"Rejected body of at least {size} bytes to {scope.get('path', '')}")
        response = JSONResponse(status_code=error.status_code, content=error.to_envelope())
        await response(scope, receive, send)


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    config: PhotogenConfig,
    image_client: ImageClientBase | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Process configuration.
        image_client: Upstream client to use.  When ``None`` an
            :class:`OpenAIImageClient` is created at startup and closed at
            shutdown; an injected client is left open for its owner.

    Returns:
        A configured :class:`FastAPI` instance.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # --- Startup -------------------------------------------------------
        owned_client: ImageClientBase | None = None
        if app.state.image_client is None:
            owned_client = OpenAIImageClient(config)
            app.state.image_client = owned_client
            logger.info(
                f"Image client ready (model={config.openai_image_model}, size={config.image_size})"
            )
        logger.info(f"Server running at http://localhost:{config.port}")

        yield  # Application runs here.

        # --- Shutdown ------------------------------------------------------
        if owned_client is not None:
            await owned_client.aclose()
            app.state.image_client = None
            logger.info("Image client closed on shutdown.")

    app = FastAPI(
        title="AI Photo Generator",
        description="Bangla and English prompt relay for image generation.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.image_client = image_client

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=config.max_body_bytes)

    # Registered last so it wraps the size check and 413 responses carry CORS headers.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PhotogenError, photogen_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(router)
    return app


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Loads :class:`PhotogenConfig` from the environment (and ``.env``).  If the
    API key is missing or any value is invalid, the error is logged and the
    process exits with status 1 before binding a port.

    This function is registered as the ``photogen`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config()
    except ValidationError as exc:
        failed_fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        if "openai_api_key" in failed_fields:
            logger.error("OPENAI_API_KEY missing in environment or .env")
        else:
            logger.error(f"Invalid configuration: {exc}")
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
