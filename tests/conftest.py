"""Shared pytest fixtures for AI Photo Generator tests."""

from __future__ import annotations

import asyncio
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from photogen.api.main import create_app
from photogen.core.config import PhotogenConfig
from photogen.core.image_client import ImageClientBase

# Environment variables read by PhotogenConfig.  Cleared for every test so
# the developer's shell cannot leak into assertions about defaults.
CONFIG_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_IMAGE_MODEL",
    "IMAGE_SIZE",
    "OPENAI_BASE_URL",
    "UPSTREAM_TIMEOUT",
    "HOST",
    "PORT",
    "MAX_BODY_BYTES",
    "LOG_LEVEL",
    "TEMPLATES_DIR",
)


class FakeImageClient(ImageClientBase):
    """In-memory stand-in for the upstream image API.

    Attributes:
        prompts: Every prompt received, in call order.
        result: Value returned by ``generate_image``.  A callable is invoked
            with the prompt instead.
        error: Exception raised instead of returning, if set.
        delay: Seconds to suspend inside each call.
        in_flight / max_in_flight: Concurrency bookkeeping.
    """

    def __init__(self, result="Zm9v", error: Exception | None = None, delay: float = 0.0):
        self.prompts: list[str] = []
        self.result = result
        self.error = error
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def generate_image(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            if callable(self.result):
                return self.result(prompt)
            return self.result
        finally:
            self.in_flight -= 1

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove configuration variables from the process environment."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config() -> PhotogenConfig:
    """Create a configuration with a fake key and no .env lookup.

    Returns:
        PhotogenConfig instance for testing
    """
    return PhotogenConfig(
        _env_file=None,
        openai_api_key="test-key",
        openai_base_url="https://images.test/v1",
    )


@pytest.fixture
def fake_client() -> FakeImageClient:
    """Fake upstream that returns ``"Zm9v"`` for every prompt."""
    return FakeImageClient()


@pytest.fixture
def test_client(
    test_config: PhotogenConfig, fake_client: FakeImageClient
) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the fake upstream.

    Yields:
        TestClient with the application lifespan running
    """
    app = create_app(test_config, image_client=fake_client)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def bangla_prompt() -> str:
    """A Bangla prompt ("a boat on the river at sunset")."""
    return "সূর্যাস্তে নদীর উপর একটি নৌকা"


@pytest.fixture
def fake_client_factory() -> type[FakeImageClient]:
    """Return the FakeImageClient class for tests that need custom behaviour."""
    return FakeImageClient
