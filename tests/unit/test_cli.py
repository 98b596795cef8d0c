"""Tests for photogen.api.main.main — the CLI entry point."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI

from photogen.api.main import main


class TestMain:
    def test_refuses_to_start_without_api_key(
        self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ):
        # No .env in the working directory and no key in the environment.
        monkeypatch.chdir(temp_dir)
        started = []
        monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: started.append(args))

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert started == []

    def test_runs_uvicorn_with_configured_port(
        self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ):
        monkeypatch.chdir(temp_dir)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("PORT", "6123")
        calls = []
        monkeypatch.setattr(
            "uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs))
        )

        main()

        assert len(calls) == 1
        app, kwargs = calls[0]
        assert isinstance(app, FastAPI)
        assert app.state.config.openai_api_key == "sk-test"
        assert kwargs["port"] == 6123
        assert kwargs["host"] == "0.0.0.0"

    def test_invalid_port_exits(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path):
        monkeypatch.chdir(temp_dir)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("PORT", "not-a-port")

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
