"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def clean_runner_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ``PIPERUNNER_*`` variables inherited from the developer shell."""
    for key in list(os.environ):
        if key.startswith("PIPERUNNER_"):
            monkeypatch.delenv(key)
