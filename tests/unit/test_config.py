"""Unit tests for PipeRunnerConfig."""

from __future__ import annotations

from pathlib import Path

import pytest

from piperunner.config import PipeRunnerConfig
from piperunner.errors import PipeRunnerConfigError
from piperunner.sources import FetcherConfig


class TestPipeRunnerConfig:
    """Tests for the runner configuration dataclass."""

    def test_defaults(self) -> None:
        """Defaults match the engine's native script type and deno."""
        config = PipeRunnerConfig()
        assert config.default_extension == "js"
        assert config.fetch_timeout_s == 30.0
        assert config.temp_dir is None
        assert config.engine_command == ("deno", "run", "--allow-all")

    def test_from_env_without_variables_uses_defaults(self) -> None:
        """An empty environment yields the default configuration."""
        assert PipeRunnerConfig.from_env() == PipeRunnerConfig()

    def test_from_env_reads_all_variables(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Every supported variable is applied."""
        monkeypatch.setenv("PIPERUNNER_LOG_LEVEL", "debug")
        monkeypatch.setenv("PIPERUNNER_FETCH_TIMEOUT_S", "2.5")
        monkeypatch.setenv("PIPERUNNER_DEFAULT_EXTENSION", ".ts")
        monkeypatch.setenv("PIPERUNNER_TEMP_DIR", "/var/tmp/pipes")
        monkeypatch.setenv("PIPERUNNER_USER_AGENT", "pipes-ci/1.0")
        monkeypatch.setenv("PIPERUNNER_ENGINE", "node --no-warnings")

        config = PipeRunnerConfig.from_env()

        assert config == PipeRunnerConfig(
            log_level="debug",
            fetch_timeout_s=2.5,
            default_extension="ts",
            temp_dir=Path("/var/tmp/pipes"),
            user_agent="pipes-ci/1.0",
            engine_command=("node", "--no-warnings"),
        )

    @pytest.mark.parametrize("raw", ["0", "-1", "soon", "nan"])
    def test_invalid_timeout(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        """Timeouts must be positive numbers."""
        monkeypatch.setenv("PIPERUNNER_FETCH_TIMEOUT_S", raw)
        with pytest.raises(PipeRunnerConfigError, match="PIPERUNNER_FETCH_TIMEOUT_S"):
            PipeRunnerConfig.from_env()

    @pytest.mark.parametrize("raw", [".", "a/b", "..\\js"])
    def test_invalid_extension(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        """Extensions must be non-empty and free of path separators."""
        monkeypatch.setenv("PIPERUNNER_DEFAULT_EXTENSION", raw)
        with pytest.raises(PipeRunnerConfigError, match="PIPERUNNER_DEFAULT_EXTENSION"):
            PipeRunnerConfig.from_env()

    def test_empty_engine(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An engine command must name a program."""
        monkeypatch.setenv("PIPERUNNER_ENGINE", "   ")
        with pytest.raises(PipeRunnerConfigError, match="PIPERUNNER_ENGINE"):
            PipeRunnerConfig.from_env()

    def test_fetcher_config(self) -> None:
        """Download settings are forwarded to the fetcher config."""
        config = PipeRunnerConfig(
            fetch_timeout_s=5.0,
            default_extension="py",
            temp_dir=Path("/srv/pipes"),
            user_agent="ua",
        )
        assert config.fetcher_config() == FetcherConfig(
            timeout_s=5.0,
            user_agent="ua",
            default_extension="py",
            temp_dir=Path("/srv/pipes"),
        )
