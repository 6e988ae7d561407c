"""Environment-driven configuration for the pipe runner.

Usage
-----
>>> import os
>>> os.environ["PIPERUNNER_DEFAULT_EXTENSION"] = ".ts"
>>> PipeRunnerConfig.from_env().default_extension
'ts'

"""

from __future__ import annotations

import dataclasses as dc
import os
import shlex
from pathlib import Path

from piperunner.errors import PipeRunnerConfigError
from piperunner.sources.fetcher import DEFAULT_SCRIPT_EXTENSION, FetcherConfig

_DEFAULT_LOG_LEVEL = "INFO"
_DEFAULT_TIMEOUT_S = 30.0
_DEFAULT_USER_AGENT = "piperunner/0.1"
_DEFAULT_ENGINE = ("deno", "run", "--allow-all")


@dc.dataclass(frozen=True, slots=True)
class PipeRunnerConfig:
    """Runner configuration.

    Attributes
    ----------
    log_level
        Raw log level; normalized when logging is configured.
    fetch_timeout_s
        Timeout for downloading a remote pipe.
    default_extension
        Script extension used when a pipe URL has none, without a dot.
    temp_dir
        Directory for downloaded pipes. ``None`` uses the system default.
    user_agent
        ``User-Agent`` header for downloads.
    engine_command
        Program and leading arguments used to run the resolved script.

    """

    log_level: str = _DEFAULT_LOG_LEVEL
    fetch_timeout_s: float = _DEFAULT_TIMEOUT_S
    default_extension: str = DEFAULT_SCRIPT_EXTENSION
    temp_dir: Path | None = None
    user_agent: str = _DEFAULT_USER_AGENT
    engine_command: tuple[str, ...] = _DEFAULT_ENGINE

    @staticmethod
    def _parse_timeout() -> float:
        raw = os.environ.get("PIPERUNNER_FETCH_TIMEOUT_S", "")
        if not raw.strip():
            return _DEFAULT_TIMEOUT_S
        try:
            timeout = float(raw)
        except ValueError as exc:
            raise PipeRunnerConfigError.invalid_timeout(raw) from exc
        if not timeout > 0:
            raise PipeRunnerConfigError.invalid_timeout(raw)
        return timeout

    @staticmethod
    def _parse_extension() -> str:
        raw = os.environ.get("PIPERUNNER_DEFAULT_EXTENSION", "")
        if not raw.strip():
            return DEFAULT_SCRIPT_EXTENSION
        extension = raw.strip().removeprefix(".")
        if not extension or "/" in extension or "\\" in extension:
            raise PipeRunnerConfigError.invalid_extension(raw)
        return extension

    @staticmethod
    def _parse_engine() -> tuple[str, ...]:
        raw = os.environ.get("PIPERUNNER_ENGINE")
        if raw is None:
            return _DEFAULT_ENGINE
        command = tuple(shlex.split(raw))
        if not command:
            raise PipeRunnerConfigError.empty_engine()
        return command

    @classmethod
    def from_env(cls) -> PipeRunnerConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``PIPERUNNER_LOG_LEVEL``: log level (default ``INFO``)
        - ``PIPERUNNER_FETCH_TIMEOUT_S``: positive download timeout in seconds
        - ``PIPERUNNER_DEFAULT_EXTENSION``: extension for extensionless URLs
        - ``PIPERUNNER_TEMP_DIR``: directory for downloaded pipes
        - ``PIPERUNNER_USER_AGENT``: ``User-Agent`` header for downloads
        - ``PIPERUNNER_ENGINE``: shell-quoted engine command

        Raises
        ------
        PipeRunnerConfigError
            If any value is present but invalid.

        """
        raw_temp_dir = os.environ.get("PIPERUNNER_TEMP_DIR", "").strip()
        user_agent = os.environ.get("PIPERUNNER_USER_AGENT", "").strip()
        return cls(
            log_level=os.environ.get("PIPERUNNER_LOG_LEVEL", _DEFAULT_LOG_LEVEL),
            fetch_timeout_s=cls._parse_timeout(),
            default_extension=cls._parse_extension(),
            temp_dir=Path(raw_temp_dir) if raw_temp_dir else None,
            user_agent=user_agent or _DEFAULT_USER_AGENT,
            engine_command=cls._parse_engine(),
        )

    def fetcher_config(self) -> FetcherConfig:
        """Return the download settings for :class:`RemoteFetcher`."""
        return FetcherConfig(
            timeout_s=self.fetch_timeout_s,
            user_agent=self.user_agent,
            default_extension=self.default_extension,
            temp_dir=self.temp_dir,
        )


__all__ = ["PipeRunnerConfig"]
