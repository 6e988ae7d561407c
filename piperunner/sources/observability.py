"""Emit structured events for each pipe resolution stage.

Usage
-----
Components accept a :class:`ResolutionEventLogger`; pass one wrapping a test
double to capture events without configuring femtologging:

>>> from piperunner.sources.models import SourceOrigin
>>> events = ResolutionEventLogger()
>>> events.log_classified(reference="./pipe.js", origin=SourceOrigin.LOCAL)

"""

from __future__ import annotations

import enum
import typing as typ

from piperunner.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    from piperunner.logging import SupportsLog

    from .errors import PipeSourceError
    from .models import SourceOrigin

_default_logger = get_logger(__name__)


class ResolutionEventType(enum.StrEnum):
    """Structured log event types for pipe resolution."""

    CLASSIFIED = "pipe.source.classified"
    PATH_CANONICALIZED = "pipe.path.canonicalized"
    URL_NORMALIZED = "pipe.url.normalized"
    SOURCE_REJECTED = "pipe.source.rejected"
    FETCH_STARTED = "pipe.fetch.started"
    FETCH_COMPLETED = "pipe.fetch.completed"
    PERSIST_COMPLETED = "pipe.persist.completed"
    RESOLUTION_COMPLETED = "pipe.resolution.completed"
    RESOLUTION_FAILED = "pipe.resolution.failed"


class ResolutionEventLogger:
    """Emit resolution events via femtologging.

    Progress is logged at INFO, policy rejections at WARNING and terminal
    failures at ERROR.
    """

    def __init__(self, logger: SupportsLog | None = None) -> None:
        """Initialise with an injected logger or the module logger."""
        self._logger: SupportsLog = logger or _default_logger

    def log_classified(self, *, reference: str, origin: SourceOrigin) -> None:
        """Log whether a reference was treated as a URL or a local path."""
        log_info(
            self._logger,
            "[%s] reference=%s origin=%s",
            ResolutionEventType.CLASSIFIED,
            reference,
            origin,
        )

    def log_path_canonicalized(self, *, reference: str, path: str) -> None:
        """Log the absolute path a local reference resolved to."""
        log_info(
            self._logger,
            "[%s] reference=%s path=%s",
            ResolutionEventType.PATH_CANONICALIZED,
            reference,
            path,
        )

    def log_url_normalized(self, *, url: str, normalized: str) -> None:
        """Log the outcome of GitHub URL normalization."""
        log_info(
            self._logger,
            "[%s] url=%s normalized=%s rewritten=%s",
            ResolutionEventType.URL_NORMALIZED,
            url,
            normalized,
            url != normalized,
        )

    def log_source_rejected(self, *, url: str, host: str) -> None:
        """Log a URL rejected by the trusted host policy."""
        log_warning(
            self._logger,
            "[%s] url=%s host=%s",
            ResolutionEventType.SOURCE_REJECTED,
            url,
            host,
        )

    def log_fetch_started(self, *, url: str) -> None:
        """Log the start of a download."""
        log_info(self._logger, "[%s] url=%s", ResolutionEventType.FETCH_STARTED, url)

    def log_fetch_completed(self, *, url: str, status_code: int, size: int) -> None:
        """Log a completed download with its body size in bytes."""
        log_info(
            self._logger,
            "[%s] url=%s status_code=%d bytes=%d",
            ResolutionEventType.FETCH_COMPLETED,
            url,
            status_code,
            size,
        )

    def log_persisted(self, *, path: str, extension: str) -> None:
        """Log the final location of a downloaded pipe."""
        log_info(
            self._logger,
            "[%s] path=%s extension=%s",
            ResolutionEventType.PERSIST_COMPLETED,
            path,
            extension,
        )

    def log_resolution_completed(
        self, *, reference: str, path: str, origin: SourceOrigin
    ) -> None:
        """Log the resolved path handed to the execution engine."""
        log_info(
            self._logger,
            "[%s] reference=%s path=%s origin=%s",
            ResolutionEventType.RESOLUTION_COMPLETED,
            reference,
            path,
            origin,
        )

    def log_resolution_failed(self, error: PipeSourceError) -> None:
        """Log a terminal resolution failure with its stage and cause."""
        log_error(
            self._logger,
            "[%s] reference=%s stage=%s error_type=%s error=%s",
            ResolutionEventType.RESOLUTION_FAILED,
            error.reference,
            error.stage,
            type(error).__name__,
            error,
            exc_info=error,
        )


__all__ = ["ResolutionEventLogger", "ResolutionEventType"]
