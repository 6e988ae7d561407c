"""Classify pipe references as URLs or local filesystem paths."""

from __future__ import annotations

import errno
import os
from pathlib import Path

import httpx

from .errors import PathResolutionError
from .models import RemotePipe, ResolvedSource, SourceOrigin
from .observability import ResolutionEventLogger


def is_absolute_url(reference: str) -> bool:
    """Return whether ``reference`` parses as a URL with a scheme and a host.

    Drive-letter paths such as ``C:/pipes/a.js`` parse with a scheme but no
    host, so they are treated as local paths.
    """
    try:
        url = httpx.URL(reference)
    except httpx.InvalidURL:
        return False
    return bool(url.scheme) and bool(url.host)


def canonicalize_local_path(reference: str) -> Path:
    """Return the absolute, symlink-free path for a local pipe reference.

    Raises
    ------
    PathResolutionError
        If the path does not exist or is not readable.

    """
    try:
        path = Path(reference).resolve(strict=True)
    except OSError as exc:
        raise PathResolutionError.from_os_error(reference, exc) from exc

    if not os.access(path, os.R_OK):
        exc = PermissionError(errno.EACCES, os.strerror(errno.EACCES), str(path))
        raise PathResolutionError.from_os_error(reference, exc) from exc
    return path


class SourceClassifier:
    """Route a pipe reference to local canonicalization or remote fetching."""

    def __init__(self, *, events: ResolutionEventLogger | None = None) -> None:
        """Initialise with an optional event logger."""
        self._events = events or ResolutionEventLogger()

    def classify(self, reference: str) -> ResolvedSource | RemotePipe:
        """Classify ``reference``, canonicalizing it when it is a local path.

        URLs are returned as :class:`RemotePipe` without any I/O. Everything
        else is attempted as a local path; there is no "neither" outcome.
        """
        if is_absolute_url(reference):
            self._events.log_classified(reference=reference, origin=SourceOrigin.REMOTE)
            return RemotePipe(url=reference)

        self._events.log_classified(reference=reference, origin=SourceOrigin.LOCAL)
        path = str(canonicalize_local_path(reference))
        self._events.log_path_canonicalized(reference=reference, path=path)
        return ResolvedSource(reference=reference, path=path, origin=SourceOrigin.LOCAL)


__all__ = ["SourceClassifier", "canonicalize_local_path", "is_absolute_url"]
