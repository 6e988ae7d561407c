"""Errors raised while resolving a pipe reference to a local script.

Every error carries the original pipe reference and the resolution stage that
failed. The underlying cause, when there is one, is chained via ``__cause__``.
"""

from __future__ import annotations

import enum

# Response body preview length for HTTP error messages
_BODY_PREVIEW_LIMIT = 200

UNSUPPORTED_SOURCE_MESSAGE = (
    "only public GitHub URLs or raw.githubusercontent.com URLs are supported"
)


class ResolutionStage(enum.StrEnum):
    """Stages of pipe source resolution."""

    CANONICALIZE = "canonicalize"
    NORMALIZE = "normalize"
    VALIDATE = "validate"
    FETCH = "fetch"
    PERSIST = "persist"


def _preview(text: str) -> str:
    if len(text) > _BODY_PREVIEW_LIMIT:
        return text[:_BODY_PREVIEW_LIMIT] + "..."
    return text


class PipeSourceError(Exception):
    """Base exception for pipe source resolution failures.

    Attributes
    ----------
    reference
        The pipe reference exactly as the user supplied it.
    stage
        Resolution stage at which the failure occurred.

    """

    def __init__(self, message: str, *, reference: str, stage: ResolutionStage) -> None:
        """Initialise with a message, the original reference and the stage."""
        self.reference = reference
        self.stage = stage
        super().__init__(message)


class PathResolutionError(PipeSourceError):
    """Raised when a local pipe path cannot be canonicalized."""

    @classmethod
    def from_os_error(cls, reference: str, exc: OSError) -> PathResolutionError:
        """Return an error for a missing or inaccessible local path."""
        detail = exc.strerror or str(exc)
        return cls(
            f"cannot resolve local pipe path {reference!r}: {detail}",
            reference=reference,
            stage=ResolutionStage.CANONICALIZE,
        )


class MalformedURLError(PipeSourceError):
    """Raised when a pipe URL cannot be normalized or validated."""

    @classmethod
    def unparseable(cls, reference: str, url: str) -> MalformedURLError:
        """Return an error for a URL that no longer parses after rewriting."""
        return cls(
            f"pipe URL {url!r} could not be parsed",
            reference=reference,
            stage=ResolutionStage.NORMALIZE,
        )

    @classmethod
    def unsupported_scheme(cls, reference: str, scheme: str) -> MalformedURLError:
        """Return an error for a URL whose scheme is not HTTP(S)."""
        return cls(
            f"pipe URL scheme {scheme!r} is not supported, expected http or https",
            reference=reference,
            stage=ResolutionStage.VALIDATE,
        )

    @classmethod
    def missing_path(cls, reference: str) -> MalformedURLError:
        """Return an error for a raw content URL without a file path."""
        return cls(
            f"pipe URL {reference!r} does not point at a file",
            reference=reference,
            stage=ResolutionStage.VALIDATE,
        )


class UnsupportedSourceError(PipeSourceError):
    """Raised when the normalized URL is not on the trusted raw content host.

    This is a policy rejection and is never retried.
    """

    def __init__(self, *, reference: str, host: str) -> None:
        """Initialise with the rejected host."""
        self.host = host
        super().__init__(
            f"{UNSUPPORTED_SOURCE_MESSAGE} (got host {host!r})",
            reference=reference,
            stage=ResolutionStage.VALIDATE,
        )


class FetchError(PipeSourceError):
    """Raised when downloading a pipe fails.

    Attributes
    ----------
    status_code
        HTTP status code of the response, when one was received.

    """

    def __init__(
        self,
        message: str,
        *,
        reference: str,
        status_code: int | None = None,
    ) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message, reference=reference, stage=ResolutionStage.FETCH)

    @classmethod
    def transport(cls, reference: str, url: str, detail: str) -> FetchError:
        """Return an error for DNS, TLS, connection or timeout failures."""
        return cls(f"request to {url} failed: {detail}", reference=reference)

    @classmethod
    def http_error(
        cls, reference: str, url: str, status_code: int, body: str = ""
    ) -> FetchError:
        """Return an error for non-success HTTP responses."""
        message = f"GET {url} returned HTTP {status_code}"
        if body.strip():
            message = f"{message}: {_preview(body.strip())}"
        return cls(message, reference=reference, status_code=status_code)

    @classmethod
    def undecodable(cls, reference: str, url: str, encoding: str) -> FetchError:
        """Return an error for a response body that is not valid text."""
        return cls(
            f"response from {url} is not valid {encoding} text",
            reference=reference,
        )


class PersistenceError(PipeSourceError):
    """Raised when a downloaded pipe cannot be written to disk.

    Attributes
    ----------
    path
        File the failing operation was acting on, when one exists.

    """

    def __init__(
        self, message: str, *, reference: str, path: str | None = None
    ) -> None:
        """Initialise with a message and the affected file path."""
        self.path = path
        super().__init__(message, reference=reference, stage=ResolutionStage.PERSIST)

    @classmethod
    def create_failed(cls, reference: str, directory: str | None) -> PersistenceError:
        """Return an error for a temporary file that could not be created."""
        where = directory or "the system temporary directory"
        return cls(f"cannot create temporary file in {where}", reference=reference)

    @classmethod
    def write_failed(cls, reference: str, path: str) -> PersistenceError:
        """Return an error for a failed or short write."""
        return cls(f"cannot write pipe to {path}", reference=reference, path=path)

    @classmethod
    def rename_failed(cls, reference: str, path: str, target: str) -> PersistenceError:
        """Return an error for a failed rename to the final file name."""
        return cls(
            f"cannot rename {path} to {target}", reference=reference, path=path
        )


__all__ = [
    "UNSUPPORTED_SOURCE_MESSAGE",
    "FetchError",
    "MalformedURLError",
    "PathResolutionError",
    "PersistenceError",
    "PipeSourceError",
    "ResolutionStage",
    "UnsupportedSourceError",
]
