"""Typed values produced while resolving a pipe reference."""

from __future__ import annotations

import dataclasses
import enum


class SourceOrigin(enum.StrEnum):
    """Where a resolved pipe script came from."""

    LOCAL = "local"
    REMOTE = "remote"


@dataclasses.dataclass(frozen=True, slots=True)
class RemotePipe:
    """A pipe reference classified as a URL, awaiting download."""

    url: str


@dataclasses.dataclass(frozen=True, slots=True)
class ResolvedSource:
    """Absolute path of a local script ready for the execution engine.

    The file existed and was readable when this value was produced. For
    ``REMOTE`` sources the file is a fresh temporary file owned by the caller,
    who is responsible for removing it.

    Attributes
    ----------
    reference
        The pipe reference exactly as supplied.
    path
        Absolute filesystem path of the script.
    origin
        Whether the script was a local file or downloaded.
    url
        Normalized URL the script was downloaded from, for remote sources.

    """

    reference: str
    path: str
    origin: SourceOrigin
    url: str | None = None

    @property
    def is_temporary(self) -> bool:
        """Return whether the caller owns cleanup of ``path``."""
        return self.origin is SourceOrigin.REMOTE


__all__ = ["RemotePipe", "ResolvedSource", "SourceOrigin"]
