"""Pipe source resolution: local paths and GitHub-hosted scripts."""

from __future__ import annotations

from .classifier import SourceClassifier, canonicalize_local_path, is_absolute_url
from .errors import (
    FetchError,
    MalformedURLError,
    PathResolutionError,
    PersistenceError,
    PipeSourceError,
    ResolutionStage,
    UnsupportedSourceError,
)
from .fetcher import FetcherConfig, RemoteFetcher, pipe_extension
from .github import GitHubURLParts, normalize_pipe_url, parse_github_url
from .models import RemotePipe, ResolvedSource, SourceOrigin
from .observability import ResolutionEventLogger, ResolutionEventType
from .resolver import PipeSourceResolver

__all__ = [
    "FetchError",
    "FetcherConfig",
    "GitHubURLParts",
    "MalformedURLError",
    "PathResolutionError",
    "PersistenceError",
    "PipeSourceError",
    "PipeSourceResolver",
    "RemoteFetcher",
    "RemotePipe",
    "ResolutionEventLogger",
    "ResolutionEventType",
    "ResolutionStage",
    "ResolvedSource",
    "SourceClassifier",
    "SourceOrigin",
    "UnsupportedSourceError",
    "canonicalize_local_path",
    "is_absolute_url",
    "normalize_pipe_url",
    "parse_github_url",
    "pipe_extension",
]
