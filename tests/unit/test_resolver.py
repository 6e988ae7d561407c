"""Unit tests for PipeSourceResolver."""

from __future__ import annotations

import asyncio
import typing as typ
from pathlib import Path

import httpx
import pytest

from piperunner.sources import (
    FetcherConfig,
    PathResolutionError,
    PipeSourceResolver,
    RemoteFetcher,
    ResolutionEventLogger,
    ResolutionEventType,
    ResolvedSource,
    SourceOrigin,
    UnsupportedSourceError,
)
from tests.helpers.fake_logger import FakeLogger

_PIPE_BODY = b"print('hello from a pipe')\n"


class ResolverHarness(typ.NamedTuple):
    """A resolver wired to a mock transport and a logger double."""

    resolver: PipeSourceResolver
    requests: list[httpx.Request]
    logger: FakeLogger
    temp_dir: Path


@pytest.fixture
def harness(tmp_path: Path) -> ResolverHarness:
    """Return a resolver whose downloads are served from memory."""
    requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, content=_PIPE_BODY)

    temp_dir = tmp_path / "downloads"
    temp_dir.mkdir()
    logger = FakeLogger()
    events = ResolutionEventLogger(logger)
    fetcher = RemoteFetcher(
        FetcherConfig(temp_dir=temp_dir),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(_handler)),
        events=events,
    )
    resolver = PipeSourceResolver(fetcher=fetcher, events=events)
    return ResolverHarness(resolver, requests, logger, temp_dir)


def _resolve(harness: ResolverHarness, reference: str) -> ResolvedSource:
    return asyncio.run(harness.resolver.resolve(reference))


def test_local_path_resolves_without_network(
    harness: ResolverHarness, tmp_path: Path
) -> None:
    """Local scripts are canonicalized and never fetched."""
    pipe = tmp_path / "pipe.js"
    pipe.write_text("console.log(1)", encoding="utf-8")

    source = _resolve(harness, str(pipe))

    assert source.path == str(pipe.resolve())
    assert source.origin is SourceOrigin.LOCAL
    assert harness.requests == []
    assert harness.logger.events()[-1] == ResolutionEventType.RESOLUTION_COMPLETED


def test_github_url_resolves_to_downloaded_file(harness: ResolverHarness) -> None:
    """GitHub URLs are fetched and persisted with their extension."""
    source = _resolve(harness, "https://github.com/octo/reef/blob/main/pipe.py")

    path = Path(source.path)
    assert path.suffix == ".py"
    assert path.read_bytes() == _PIPE_BODY
    assert source.reference == "https://github.com/octo/reef/blob/main/pipe.py"
    assert len(harness.requests) == 1


def test_missing_local_path_leaves_no_trace(harness: ResolverHarness) -> None:
    """Missing paths fail with no temp file and no network traffic."""
    with pytest.raises(PathResolutionError):
        _resolve(harness, "./definitely/not/here.js")

    assert harness.requests == []
    assert list(harness.temp_dir.iterdir()) == []


def test_failures_are_logged_once_at_error(harness: ResolverHarness) -> None:
    """The resolver logs the terminal failure with its stage."""
    with pytest.raises(UnsupportedSourceError):
        _resolve(harness, "https://example.com/pipe.js")

    errors = harness.logger.messages("ERROR")
    assert len(errors) == 1
    assert ResolutionEventType.RESOLUTION_FAILED in errors[0]
    assert "stage=validate" in errors[0]
    assert "error_type=UnsupportedSourceError" in errors[0]
    assert isinstance(harness.logger.calls[-1].exc_info, UnsupportedSourceError)


def test_resolver_closes_only_its_own_fetcher(harness: ResolverHarness) -> None:
    """An injected fetcher stays usable after the resolver is closed."""
    asyncio.run(harness.resolver.aclose())

    source = _resolve(
        harness, "https://raw.githubusercontent.com/octo/reef/main/pipe.js"
    )

    assert Path(source.path).exists()
