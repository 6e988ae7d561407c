"""Resolve a pipe reference to a local script path.

Usage
-----
>>> import asyncio
>>> resolver = PipeSourceResolver()
>>> source = asyncio.run(resolver.resolve("./pipes/hello.js"))
>>> source.path
'/home/me/pipes/hello.js'

"""

from __future__ import annotations

from .classifier import SourceClassifier
from .errors import PipeSourceError
from .fetcher import FetcherConfig, RemoteFetcher
from .models import RemotePipe, ResolvedSource
from .observability import ResolutionEventLogger


class PipeSourceResolver:
    """Classify a pipe reference and fetch it when it is a URL.

    One reference is resolved per call and at most one HTTP request is made.
    Errors from any stage are logged once and re-raised unchanged.
    """

    def __init__(
        self,
        *,
        fetcher: RemoteFetcher | None = None,
        fetcher_config: FetcherConfig | None = None,
        events: ResolutionEventLogger | None = None,
    ) -> None:
        """Initialise the resolver, building a fetcher when none is given."""
        self._events = events or ResolutionEventLogger()
        self._classifier = SourceClassifier(events=self._events)
        self._owns_fetcher = fetcher is None
        self._fetcher = fetcher or RemoteFetcher(fetcher_config, events=self._events)

    async def aclose(self) -> None:
        """Close the fetcher if this resolver created it."""
        if self._owns_fetcher:
            await self._fetcher.aclose()

    async def resolve(self, reference: str) -> ResolvedSource:
        """Return the local script for ``reference``.

        Raises
        ------
        PipeSourceError
            The stage-specific subclass for whichever stage failed.

        """
        try:
            classified = self._classifier.classify(reference)
            if isinstance(classified, RemotePipe):
                source = await self._fetcher.fetch(classified.url)
            else:
                source = classified
        except PipeSourceError as exc:
            self._events.log_resolution_failed(exc)
            raise

        self._events.log_resolution_completed(
            reference=reference, path=source.path, origin=source.origin
        )
        return source


__all__ = ["PipeSourceResolver"]
