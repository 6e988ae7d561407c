"""Download remote pipes into local temporary files.

A remote pipe goes through four stages, each attempted once:

1. normalize GitHub web UI URLs to raw content URLs;
2. reject any host other than ``raw.githubusercontent.com``;
3. GET the raw URL and check the body decodes as text;
4. write the body to a new temporary file and rename it so that it carries
   the extension of the URL the user supplied.

If a stage fails after the temporary file was created, the file is left in
place under its temporary name. It is never renamed to the final name.
"""

from __future__ import annotations

import asyncio
import dataclasses
import os
import tempfile
import typing as typ
from pathlib import Path, PurePosixPath

import httpx

from .errors import (
    FetchError,
    MalformedURLError,
    PersistenceError,
    UnsupportedSourceError,
)
from .github import RAW_CONTENT_HOST, normalize_pipe_url
from .models import ResolvedSource, SourceOrigin
from .observability import ResolutionEventLogger

DEFAULT_SCRIPT_EXTENSION = "js"

_DEFAULT_TIMEOUT_S = 30.0
_DEFAULT_USER_AGENT = "piperunner/0.1"
_TEMP_PREFIX = "pipe-"
_SUPPORTED_SCHEMES = frozenset({"http", "https"})


@dataclasses.dataclass(frozen=True, slots=True)
class FetcherConfig:
    """Configuration for :class:`RemoteFetcher`.

    Attributes
    ----------
    timeout_s
        Timeout applied to the download request.
    user_agent
        ``User-Agent`` header sent with the request.
    default_extension
        Extension, without a leading dot, for URLs whose path has none.
    temp_dir
        Directory for downloaded pipes. ``None`` uses the system default.

    """

    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = _DEFAULT_USER_AGENT
    default_extension: str = DEFAULT_SCRIPT_EXTENSION
    temp_dir: Path | None = None


def pipe_extension(url: str, *, default: str = DEFAULT_SCRIPT_EXTENSION) -> str:
    """Return the file extension of the path in ``url`` without its dot.

    Query strings and fragments are ignored. ``default`` is returned when the
    last path segment has no extension or one that is not alphanumeric.

    >>> pipe_extension("https://github.com/o/r/blob/main/pipe.py?plain=1")
    'py'
    >>> pipe_extension("https://raw.githubusercontent.com/o/r/main/pipe")
    'js'

    """
    try:
        path = httpx.URL(url).path
    except httpx.InvalidURL:
        path = ""
    extension = PurePosixPath(path).suffix.removeprefix(".")
    return extension if extension.isalnum() else default


class RemoteFetcher:
    """Fetch a pipe from the raw content host into a local file."""

    def __init__(
        self,
        config: FetcherConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        events: ResolutionEventLogger | None = None,
    ) -> None:
        """Initialise the fetcher, creating an HTTP client when none is given."""
        self._config = config or FetcherConfig()
        self._events = events or ResolutionEventLogger()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=self._config.timeout_s,
            follow_redirects=True,
            headers={"User-Agent": self._config.user_agent},
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, url: str) -> ResolvedSource:
        """Download ``url`` and return the local file holding its content.

        Raises
        ------
        MalformedURLError
            If the normalized URL cannot be parsed, is not HTTP(S), or has no
            file path.
        UnsupportedSourceError
            If the normalized URL is not on the raw content host. No request
            is made in this case.
        FetchError
            On transport failure, a non-success status, or undecodable text.
        PersistenceError
            If the temporary file cannot be created, written, or renamed.

        """
        raw_url = normalize_pipe_url(url)
        self._events.log_url_normalized(url=url, normalized=raw_url)
        self._validate(url, raw_url)

        body = await self._download(url, raw_url)
        path, extension = await asyncio.to_thread(self._persist, url, body)
        self._events.log_persisted(path=path, extension=extension)
        return ResolvedSource(
            reference=url,
            path=path,
            origin=SourceOrigin.REMOTE,
            url=raw_url,
        )

    def _reject_host(self, reference: str, url: str, host: str) -> typ.NoReturn:
        self._events.log_source_rejected(url=url, host=host)
        raise UnsupportedSourceError(reference=reference, host=host)

    def _validate(self, reference: str, url: str) -> None:
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise MalformedURLError.unparseable(reference, url) from exc

        if parsed.host != RAW_CONTENT_HOST:
            self._reject_host(reference, url, parsed.host)
        if parsed.scheme not in _SUPPORTED_SCHEMES:
            raise MalformedURLError.unsupported_scheme(reference, parsed.scheme)
        if not parsed.path.strip("/") or parsed.path.endswith("/"):
            raise MalformedURLError.missing_path(reference)

    async def _download(self, reference: str, url: str) -> bytes:
        self._events.log_fetch_started(url=url)
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as exc:
            raise FetchError.transport(reference, url, "request timed out") from exc
        except httpx.RequestError as exc:
            raise FetchError.transport(reference, url, str(exc) or repr(exc)) from exc

        # Redirects are followed, but must stay on the raw content host.
        if response.url.host != RAW_CONTENT_HOST:
            self._reject_host(reference, str(response.url), response.url.host)
        if not response.is_success:
            raise FetchError.http_error(
                reference, url, response.status_code, response.text
            )

        body = response.content
        encoding = response.charset_encoding or "utf-8"
        try:
            body.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise FetchError.undecodable(reference, url, encoding) from exc

        self._events.log_fetch_completed(
            url=url, status_code=response.status_code, size=len(body)
        )
        return body

    def _persist(self, reference: str, body: bytes) -> tuple[str, str]:
        extension = pipe_extension(
            reference, default=self._config.default_extension
        )
        temp_dir = self._config.temp_dir
        try:
            handle = tempfile.NamedTemporaryFile(  # noqa: SIM115 - renamed below
                prefix=_TEMP_PREFIX,
                dir=temp_dir,
                delete=False,
            )
        except OSError as exc:
            raise PersistenceError.create_failed(
                reference, str(temp_dir) if temp_dir else None
            ) from exc

        temp_path = Path(handle.name)
        try:
            with handle:
                written = handle.write(body)
                handle.flush()
                os.fsync(handle.fileno())
        except OSError as exc:
            raise PersistenceError.write_failed(reference, str(temp_path)) from exc
        if written != len(body):
            raise PersistenceError.write_failed(reference, str(temp_path))

        final_path = temp_path.with_name(f"{temp_path.name}.{extension}")
        try:
            temp_path.replace(final_path)
        except OSError as exc:
            raise PersistenceError.rename_failed(
                reference, str(temp_path), str(final_path)
            ) from exc
        return str(final_path.resolve()), extension


__all__ = [
    "DEFAULT_SCRIPT_EXTENSION",
    "FetcherConfig",
    "RemoteFetcher",
    "pipe_extension",
]
