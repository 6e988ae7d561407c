"""GitHub web URL to raw content URL rewriting.

GitHub renders files at ``https://github.com/{owner}/{repo}/blob/{branch}/...``
as HTML pages. Pipes must be fetched from the raw content host instead, so
web UI URLs are rewritten to
``https://raw.githubusercontent.com/{owner}/{repo}/{branch}/...``.

The rewrite is a fixed-shape string transformation. URLs that do not match the
shape are returned unchanged and left for host validation to reject.

Examples
--------
>>> normalize_pipe_url("https://github.com/octo/reef/blob/main/pipes/a.js")
'https://raw.githubusercontent.com/octo/reef/main/pipes/a.js'
>>> normalize_pipe_url("https://example.com/a.js")
'https://example.com/a.js'

"""

from __future__ import annotations

import dataclasses

import httpx

GITHUB_HOST = "github.com"
RAW_CONTENT_HOST = "raw.githubusercontent.com"

# owner, repo, view marker ("blob"/"tree"), branch
_MIN_WEB_PATH_SEGMENTS = 4


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubURLParts:
    """Components of a GitHub web UI file URL."""

    owner: str
    repo: str
    branch: str
    path_segments: tuple[str, ...]

    def raw_url(self) -> str:
        """Return the raw content URL for these parts."""
        path = "/".join(self.path_segments)
        return (
            f"https://{RAW_CONTENT_HOST}/"
            f"{self.owner}/{self.repo}/{self.branch}/{path}"
        )


def parse_github_url(url: str) -> GitHubURLParts | None:
    """Split a ``github.com`` web UI URL into its parts.

    Returns ``None`` when ``url`` does not parse, is not hosted on exactly
    ``github.com``, or has too few path segments to name a branch.
    """
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return None
    if parsed.host != GITHUB_HOST:
        return None

    # Segments stay percent-encoded so "%23" or "%3F" in a name survive.
    raw_path = parsed.raw_path.decode("ascii").partition("?")[0]
    segments = raw_path.removeprefix("/").split("/")
    if len(segments) < _MIN_WEB_PATH_SEGMENTS:
        return None

    owner, repo, _marker, branch, *rest = segments
    if not owner or not repo or not branch:
        return None
    return GitHubURLParts(
        owner=owner,
        repo=repo,
        branch=branch,
        path_segments=tuple(rest),
    )


def normalize_pipe_url(url: str) -> str:
    """Rewrite GitHub web UI URLs to raw content URLs.

    Any other URL, including one already on the raw content host, is returned
    unchanged, so the function is idempotent. It never raises.
    """
    parts = parse_github_url(url)
    if parts is None:
        return url
    return parts.raw_url()


__all__ = [
    "GITHUB_HOST",
    "RAW_CONTENT_HOST",
    "GitHubURLParts",
    "normalize_pipe_url",
    "parse_github_url",
]
