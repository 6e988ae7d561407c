"""Unit tests for pipe source error factories."""

from __future__ import annotations

import errno

import pytest

from piperunner.sources import (
    FetchError,
    MalformedURLError,
    PathResolutionError,
    PersistenceError,
    PipeSourceError,
    ResolutionStage,
    UnsupportedSourceError,
)

_URL = "https://raw.githubusercontent.com/o/r/main/a.js"


@pytest.mark.parametrize(
    ("error", "stage"),
    [
        pytest.param(
            PathResolutionError.from_os_error(
                "a.js", FileNotFoundError(errno.ENOENT, "No such file", "a.js")
            ),
            ResolutionStage.CANONICALIZE,
            id="path",
        ),
        pytest.param(
            MalformedURLError.unparseable(_URL, "https://[bad"),
            ResolutionStage.NORMALIZE,
            id="unparseable",
        ),
        pytest.param(
            MalformedURLError.unsupported_scheme(_URL, "ftp"),
            ResolutionStage.VALIDATE,
            id="scheme",
        ),
        pytest.param(
            UnsupportedSourceError(reference=_URL, host="example.com"),
            ResolutionStage.VALIDATE,
            id="host",
        ),
        pytest.param(
            FetchError.http_error(_URL, _URL, 500),
            ResolutionStage.FETCH,
            id="fetch",
        ),
        pytest.param(
            PersistenceError.write_failed(_URL, "/tmp/pipe-x"),  # noqa: S108
            ResolutionStage.PERSIST,
            id="persist",
        ),
    ],
)
def test_errors_carry_stage_and_reference(
    error: PipeSourceError, stage: ResolutionStage
) -> None:
    """Each error kind records the stage it belongs to."""
    assert isinstance(error, PipeSourceError)
    assert error.stage is stage
    assert error.reference in {"a.js", _URL}


def test_path_resolution_error_uses_strerror() -> None:
    """The OS error description is included in the message."""
    exc = PermissionError(errno.EACCES, "Permission denied", "/root/pipe.js")

    error = PathResolutionError.from_os_error("/root/pipe.js", exc)

    assert "Permission denied" in str(error)
    assert "'/root/pipe.js'" in str(error)


def test_unsupported_source_error_names_policy_and_host() -> None:
    """The message states the trusted-host policy and the rejected host."""
    error = UnsupportedSourceError(reference="https://a.test/x", host="a.test")

    assert str(error).startswith(
        "only public GitHub URLs or raw.githubusercontent.com URLs are supported"
    )
    assert error.host == "a.test"


class TestFetchError:
    """Tests for FetchError factories."""

    def test_http_error_without_body(self) -> None:
        """Status is recorded and named in the message."""
        error = FetchError.http_error(_URL, _URL, 503)
        assert error.status_code == 503
        assert str(error) == f"GET {_URL} returned HTTP 503"

    def test_http_error_truncates_long_bodies(self) -> None:
        """Large error pages are cut to a short preview."""
        error = FetchError.http_error(_URL, _URL, 500, "x" * 5000)
        assert len(str(error)) < 300
        assert str(error).endswith("...")

    def test_transport_error_has_no_status(self) -> None:
        """Transport failures never carry an HTTP status."""
        error = FetchError.transport(_URL, _URL, "name resolution failed")
        assert error.status_code is None
        assert "name resolution failed" in str(error)


def test_persistence_create_failed_defaults_location() -> None:
    """Without a configured directory the system temp dir is named."""
    error = PersistenceError.create_failed(_URL, None)
    assert "system temporary directory" in str(error)
    assert error.path is None
