"""Command-line entrypoint: resolve one pipe and run it.

Run with ``python -m piperunner.cli --pipe <path-or-url>``. Only the first
``--pipe`` is used. Remote pipes must be public GitHub or
``raw.githubusercontent.com`` URLs.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import typing as typ

import msgspec

from piperunner.config import PipeRunnerConfig
from piperunner.engine import ScriptEngine, SubprocessScriptEngine
from piperunner.errors import ExecutionError, PipeRunnerConfigError
from piperunner.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_exception,
    log_info,
    log_warning,
)
from piperunner.sources import PipeSourceError, PipeSourceResolver

if typ.TYPE_CHECKING:
    from piperunner.sources import ResolvedSource

logger = get_logger(__name__)

NO_PIPE_MESSAGE = "No pipe specified. Use --pipe to specify the pipe."


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="piperunner", description=__doc__)
    parser.add_argument(
        "--pipe",
        action="append",
        default=[],
        metavar="PATH_OR_URL",
        help="Local script path or GitHub URL of the pipe to run",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (overrides PIPERUNNER_LOG_LEVEL)",
    )
    parser.add_argument(
        "--resolve-only",
        action="store_true",
        help="Print the resolved script path instead of running it",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="With --resolve-only, print the resolved source as JSON",
    )
    return parser


async def _resolve(reference: str, config: PipeRunnerConfig) -> ResolvedSource:
    resolver = PipeSourceResolver(fetcher_config=config.fetcher_config())
    try:
        return await resolver.resolve(reference)
    finally:
        await resolver.aclose()


def _print_resolved(source: ResolvedSource, *, as_json: bool) -> None:
    if as_json:
        print(msgspec.json.encode(source).decode("utf-8"))
    else:
        print(source.path)


def main(argv: list[str] | None = None, *, engine: ScriptEngine | None = None) -> int:
    """Resolve the first ``--pipe`` reference and execute it.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.
    engine : ScriptEngine | None, optional
        Engine used to run the script. Defaults to a
        :class:`SubprocessScriptEngine` built from ``PIPERUNNER_ENGINE``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 on configuration, resolution or execution
        failure.

    """
    args = _build_parser().parse_args(argv)

    try:
        config = PipeRunnerConfig.from_env()
    except PipeRunnerConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    raw_level = args.log_level or config.log_level
    normalized_level, invalid_level = configure_logging(raw_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid log level %r, falling back to %s",
            raw_level,
            normalized_level,
        )

    pipes: list[str] = [pipe for pipe in args.pipe if pipe]
    if not pipes:
        log_error(logger, NO_PIPE_MESSAGE)
        print(NO_PIPE_MESSAGE, file=sys.stderr)
        return 1
    if len(pipes) > 1:
        log_warning(
            logger,
            "Only 1 pipe is supported right now; ignoring %d additional pipe(s)",
            len(pipes) - 1,
        )

    reference = pipes[0]
    log_info(logger, "Attempting to process pipe input: %s", reference)
    try:
        source = asyncio.run(_resolve(reference, config))
    except PipeSourceError as exc:
        print(f"Failed to resolve pipe {reference!r}: {exc}", file=sys.stderr)
        return 1

    if args.resolve_only:
        _print_resolved(source, as_json=args.json)
        return 0

    script_engine = engine or SubprocessScriptEngine(config.engine_command)
    log_info(logger, "Running pipe %s", source.path)
    try:
        script_engine.execute(source.path)
    except ExecutionError as exc:
        log_exception(logger, f"Error during pipe execution: {exc}", exc)
        print(f"Pipe execution failed: {exc}", file=sys.stderr)
        return 1

    log_info(logger, "Pipe execution completed successfully")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
