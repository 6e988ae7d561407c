"""Script engines that execute a resolved pipe.

The runner only forwards the resolved path; how the script runs is up to the
engine. :class:`SubprocessScriptEngine` runs an external program such as
``deno run --allow-all <path>`` and maps its exit status to
:class:`~piperunner.errors.ExecutionError`.
"""

from __future__ import annotations

import subprocess
import typing as typ

from piperunner.errors import ExecutionError

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@typ.runtime_checkable
class ScriptEngine(typ.Protocol):
    """Protocol for running a pipe script from a local path."""

    def execute(self, path: str) -> None:
        """Run the script at ``path``, raising ExecutionError on failure."""
        ...


class SubprocessScriptEngine:
    """Run pipes with an external interpreter, inheriting stdio."""

    def __init__(self, command: cabc.Sequence[str]) -> None:
        """Initialise with the program and leading arguments."""
        if not command:
            msg = "engine command must name a program"
            raise ValueError(msg)
        self._command = tuple(command)

    @property
    def command(self) -> tuple[str, ...]:
        """Return the engine command without the script path."""
        return self._command

    def execute(self, path: str) -> None:
        """Run ``path`` and wait for the engine to exit."""
        try:
            result = subprocess.run(  # noqa: S603 - argv built from config
                [*self._command, path],
                check=False,
            )
        except FileNotFoundError as exc:
            raise ExecutionError.engine_not_found(self._command) from exc
        if result.returncode != 0:
            raise ExecutionError.failed(path, result.returncode)


__all__ = ["ScriptEngine", "SubprocessScriptEngine"]
