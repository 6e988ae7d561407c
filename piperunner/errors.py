"""Runner configuration and execution errors."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class PipeRunnerConfigError(ValueError):
    """Raised when runner configuration is invalid."""

    @classmethod
    def invalid_parameter(
        cls, env_var: str, value: str, constraint: str
    ) -> PipeRunnerConfigError:
        """Return an error for an environment variable with an invalid value."""
        return cls(f"Invalid {env_var} {value!r}. {constraint}")

    @classmethod
    def invalid_timeout(cls, value: str) -> PipeRunnerConfigError:
        """Return an error for a non-positive or non-numeric timeout."""
        return cls.invalid_parameter(
            "PIPERUNNER_FETCH_TIMEOUT_S", value, "Must be a positive number"
        )

    @classmethod
    def invalid_extension(cls, value: str) -> PipeRunnerConfigError:
        """Return an error for an unusable default script extension."""
        return cls.invalid_parameter(
            "PIPERUNNER_DEFAULT_EXTENSION",
            value,
            "Must be a non-empty file extension without path separators",
        )

    @classmethod
    def empty_engine(cls) -> PipeRunnerConfigError:
        """Return an error for an engine command with no program."""
        return cls("PIPERUNNER_ENGINE must name a program")


class ExecutionError(RuntimeError):
    """Raised when the script engine fails to run a pipe.

    Attributes
    ----------
    returncode
        Exit status of the engine process, when it started.

    """

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        """Initialise with a message and optional exit status."""
        self.returncode = returncode
        super().__init__(message)

    @classmethod
    def engine_not_found(cls, command: cabc.Sequence[str]) -> ExecutionError:
        """Return an error for an engine program that cannot be started."""
        return cls(f"script engine {command[0]!r} could not be started")

    @classmethod
    def failed(cls, path: str, returncode: int) -> ExecutionError:
        """Return an error for a script that exited unsuccessfully."""
        return cls(
            f"pipe {path} exited with status {returncode}", returncode=returncode
        )
