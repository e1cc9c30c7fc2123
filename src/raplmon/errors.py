"""Fatal error taxonomy for the monitor.

Every error carries the process exit code the CLI terminates with.
A missing resource during discovery filtering is not an error; these
classes only cover conditions that end the run.
"""

import errno
import os

NO_SENSORS_EXIT_CODE = 256 - errno.ENODEV


class RaplmonError(Exception):
    """Base class for fatal monitor errors."""

    exit_code: int = errno.EIO

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class DiscoveryUnavailableError(RaplmonError):
    """Raised when the sensor source root cannot be enumerated."""

    def __init__(self, root: str, cause: OSError) -> None:
        self.root = root
        self.cause = cause
        super().__init__(
            f"failed to open powercap directory {root}: {_strerror(cause)}",
            exit_code=cause.errno or errno.EIO,
        )


class NoSensorsFoundError(RaplmonError):
    """Raised when enumeration succeeds but no sensor qualifies."""

    # Shell status of exit(-ENODEV), outside the errno codes I/O failures use.
    exit_code = NO_SENSORS_EXIT_CODE

    def __init__(self, root: str, prefix: str) -> None:
        self.root = root
        self.prefix = prefix
        super().__init__(f"no available sensor found under {root} (prefix {prefix!r})")


class ResourceReadError(RaplmonError):
    """Raised when a label or counter resource cannot be read or parsed.

    Attributes:
        path: The file that failed.
        operation: What was being attempted ("open", "read", "parse", ...).
    """

    def __init__(self, path: str, operation: str, reason: str, exit_code: int) -> None:
        self.path = path
        self.operation = operation
        self.reason = reason
        super().__init__(f"failed to {operation} {path}: {reason}", exit_code=exit_code)

    @classmethod
    def from_os_error(cls, path: str, operation: str, cause: OSError) -> "ResourceReadError":
        """Build from an OSError, keeping its errno as the exit code."""
        return cls(path, operation, _strerror(cause), cause.errno or errno.EIO)


class ConfigurationError(RaplmonError):
    """Raised when settings from the environment or .env files fail validation."""

    exit_code = errno.EINVAL

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("invalid configuration: " + "; ".join(problems))


def _strerror(cause: OSError) -> str:
    if cause.strerror:
        return cause.strerror
    if cause.errno:
        return os.strerror(cause.errno)
    return str(cause)
