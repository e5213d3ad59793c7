"""Exception hierarchy for routeclient.

All exceptions inherit from :class:`RouteClientError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`routeclient.exit_codes`.
The top-level error handler in :func:`routeclient.app.main` catches
``RouteClientError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    RouteClientError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- ManifestError        (exit 7)
    +-- DuplicateRouteError  (exit 8)
    +-- MemberNameConflictError (exit 8)
    +-- OutputWriteError     (exit 9)
    +-- ConfigError          (exit 1)
"""

from routeclient.exit_codes import (
    EXIT_DUPLICATE_ROUTE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MANIFEST_ERROR,
    EXIT_OUTPUT_ERROR,
)


class RouteClientError(Exception):
    """Base exception for all routeclient errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`routeclient.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RouteClientError):
    """Raised for invalid CLI arguments or option values."""

    exit_code = EXIT_INVALID_USAGE


class ManifestError(RouteClientError):
    """Raised when a route manifest cannot be read, parsed, or validated."""

    exit_code = EXIT_MANIFEST_ERROR


class DuplicateRouteError(RouteClientError):
    """Raised when two declarations attach the same HTTP method to one node.

    Args:
        method: The HTTP method that was declared twice.
        first_key: Declaration key that attached the method first.
        second_key: Declaration key that attempted to attach it again.
    """

    exit_code = EXIT_DUPLICATE_ROUTE

    def __init__(self, method: str, first_key: str, second_key: str):
        super().__init__(
            f"{method} is declared by both '{first_key}' and '{second_key}'"
        )
        self.method = method
        self.first_key = first_key
        self.second_key = second_key


class MemberNameConflictError(RouteClientError):
    """Raised when two tree members would emit the same client member name.

    Sibling ``[id]`` and ``[[id]]`` segments both become ``id(...)``, and a
    static ``get`` segment collides with a ``GET`` endpoint when verb methods
    are lower-cased. The later member would silently replace the earlier one
    in the generated object.

    Args:
        name: The member name emitted twice.
        first_key: Declaration key behind the first member.
        second_key: Declaration key behind the second member.
    """

    exit_code = EXIT_DUPLICATE_ROUTE

    def __init__(self, name: str, first_key: str, second_key: str):
        super().__init__(
            f"Client member '{name}' is produced by both '{first_key}' and '{second_key}'"
        )
        self.name = name
        self.first_key = first_key
        self.second_key = second_key


class OutputWriteError(RouteClientError):
    """Raised when the generated client cannot be written to disk."""

    exit_code = EXIT_OUTPUT_ERROR


class ConfigError(RouteClientError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
