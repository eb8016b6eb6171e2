"""Exception hierarchy for muni-mcp.

All exceptions inherit from :class:`MuniError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`munimcp.exit_codes`.
The transit client raises these to its caller and never retries or logs
them; the tool layer turns them into tool-level error results and the CLI
entry point in :func:`munimcp.app.main` turns them into exit codes.

Subclass hierarchy::

    MuniError (exit 1)
    +-- InvalidUsageError        (exit 2)
    |   +-- RouteIDRequiredError
    |   +-- StopIDRequiredError
    +-- UnexpectedStatusError    (exit 5)
    +-- TransportError           (exit 6)
    +-- DecodeError              (exit 7)
    +-- ConfigError              (exit 1)
"""

from munimcp.exit_codes import (
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_TRANSPORT_ERROR,
    EXIT_UPSTREAM_STATUS,
)


class MuniError(Exception):
    """Base exception for all muni-mcp errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(MuniError):
    """Raised for invalid arguments detected before any network activity."""

    exit_code = EXIT_INVALID_USAGE


class RouteIDRequiredError(InvalidUsageError):
    """Raised when a route ID is empty."""

    def __init__(self, message: str = "route ID is required"):
        super().__init__(message)


class StopIDRequiredError(InvalidUsageError):
    """Raised when a stop ID is empty."""

    def __init__(self, message: str = "stop ID is required"):
        super().__init__(message)


class UnexpectedStatusError(MuniError):
    """Raised when the MUNI API answers with anything but HTTP 200.

    Args:
        status_code: The HTTP status returned upstream.
    """

    exit_code = EXIT_UPSTREAM_STATUS

    def __init__(self, status_code: int):
        super().__init__(f"unexpected status code: {status_code}")
        self.status_code = status_code


class TransportError(MuniError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    exit_code = EXIT_TRANSPORT_ERROR


class DecodeError(MuniError):
    """Raised when a response body is not JSON of the expected shape."""

    exit_code = EXIT_DECODE_ERROR


class ConfigError(MuniError):
    """Raised for configuration problems (e.g. an empty base URL)."""

    exit_code = EXIT_GENERIC_FAILURE
