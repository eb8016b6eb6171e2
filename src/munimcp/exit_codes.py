"""Numeric process exit codes for the ``muni-mcp`` console script.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~munimcp.exceptions.MuniError` subclass.  Shell
wrappers and supervisors can inspect the exit code of a one-shot query
(``muni-mcp routes``, ``muni-mcp predictions ...``) to tell a bad argument
from an upstream outage without parsing stderr.

Example::

    $ muni-mcp predictions N ""
    $ echo $?
    2   # EXIT_INVALID_USAGE -- stop ID is required
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""A required route or stop ID was missing, or arguments were invalid."""

EXIT_UPSTREAM_STATUS = 5
"""The MUNI API answered with a status other than HTTP 200."""

EXIT_TRANSPORT_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_ERROR = 7
"""The MUNI API response body could not be decoded."""
