"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~routeclient.exceptions.RouteClientError` subclass.
Build scripts that shell out to ``routeclient generate`` can inspect the exit
code to tell a bad manifest from a route conflict without parsing stderr.

Example::

    $ routeclient generate routes.json -o src/lib/api.ts
    $ echo $?
    8   # EXIT_DUPLICATE_ROUTE -- two declarations attach the same method
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or option values."""

EXIT_MANIFEST_ERROR = 7
"""The route manifest could not be loaded, parsed, or validated."""

EXIT_DUPLICATE_ROUTE = 8
"""Two route declarations attach the same HTTP method to one tree node."""

EXIT_OUTPUT_ERROR = 9
"""The generated client could not be written to its destination."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C."""
