"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific outcome and is referenced by the
corresponding :class:`~apicompare.exceptions.ApiCompareError` subclass or
by the ``compare`` command. CI scripts can inspect the exit code to gate a
release on API changes without parsing stdout.

Example::

    $ apicompare compare v1/openapi.yaml v2/openapi.yaml --fail-on high
    $ echo $?
    3   # EXIT_CHANGES_DETECTED -- a high-severity change was found
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_CHANGES_DETECTED = 3
"""The comparison found changes at or above the ``--fail-on`` threshold."""

EXIT_FETCH_ERROR = 6
"""A specification file could not be read, downloaded, or discovered."""

EXIT_SPEC_PARSE_ERROR = 7
"""A specification document could not be parsed."""
