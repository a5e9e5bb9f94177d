"""Exception hierarchy for apicompare.

All exceptions inherit from :class:`ApiCompareError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apicompare.exit_codes`.
The top-level error handler in :func:`apicompare.app.main` catches
``ApiCompareError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The diff engine itself never lets these escape:
:func:`apicompare.compare.compare_files` converts parse failures into a
``success=False`` result.

Subclass hierarchy::

    ApiCompareError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- FetchError                 (exit 6)
    +-- SpecParseError             (exit 7)
    |   +-- UnsupportedFormatError (exit 7)
    +-- ConfigError                (exit 1)
"""

from apicompare.exit_codes import (
    EXIT_FETCH_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)


class ApiCompareError(Exception):
    """Base exception for all apicompare errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`apicompare.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApiCompareError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class FetchError(ApiCompareError):
    """Raised when a spec file cannot be read, downloaded, or discovered."""

    exit_code = EXIT_FETCH_ERROR


class SpecParseError(ApiCompareError):
    """Raised when a spec document matched a format but its parser rejected it."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class UnsupportedFormatError(SpecParseError):
    """Raised when raw text is neither OpenAPI/Swagger YAML nor a JSON object."""


class ConfigError(ApiCompareError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
