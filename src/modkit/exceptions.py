"""Exception hierarchy for modkit.

All exceptions inherit from :class:`ModkitError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`modkit.exit_codes`.
The CLI entry point in :func:`modkit.app.main` catches ``ModkitError`` and
exits with the appropriate code.

Exceptions raised by hook handlers or by an extension's ``init`` are never
wrapped in this hierarchy; they reach the caller unchanged.

Subclass hierarchy::

    ModkitError (exit 1)
    +-- ConfigError          (exit 3)
    +-- ConfigurationError   (exit 3)
    +-- SchemaParseError     (exit 7)
    +-- ExtensionError       (exit 10)
"""

from modkit.exit_codes import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_EXTENSION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_SCHEMA_PARSE_ERROR,
)


class ModkitError(Exception):
    """Base exception for all modkit errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(ModkitError):
    """Raised for unreadable or invalid configuration files and settings."""

    exit_code = EXIT_CONFIGURATION_ERROR


class ConfigurationError(ModkitError):
    """Raised when an extension descriptor matches none of the recognised shapes.

    Attributes:
        extension_id: The id of the offending entry in the configuration map.
    """

    exit_code = EXIT_CONFIGURATION_ERROR

    def __init__(self, message: str, extension_id: str | None = None):
        super().__init__(message)
        self.extension_id = extension_id


class SchemaParseError(ModkitError):
    """Raised when a type definition fragment cannot be loaded or parsed.

    Attributes:
        fragment: Index (or source label) of the fragment that failed, if known.
    """

    exit_code = EXIT_SCHEMA_PARSE_ERROR

    def __init__(self, message: str, fragment: int | str | None = None):
        super().__init__(message)
        self.fragment = fragment


class ExtensionError(ModkitError):
    """Raised when an extension cannot be discovered or registered."""

    exit_code = EXIT_EXTENSION_ERROR
