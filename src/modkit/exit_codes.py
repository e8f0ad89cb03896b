"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~modkit.exceptions.ModkitError` subclass. Process
supervisors can inspect the exit code to tell a bad configuration apart from
a broken schema without parsing stderr.
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments (reported by Click)."""

EXIT_CONFIGURATION_ERROR = 3
"""An extension descriptor or configuration file is invalid."""

EXIT_SCHEMA_PARSE_ERROR = 7
"""A type definition fragment could not be parsed."""

EXIT_EXTENSION_ERROR = 10
"""An extension failed to load or register."""
