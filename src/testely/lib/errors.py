# src/testely/lib/errors.py
"""Testely error hierarchy.

All project exceptions inherit from TestelyError, so the command layer can
report them with a single ``except TestelyError``. The message is what the
user gets to see.
"""


class TestelyError(Exception):
    """Base class for all testely errors."""
    __test__ = False  # not a pytest test class


class UnsupportedScheme(TestelyError):
    """The document is unsaved or not backed by a local file."""


class NoProjectFound(TestelyError):
    """No registered project claims the file."""


class NoStrategy(TestelyError):
    """The configured strategy has no entry in the resolution table."""


class SourceNotFound(TestelyError):
    """Every strategy was tried and no source file exists."""


class NotADirectory(TestelyError):
    """A directory was expected but something else occupies the path."""


class Unsupported(TestelyError):
    """The operation is not implemented for this project kind or strategy."""


class ConfigurationNotSet(TestelyError):
    """A required setting is missing and the user dismissed every prompt."""


class ConfigurationError(TestelyError):
    """The settings file cannot be read or written."""
