"""
Exceptions raised by Token Scanner.

Only configuration and repository preparation problems are raised; per-file
and git failures are recorded or degraded where they happen.
"""


class TokenScannerError(Exception):
    """Base class for scanner errors."""


class ConfigurationError(TokenScannerError):
    """The configuration file or a preset name is invalid."""


class RepositoryNotFoundError(TokenScannerError):
    """A repository root does not exist or is not a directory."""


class RepositoryPreparationError(TokenScannerError):
    """Cloning or updating a remote repository failed."""
