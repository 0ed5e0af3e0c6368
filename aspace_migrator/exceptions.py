"""
Exceptions - Error taxonomy for the migrator.

Fatal errors abort the whole run and propagate to the caller. Everything else
that goes wrong while processing a single resource is logged and the resource
is skipped, so those failures never surface as exceptions from the orchestrator.
"""

from typing import Optional


class MigratorError(Exception):
    """Base class for all migrator errors."""


class ConfigurationError(MigratorError, ValueError):
    """The event or environment does not describe a runnable migration.

    Attributes:
        problems: Every validation problem found, not just the first.
    """

    def __init__(self, problems):
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class FatalSyncError(MigratorError):
    """A condition the run cannot continue past."""

    def __init__(self, message: str, role: Optional[str] = None):
        self.role = role
        if role:
            message = f"[{role}] {message}"
        super().__init__(message)


class RepositoryNotFoundError(FatalSyncError):
    """The configured sub-repository does not exist on the instance."""


class ConverterUnavailableError(FatalSyncError):
    """The destination does not have the jsonmodel_from_format plugin installed."""
