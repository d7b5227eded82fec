"""Exceptions raised by Git Bonsai."""


class BonsaiError(Exception):
    """Base class for Git Bonsai errors."""


class NoCommitsError(BonsaiError, ValueError):
    """Raised when a layout is requested for an empty commit map."""

    def __init__(self, message: str = "No commits found"):
        super().__init__(message)


class RepositoryReadError(BonsaiError, RuntimeError):
    """Raised when commits cannot be read from a git repository."""
