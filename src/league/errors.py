"""
Error types raised by the tournament core and its storage.
"""


class TournamentError(Exception):
    """Base class for every error reported back to a caller."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InvalidInput(TournamentError):
    """Malformed or insufficient caller-supplied data."""


class ValidationError(InvalidInput):
    """A result payload broke one of the scoring rules."""


class NotFound(TournamentError):
    """Referenced tournament, bracket or match does not exist."""


class NotEligible(TournamentError):
    """Operation requested before the tournament is ready for it."""


class StorageFailure(TournamentError):
    """Reading or writing a tournament document failed."""
