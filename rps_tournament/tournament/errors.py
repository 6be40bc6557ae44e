"""
Exceptions raised by the tournament engine.
"""


class TournamentError(Exception):
    """Base class for tournament failures that halt a run."""


class InputValidationError(TournamentError):
    """The roster or configuration cannot start a tournament."""


class TournamentAlreadyRunningError(TournamentError):
    """A tournament is already in progress on this runner."""
