"""
Moves and round resolution.

A move script holds normalized tokens ('r', 'p', 's'). Tokens that are not
one of the three valid moves are kept as-is so that the round they appear
in resolves to a tie instead of silently shifting the rest of the script.
"""
from enum import Enum, IntEnum
from typing import Optional, Union

from rps_tournament.utils.constants import (
    ROCK, PAPER, SCISSORS, MOVE_MAPPING, MOVE_NAMES, BEATS,
    TIE, FIRST_WINS, SECOND_WINS
)


class Move(Enum):
    """The three valid moves."""
    ROCK = ROCK
    PAPER = PAPER
    SCISSORS = SCISSORS

    @classmethod
    def from_token(cls, token: Union[str, 'Move', None]) -> Optional['Move']:
        """Return the Move for a token, or None if the token is not a valid move."""
        if isinstance(token, Move):
            return token
        if not token:
            return None
        try:
            return cls(normalize_move(token))
        except ValueError:
            return None

    def beats(self, other: 'Move') -> bool:
        return BEATS[self.value] == other.value

    @property
    def display_name(self) -> str:
        return MOVE_NAMES[self.value]


class RoundResult(IntEnum):
    """Outcome of a single round, from the first move's point of view."""
    TIE = TIE
    FIRST_WINS = FIRST_WINS
    SECOND_WINS = SECOND_WINS


def normalize_move(token: str) -> str:
    """
    Normalize a submitted move token.

    Full words ('rock', 'paper', 'scissors') become single-letter codes.
    Anything else is trimmed and lower-cased but otherwise passed through.

    Args:
        token: Raw move text from the data source

    Returns:
        Normalized token (may be '' for blank input)
    """
    trimmed = token.strip().lower()
    return MOVE_MAPPING.get(trimmed, trimmed)


def resolve_round(move_a: Union[str, Move, None], move_b: Union[str, Move, None]) -> RoundResult:
    """
    Decide a single round.

    Invalid moves on either side force a tie.

    Args:
        move_a: First player's move (token or Move)
        move_b: Second player's move (token or Move)

    Returns:
        RoundResult.FIRST_WINS, RoundResult.SECOND_WINS or RoundResult.TIE
    """
    first = Move.from_token(move_a)
    second = Move.from_token(move_b)
    if first is None or second is None:
        return RoundResult.TIE
    if first is second:
        return RoundResult.TIE
    return RoundResult.FIRST_WINS if first.beats(second) else RoundResult.SECOND_WINS
