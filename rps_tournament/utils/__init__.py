"""
Utilities module for the rock-paper-scissors tournament.
"""
from rps_tournament.utils.constants import (
    ROCK, PAPER, SCISSORS, VALID_MOVES, MOVE_NAMES, MOVE_MAPPING, BEATS,
    TIE, FIRST_WINS, SECOND_WINS,
    WIN, LOSS, MATCH_TIE,
    DEFAULT_SPEED_MULTIPLIER, ROUND_DELAY, MATCH_DELAY
)

__all__ = [
    'ROCK', 'PAPER', 'SCISSORS', 'VALID_MOVES', 'MOVE_NAMES', 'MOVE_MAPPING', 'BEATS',
    'TIE', 'FIRST_WINS', 'SECOND_WINS',
    'WIN', 'LOSS', 'MATCH_TIE',
    'DEFAULT_SPEED_MULTIPLIER', 'ROUND_DELAY', 'MATCH_DELAY'
]
