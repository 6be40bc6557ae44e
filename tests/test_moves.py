"""
Unit tests for moves and round resolution.
"""

import pytest
from itertools import product

from rps_tournament.game.moves import Move, RoundResult, normalize_move, resolve_round


class TestNormalizeMove:
    """Tests for move token normalization."""

    @pytest.mark.parametrize("token,expected", [
        ("rock", "r"),
        ("Paper", "p"),
        ("  SCISSORS ", "s"),
        ("r", "r"),
        ("P", "p"),
    ])
    def test_known_tokens(self, token, expected):
        """Full words and letter codes map to letter codes."""
        assert normalize_move(token) == expected

    def test_unknown_token_passes_through(self):
        """Unrecognized tokens are kept, trimmed and lower-cased."""
        assert normalize_move(" Lizard ") == "lizard"

    def test_blank_token(self):
        """Blank input normalizes to an empty string."""
        assert normalize_move("   ") == ""


class TestMove:
    """Tests for the Move enum."""

    def test_from_token(self):
        assert Move.from_token("r") is Move.ROCK
        assert Move.from_token("rock") is Move.ROCK
        assert Move.from_token(Move.PAPER) is Move.PAPER

    def test_from_invalid_token(self):
        assert Move.from_token("x") is None
        assert Move.from_token("") is None
        assert Move.from_token(None) is None

    def test_display_name(self):
        assert Move.SCISSORS.display_name == "Scissors"


class TestResolveRound:
    """Tests for the round resolver."""

    def test_beats_cycle(self):
        """Rock beats scissors, scissors beats paper, paper beats rock."""
        assert resolve_round("r", "s") == RoundResult.FIRST_WINS
        assert resolve_round("s", "p") == RoundResult.FIRST_WINS
        assert resolve_round("p", "r") == RoundResult.FIRST_WINS

    def test_identical_moves_tie(self):
        for move in Move:
            assert resolve_round(move, move) == RoundResult.TIE

    def test_swap_flips_result(self):
        """Swapping the moves swaps the winner."""
        for a, b in product(Move, Move):
            forward = resolve_round(a, b)
            backward = resolve_round(b, a)
            if forward == RoundResult.FIRST_WINS:
                assert backward == RoundResult.SECOND_WINS
            elif forward == RoundResult.SECOND_WINS:
                assert backward == RoundResult.FIRST_WINS
            else:
                assert backward == RoundResult.TIE

    def test_exactly_three_decisive_pairs(self):
        """Only the three beats pairs produce a first-player win."""
        first_wins = {
            (a, b) for a, b in product(Move, Move)
            if resolve_round(a, b) == RoundResult.FIRST_WINS
        }
        assert first_wins == {
            (Move.ROCK, Move.SCISSORS),
            (Move.SCISSORS, Move.PAPER),
            (Move.PAPER, Move.ROCK),
        }

    def test_invalid_move_forces_tie(self):
        """An invalid token on either side is a tie, not an error."""
        assert resolve_round("r", "lizard") == RoundResult.TIE
        assert resolve_round("spock", "s") == RoundResult.TIE
        assert resolve_round("", "p") == RoundResult.TIE

    def test_accepts_move_values(self):
        assert resolve_round(Move.ROCK, "p") == RoundResult.SECOND_WINS
