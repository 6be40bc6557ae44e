"""
Tournament participants and their cumulative statistics.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Tuple

from rps_tournament.utils.constants import WIN, LOSS, MATCH_TIE


class MatchOutcome(Enum):
    """Result of a match from one player's perspective."""
    WIN = WIN
    LOSS = LOSS
    TIE = MATCH_TIE

    @property
    def opposite(self) -> 'MatchOutcome':
        if self is MatchOutcome.WIN:
            return MatchOutcome.LOSS
        if self is MatchOutcome.LOSS:
            return MatchOutcome.WIN
        return MatchOutcome.TIE


@dataclass(frozen=True)
class MatchRecord:
    """One entry of a player's match history."""
    opponent: str
    outcome: MatchOutcome
    round_wins: int
    round_losses: int
    round_ties: int

    @property
    def rounds_played(self) -> int:
        return self.round_wins + self.round_losses + self.round_ties

    def to_dict(self) -> dict:
        return {
            'opponent': self.opponent,
            'result': self.outcome.value,
            'round_wins': self.round_wins,
            'round_losses': self.round_losses,
            'round_ties': self.round_ties,
        }


@dataclass
class PlayerStats:
    """Cumulative match and round counters for a player."""
    match_wins: int = 0
    match_losses: int = 0
    match_ties: int = 0
    round_wins: int = 0
    round_losses: int = 0
    round_ties: int = 0
    history: List[MatchRecord] = field(default_factory=list)

    @property
    def matches_played(self) -> int:
        return self.match_wins + self.match_losses + self.match_ties

    @property
    def rounds_played(self) -> int:
        return self.round_wins + self.round_losses + self.round_ties

    def record_match(
        self,
        opponent: str,
        outcome: MatchOutcome,
        round_wins: int,
        round_losses: int,
        round_ties: int
    ) -> MatchRecord:
        """
        Record a completed match.

        Not idempotent: each call counts as another match.

        Args:
            opponent: Name of the opponent
            outcome: Match outcome from this player's perspective
            round_wins: Rounds this player won in the match
            round_losses: Rounds this player lost in the match
            round_ties: Rounds tied in the match

        Returns:
            The appended history entry
        """
        record = MatchRecord(
            opponent=opponent,
            outcome=outcome,
            round_wins=round_wins,
            round_losses=round_losses,
            round_ties=round_ties
        )
        self.history.append(record)

        if outcome is MatchOutcome.WIN:
            self.match_wins += 1
        elif outcome is MatchOutcome.LOSS:
            self.match_losses += 1
        else:
            self.match_ties += 1

        self.round_wins += round_wins
        self.round_losses += round_losses
        self.round_ties += round_ties
        return record


class Player:
    """
    A tournament participant with a fixed move script.

    The move script is stored as a tuple and never changes after
    construction; only `stats` is mutated as matches complete.
    """

    def __init__(self, name: str, moves: Sequence[str]):
        self.name = name
        self._moves: Tuple[str, ...] = tuple(moves)
        self.stats = PlayerStats()

    @property
    def moves(self) -> Tuple[str, ...]:
        return self._moves

    def record_match(
        self,
        opponent: str,
        outcome: MatchOutcome,
        round_wins: int,
        round_losses: int,
        round_ties: int
    ) -> MatchRecord:
        """Record a completed match into this player's statistics."""
        return self.stats.record_match(opponent, outcome, round_wins, round_losses, round_ties)

    def __repr__(self) -> str:
        return f"Player(name={self.name!r}, moves={len(self._moves)})"
