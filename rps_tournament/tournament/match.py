"""
Match simulation between two players.

A match plays one round per move index up to the shorter of the two move
scripts, then records the outcome into both players' statistics.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from rps_tournament.game.moves import RoundResult, resolve_round
from rps_tournament.game.player import Player, MatchOutcome


@dataclass(frozen=True)
class RoundEvent:
    """A single resolved round, as shown to renderers."""
    round_number: int
    player1: str
    player2: str
    move1: str
    move2: str
    winner: Optional[str]

    def to_dict(self) -> dict:
        return {
            'round': self.round_number,
            'player1': self.player1,
            'player2': self.player2,
            'move1': self.move1,
            'move2': self.move2,
            'winner': self.winner,
        }


@dataclass
class MatchResult:
    """Round tallies and outcome for a single match."""
    player_a: str
    player_b: str
    a_wins: int = 0
    b_wins: int = 0
    ties: int = 0
    outcome_a: MatchOutcome = MatchOutcome.TIE
    outcome_b: MatchOutcome = MatchOutcome.TIE
    rounds: List[RoundEvent] = field(default_factory=list)

    @property
    def rounds_played(self) -> int:
        return self.a_wins + self.b_wins + self.ties

    @property
    def winner(self) -> Optional[str]:
        if self.outcome_a is MatchOutcome.WIN:
            return self.player_a
        if self.outcome_b is MatchOutcome.WIN:
            return self.player_b
        return None


def get_match_outcomes(a_wins: int, b_wins: int) -> Tuple[MatchOutcome, MatchOutcome]:
    """Map round-win counts to (player A outcome, player B outcome)."""
    if a_wins > b_wins:
        return MatchOutcome.WIN, MatchOutcome.LOSS
    if b_wins > a_wins:
        return MatchOutcome.LOSS, MatchOutcome.WIN
    return MatchOutcome.TIE, MatchOutcome.TIE


def play_match(
    player1: Player,
    player2: Player,
    on_round: Optional[Callable[[RoundEvent], None]] = None
) -> MatchResult:
    """
    Simulate a match and record it for both players.

    Args:
        player1: First player
        player2: Second player
        on_round: Optional callback invoked after each round is resolved

    Returns:
        MatchResult with per-round events and both outcomes
    """
    result = MatchResult(player_a=player1.name, player_b=player2.name)
    rounds = min(len(player1.moves), len(player2.moves))

    for round_index in range(rounds):
        move1 = player1.moves[round_index]
        move2 = player2.moves[round_index]

        outcome = resolve_round(move1, move2)
        winner = None
        if outcome == RoundResult.FIRST_WINS:
            result.a_wins += 1
            winner = player1.name
        elif outcome == RoundResult.SECOND_WINS:
            result.b_wins += 1
            winner = player2.name
        else:
            result.ties += 1

        event = RoundEvent(
            round_number=round_index + 1,
            player1=player1.name,
            player2=player2.name,
            move1=move1,
            move2=move2,
            winner=winner
        )
        result.rounds.append(event)
        if on_round:
            on_round(event)

    result.outcome_a, result.outcome_b = get_match_outcomes(result.a_wins, result.b_wins)

    # Round counts are mirrored for the second player
    player1.record_match(player2.name, result.outcome_a, result.a_wins, result.b_wins, result.ties)
    player2.record_match(player1.name, result.outcome_b, result.b_wins, result.a_wins, result.ties)

    return result
