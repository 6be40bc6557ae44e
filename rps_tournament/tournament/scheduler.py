"""
Round-robin tournament scheduling.

Generates every pairing of participants exactly once, in a fixed order.
"""

from dataclasses import dataclass
from typing import List, Sequence

from rps_tournament.game.player import Player
from rps_tournament.tournament.errors import InputValidationError


@dataclass(frozen=True)
class Matchup:
    """A single pairing between two participants."""
    index_a: int
    index_b: int
    player_a: Player
    player_b: Player

    @property
    def matchup_id(self) -> str:
        """Generate an ID for this matchup, unique within a tournament."""
        return f"{self.index_a}_vs_{self.index_b}"

    @property
    def label(self) -> str:
        return f"{self.player_a.name} vs {self.player_b.name}"


def generate_round_robin_schedule(players: Sequence[Player]) -> List[Matchup]:
    """
    Generate all matchups for a round-robin tournament.

    The order is canonical: the player at index 0 meets everyone after it
    in ascending index order, then the player at index 1 meets the players
    after it, and so on.

    Args:
        players: Participants in roster order

    Returns:
        List of Matchup objects, n*(n-1)/2 long

    Raises:
        InputValidationError: If fewer than 2 players
    """
    if len(players) < 2:
        raise InputValidationError("At least 2 players with moves are required")

    matchups = []
    for i in range(len(players) - 1):
        for j in range(i + 1, len(players)):
            matchups.append(Matchup(
                index_a=i,
                index_b=j,
                player_a=players[i],
                player_b=players[j]
            ))

    return matchups


def num_matchups(players: Sequence) -> int:
    """Calculate number of matchups in a round-robin tournament."""
    n = len(players)
    return n * (n - 1) // 2
