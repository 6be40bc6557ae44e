"""
Leaderboard ranking.

Standings are ordered by match wins (descending), then match losses
(ascending), then round wins (descending). Players still level after that
keep their roster order because the sort is stable.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from rps_tournament.game.player import Player, MatchRecord


@dataclass
class LeaderboardEntry:
    """Point-in-time standings for one player."""
    name: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    round_wins: int = 0
    round_losses: int = 0
    round_ties: int = 0
    rank: int = 0
    highlight: bool = False
    history: List[MatchRecord] = field(default_factory=list)

    @property
    def matches_played(self) -> int:
        return self.wins + self.losses + self.ties

    def to_dict(self, include_history: bool = True) -> dict:
        data = {
            'rank': self.rank,
            'name': self.name,
            'wins': self.wins,
            'losses': self.losses,
            'ties': self.ties,
            'round_wins': self.round_wins,
            'round_losses': self.round_losses,
            'round_ties': self.round_ties,
            'highlight': self.highlight,
        }
        if include_history:
            data['history'] = [record.to_dict() for record in self.history]
        return data


def ranking_key(entry: LeaderboardEntry):
    """Sort key used for standings."""
    return (-entry.wins, entry.losses, -entry.round_wins)


def get_leaderboard(players: Sequence[Player]) -> List[LeaderboardEntry]:
    """
    Build an ordered leaderboard snapshot.

    Reads player statistics without modifying them; history lists are
    copied so the snapshot does not change as later matches are recorded.

    Args:
        players: Participants in roster order

    Returns:
        Entries sorted by standing, rank starting at 1
    """
    entries = [
        LeaderboardEntry(
            name=p.name,
            wins=p.stats.match_wins,
            losses=p.stats.match_losses,
            ties=p.stats.match_ties,
            round_wins=p.stats.round_wins,
            round_losses=p.stats.round_losses,
            round_ties=p.stats.round_ties,
            history=list(p.stats.history)
        )
        for p in players
    ]
    entries.sort(key=ranking_key)

    for i, entry in enumerate(entries, 1):
        entry.rank = i
    if entries:
        top_wins = entries[0].wins
        for entry in entries:
            entry.highlight = entry.wins == top_wins

    return entries


def get_champion(players: Sequence[Player]) -> Optional[str]:
    """Name of the top-ranked player, or None for an empty roster."""
    leaderboard = get_leaderboard(players)
    if not leaderboard:
        return None
    return leaderboard[0].name
