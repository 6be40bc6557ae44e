"""
Storage backend for tournament results.

Uses SQLite for tournament metadata, final standings, per-player histories
and match results. Only completed tournaments are written, in a single
transaction.
"""

import sqlite3
from pathlib import Path
from typing import List, Optional, Dict, Any
from dataclasses import dataclass

from rps_tournament.game.player import MatchOutcome, MatchRecord
from rps_tournament.tournament.leaderboard import LeaderboardEntry
from rps_tournament.tournament.match import MatchResult


@dataclass
class TournamentResult:
    """Complete results of a tournament."""
    tournament_id: str
    created_at: str
    completed_at: Optional[str]
    status: str
    source: str
    leaderboard: List[LeaderboardEntry]
    matches: List[MatchResult]

    @property
    def champion(self) -> Optional[str]:
        return self.leaderboard[0].name if self.leaderboard else None

    def get_entry(self, name: str) -> Optional[LeaderboardEntry]:
        """Find a player's standings by name (first match wins)."""
        for entry in self.leaderboard:
            if entry.name == name:
                return entry
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tournament_id': self.tournament_id,
            'created_at': self.created_at,
            'completed_at': self.completed_at,
            'status': self.status,
            'source': self.source,
            'champion': self.champion,
            'leaderboard': [entry.to_dict() for entry in self.leaderboard],
            'matches': [
                {
                    'player1': m.player_a,
                    'player2': m.player_b,
                    'player1_round_wins': m.a_wins,
                    'player2_round_wins': m.b_wins,
                    'round_ties': m.ties,
                    'winner': m.winner,
                }
                for m in self.matches
            ],
        }


class TournamentStorage:
    """
    Handles persistent storage of tournament results.

    Uses SQLite tables in the tournaments.db database.
    """

    def __init__(self, data_dir: str = "data"):
        """
        Initialize storage backend.

        Args:
            data_dir: Base directory for data storage
        """
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / "tournaments.db"

        # Ensure directory exists
        self.data_dir.mkdir(parents=True, exist_ok=True)

        # Initialize database tables
        self._init_db()

    def _init_db(self):
        """Initialize SQLite database schema for tournaments."""
        with sqlite3.connect(self.db_path) as conn:
            # Tournament metadata
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tournaments (
                    tournament_id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
                    completed_at TEXT,
                    status TEXT DEFAULT 'completed',
                    source TEXT,
                    num_players INTEGER NOT NULL
                )
            """)

            # Final standings
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tournament_players (
                    tournament_id TEXT NOT NULL,
                    rank INTEGER NOT NULL,
                    player TEXT NOT NULL,
                    wins INTEGER DEFAULT 0,
                    losses INTEGER DEFAULT 0,
                    ties INTEGER DEFAULT 0,
                    round_wins INTEGER DEFAULT 0,
                    round_losses INTEGER DEFAULT 0,
                    round_ties INTEGER DEFAULT 0,
                    PRIMARY KEY (tournament_id, rank),
                    FOREIGN KEY (tournament_id) REFERENCES tournaments(tournament_id)
                )
            """)

            # Match results, in play order
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tournament_matches (
                    tournament_id TEXT NOT NULL,
                    match_number INTEGER NOT NULL,
                    player_a TEXT NOT NULL,
                    player_b TEXT NOT NULL,
                    a_wins INTEGER DEFAULT 0,
                    b_wins INTEGER DEFAULT 0,
                    ties INTEGER DEFAULT 0,
                    outcome_a TEXT NOT NULL,
                    PRIMARY KEY (tournament_id, match_number),
                    FOREIGN KEY (tournament_id) REFERENCES tournaments(tournament_id)
                )
            """)

            # Per-player match history, keyed by final rank so duplicate names stay apart
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tournament_history (
                    tournament_id TEXT NOT NULL,
                    rank INTEGER NOT NULL,
                    seq INTEGER NOT NULL,
                    opponent TEXT NOT NULL,
                    outcome TEXT NOT NULL,
                    round_wins INTEGER DEFAULT 0,
                    round_losses INTEGER DEFAULT 0,
                    round_ties INTEGER DEFAULT 0,
                    PRIMARY KEY (tournament_id, rank, seq),
                    FOREIGN KEY (tournament_id) REFERENCES tournaments(tournament_id)
                )
            """)

            # Indexes
            conn.execute("CREATE INDEX IF NOT EXISTS idx_players_tournament ON tournament_players(tournament_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_matches_tournament ON tournament_matches(tournament_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_history_tournament ON tournament_history(tournament_id)")

            conn.commit()

    def save_tournament(self, result: TournamentResult) -> str:
        """
        Save a completed tournament.

        Args:
            result: Tournament result to persist

        Returns:
            tournament_id
        """
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                INSERT OR REPLACE INTO tournaments
                (tournament_id, created_at, completed_at, status, source, num_players)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                result.tournament_id,
                result.created_at,
                result.completed_at,
                result.status,
                result.source,
                len(result.leaderboard)
            ))

            conn.execute("DELETE FROM tournament_players WHERE tournament_id = ?", (result.tournament_id,))
            conn.execute("DELETE FROM tournament_matches WHERE tournament_id = ?", (result.tournament_id,))
            conn.execute("DELETE FROM tournament_history WHERE tournament_id = ?", (result.tournament_id,))

            for entry in result.leaderboard:
                conn.execute("""
                    INSERT INTO tournament_players
                    (tournament_id, rank, player, wins, losses, ties,
                     round_wins, round_losses, round_ties)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    result.tournament_id,
                    entry.rank,
                    entry.name,
                    entry.wins,
                    entry.losses,
                    entry.ties,
                    entry.round_wins,
                    entry.round_losses,
                    entry.round_ties
                ))

                for seq, record in enumerate(entry.history, 1):
                    conn.execute("""
                        INSERT INTO tournament_history
                        (tournament_id, rank, seq, opponent, outcome,
                         round_wins, round_losses, round_ties)
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """, (
                        result.tournament_id,
                        entry.rank,
                        seq,
                        record.opponent,
                        record.outcome.value,
                        record.round_wins,
                        record.round_losses,
                        record.round_ties
                    ))

            for number, match in enumerate(result.matches, 1):
                conn.execute("""
                    INSERT INTO tournament_matches
                    (tournament_id, match_number, player_a, player_b,
                     a_wins, b_wins, ties, outcome_a)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    result.tournament_id,
                    number,
                    match.player_a,
                    match.player_b,
                    match.a_wins,
                    match.b_wins,
                    match.ties,
                    match.outcome_a.value
                ))

            conn.commit()

        return result.tournament_id

    def load_tournament(self, tournament_id: str) -> Optional[TournamentResult]:
        """Load a tournament by ID."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row

            # Get tournament
            cursor = conn.execute(
                "SELECT * FROM tournaments WHERE tournament_id = ?",
                (tournament_id,)
            )
            row = cursor.fetchone()
            if not row:
                return None

            # Get matches
            cursor = conn.execute(
                "SELECT * FROM tournament_matches WHERE tournament_id = ? ORDER BY match_number",
                (tournament_id,)
            )
            matches = []
            for r in cursor.fetchall():
                outcome_a = MatchOutcome(r['outcome_a'])
                matches.append(MatchResult(
                    player_a=r['player_a'],
                    player_b=r['player_b'],
                    a_wins=r['a_wins'] or 0,
                    b_wins=r['b_wins'] or 0,
                    ties=r['ties'] or 0,
                    outcome_a=outcome_a,
                    outcome_b=outcome_a.opposite
                ))

            # Get standings
            cursor = conn.execute(
                "SELECT * FROM tournament_players WHERE tournament_id = ? ORDER BY rank",
                (tournament_id,)
            )
            leaderboard = [
                LeaderboardEntry(
                    name=r['player'],
                    wins=r['wins'] or 0,
                    losses=r['losses'] or 0,
                    ties=r['ties'] or 0,
                    round_wins=r['round_wins'] or 0,
                    round_losses=r['round_losses'] or 0,
                    round_ties=r['round_ties'] or 0,
                    rank=r['rank']
                )
                for r in cursor.fetchall()
            ]

            # Get histories
            cursor = conn.execute(
                "SELECT * FROM tournament_history WHERE tournament_id = ? ORDER BY rank, seq",
                (tournament_id,)
            )
            entries = {entry.rank: entry for entry in leaderboard}
            for r in cursor.fetchall():
                entry = entries.get(r['rank'])
                if entry is not None:
                    entry.history.append(MatchRecord(
                        r['opponent'],
                        MatchOutcome(r['outcome']),
                        r['round_wins'] or 0,
                        r['round_losses'] or 0,
                        r['round_ties'] or 0
                    ))

            if leaderboard:
                top_wins = leaderboard[0].wins
                for entry in leaderboard:
                    entry.highlight = entry.wins == top_wins

            return TournamentResult(
                tournament_id=row['tournament_id'],
                created_at=row['created_at'],
                completed_at=row['completed_at'],
                status=row['status'],
                source=row['source'] or "",
                leaderboard=leaderboard,
                matches=matches
            )

    def list_tournaments(self, limit: int = 20) -> List[Dict[str, Any]]:
        """List recent tournaments."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute("""
                SELECT tournament_id, created_at, completed_at, status, source, num_players
                FROM tournaments
                ORDER BY created_at DESC
                LIMIT ?
            """, (limit,))

            return [dict(row) for row in cursor.fetchall()]

