"""
Tournament module for running round-robin rock-paper-scissors competitions.

Provides:
- play_match: Match simulation between two players
- TournamentRunner: Orchestrates tournament execution
- get_leaderboard: Ordered standings
- TournamentStorage: Persists tournament results
"""

from rps_tournament.tournament.errors import (
    TournamentError,
    InputValidationError,
    TournamentAlreadyRunningError
)
from rps_tournament.tournament.match import RoundEvent, MatchResult, play_match, get_match_outcomes
from rps_tournament.tournament.scheduler import generate_round_robin_schedule, num_matchups, Matchup
from rps_tournament.tournament.leaderboard import LeaderboardEntry, get_leaderboard, get_champion
from rps_tournament.tournament.storage import TournamentStorage, TournamentResult
from rps_tournament.tournament.renderer import (
    TournamentRenderer,
    NullRenderer,
    ConsoleRenderer,
    RecordingRenderer
)
from rps_tournament.tournament.runner import TournamentRunner, TournamentConfig
from rps_tournament.tournament.display import format_leaderboard, format_win_matrix, format_player_details

__all__ = [
    'TournamentError',
    'InputValidationError',
    'TournamentAlreadyRunningError',
    'RoundEvent',
    'MatchResult',
    'play_match',
    'get_match_outcomes',
    'generate_round_robin_schedule',
    'num_matchups',
    'Matchup',
    'LeaderboardEntry',
    'get_leaderboard',
    'get_champion',
    'TournamentStorage',
    'TournamentResult',
    'TournamentRenderer',
    'NullRenderer',
    'ConsoleRenderer',
    'RecordingRenderer',
    'TournamentRunner',
    'TournamentConfig',
    'format_leaderboard',
    'format_win_matrix',
    'format_player_details',
]
