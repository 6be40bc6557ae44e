"""
Game rules: moves, round resolution and players.
"""
from rps_tournament.game.moves import Move, RoundResult, normalize_move, resolve_round
from rps_tournament.game.player import Player, PlayerStats, MatchRecord, MatchOutcome

__all__ = [
    'Move',
    'RoundResult',
    'normalize_move',
    'resolve_round',
    'Player',
    'PlayerStats',
    'MatchRecord',
    'MatchOutcome',
]
