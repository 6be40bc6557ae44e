"""
Presentation hooks for a running tournament.

The runner reports every step through a TournamentRenderer. The base class
ignores everything, so a renderer only overrides the hooks it cares about.
"""
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from rps_tournament.tournament.display import (
    format_leaderboard,
    format_player_details,
    format_round_event,
    format_matchup_result,
    format_champion,
    format_tournament_header
)
from rps_tournament.tournament.leaderboard import LeaderboardEntry
from rps_tournament.tournament.match import RoundEvent, MatchResult


class TournamentRenderer:
    """Receives tournament progress. Every hook is a no-op by default."""

    def show_tournament_start(self, tournament_id: str, num_players: int, total_matches: int):
        pass

    def show_leaderboard(self, leaderboard: List[LeaderboardEntry]):
        pass

    def show_match_start(self, player1: str, player2: str):
        pass

    def show_round_event(self, event: RoundEvent):
        pass

    def show_match_result(self, matchup_num: int, total_matchups: int, result: MatchResult):
        pass

    def show_progress(self, fraction: float):
        pass

    def show_result(self, winner: str):
        pass

    def show_error(self, message: str):
        pass


class NullRenderer(TournamentRenderer):
    """Discards all output."""


class ConsoleRenderer(TournamentRenderer):
    """
    Renders a tournament in the terminal.

    Match progress is drawn with a tqdm bar; other lines are written through
    tqdm so they do not break the bar.
    """

    def __init__(self, verbose: bool = True, show_rounds: bool = True, show_details: bool = False):
        """
        Args:
            verbose: Print match results and intermediate leaderboards
            show_rounds: Print every round (only when verbose)
            show_details: Print each player's match history with the final standings
        """
        self.verbose = verbose
        self.show_rounds = show_rounds
        self.show_details = show_details
        self._bar: Optional[tqdm] = None
        self._last_leaderboard: List[LeaderboardEntry] = []

    def _write(self, text: str):
        if self._bar is not None:
            tqdm.write(text)
        else:
            print(text)

    def show_tournament_start(self, tournament_id: str, num_players: int, total_matches: int):
        self._write(format_tournament_header(tournament_id, num_players, total_matches))
        self._bar = tqdm(total=total_matches, desc="Matches", unit="match", leave=True)

    def show_leaderboard(self, leaderboard: List[LeaderboardEntry]):
        self._last_leaderboard = leaderboard
        if self.verbose:
            self._write("\n" + format_leaderboard(leaderboard))

    def show_match_start(self, player1: str, player2: str):
        if self.verbose:
            self._write(f"\n{player1} vs {player2}")

    def show_round_event(self, event: RoundEvent):
        if self.verbose and self.show_rounds:
            self._write(format_round_event(event))

    def show_match_result(self, matchup_num: int, total_matchups: int, result: MatchResult):
        if self.verbose:
            self._write(format_matchup_result(matchup_num, total_matchups, result))

    def show_progress(self, fraction: float):
        if self._bar is None:
            return
        self._bar.n = round(fraction * self._bar.total)
        self._bar.refresh()
        if fraction >= 1.0:
            self._bar.close()
            self._bar = None

    def show_result(self, winner: str):
        self._write("\n" + format_leaderboard(self._last_leaderboard, title="FINAL STANDINGS"))
        if self.show_details:
            for entry in self._last_leaderboard:
                self._write("")
                self._write(format_player_details(entry))
        self._write("\n" + format_champion(winner))

    def show_error(self, message: str):
        if self._bar is not None:
            self._bar.close()
            self._bar = None
        self._write(f"Error: {message}")


class RecordingRenderer(TournamentRenderer):
    """
    Records every hook call as a JSON-ready event dict.

    Used by the web layer to replay a finished tournament and by tests to
    check the order of reported steps.
    """

    def __init__(self):
        self.events: List[Dict[str, Any]] = []

    def of_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e['type'] == event_type]

    def show_tournament_start(self, tournament_id: str, num_players: int, total_matches: int):
        self.events.append({
            'type': 'start',
            'tournament_id': tournament_id,
            'num_players': num_players,
            'total_matches': total_matches,
        })

    def show_leaderboard(self, leaderboard: List[LeaderboardEntry]):
        self.events.append({
            'type': 'leaderboard',
            'leaderboard': [entry.to_dict() for entry in leaderboard],
        })

    def show_match_start(self, player1: str, player2: str):
        self.events.append({'type': 'match_start', 'player1': player1, 'player2': player2})

    def show_round_event(self, event: RoundEvent):
        self.events.append({'type': 'round', **event.to_dict()})

    def show_match_result(self, matchup_num: int, total_matchups: int, result: MatchResult):
        self.events.append({
            'type': 'match_result',
            'matchup': matchup_num,
            'total_matchups': total_matchups,
            'player1': result.player_a,
            'player2': result.player_b,
            'player1_round_wins': result.a_wins,
            'player2_round_wins': result.b_wins,
            'round_ties': result.ties,
            'winner': result.winner,
        })

    def show_progress(self, fraction: float):
        self.events.append({'type': 'progress', 'fraction': fraction})

    def show_result(self, winner: str):
        self.events.append({'type': 'result', 'winner': winner})

    def show_error(self, message: str):
        self.events.append({'type': 'error', 'message': message})
