"""
Tournament runner that orchestrates round-robin competitions.

Handles match execution in schedule order, leaderboard updates, pacing and
progress reporting.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence
from dataclasses import dataclass

from rps_tournament.game.player import Player
from rps_tournament.utils.constants import DEFAULT_SPEED_MULTIPLIER, ROUND_DELAY, MATCH_DELAY
from rps_tournament.tournament.errors import (
    TournamentError,
    InputValidationError,
    TournamentAlreadyRunningError
)
from rps_tournament.tournament.leaderboard import get_leaderboard
from rps_tournament.tournament.match import MatchResult, RoundEvent, play_match
from rps_tournament.tournament.renderer import TournamentRenderer, NullRenderer
from rps_tournament.tournament.scheduler import generate_round_robin_schedule
from rps_tournament.tournament.storage import TournamentStorage, TournamentResult

logger = logging.getLogger(__name__)


@dataclass
class TournamentConfig:
    """Configuration for a tournament run."""
    speed_multiplier: float = DEFAULT_SPEED_MULTIPLIER
    round_delay: float = ROUND_DELAY
    match_delay: float = MATCH_DELAY
    # Called with a delay in seconds between steps; None disables pacing
    pacing: Optional[Callable[[float], None]] = None
    save_results: bool = False
    data_dir: str = "data"
    source: str = ""


class TournamentRunner:
    """
    Orchestrates a round-robin tournament between players.

    At most one tournament runs on a runner at a time.

    Usage:
        runner = TournamentRunner(config, renderer=ConsoleRenderer())
        result = runner.run(players)
    """

    def __init__(
        self,
        config: Optional[TournamentConfig] = None,
        renderer: Optional[TournamentRenderer] = None,
        storage: Optional[TournamentStorage] = None
    ):
        """
        Initialize the tournament runner.

        Args:
            config: Tournament configuration (defaults if None)
            renderer: Receives progress; output is discarded if None
            storage: Storage backend, created on demand when results are saved
        """
        self.config = config or TournamentConfig()
        self.renderer = renderer or NullRenderer()
        self._storage = storage
        self._lock = threading.Lock()
        self.is_running = False

        self.set_speed(self.config.speed_multiplier)

    @property
    def storage(self) -> TournamentStorage:
        if self._storage is None:
            self._storage = TournamentStorage(self.config.data_dir)
        return self._storage

    def set_speed(self, multiplier: float):
        """Change the pacing speed multiplier; takes effect at the next step."""
        if multiplier <= 0:
            raise InputValidationError(f"Speed multiplier must be positive, got {multiplier}")
        self.config.speed_multiplier = multiplier

    @contextmanager
    def _running(self):
        """Hold the running flag for the duration of one tournament."""
        if not self._lock.acquire(blocking=False):
            raise TournamentAlreadyRunningError("A tournament is already running")
        self.is_running = True
        try:
            yield
        finally:
            self.is_running = False
            self._lock.release()

    def _validate_players(self, players: Sequence[Player]):
        """Check the roster before any match is played."""
        if len(players) < 2:
            raise InputValidationError("At least 2 players with moves are required")
        for p in players:
            if p.stats.matches_played:
                raise InputValidationError(f"Player '{p.name}' has already played matches")

    def _generate_tournament_id(self) -> str:
        """Generate a unique tournament ID."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"tourney_{timestamp}_{uuid.uuid4().hex[:6]}"

    def _pace(self, base_delay: float):
        if self.config.pacing is not None and base_delay > 0:
            self.config.pacing(base_delay / self.config.speed_multiplier)

    def run(
        self,
        players: Sequence[Player],
        tournament_id: Optional[str] = None,
        renderer: Optional[TournamentRenderer] = None,
        source: Optional[str] = None
    ) -> TournamentResult:
        """
        Run a complete round-robin tournament.

        Args:
            players: Roster in input order (at least 2)
            tournament_id: Optional ID (auto-generated if None)
            renderer: Renderer for this run only (defaults to the runner's)
            source: Roster source recorded with the result (defaults to config.source)

        Returns:
            Complete TournamentResult

        Raises:
            InputValidationError: If the roster cannot start a tournament
            TournamentAlreadyRunningError: If a run is already in progress
        """
        with self._running():
            return self._run(list(players), tournament_id, renderer, source)

    def run_safely(
        self,
        load_players: Callable[[], Sequence[Player]],
        tournament_id: Optional[str] = None
    ) -> Optional[TournamentResult]:
        """
        Load a roster and run a tournament, reporting failures to the renderer.

        The loader is called while the running flag is held, so fetching the
        roster counts as part of the run.

        Args:
            load_players: Returns the roster (may raise TournamentError)
            tournament_id: Optional ID (auto-generated if None)

        Returns:
            TournamentResult, or None if the run failed
        """
        try:
            with self._running():
                players = list(load_players())
                return self._run(players, tournament_id)
        except TournamentError as e:
            logger.error("Tournament failed: %s", e)
            self.renderer.show_error(str(e))
            return None

    def _run(
        self,
        players: List[Player],
        tournament_id: Optional[str],
        renderer: Optional[TournamentRenderer] = None,
        source: Optional[str] = None
    ) -> TournamentResult:
        self._validate_players(players)
        renderer = self.renderer if renderer is None else renderer
        source = self.config.source if source is None else source
        tournament_id = tournament_id or self._generate_tournament_id()
        created_at = datetime.now(timezone.utc).isoformat()

        matchups = generate_round_robin_schedule(players)
        total_matchups = len(matchups)

        def on_round(event: RoundEvent):
            renderer.show_round_event(event)
            self._pace(self.config.round_delay)

        logger.info("Starting tournament %s: %d players, %d matches",
                    tournament_id, len(players), total_matchups)
        renderer.show_tournament_start(tournament_id, len(players), total_matchups)
        renderer.show_leaderboard(get_leaderboard(players))

        match_results: List[MatchResult] = []
        for i, matchup in enumerate(matchups, 1):
            renderer.show_match_start(matchup.player_a.name, matchup.player_b.name)
            result = play_match(matchup.player_a, matchup.player_b, on_round=on_round)
            match_results.append(result)
            logger.debug("Match %s (%s): %d-%d-%d",
                         matchup.matchup_id, matchup.label, result.a_wins, result.b_wins, result.ties)

            renderer.show_match_result(i, total_matchups, result)
            self._pace(self.config.match_delay)
            renderer.show_leaderboard(get_leaderboard(players))
            renderer.show_progress(i / total_matchups)

        leaderboard = get_leaderboard(players)
        champion = leaderboard[0].name
        renderer.show_result(champion)
        logger.info("Tournament %s complete, champion: %s", tournament_id, champion)

        tournament = TournamentResult(
            tournament_id=tournament_id,
            created_at=created_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
            status='completed',
            source=source,
            leaderboard=leaderboard,
            matches=match_results
        )

        if self.config.save_results:
            self.storage.save_tournament(tournament)

        return tournament
