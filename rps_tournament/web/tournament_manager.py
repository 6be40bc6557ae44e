"""
Tournament session manager for the web interface.

Runs tournaments to completion with a recording renderer and keeps the
recorded events so WebSocket clients can replay them at their own pace.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from rps_tournament.game.moves import normalize_move
from rps_tournament.game.player import Player
from rps_tournament.sheets.parser import load_sheet_roster
from rps_tournament.sheets.timestamps import build_filter_datetime
from rps_tournament.tournament.errors import InputValidationError
from rps_tournament.tournament.renderer import RecordingRenderer
from rps_tournament.tournament.runner import TournamentRunner, TournamentConfig
from rps_tournament.tournament.storage import TournamentResult, TournamentStorage
from rps_tournament.web.models import TournamentRequest

logger = logging.getLogger(__name__)


@dataclass
class TournamentSession:
    """A finished tournament available for replay."""
    tournament_id: str
    result: TournamentResult
    events: List[Dict[str, Any]]
    speed: float = 1.0
    replay_task: Optional[asyncio.Task] = None
    resume_event: asyncio.Event = field(default_factory=asyncio.Event)

    def __post_init__(self):
        self.resume_event.set()


class TournamentManager:
    """
    Manages tournament sessions.

    One runner is shared by all requests, so only one tournament is
    simulated at a time. Tournaments are created on worker threads; replay
    tasks are only cancelled from the event loop.
    """

    def __init__(self, data_dir: str = "data", save_results: bool = False, max_sessions: int = 50):
        """
        Initialize tournament manager.

        Args:
            data_dir: Directory for data storage
            save_results: Persist finished tournaments to SQLite
            max_sessions: Sessions kept for replay; the oldest is dropped beyond this
        """
        self.sessions: Dict[str, TournamentSession] = {}
        self.max_sessions = max_sessions
        self.storage = TournamentStorage(data_dir) if save_results else None
        self.runner = TournamentRunner(
            TournamentConfig(save_results=save_results, data_dir=data_dir),
            storage=self.storage
        )

    def _load_players(self, request: TournamentRequest) -> Tuple[List[Player], str]:
        """Build the roster from an inline list or a sheet reference, with its source label."""
        if request.players is not None:
            players = []
            for p in request.players:
                moves = [m for m in (normalize_move(token) for token in p.moves) if m]
                if p.name.strip() and moves:
                    players.append(Player(p.name.strip(), moves))
            return players, "inline"

        if not request.sheet_url or not request.sheet_name:
            raise InputValidationError("Provide either players or both sheet_url and sheet_name")

        cutoff = None
        if request.filter_date and request.filter_time:
            try:
                cutoff = build_filter_datetime(request.filter_date, request.filter_time)
            except ValueError as e:
                raise InputValidationError(f"Invalid date or time format: {e}") from e

        players = load_sheet_roster(request.sheet_url, request.sheet_name, cutoff=cutoff)
        return players, request.sheet_url

    def create_tournament(self, request: TournamentRequest) -> TournamentSession:
        """
        Run a tournament and register it for replay.

        Raises:
            TournamentError: On validation, data-source or reentrancy failures
        """
        players, source = self._load_players(request)
        recorder = RecordingRenderer()
        result = self.runner.run(players, renderer=recorder, source=source)

        session = TournamentSession(
            tournament_id=result.tournament_id,
            result=result,
            events=recorder.events,
            speed=request.speed
        )
        self.sessions[session.tournament_id] = session
        self._evict_idle_sessions()
        logger.info("Registered tournament %s (%d events)", session.tournament_id, len(session.events))
        return session

    def get_session(self, tournament_id: str) -> Optional[TournamentSession]:
        """Get a tournament session by ID."""
        return self.sessions.get(tournament_id)

    def get_result(self, tournament_id: str) -> Optional[TournamentResult]:
        """Get a result from memory, falling back to storage."""
        session = self.get_session(tournament_id)
        if session:
            return session.result
        if self.storage:
            return self.storage.load_tournament(tournament_id)
        return None

    def list_sessions(self) -> List[Dict[str, Any]]:
        """List tournaments held in memory."""
        return [
            {
                "tournament_id": s.tournament_id,
                "champion": s.result.champion,
                "num_players": len(s.result.leaderboard),
                "num_events": len(s.events),
            }
            for s in list(self.sessions.values())
        ]

    def _evict_idle_sessions(self):
        """Drop the oldest sessions beyond max_sessions, skipping any still replaying."""
        excess = len(self.sessions) - self.max_sessions
        for tournament_id in list(self.sessions):
            if excess <= 0:
                break
            task = self.sessions[tournament_id].replay_task
            if task and not task.done():
                continue
            del self.sessions[tournament_id]
            excess -= 1

    def stop_replay(self, tournament_id: str) -> bool:
        """Cancel a session's replay task, including one waiting while paused."""
        session = self.sessions.get(tournament_id)
        if not session or not session.replay_task or session.replay_task.done():
            return False
        session.replay_task.cancel()
        logger.info("Stopped replay of %s", tournament_id)
        return True

    def remove_session(self, tournament_id: str) -> bool:
        """Drop a session, cancelling any running replay."""
        if tournament_id not in self.sessions:
            return False
        self.stop_replay(tournament_id)
        del self.sessions[tournament_id]
        return True
