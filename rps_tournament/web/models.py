"""
Pydantic models for the tournament web API.

Defines request/response schemas for REST endpoints and WebSocket messages.
"""
from pydantic import BaseModel, Field
from typing import List, Optional


class PlayerInput(BaseModel):
    """A roster entry submitted inline."""
    name: str = Field(min_length=1)
    moves: List[str] = Field(default_factory=list, description="Move tokens: rock/paper/scissors or r/p/s")


class TournamentRequest(BaseModel):
    """Request to run a tournament from an inline roster or a sheet."""
    players: Optional[List[PlayerInput]] = Field(default=None, description="Inline roster")
    sheet_url: Optional[str] = Field(default=None, description="Share URL of a public Google Sheet")
    sheet_name: Optional[str] = Field(default=None, description="Tab name inside the sheet")
    filter_date: Optional[str] = Field(default=None, description="Keep rows submitted on/after this date (YYYY-MM-DD)")
    filter_time: Optional[str] = Field(default=None, description="Time of day for the filter (HH:MM or H:MM AM/PM)")
    speed: float = Field(default=1.0, gt=0, description="Replay speed multiplier")


class MatchHistoryRow(BaseModel):
    """One match from a player's point of view."""
    opponent: str
    result: str
    round_wins: int
    round_losses: int
    round_ties: int


class LeaderboardRow(BaseModel):
    """Standings for one player."""
    rank: int
    name: str
    wins: int
    losses: int
    ties: int
    round_wins: int
    round_losses: int
    round_ties: int
    highlight: bool = False
    history: List[MatchHistoryRow] = Field(default_factory=list)


class MatchRow(BaseModel):
    """Result of one match."""
    player1: str
    player2: str
    player1_round_wins: int
    player2_round_wins: int
    round_ties: int
    winner: Optional[str] = None


class TournamentResponse(BaseModel):
    """Complete tournament result."""
    tournament_id: str
    created_at: str
    completed_at: Optional[str] = None
    status: str
    source: str
    champion: Optional[str] = None
    leaderboard: List[LeaderboardRow]
    matches: List[MatchRow]


class TournamentSummary(BaseModel):
    """Summary of a tournament for listings."""
    tournament_id: str
    champion: Optional[str] = None
    num_players: int
    num_events: int


# WebSocket message models

class WSMessage(BaseModel):
    """Base WebSocket message."""
    type: str


class WSStartReplay(WSMessage):
    """Start streaming the recorded tournament."""
    type: str = "start_replay"
    speed: Optional[float] = Field(default=None, gt=0)


class WSSetSpeed(WSMessage):
    """Change replay speed."""
    type: str = "set_speed"
    speed: float = Field(gt=0)


class WSError(WSMessage):
    """Server error message."""
    type: str = "error"
    message: str
