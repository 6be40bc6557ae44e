"""
FastAPI application for the tournament web interface.
"""
import logging
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, HTTPException
from fastapi.websockets import WebSocketState

from rps_tournament import __version__
from rps_tournament.sheets.client import SheetSourceError
from rps_tournament.tournament.errors import InputValidationError, TournamentAlreadyRunningError
from rps_tournament.web.models import (
    TournamentRequest, TournamentResponse, TournamentSummary, LeaderboardRow
)
from rps_tournament.web.tournament_manager import TournamentManager
from rps_tournament.web.websocket import ConnectionManager, TournamentWebSocketHandler

logger = logging.getLogger(__name__)


def create_app(data_dir: str = "data", save_results: bool = False) -> FastAPI:
    """
    Build the application.

    Args:
        data_dir: Directory for data storage
        save_results: Persist finished tournaments to SQLite
    """
    app = FastAPI(
        title="RPS Tournament",
        description="Round-robin rock-paper-scissors tournaments with a live leaderboard",
        version=__version__
    )

    tournament_manager = TournamentManager(data_dir=data_dir, save_results=save_results)
    connection_manager = ConnectionManager(tournament_manager)
    ws_handler = TournamentWebSocketHandler(connection_manager)
    app.state.tournament_manager = tournament_manager
    app.state.connection_manager = connection_manager

    # =========================================================================
    # REST API Endpoints
    # =========================================================================

    # Plain def: the sheet fetch blocks, so FastAPI runs this in its threadpool
    @app.post("/api/tournaments", response_model=TournamentResponse)
    def create_tournament(request: TournamentRequest):
        """Run a tournament and return the final standings."""
        try:
            session = tournament_manager.create_tournament(request)
        except InputValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except TournamentAlreadyRunningError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except SheetSourceError as e:
            raise HTTPException(status_code=502, detail=f"{e}. Ensure your sheet is public and the name is correct.")

        return TournamentResponse(**session.result.to_dict())

    @app.get("/api/tournaments")
    async def list_tournaments():
        """List tournaments available for replay."""
        return {"tournaments": [TournamentSummary(**s) for s in tournament_manager.list_sessions()]}

    @app.get("/api/tournaments/{tournament_id}", response_model=TournamentResponse)
    async def get_tournament(tournament_id: str):
        """Get a tournament's final result."""
        result = tournament_manager.get_result(tournament_id)
        if not result:
            raise HTTPException(status_code=404, detail="Tournament not found")
        return TournamentResponse(**result.to_dict())

    @app.get("/api/tournaments/{tournament_id}/players/{name}", response_model=LeaderboardRow)
    async def get_player(tournament_id: str, name: str):
        """Get one player's standings and match history."""
        result = tournament_manager.get_result(tournament_id)
        if not result:
            raise HTTPException(status_code=404, detail="Tournament not found")

        entry = result.get_entry(name)
        if not entry:
            raise HTTPException(status_code=404, detail="Player not found")
        return LeaderboardRow(**entry.to_dict())

    @app.delete("/api/tournaments/{tournament_id}")
    async def delete_tournament(tournament_id: str):
        """Forget a tournament session."""
        if not tournament_manager.remove_session(tournament_id):
            raise HTTPException(status_code=404, detail="Tournament not found")
        return {"status": "removed"}

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/ws/{tournament_id}")
    async def websocket_endpoint(websocket: WebSocket, tournament_id: str):
        """WebSocket endpoint for live tournament replay."""
        session = tournament_manager.get_session(tournament_id)
        if not session:
            await websocket.close(code=4004, reason="Tournament not found")
            return

        await connection_manager.connect(websocket, tournament_id)

        # Send initial summary
        await websocket.send_json({
            "type": "connected",
            "tournament_id": tournament_id,
            "speed": session.speed,
            "num_events": len(session.events)
        })

        try:
            while True:
                data = await websocket.receive_json()
                await ws_handler.handle_message(websocket, tournament_id, data)
        except WebSocketDisconnect:
            connection_manager.disconnect(websocket)
        except Exception as e:
            logger.warning("Closing WebSocket for %s: %s", tournament_id, e)
            connection_manager.disconnect(websocket)
            if websocket.client_state == WebSocketState.CONNECTED:
                await websocket.close(code=1003)

    return app


app = create_app()
