"""
Display formatting for tournament results.

Provides ASCII-formatted leaderboards, player details and match results
for terminal output.
"""

from typing import List, Optional

from rps_tournament.game.moves import Move
from rps_tournament.tournament.leaderboard import LeaderboardEntry
from rps_tournament.tournament.match import RoundEvent, MatchResult


def format_leaderboard(leaderboard: List[LeaderboardEntry], title: str = "LIVE LEADERBOARD") -> str:
    """
    Format standings as an ASCII table.

    Rows level with the leader on match wins are marked with '*'.

    Args:
        leaderboard: Ordered leaderboard snapshot
        title: Heading printed above the table

    Returns:
        Formatted string for terminal display
    """
    lines = []
    lines.append(f"=== {title} ===")
    lines.append("")

    # Header
    lines.append(f"{'Rank':<6}{'Player':<24}{'W-L-T':<12}{'Rounds W-L-T':<16}")
    lines.append("-" * 58)

    # Rows
    for entry in leaderboard:
        marker = "*" if entry.highlight else " "
        wlt = f"{entry.wins}-{entry.losses}-{entry.ties}"
        rounds = f"{entry.round_wins}-{entry.round_losses}-{entry.round_ties}"
        rank = f"{entry.rank}{marker}"
        lines.append(f"{rank:<6}{entry.name:<24}{wlt:<12}{rounds:<16}")

    return "\n".join(lines)


def format_player_details(entry: LeaderboardEntry) -> str:
    """Format a player's round totals and match history."""
    lines = []
    lines.append(f"{entry.name}: rounds won {entry.round_wins}, "
                 f"lost {entry.round_losses}, tied {entry.round_ties}")

    if not entry.history:
        lines.append("  No matches played")
        return "\n".join(lines)

    lines.append(f"  {'Opponent':<24}{'Result':<8}{'Rounds W-L-T':<14}")
    for record in entry.history:
        rounds = f"{record.round_wins}-{record.round_losses}-{record.round_ties}"
        lines.append(f"  {record.opponent:<24}{record.outcome.value:<8}{rounds:<14}")

    return "\n".join(lines)


def format_win_matrix(leaderboard: List[LeaderboardEntry]) -> str:
    """
    Format the match outcome matrix as an ASCII table.

    Shows the row player's result (W/L/T) against the column player.
    """
    names = [entry.name for entry in leaderboard]

    # Truncate long names for display
    def short_name(name: str, max_len: int = 12) -> str:
        if len(name) <= max_len:
            return name
        return name[:max_len-2] + ".."

    short_names = [short_name(n) for n in names]
    col_width = max(max(len(sn) for sn in short_names) + 2, 6) if short_names else 6

    lines = []
    lines.append("")
    lines.append("Results (row vs column):")
    lines.append("")

    header = " " * (col_width + 2)
    for sn in short_names:
        header += f"{sn:>{col_width}}"
    lines.append(header)

    for entry, sn in zip(leaderboard, short_names):
        results = {record.opponent: record.outcome.value[0] for record in entry.history}
        row = f"{sn:<{col_width}}  "
        for opponent in names:
            cell = "-" if opponent == entry.name else results.get(opponent, ".")
            row += f"{cell:>{col_width}}"
        lines.append(row)

    return "\n".join(lines)


def _move_label(token: str) -> str:
    move = Move.from_token(token)
    return move.display_name if move else f"?{token}"


def format_round_event(event: RoundEvent) -> str:
    """Format a single round line; the round winner's name is bracketed."""
    p1 = f"[{event.player1}]" if event.winner == event.player1 else event.player1
    p2 = f"[{event.player2}]" if event.winner == event.player2 else event.player2
    return f"  R{event.round_number}: {p1} {_move_label(event.move1)} vs {_move_label(event.move2)} {p2}"


def format_matchup_result(matchup_num: int, total_matchups: int, result: MatchResult) -> str:
    """Format a single match result line."""
    return (f"[{matchup_num}/{total_matchups}] "
            f"{result.player_a} vs {result.player_b}: "
            f"{result.a_wins}W-{result.b_wins}L-{result.ties}T "
            f"({result.outcome_a.value} for {result.player_a})")


def format_champion(name: Optional[str]) -> str:
    return f"*** Champion: {name} ***" if name else "No champion"


def format_tournament_header(tournament_id: str, num_players: int, total_matches: int) -> str:
    """Format tournament header information."""
    lines = []
    lines.append(f"Tournament: {tournament_id}")
    lines.append(f"Players: {num_players}")
    lines.append(f"Matches: {total_matches}")
    lines.append("")
    return "\n".join(lines)
