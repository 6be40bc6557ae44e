#!/usr/bin/env python3
"""
Round-robin rock-paper-scissors tournament with a live leaderboard.

Usage:
    python scripts/tournament.py --sheet-url URL --sheet-name "Form Responses 1"

Examples:
    # Public Google Sheet, only entries submitted after noon on a given day
    python scripts/tournament.py \\
        --sheet-url https://docs.google.com/spreadsheets/d/SHEET_ID/edit \\
        --sheet-name "Form Responses 1" --date 2024-05-01 --time "12:00 PM"

    # Local CSV export, as fast as possible, saving the results
    python scripts/tournament.py --csv responses.csv --no-delay --save

    # List saved tournaments
    python scripts/tournament.py --list
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rps_tournament.sheets.parser import load_csv_roster, load_sheet_roster
from rps_tournament.sheets.timestamps import build_filter_datetime
from rps_tournament.tournament.display import format_win_matrix
from rps_tournament.tournament.renderer import ConsoleRenderer
from rps_tournament.tournament.runner import TournamentRunner, TournamentConfig
from rps_tournament.tournament.storage import TournamentStorage


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Run a round-robin rock-paper-scissors tournament.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Data layout (sheet or CSV):
  column 1  submission timestamp (month/day/year hr:min:sec)
  column 2  player name
  column 3+ one move per round: rock/paper/scissors or r/p/s
'''
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        '--sheet-url',
        type=str, default=None,
        help='Share URL of a public Google Sheet'
    )
    source.add_argument(
        '--csv',
        type=str, default=None,
        help='Path to a CSV export with the same layout'
    )
    parser.add_argument(
        '--sheet-name',
        type=str, default=None,
        help='Sheet tab name (required with --sheet-url)'
    )
    parser.add_argument(
        '--date',
        type=str, default=None,
        help='Only include entries submitted on/after this date (YYYY-MM-DD)'
    )
    parser.add_argument(
        '--time',
        type=str, default=None,
        help='Time of day for --date (HH:MM or H:MM AM/PM)'
    )
    parser.add_argument(
        '--speed',
        type=float, default=1.0,
        help='Playback speed multiplier (default: 1.0)'
    )
    parser.add_argument(
        '--no-delay',
        action='store_true',
        help='Run without pauses between rounds and matches'
    )
    parser.add_argument(
        '--details',
        action='store_true',
        help="Print each player's match history with the final standings"
    )
    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Minimal output (only final results)'
    )
    parser.add_argument(
        '--save',
        action='store_true',
        help='Save the results to the tournament database'
    )
    parser.add_argument(
        '--output', '-o',
        type=str, default=None,
        help='Tournament ID/name (auto-generated if not specified)'
    )
    parser.add_argument(
        '--data-dir',
        type=str, default='data',
        help='Directory for storing results (default: data)'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List saved tournaments and exit'
    )
    parser.add_argument(
        '--log-level',
        type=str, default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: WARNING)'
    )

    return parser.parse_args()


def main():
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    # Handle --list
    if args.list:
        storage = TournamentStorage(args.data_dir)
        tournaments = storage.list_tournaments()
        if not tournaments:
            print("No tournaments found.")
        else:
            print(f"{'Tournament':<32} {'Players':<8} {'Completed'}")
            print("-" * 70)
            for t in tournaments:
                print(f"{t['tournament_id']:<32} {t['num_players']:<8} {t['completed_at']}")
        return 0

    if not args.sheet_url and not args.csv:
        print("Error: Provide --sheet-url with --sheet-name, or --csv")
        return 1
    if args.sheet_url and not args.sheet_name:
        print("Error: Please enter both the sheet name and URL")
        return 1
    if args.csv and not Path(args.csv).is_file():
        print(f"Error: CSV file not found: {args.csv}")
        return 1
    if args.speed <= 0:
        print("Error: --speed must be positive")
        return 1

    cutoff = None
    if args.date and args.time:
        try:
            cutoff = build_filter_datetime(args.date, args.time)
        except ValueError as e:
            print(f"Error: Invalid date or time format: {e}")
            return 1

    if args.sheet_url:
        def load_players():
            return load_sheet_roster(args.sheet_url, args.sheet_name, cutoff=cutoff)
    else:
        def load_players():
            return load_csv_roster(args.csv, cutoff=cutoff)

    config = TournamentConfig(
        speed_multiplier=args.speed,
        pacing=None if args.no_delay or args.quiet else time.sleep,
        save_results=args.save,
        data_dir=args.data_dir,
        source=args.sheet_url or args.csv
    )

    renderer = ConsoleRenderer(verbose=not args.quiet, show_details=args.details)
    runner = TournamentRunner(config=config, renderer=renderer)

    result = runner.run_safely(load_players, tournament_id=args.output)
    if result is None:
        return 1

    print(format_win_matrix(result.leaderboard))

    if args.save:
        print(f"\nTournament ID: {result.tournament_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
