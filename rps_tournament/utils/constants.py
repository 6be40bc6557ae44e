"""
Constants for the rock-paper-scissors tournament.
"""

# Move tokens
ROCK = 'r'
PAPER = 'p'
SCISSORS = 's'
VALID_MOVES = [ROCK, PAPER, SCISSORS]
MOVE_NAMES = {ROCK: "Rock", PAPER: "Paper", SCISSORS: "Scissors"}

# Full-word spellings accepted in submitted move columns
MOVE_MAPPING = {
    'rock': ROCK,
    'paper': PAPER,
    'scissors': SCISSORS,
}

# move -> the move it beats
BEATS = {
    ROCK: SCISSORS,
    SCISSORS: PAPER,
    PAPER: ROCK,
}

# Round results
TIE = 0
FIRST_WINS = 1
SECOND_WINS = 2

# Match outcomes (from one player's perspective)
WIN = "Win"
LOSS = "Loss"
MATCH_TIE = "Tie"

# Pacing (seconds, divided by the speed multiplier)
DEFAULT_SPEED_MULTIPLIER = 1.0
ROUND_DELAY = 0.3
MATCH_DELAY = 0.2

# Spreadsheet source
SHEETS_BASE_URL = "https://docs.google.com/spreadsheets/d/"
SHEET_TIMESTAMP_COLUMN = 0
SHEET_NAME_COLUMN = 1
SHEET_FIRST_MOVE_COLUMN = 2
DEFAULT_FETCH_TIMEOUT = 15.0
