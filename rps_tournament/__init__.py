"""
Round-robin rock-paper-scissors tournaments with a live leaderboard.
"""

__version__ = "1.0.0"
