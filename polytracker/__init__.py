"""PolyTracker — weather model forecast comparison and accuracy leaderboard."""

__version__ = "0.1.0"
