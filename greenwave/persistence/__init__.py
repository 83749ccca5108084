"""Boundary implementations for best-time storage and leaderboard submission."""
