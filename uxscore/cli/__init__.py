"""Command-line interface for uxscore."""
