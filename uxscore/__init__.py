"""uxscore - score reconciliation for AI usability assessments."""

__version__ = "0.1.0"
