"""Loading of version records from files."""

from uxscore.loader.loader import RecordLoader

__all__ = ["RecordLoader"]
