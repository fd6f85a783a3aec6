"""Writer Stats: typed vs pasted word counts, daily goals and streaks."""

__version__ = "0.1.0"
