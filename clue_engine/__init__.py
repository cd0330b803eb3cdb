"""Clue-style detective deduction game engine."""

__version__ = "0.1.0"
