"""Talent Bank Matching & Suggestion Engine."""

__version__ = "0.1.0"
