"""Tafa — personal analytics backend (habits, goals, XP and AI insights)."""

__version__ = "0.1.0"
