"""Mentor Bot: out-of-hours notices for Discord mentor mentions."""

__version__ = "0.1.0"
