"""Commit workspace files to GitHub through the Git Data API."""

__version__ = "0.1.0"
