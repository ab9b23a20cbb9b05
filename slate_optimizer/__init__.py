"""Slate optimizer: randomized, exposure-aware DFS lineup portfolio generation."""

__version__ = "0.1.0"
