"""Tempo: a small alpha-beta chess engine built on python-chess."""

__version__ = "0.1.0"
