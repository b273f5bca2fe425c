"""Tycoon companion: trade synchronization and AI heuristics for Tycoon games."""

__version__ = "0.1.0"
