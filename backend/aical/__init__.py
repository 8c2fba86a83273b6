"""AI Cal overlay engine."""

__version__ = "0.1.0"
