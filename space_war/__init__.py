"""Space War: turn-based space-conquest simulation engine."""

__version__ = "0.1.0"
