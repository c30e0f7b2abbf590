"""API route modules."""

from . import directions, health

__all__ = ["directions", "health"]
