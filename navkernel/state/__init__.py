"""
Navigation state.
"""

from .nav_state import NavState, NavStated, NavStatef

__all__ = ["NavState", "NavStated", "NavStatef"]
