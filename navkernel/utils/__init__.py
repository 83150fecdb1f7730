"""
Diagnostic utilities.
"""

from .timer import Timer, TimerRecord

__all__ = ["Timer", "TimerRecord"]
