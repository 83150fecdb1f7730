"""
Wheel odometry sample.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Odom:
    """Wheel encoder reading: pulses per unit time for each wheel."""

    timestamp: float = 0.0
    left_pulse: float = 0.0
    right_pulse: float = 0.0
