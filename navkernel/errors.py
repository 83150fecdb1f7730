"""
Error kinds raised by the navigation kernel.
"""


class InvalidArgument(ValueError):
    """
    Raised when a caller violates a documented precondition.

    Expected failures (too few points for a fit, coordinates outside the UTM
    domain, extrapolation beyond tolerance) are reported through boolean
    results instead; this error is reserved for programmer mistakes such as
    computing a covariance from a single sample.
    """
