from arbscan.exceptions.base import ArbscanError

"""
Exceptions defined here are raised by classes and functions in the `arbitrage` module.
"""


class ArbitrageError(ArbscanError):
    """
    Exception raised inside arbitrage helpers.
    """


class DegenerateArbitrage(ArbitrageError):
    """
    Raised when the optimal sizing has no positive-size solution, e.g. equal prices or empty
    reserves. This is not a failure, it signals that no opportunity exists.
    """


class IncompatiblePools(ArbitrageError):
    """
    Raised when two pools do not hold the same token pair and cannot be compared.
    """
