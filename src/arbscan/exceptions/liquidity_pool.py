from typing import Any

from arbscan.exceptions.base import ArbscanError


class LiquidityPoolError(ArbscanError):
    """
    Exception raised inside liquidity pool helpers.
    """


# 2nd level exceptions for Liquidity Pool classes
class InsufficientLiquidity(LiquidityPoolError):
    """
    Raised if a swap would consume the entire output reserve, or if the pool holds no reserves for
    one side of the trade.
    """

    def __init__(self, amount_in: int, reserves_out: int) -> None:
        self.amount_in = amount_in
        self.reserves_out = reserves_out
        super().__init__(
            message=f"Insufficient liquidity to swap {amount_in} against reserves {reserves_out}."
        )

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, (self.amount_in, self.reserves_out)


class InvalidSwapInputAmount(LiquidityPoolError):
    def __init__(self) -> None:
        """
        Raised if a swap input amount is invalid.
        """

        super().__init__(message="The swap input is invalid.")

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, ()


class UninitializedPool(LiquidityPoolError):
    """
    Raised if pool metadata is read before the pool has finished initializing.
    """

    def __init__(self, pool: str) -> None:
        self.pool = pool
        super().__init__(message=f"Pool {pool} has not been initialized.")

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, (self.pool,)
