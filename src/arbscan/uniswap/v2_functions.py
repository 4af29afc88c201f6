from fractions import Fraction

from arbscan.exceptions.liquidity_pool import InsufficientLiquidity, InvalidSwapInputAmount


def constant_product_calc_exact_in(
    amount_in: int,
    reserves_in: int,
    reserves_out: int,
    fee: Fraction,
) -> int:
    """
    Calculate the amount out for an exact input from a constant product (x*y=k) invariant pool.

    The fee is deducted from the input before the swap, so it remains in the pool. The result is
    truncated toward zero.
    """

    if amount_in <= 0:
        raise InvalidSwapInputAmount

    if reserves_in <= 0 or reserves_out <= 0:
        raise InsufficientLiquidity(amount_in=amount_in, reserves_out=reserves_out)

    amount_out = (amount_in * (fee.denominator - fee.numerator) * reserves_out) // (
        reserves_in * fee.denominator + amount_in * (fee.denominator - fee.numerator)
    )

    # the last token becomes infinitely expensive, so the pool can never be fully drained
    if amount_out >= reserves_out:
        raise InsufficientLiquidity(amount_in=amount_in, reserves_out=reserves_out)

    return amount_out
