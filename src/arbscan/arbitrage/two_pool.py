import math
from fractions import Fraction

from arbscan.arbitrage.types import ArbitrageOpportunity
from arbscan.exceptions.arbitrage import ArbitrageError, DegenerateArbitrage, IncompatiblePools
from arbscan.exceptions.liquidity_pool import LiquidityPoolError
from arbscan.logging import logger
from arbscan.uniswap.v2_liquidity_pool import LiquidityPool
from arbscan.uniswap.v2_types import UniswapV2PoolState


def _floor_sqrt(value: Fraction) -> Fraction:
    """
    The square root of a non-negative rational, rounded down to a multiple of 1/denominator.
    """

    return Fraction(math.isqrt(value.numerator * value.denominator), value.denominator)


def calculate_optimal_input(
    low_state: UniswapV2PoolState,
    high_state: UniswapV2PoolState,
    low_fee: Fraction,
    high_fee: Fraction,
) -> int:
    """
    Calculate the token1 amount to spend buying token0 from the low-priced pool, for resale into the
    high-priced pool, that maximizes the round trip profit.

    With reserves (x1, y1) and (x2, y2) and fee multipliers g1 = 1 - fee1, g2 = 1 - fee2, the
    round trip output for an input d is:

        out(d) = A * d / (B + C * d)

    where A = g1 * g2 * x1 * y2, B = x2 * y1, C = g1 * (x2 + g2 * x1). Setting out'(d) = 1 gives:

        d = (sqrt(A * B) - B) / C

    The calculation uses exact rational arithmetic with an integer square root and rounds down.
    Raises `DegenerateArbitrage` if there is no positive solution.
    """

    x1, y1 = low_state.reserves_token0, low_state.reserves_token1
    x2, y2 = high_state.reserves_token0, high_state.reserves_token1
    if 0 in (x1, y1, x2, y2):
        raise DegenerateArbitrage(message="Pools with empty reserves cannot be arbitraged.")

    g1 = 1 - low_fee
    g2 = 1 - high_fee

    a = g1 * g2 * x1 * y2
    b = Fraction(x2 * y1)
    c = g1 * (x2 + g2 * x1)

    root = _floor_sqrt(a * b)
    if root <= b:
        raise DegenerateArbitrage(message="The price gap does not cover the pool fees.")

    optimal_input = math.floor((root - b) / c)
    if optimal_input <= 0:
        raise DegenerateArbitrage(message="The optimal input rounds to zero.")

    return optimal_input


def _calculate(pool_a: LiquidityPool, pool_b: LiquidityPool) -> ArbitrageOpportunity | None:
    if (pool_a.token0.address, pool_a.token1.address) != (
        pool_b.token0.address,
        pool_b.token1.address,
    ):
        raise IncompatiblePools(message=f"{pool_a} and {pool_b} do not hold the same token pair.")

    price_a = pool_a.nominal_price(use_simulated=True)
    price_b = pool_b.nominal_price(use_simulated=True)
    if price_a == price_b:
        raise DegenerateArbitrage(message="Pool prices are equal.")

    low_pool, high_pool = (pool_a, pool_b) if price_a < price_b else (pool_b, pool_a)
    low_snapshot = low_pool.simulated_state
    high_snapshot = high_pool.simulated_state

    buy_amount = calculate_optimal_input(
        low_state=low_snapshot,
        high_state=high_snapshot,
        low_fee=low_pool.fee,
        high_fee=high_pool.fee,
    )

    # The estimate ignores integer rounding, so the profit is found by simulating both legs
    try:
        low_pool.reset_simulation(low_snapshot)
        high_pool.reset_simulation(high_snapshot)
        buy_amount_out = low_pool.simulate_buy(buy_amount)
        sell_amount_out = high_pool.simulate_sell(buy_amount_out)
        buy_pool_final_price = low_pool.price(use_simulated=True)
        sell_pool_final_price = high_pool.price(use_simulated=True)
    finally:
        low_pool.reset_simulation(low_snapshot)
        high_pool.reset_simulation(high_snapshot)

    profit = sell_amount_out - buy_amount
    if profit <= 0:
        logger.debug(
            f"Arbitrage {low_pool.address} -> {high_pool.address} unprofitable after simulation "
            f"(input {buy_amount}, profit {profit})"
        )
        return None

    return ArbitrageOpportunity(
        buy_pool=low_pool.address,
        sell_pool=high_pool.address,
        buy_amount=buy_amount,
        buy_amount_out=buy_amount_out,
        sell_amount_out=sell_amount_out,
        profit=profit,
        buy_pool_final_price=buy_pool_final_price,
        sell_pool_final_price=sell_pool_final_price,
    )


def calculate_optimal_arbitrage(
    pool_a: LiquidityPool,
    pool_b: LiquidityPool,
) -> ArbitrageOpportunity | None:
    """
    Find the most profitable counter-trade between two pools holding the same token pair, using
    their current simulated reserves. Token0 is bought from the pool with the lower price and sold
    into the pool with the higher price.

    The trade size comes from a closed form estimate, which is then verified by simulating both legs.
    The simulated result is reported. Returns `None` if there is no profitable trade. The simulated
    state of both pools is unchanged when this function returns, and the result does not depend on
    the argument order.
    """

    if pool_a == pool_b:
        return None

    try:
        return _calculate(pool_a, pool_b)
    except (ArbitrageError, LiquidityPoolError) as exc:
        logger.debug(f"No arbitrage between {pool_a.address} and {pool_b.address}: {exc}")
        return None
