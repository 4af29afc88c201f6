from fractions import Fraction

import pytest

from arbscan.arbitrage.two_pool import calculate_optimal_arbitrage, calculate_optimal_input
from arbscan.checksum_cache import get_checksum_address
from arbscan.exceptions import DegenerateArbitrage
from arbscan.types import Erc20TokenInfo
from arbscan.uniswap.v2_types import UniswapV2PoolState

POOL_A = get_checksum_address("0x" + "a1" * 20)
POOL_B = get_checksum_address("0x" + "b2" * 20)

UNISWAP_V2_FEE = Fraction(3, 1000)


def test_optimal_input_without_fees():
    # Pools priced at 1 and 4: (sqrt(x1 * y2 * x2 * y1) - x2 * y1) / (x1 + x2)
    assert (
        calculate_optimal_input(
            low_state=UniswapV2PoolState(reserves_token0=1000, reserves_token1=1000),
            high_state=UniswapV2PoolState(reserves_token0=1000, reserves_token1=4000),
            low_fee=Fraction(0),
            high_fee=Fraction(0),
        )
        == 500
    )


def test_optimal_input_is_reduced_by_fees():
    low_state = UniswapV2PoolState(reserves_token0=10**21, reserves_token1=3 * 10**21)
    high_state = UniswapV2PoolState(reserves_token0=10**21, reserves_token1=31 * 10**20)

    fee_free_input = calculate_optimal_input(low_state, high_state, Fraction(0), Fraction(0))
    assert 0 < calculate_optimal_input(low_state, high_state, UNISWAP_V2_FEE, UNISWAP_V2_FEE) < (
        fee_free_input
    )


@pytest.mark.parametrize(
    ("low_state", "high_state"),
    [
        (
            UniswapV2PoolState(reserves_token0=0, reserves_token1=1000),
            UniswapV2PoolState(reserves_token0=1000, reserves_token1=4000),
        ),
        (
            UniswapV2PoolState(reserves_token0=1000, reserves_token1=1000),
            UniswapV2PoolState(reserves_token0=1000, reserves_token1=0),
        ),
        (
            # Price gap smaller than the fees
            UniswapV2PoolState(reserves_token0=1000, reserves_token1=1000),
            UniswapV2PoolState(reserves_token0=1000, reserves_token1=1001),
        ),
        (
            # Reversed roles
            UniswapV2PoolState(reserves_token0=1000, reserves_token1=4000),
            UniswapV2PoolState(reserves_token0=1000, reserves_token1=1000),
        ),
    ],
)
def test_optimal_input_without_solution(
    low_state: UniswapV2PoolState, high_state: UniswapV2PoolState
):
    with pytest.raises(DegenerateArbitrage):
        calculate_optimal_input(low_state, high_state, UNISWAP_V2_FEE, UNISWAP_V2_FEE)


def test_scenario_buy_low_sell_high(make_pool):
    pool_a = make_pool(POOL_A, (1_000 * 10**18, 3_000 * 10**18), fee=UNISWAP_V2_FEE)
    pool_b = make_pool(POOL_B, (1_000 * 10**18, 3_100 * 10**18), fee=UNISWAP_V2_FEE)

    opportunity = calculate_optimal_arbitrage(pool_a, pool_b)

    assert opportunity is not None
    assert opportunity.buy_pool == pool_a.address
    assert opportunity.sell_pool == pool_b.address
    assert opportunity.buy_amount > 0
    assert opportunity.profit > 0
    assert opportunity.profit == opportunity.sell_amount_out - opportunity.buy_amount

    # The reported result matches a simulation of both legs
    assert opportunity.buy_amount_out == pool_a.quote_buy(opportunity.buy_amount)
    assert opportunity.sell_amount_out == pool_b.get_amount_out(
        opportunity.buy_amount_out, is_buy=False
    )

    # The trade moves the prices together
    assert pool_a.price() < opportunity.buy_pool_final_price
    assert opportunity.sell_pool_final_price < pool_b.price()


def test_pricing_leaves_simulated_state_unchanged(make_pool):
    pool_a = make_pool(POOL_A, (1_000 * 10**18, 3_000 * 10**18))
    pool_b = make_pool(POOL_B, (1_000 * 10**18, 3_100 * 10**18))
    pool_a.simulate_sell(10**18)
    snapshot_a = pool_a.simulated_state
    snapshot_b = pool_b.simulated_state

    calculate_optimal_arbitrage(pool_a, pool_b)

    assert pool_a.simulated_state == snapshot_a
    assert pool_b.simulated_state == snapshot_b


def test_pricing_is_order_independent(make_pool):
    pool_a = make_pool(POOL_A, (1_000 * 10**18, 3_000 * 10**18))
    pool_b = make_pool(POOL_B, (1_000 * 10**18, 3_100 * 10**18))

    assert calculate_optimal_arbitrage(pool_a, pool_b) == calculate_optimal_arbitrage(
        pool_b, pool_a
    )


def test_pricing_uses_simulated_state(make_pool):
    pool_a = make_pool(POOL_A, (1_000 * 10**18, 3_000 * 10**18))
    pool_b = make_pool(POOL_B, (1_000 * 10**18, 3_100 * 10**18))

    # A large pending buy pushes pool A above pool B
    pool_a.simulate_buy(100 * 10**18)

    opportunity = calculate_optimal_arbitrage(pool_a, pool_b)
    assert opportunity is not None
    assert opportunity.buy_pool == pool_b.address
    assert opportunity.sell_pool == pool_a.address


def test_equal_prices(make_pool):
    pool_a = make_pool(POOL_A, (1_000 * 10**18, 3_000 * 10**18))
    pool_b = make_pool(POOL_B, (2_000 * 10**18, 6_000 * 10**18))
    assert calculate_optimal_arbitrage(pool_a, pool_b) is None


def test_price_gap_within_fees(make_pool):
    pool_a = make_pool(POOL_A, (1_000 * 10**18, 3_000 * 10**18))
    pool_b = make_pool(POOL_B, (1_000 * 10**18, 3_010 * 10**18))
    assert calculate_optimal_arbitrage(pool_a, pool_b) is None


def test_unscaled_reserves_lose_to_rounding(make_pool):
    pool_a = make_pool(POOL_A, (1_000, 3_000))
    pool_b = make_pool(POOL_B, (1_000, 3_100))
    assert calculate_optimal_arbitrage(pool_a, pool_b) is None


def test_same_pool(make_pool):
    pool_a = make_pool(POOL_A, (1_000 * 10**18, 3_000 * 10**18))
    assert calculate_optimal_arbitrage(pool_a, pool_a) is None


def test_empty_pool(make_pool):
    pool_a = make_pool(POOL_A, (0, 0))
    pool_b = make_pool(POOL_B, (1_000 * 10**18, 3_100 * 10**18))
    assert calculate_optimal_arbitrage(pool_a, pool_b) is None


def test_incompatible_pools(make_pool, weth):
    usdc = Erc20TokenInfo(
        address=get_checksum_address("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"),
        symbol="USDC",
        decimals=6,
    )
    pool_a = make_pool(POOL_A, (1_000 * 10**18, 3_000 * 10**18))
    pool_b = make_pool(POOL_B, (1_000 * 10**18, 3_100 * 10**6), token0=weth, token1=usdc)
    assert calculate_optimal_arbitrage(pool_a, pool_b) is None
