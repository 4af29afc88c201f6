import dataclasses
from collections.abc import Iterable, Mapping

from eth_typing import ChecksumAddress

from arbscan.arbitrage.types import ArbitrageOpportunity
from arbscan.constants import MAX_BASIS_POINTS
from arbscan.exceptions import ArbscanValueError
from arbscan.functions import encode_function_calldata
from arbscan.uniswap.v2_liquidity_pool import LiquidityPool

EXECUTE_TRANSACTIONS_PROTOTYPE = "executeTransactions((uint256,address,address,uint256,uint256)[][])"


@dataclasses.dataclass(slots=True, frozen=True)
class DexSwapParams:
    """
    A single swap leg submitted to the transaction executor.
    """

    dex_id: int
    token_in: ChecksumAddress
    token_out: ChecksumAddress
    amount_in: int
    amount_out_min: int

    def __post_init__(self) -> None:
        assert self.amount_in > 0
        assert self.amount_out_min >= 0

    def as_tuple(self) -> tuple[int, ChecksumAddress, ChecksumAddress, int, int]:
        return (self.dex_id, self.token_in, self.token_out, self.amount_in, self.amount_out_min)


def _apply_slippage(amount: int, slippage_bps: int) -> int:
    return amount * (MAX_BASIS_POINTS - slippage_bps) // MAX_BASIS_POINTS


def build_arbitrage_params(
    opportunity: ArbitrageOpportunity,
    pools: Mapping[ChecksumAddress, LiquidityPool],
    slippage_bps: int,
) -> tuple[DexSwapParams, DexSwapParams]:
    """
    Build the buy and sell legs for an arbitrage opportunity. The buy leg spends token1 for token0
    at the buy pool, and the sell leg spends the token0 received for token1 at the sell pool. The
    minimum output of each leg is the simulated output, reduced by `slippage_bps` basis points.
    """

    if not 0 <= slippage_bps < MAX_BASIS_POINTS:
        raise ArbscanValueError(message=f"Slippage of {slippage_bps} bps is out of range.")

    try:
        buy_pool = pools[opportunity.buy_pool]
        sell_pool = pools[opportunity.sell_pool]
    except KeyError as exc:
        raise ArbscanValueError(message=f"Pool {exc.args[0]} is not known.") from None

    buy_params = DexSwapParams(
        dex_id=buy_pool.exchange.dex_id,
        token_in=buy_pool.token1.address,
        token_out=buy_pool.token0.address,
        amount_in=opportunity.buy_amount,
        amount_out_min=_apply_slippage(opportunity.buy_amount_out, slippage_bps),
    )
    sell_params = DexSwapParams(
        dex_id=sell_pool.exchange.dex_id,
        token_in=sell_pool.token0.address,
        token_out=sell_pool.token1.address,
        amount_in=opportunity.buy_amount_out,
        amount_out_min=_apply_slippage(opportunity.sell_amount_out, slippage_bps),
    )
    return buy_params, sell_params


def encode_execute_transactions(
    params: Iterable[tuple[DexSwapParams, DexSwapParams]],
) -> bytes:
    """
    Encode the calldata for a call to the executor's `executeTransactions` function. Each group of
    legs is executed as one arbitrage.
    """

    return encode_function_calldata(
        function_prototype=EXECUTE_TRANSACTIONS_PROTOTYPE,
        function_arguments=[[[leg.as_tuple() for leg in group] for group in params]],
    )
