import dataclasses

from eth_typing import ChecksumAddress


@dataclasses.dataclass(slots=True, frozen=True)
class SwapOperation:
    """
    A pending swap, replayed against simulated pool state before scanning for arbitrage.
    """

    token_in: ChecksumAddress
    token_out: ChecksumAddress
    amount_in: int
    amount_out_min: int
    pool: ChecksumAddress


@dataclasses.dataclass(slots=True, frozen=True)
class ArbitrageOpportunity:
    """
    A profitable counter-trade across two pools. The buy leg spends `buy_amount` of token1 at the
    low-priced pool for `buy_amount_out` of token0, which the sell leg sells into the high-priced
    pool for `sell_amount_out` of token1.

    The final prices are the token0 prices of both pools after the trade, for display only.
    """

    buy_pool: ChecksumAddress
    sell_pool: ChecksumAddress
    buy_amount: int
    buy_amount_out: int
    sell_amount_out: int
    profit: int
    buy_pool_final_price: float
    sell_pool_final_price: float

    def __post_init__(self) -> None:
        assert self.buy_pool != self.sell_pool
        assert self.buy_amount > 0
        assert self.profit == self.sell_amount_out - self.buy_amount
