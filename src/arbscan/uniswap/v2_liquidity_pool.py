from fractions import Fraction
from threading import Lock
from typing import TYPE_CHECKING, Any

from eth_typing import ChecksumAddress

from arbscan.checksum_cache import get_checksum_address
from arbscan.exceptions import StateFetchError
from arbscan.exceptions.liquidity_pool import LiquidityPoolError, UninitializedPool
from arbscan.logging import logger
from arbscan.types import AbstractLiquidityPool, Erc20TokenInfo, PoolMetadata
from arbscan.uniswap.deployments import UniswapV2ExchangeDeployment, get_exchange_for_factory
from arbscan.uniswap.v2_functions import constant_product_calc_exact_in
from arbscan.uniswap.v2_types import UniswapV2PoolState

if TYPE_CHECKING:
    from arbscan.providers.base import PoolStateProvider


class LiquidityPool(AbstractLiquidityPool):
    """
    A Uniswap V2-based liquidity pool implementing the x*y=k constant function invariant.

    The pool holds two reserve sets: the real reserves, refreshed from the state provider by
    `sync`, and a scratch copy used to evaluate hypothetical swaps. Simulated swaps only ever touch
    the scratch copy, which `reset_simulation` sets back to the real reserves.

    A buy spends token1 to receive token0. A sell spends token0 to receive token1.
    """

    type PoolState = UniswapV2PoolState

    _metadata: PoolMetadata | None = None

    def __init__(
        self,
        address: ChecksumAddress | str,
        state_provider: "PoolStateProvider",
        *,
        silent: bool = False,
    ) -> None:
        """
        Build the pool helper. The static pool values are fetched once, followed by the current
        reserves. Raises `StateFetchError` if either read fails.

        Arguments
        ---------
        address:
            The address for the deployed pool contract.
        state_provider:
            The source for pool metadata and reserves.
        silent:
            Suppress status output.
        """

        self.address = get_checksum_address(address)
        self._state_provider = state_provider
        self._state_lock = Lock()

        metadata = state_provider.get_pool_metadata(self.address)
        self.exchange: UniswapV2ExchangeDeployment = get_exchange_for_factory(metadata.factory)
        fee_string = f"{100 * metadata.fee.numerator / metadata.fee.denominator:.2f}"
        self.name = f"{metadata.token0}-{metadata.token1} ({self.exchange.name}, {fee_string}%)"

        empty_state = self.PoolState.__value__(reserves_token0=0, reserves_token1=0)
        self._state: UniswapV2PoolState = empty_state
        self._simulated_state: UniswapV2PoolState = empty_state

        # The pool counts as initialized only once its first reserves are recorded
        self.sync()
        self._metadata = metadata

        if not silent:  # pragma: no cover
            logger.info(self.name)
            logger.info(f"• Token 0: {self.token0} - Reserves: {self.reserves_token0}")
            logger.info(f"• Token 1: {self.token1} - Reserves: {self.reserves_token1}")

    def __getstate__(self) -> dict[str, Any]:
        # Remove objects that either cannot be pickled or are unnecessary to perform the calculation
        dropped_attributes = (
            "_state_lock",
            "_state_provider",
        )

        with self._state_lock:
            return {k: v for k, v in self.__dict__.items() if k not in dropped_attributes}

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.__dict__.update(state)
        self._state_lock = Lock()
        self._state_provider = None

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(address={self.address}, token0={self.token0}, token1={self.token1})"  # noqa:E501

    @property
    def metadata(self) -> PoolMetadata:
        if self._metadata is None:
            raise UninitializedPool(pool=self.address)
        return self._metadata

    @property
    def factory(self) -> ChecksumAddress:
        return self.metadata.factory

    @property
    def fee(self) -> Fraction:
        return self.metadata.fee

    @property
    def token0(self) -> Erc20TokenInfo:
        return self.metadata.token0

    @property
    def token1(self) -> Erc20TokenInfo:
        return self.metadata.token1

    @property
    def tokens(self) -> tuple[Erc20TokenInfo, Erc20TokenInfo]:
        return self.token0, self.token1

    @property
    def base_token(self) -> ChecksumAddress:
        """
        The token used to group this pool with related pools.
        """
        return self.token0.address

    @property
    def state(self) -> PoolState:
        return self._state

    @property
    def simulated_state(self) -> PoolState:
        return self._simulated_state

    @property
    def reserves_token0(self) -> int:
        return self.state.reserves_token0

    @property
    def reserves_token1(self) -> int:
        return self.state.reserves_token1

    def sync(self) -> None:
        """
        Replace the real and simulated reserves with the current values from the state provider.
        """

        if self._state_provider is None:
            raise LiquidityPoolError(message=f"Pool {self.address} has no state provider.")

        reserves = self._state_provider.get_reserves(self.address)
        match reserves:
            case (int() as reserves0, int() as reserves1) if reserves0 >= 0 and reserves1 >= 0:
                pass
            case _:
                raise StateFetchError(address=self.address, reason=f"malformed reserves {reserves}")

        with self._state_lock:
            self._state = self.PoolState.__value__(
                reserves_token0=reserves0,
                reserves_token1=reserves1,
            )
            self._simulated_state = self._state

        logger.debug(f"Synced {self.address}: {reserves0}, {reserves1}")

    def reset_simulation(self, state: PoolState | None = None) -> None:
        """
        Set the simulated reserves back to the real reserves, or to the given state.
        """

        with self._state_lock:
            self._simulated_state = self._state if state is None else state

    def get_amount_out(
        self,
        amount_in: int,
        *,
        is_buy: bool,
        override_state: PoolState | None = None,
    ) -> int:
        """
        Calculate the output for an exact input against the real reserves, or the given state. The
        pool is not modified.
        """

        state = self.state if override_state is None else override_state

        if is_buy:
            reserves_in, reserves_out = state.reserves_token1, state.reserves_token0
        else:
            reserves_in, reserves_out = state.reserves_token0, state.reserves_token1

        return constant_product_calc_exact_in(
            amount_in=amount_in,
            reserves_in=reserves_in,
            reserves_out=reserves_out,
            fee=self.fee,
        )

    def quote_buy(self, amount_in: int) -> int:
        """
        The token0 received for spending `amount_in` token1 at the simulated reserves.
        """
        return self.get_amount_out(amount_in, is_buy=True, override_state=self.simulated_state)

    def quote_sell(self, amount_in: int) -> int:
        """
        The token1 received for spending `amount_in` token0 at the simulated reserves.
        """
        return self.get_amount_out(amount_in, is_buy=False, override_state=self.simulated_state)

    def simulate_buy(self, amount_in: int) -> int:
        """
        Spend `amount_in` token1 for token0 against the simulated reserves, recording the result.
        """

        with self._state_lock:
            amount_out = self.get_amount_out(
                amount_in, is_buy=True, override_state=self._simulated_state
            )
            self._simulated_state = self.PoolState.__value__(
                reserves_token0=self._simulated_state.reserves_token0 - amount_out,
                reserves_token1=self._simulated_state.reserves_token1 + amount_in,
            )
        return amount_out

    def simulate_sell(self, amount_in: int) -> int:
        """
        Spend `amount_in` token0 for token1 against the simulated reserves, recording the result.
        """

        with self._state_lock:
            amount_out = self.get_amount_out(
                amount_in, is_buy=False, override_state=self._simulated_state
            )
            self._simulated_state = self.PoolState.__value__(
                reserves_token0=self._simulated_state.reserves_token0 + amount_in,
                reserves_token1=self._simulated_state.reserves_token1 - amount_out,
            )
        return amount_out

    def nominal_price(self, use_simulated: bool = False) -> Fraction:
        """
        Get the exact nominal price of token0, expressed in units of token1 and corrected for the
        decimal place values of both tokens.
        """

        state = self.simulated_state if use_simulated else self.state
        if state.reserves_token0 == 0:
            raise LiquidityPoolError(message=f"Price is undefined for {self.address}, no reserves.")

        return Fraction(state.reserves_token1, state.reserves_token0) * Fraction(10) ** (
            self.token0.decimals - self.token1.decimals
        )

    def price(self, use_simulated: bool = False) -> float:
        """
        The price of token0 in units of token1, for display. Reserve math never uses this value.
        """
        return float(self.nominal_price(use_simulated=use_simulated))
