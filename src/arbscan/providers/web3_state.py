from fractions import Fraction
from typing import Any, cast

import eth_abi.abi
from eth_abi.exceptions import DecodingError
from eth_typing import ChecksumAddress
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception
from web3.types import TxParams

from arbscan.checksum_cache import get_checksum_address
from arbscan.constants import DEFAULT_FEE, FEE_DENOMINATOR
from arbscan.exceptions import StateFetchError
from arbscan.functions import encode_function_calldata, raw_call
from arbscan.logging import logger
from arbscan.types import Erc20TokenInfo, PoolMetadata


class Web3PoolStateProvider:
    """
    Reads Uniswap V2 pool values through `eth_call` on a connected Web3 instance.
    """

    def __init__(self, w3: Web3) -> None:
        self.w3 = w3
        self._token_cache: dict[ChecksumAddress, Erc20TokenInfo] = {}

    def _call(self, address: ChecksumAddress, function_prototype: str, return_types: list[str]) -> Any:
        try:
            return raw_call(
                w3=self.w3,
                address=address,
                calldata=encode_function_calldata(
                    function_prototype=function_prototype,
                    function_arguments=None,
                ),
                return_types=return_types,
            )
        except (Web3Exception, DecodingError) as exc:
            raise StateFetchError(address=address, reason=f"{function_prototype} failed") from exc

    def _get_fee(self, pool_address: ChecksumAddress) -> Fraction:
        try:
            (fee,) = raw_call(
                w3=self.w3,
                address=pool_address,
                calldata=encode_function_calldata(
                    function_prototype="fee()",
                    function_arguments=None,
                ),
                return_types=["uint24"],
            )
        except ContractLogicError:
            # Most V2 forks do not expose the fee
            return DEFAULT_FEE
        except (Web3Exception, DecodingError) as exc:
            raise StateFetchError(address=pool_address, reason="fee() failed") from exc

        if fee >= FEE_DENOMINATOR:
            raise StateFetchError(address=pool_address, reason=f"fee of {fee} bps is invalid")
        return Fraction(fee, FEE_DENOMINATOR)

    def _get_symbol(self, token_address: ChecksumAddress) -> str:
        try:
            result = self.w3.eth.call(
                TxParams(
                    to=token_address,
                    data=encode_function_calldata(
                        function_prototype="symbol()",
                        function_arguments=None,
                    ),
                )
            )
        except Web3Exception as exc:
            raise StateFetchError(address=token_address, reason="symbol() failed") from exc

        try:
            (symbol,) = eth_abi.abi.decode(types=["string"], data=result)
            return cast("str", symbol)
        except DecodingError:
            pass

        # Some early tokens return the symbol as a fixed-length byte string
        try:
            (symbol,) = eth_abi.abi.decode(types=["bytes32"], data=result)
        except DecodingError as exc:
            raise StateFetchError(address=token_address, reason="malformed symbol") from exc
        return cast("bytes", symbol).decode("utf-8", errors="ignore").strip("\x00")

    def get_token_info(self, token_address: ChecksumAddress | str) -> Erc20TokenInfo:
        token_address = get_checksum_address(token_address)
        try:
            return self._token_cache[token_address]
        except KeyError:
            pass

        (decimals,) = self._call(token_address, "decimals()", ["uint256"])
        token = Erc20TokenInfo(
            address=token_address,
            symbol=self._get_symbol(token_address),
            decimals=decimals,
        )
        self._token_cache[token_address] = token
        return token

    def get_pool_metadata(self, pool_address: ChecksumAddress) -> PoolMetadata:
        (factory,) = self._call(pool_address, "factory()", ["address"])
        (token0,) = self._call(pool_address, "token0()", ["address"])
        (token1,) = self._call(pool_address, "token1()", ["address"])

        if get_checksum_address(token0) == get_checksum_address(token1):
            raise StateFetchError(address=pool_address, reason="pool tokens are identical")

        metadata = PoolMetadata(
            factory=get_checksum_address(factory),
            token0=self.get_token_info(token0),
            token1=self.get_token_info(token1),
            fee=self._get_fee(pool_address),
        )
        logger.debug(f"Fetched metadata for {pool_address}: {metadata}")
        return metadata

    def get_reserves(self, pool_address: ChecksumAddress) -> tuple[int, int]:
        reserves0, reserves1, _ = self._call(
            pool_address, "getReserves()", ["uint112", "uint112", "uint32"]
        )
        return reserves0, reserves1
