from eth_abi.exceptions import DecodingError
from eth_typing import ChecksumAddress
from web3 import Web3
from web3.exceptions import Web3Exception

from arbscan.arbitrage.types import SwapOperation
from arbscan.checksum_cache import get_checksum_address
from arbscan.exceptions import StateFetchError
from arbscan.functions import encode_function_calldata, raw_call
from arbscan.logging import logger

PENDING_BLOCK_RETURN_TYPE = "(uint256,uint256,(uint256,uint256,address,address,address)[])"


class PendingBlockMonitor:
    """
    Reads the earliest pending block of user swaps from the transaction router contract.
    """

    def __init__(self, w3: Web3, router_address: ChecksumAddress | str) -> None:
        self.w3 = w3
        self.router_address = get_checksum_address(router_address)

    def get_pending_operations(self) -> list[SwapOperation] | None:
        """
        Return the swaps in the earliest pending block, in submission order, or `None` if the block
        is empty. Each swap targets the pool at its recipient address.
        """

        try:
            ((block_number, transaction_count, swap_params),) = raw_call(
                w3=self.w3,
                address=self.router_address,
                calldata=encode_function_calldata(
                    function_prototype="getEarliestPendingBlock()",
                    function_arguments=None,
                ),
                return_types=[PENDING_BLOCK_RETURN_TYPE],
            )
        except (Web3Exception, DecodingError) as exc:
            raise StateFetchError(
                address=self.router_address, reason="getEarliestPendingBlock() failed"
            ) from exc

        if not swap_params:
            return None

        logger.debug(
            f"Pending block {block_number}: {transaction_count} transactions, "
            f"{len(swap_params)} swaps"
        )

        return [
            SwapOperation(
                token_in=get_checksum_address(token_in),
                token_out=get_checksum_address(token_out),
                amount_in=amount_in,
                amount_out_min=amount_out_min,
                pool=get_checksum_address(pool),
            )
            for amount_in, amount_out_min, token_in, token_out, pool in swap_params
        ]
