from collections import Counter
from typing import Any

import eth_abi.abi
import pytest
from eth_utils.crypto import keccak
from hexbytes import HexBytes
from web3.exceptions import ContractLogicError

from arbscan.checksum_cache import get_checksum_address


class FakeEth:
    """
    Answers `eth_call` requests from a table of canned responses, keyed by contract address and
    function selector. Calls without a response revert.
    """

    def __init__(self) -> None:
        self.responses: dict[tuple[str, bytes], bytes | Exception] = {}
        self.calls: Counter[tuple[str, bytes]] = Counter()

    def call(self, transaction: dict[str, Any], block_identifier: Any = None) -> HexBytes:
        key = (get_checksum_address(transaction["to"]), bytes(transaction["data"])[:4])
        self.calls[key] += 1
        try:
            response = self.responses[key]
        except KeyError:
            raise ContractLogicError("execution reverted") from None
        if isinstance(response, Exception):
            raise response
        return HexBytes(response)


class FakeWeb3:
    def __init__(self) -> None:
        self.eth = FakeEth()

    def respond(
        self,
        address: str,
        function_prototype: str,
        return_types: list[str] | None = None,
        values: list[Any] | None = None,
        *,
        raw: bytes | Exception | None = None,
    ) -> None:
        """
        Register the response for a call. The response is ABI-encoded from the given types and
        values, unless `raw` bytes or an exception are given.
        """

        key = (get_checksum_address(address), keccak(text=function_prototype)[:4])
        if raw is not None:
            self.eth.responses[key] = raw
        else:
            assert return_types is not None
            assert values is not None
            self.eth.responses[key] = eth_abi.abi.encode(return_types, values)

    def call_count(self, address: str, function_prototype: str) -> int:
        return self.eth.calls[(get_checksum_address(address), keccak(text=function_prototype)[:4])]


@pytest.fixture
def fake_w3() -> FakeWeb3:
    return FakeWeb3()
