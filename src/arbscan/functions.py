from collections.abc import Sequence
from typing import Any

import eth_abi.abi
from eth_typing import ChecksumAddress
from eth_utils.crypto import keccak
from web3 import Web3
from web3.types import BlockIdentifier, TxParams


def encode_function_calldata(
    function_prototype: str, function_arguments: Sequence[Any] | None
) -> bytes:
    """
    Encode the calldata to execute a call to the given function prototype, with ordered arguments.
    The resulting bytes array will include the 4-byte function selector, followed by the
    ABI-encoded arguments.
    """

    if function_arguments is None:
        function_arguments = ()

    return keccak(text=function_prototype)[:4] + eth_abi.abi.encode(
        types=extract_argument_types_from_function_prototype(function_prototype),
        args=function_arguments,
    )


def extract_argument_types_from_function_prototype(function_prototype: str) -> list[str]:
    """
    Extract the argument types from the function prototype.

    e.g. the argument types for the prototype 'function(address,uint256)' are ['address','uint256']

    Tuple arguments are kept whole, e.g. 'execute((uint256,address)[],bool)' gives
    ['(uint256,address)[]', 'bool']
    """

    function_args = function_prototype[
        function_prototype.find("(") + 1 : function_prototype.rfind(")")
    ]
    if not function_args:
        return []

    types: list[str] = []
    depth = 0
    current = ""
    for char in function_args:
        match char:
            case "(":
                depth += 1
            case ")":
                depth -= 1
            case "," if depth == 0:
                types.append(current)
                current = ""
                continue
        current += char
    types.append(current)
    return types


def raw_call(
    w3: Web3,
    address: ChecksumAddress,
    calldata: bytes,
    return_types: list[str],
    block_identifier: BlockIdentifier | None = None,
) -> tuple[Any, ...]:
    """
    Perform an eth_call at the given address and returns the decoded response.
    """

    return eth_abi.abi.decode(
        types=return_types,
        data=w3.eth.call(
            transaction=TxParams(
                to=address,
                data=calldata,
            ),
            block_identifier=block_identifier,
        ),
    )
