import dataclasses
from fractions import Fraction

from eth_typing import ChecksumAddress
from hexbytes import HexBytes

type BlockNumber = int
type ChainId = int


@dataclasses.dataclass(slots=True, frozen=True)
class Erc20TokenInfo:
    address: ChecksumAddress
    symbol: str
    decimals: int

    def __post_init__(self) -> None:
        assert self.decimals >= 0

    def __str__(self) -> str:
        return self.symbol


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class PoolMetadata:
    """
    Static values for a pool, read once when the pool is first built.
    """

    factory: ChecksumAddress
    token0: Erc20TokenInfo
    token1: Erc20TokenInfo
    fee: Fraction

    def __post_init__(self) -> None:
        assert 0 <= self.fee < 1
        assert self.token0.address != self.token1.address


class AbstractLiquidityPool:
    address: ChecksumAddress
    name: str

    def __eq__(self, other: object) -> bool:
        match other:
            case AbstractLiquidityPool():
                return self.address == other.address
            case HexBytes():
                return self.address.lower() == other.to_0x_hex().lower()
            case str():
                return self.address.lower() == other.lower()
            case _:
                return NotImplemented

    def __hash__(self) -> int:
        return hash(self.address)

    def __str__(self) -> str:
        return self.name
