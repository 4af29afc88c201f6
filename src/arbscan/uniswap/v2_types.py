import dataclasses


@dataclasses.dataclass(slots=True, frozen=True, kw_only=True)
class UniswapV2PoolState:
    reserves_token0: int
    reserves_token1: int

    def __post_init__(self) -> None:
        assert self.reserves_token0 >= 0
        assert self.reserves_token1 >= 0
