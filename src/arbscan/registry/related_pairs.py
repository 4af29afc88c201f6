from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING

from eth_typing import ChecksumAddress

from arbscan.checksum_cache import get_checksum_address
from arbscan.exceptions import ConfigurationError

if TYPE_CHECKING:
    from arbscan.config import PairConfig


def _checksum_or_raise(address: object) -> ChecksumAddress:
    if not isinstance(address, str):
        raise ConfigurationError(message=f"Expected an address string, got {address!r}")
    try:
        return get_checksum_address(address)
    except (ValueError, TypeError) as exc:
        raise ConfigurationError(message=f"Invalid address {address!r}") from exc


class RelatedPairIndex:
    """
    A fixed mapping from a base token address to the pools considered economically linked through
    that token. Pools are only compared for arbitrage if both are listed under the same base token.

    Pool order is preserved from the configuration, and duplicates are dropped.
    """

    def __init__(self, entries: Mapping[ChecksumAddress, Iterable[ChecksumAddress]]) -> None:
        self._entries: dict[ChecksumAddress, tuple[ChecksumAddress, ...]] = {}
        for base_token, pools in entries.items():
            existing = self._entries.get(base_token, ())
            self._entries[base_token] = tuple(dict.fromkeys((*existing, *pools)))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> "RelatedPairIndex":
        """
        Build the index from a mapping of base token address to related pool addresses.
        """

        if not isinstance(mapping, Mapping):
            raise ConfigurationError(message="Related pairs must be a mapping of token to pools.")

        entries: dict[ChecksumAddress, list[ChecksumAddress]] = {}
        for base_token, pools in mapping.items():
            if isinstance(pools, str) or not isinstance(pools, Iterable):
                raise ConfigurationError(
                    message=f"Related pairs for {base_token} must be a list of pool addresses."
                )
            entries.setdefault(_checksum_or_raise(base_token), []).extend(
                _checksum_or_raise(pool) for pool in pools
            )

        return cls(entries)

    @classmethod
    def from_pair_config(cls, pairs: Iterable["PairConfig"]) -> "RelatedPairIndex":
        """
        Build the index from pair configurations. Each pair is listed under its base token,
        followed by its related pairs. Entries sharing a base token are merged.
        """

        entries: dict[ChecksumAddress, list[ChecksumAddress]] = {}
        for pair in pairs:
            entries.setdefault(pair.base_token, []).extend((pair.address, *pair.related_pairs))

        return cls(entries)

    def __contains__(self, base_token: object) -> bool:
        return base_token in self._entries

    def __iter__(self) -> Iterator[ChecksumAddress]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(base_tokens={len(self._entries)})"

    def get_related_pools(self, base_token: ChecksumAddress | str) -> tuple[ChecksumAddress, ...]:
        """
        Get the pools listed under the base token, or an empty tuple if the token is unknown.
        """

        return self._entries.get(get_checksum_address(base_token), ())

    def are_related(
        self,
        base_token: ChecksumAddress | str,
        pool_a: ChecksumAddress | str,
        pool_b: ChecksumAddress | str,
    ) -> bool:
        """
        Check if both pools are listed under the base token.
        """

        related = self.get_related_pools(base_token)
        return get_checksum_address(pool_a) in related and get_checksum_address(pool_b) in related
