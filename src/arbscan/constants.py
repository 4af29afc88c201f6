from fractions import Fraction

from eth_typing import ChecksumAddress

from arbscan.checksum_cache import get_checksum_address

ZERO_ADDRESS: ChecksumAddress = get_checksum_address("0x0000000000000000000000000000000000000000")

# Pool fees reported by `fee()` are denominated in basis points
FEE_DENOMINATOR = 10_000
DEFAULT_FEE = Fraction(30, FEE_DENOMINATOR)

MAX_BASIS_POINTS = 10_000
