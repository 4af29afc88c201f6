"""
Data fetching exceptions for the arbscan package.

This module contains exceptions raised while reading pool state or pending operations from an
external provider.
"""

from typing import Any

from arbscan.exceptions.base import ArbscanError


class FetchingError(ArbscanError):
    """
    Base exception for data fetching errors.
    """


class StateFetchError(FetchingError):
    """
    Raised when the state provider is unavailable, times out, or returns a malformed response.

    A scan cycle that hits this error is aborted. The next cycle retries from a fresh sync.
    """

    def __init__(self, address: str, reason: str) -> None:
        """
        Initialize StateFetchError.

        Args:
            address: The contract address that was being read
            reason: A short description of the failure
        """
        self.address = address
        self.reason = reason
        super().__init__(message=f"Could not fetch state for {address}: {reason}")

    def __reduce__(self) -> tuple[Any, ...]:
        # Pickling will raise an exception if a reduction method is not defined
        return self.__class__, (self.address, self.reason)
