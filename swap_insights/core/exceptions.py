"""
Application-level exceptions.

Only caller bugs and storage write failures raise. Thin data (too few swaps)
and unknown pools/tokens are not errors: they degrade to defined fallback
outputs instead.
"""

from __future__ import annotations


class SwapInsightsError(Exception):
    """Base class for all Swap Insights errors."""


class InvalidArgumentError(SwapInsightsError, ValueError):
    """An argument is outside its allowed domain (e.g. percentile rank not in [0, 100])."""


class StorageError(SwapInsightsError):
    """The external analysis store failed to accept a write."""


class SignerRequiredError(StorageError):
    """A write was attempted without a signing credential."""

    def __init__(self, message: str = "Signer required for storage operations") -> None:
        super().__init__(message)
