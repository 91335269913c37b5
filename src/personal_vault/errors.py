"""
Error types shared by the ingest, ranking and HTTP layers.
"""

from __future__ import annotations


class VaultValidationError(ValueError):
    """Raised when a request is missing required input.

    The message is returned to the client verbatim.
    """


class ProviderError(RuntimeError):
    """Raised when the embedding provider fails or returns an unusable shape."""


class DimensionMismatchError(ValueError):
    """Raised when two vectors of different lengths are compared."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"Vector dimensions differ: {left} != {right}")
        self.left = left
        self.right = right
