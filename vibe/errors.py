"""Exception types raised by the vibe search core."""


class VibeError(Exception):
    """Base class for all vibe errors."""


class ConstructExtractionError(VibeError):
    """Raised when a source file cannot be parsed into constructs."""


class DimensionMismatchError(VibeError, ValueError):
    """Raised when two embedding vectors have different lengths.

    Embeddings always come back with a fixed dimension, so this signals a
    broken invariant upstream rather than bad user input.
    """

    def __init__(self, left: int, right: int):
        super().__init__(f"dimension mismatch: {left} != {right}")
        self.left = left
        self.right = right
