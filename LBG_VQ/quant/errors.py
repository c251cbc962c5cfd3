"""Exceptions raised by the quantization engine."""
from __future__ import annotations

import numpy as np


class VQError(Exception):
    """Base exception for all vector quantization errors."""

    pass


class EmptyInputError(VQError, ValueError):
    """Raised when a centroid or classification is asked of an empty set."""

    pass


class EmptyCodebookError(VQError, ValueError):
    """Raised when classifying against a codebook with no codewords."""

    pass


class InsufficientDataError(VQError, ValueError):
    """Raised when random sampling needs more codewords than training vectors."""

    pass


class IndexOutOfRangeError(VQError, IndexError):
    pass


class LengthMismatchError(VQError, ValueError):
    pass


class DimensionMismatchError(VQError, ValueError):
    pass


class RoundFailedError(VQError):
    """A refinement round did not complete.

    ``codebook`` is the last codebook that was fully built before the failing
    round and ``round`` the 1-based number of the round that failed.
    """

    def __init__(self, msg: str, codebook: np.ndarray, round: int):
        super().__init__(msg)
        self.codebook = codebook
        self.round    = round
