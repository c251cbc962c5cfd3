"""Vector primitives: squared distance, centroid and clamped add / subtract."""
from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

import numpy as np

from .errors import DimensionMismatchError, EmptyInputError


class Bounds(NamedTuple):
    low: float
    high: float


def as_vector(v) -> np.ndarray:
    a = np.asarray(v, dtype=np.float64)
    if a.ndim != 1:
        raise DimensionMismatchError(f"vector must be 1-D, got shape {a.shape}")
    return a


def as_matrix(vs) -> np.ndarray:
    """Stack a sequence of equal-length vectors into an (N, D) array."""
    if isinstance(vs, np.ndarray):
        m = vs.astype(np.float64, copy=False)
    else:
        rows = [np.asarray(v, dtype=np.float64) for v in vs]
        if not rows:
            return np.zeros((0, 0), np.float64)
        if len({r.shape for r in rows}) != 1:
            raise DimensionMismatchError("vectors have different lengths")
        m = np.stack(rows)
    if m.ndim != 2:
        raise DimensionMismatchError(f"expected (N, D) vectors, got shape {m.shape}")
    return m


def _check(a: np.ndarray, b: np.ndarray) -> None:
    if a.shape != b.shape:
        raise DimensionMismatchError(f"dimension {a.shape[-1]} != {b.shape[-1]}")


def clamp(v: np.ndarray, bounds: Optional[Bounds]) -> np.ndarray:
    if bounds is None:
        return v
    return np.clip(v, bounds.low, bounds.high)


def add(a, b, bounds: Optional[Bounds] = None) -> np.ndarray:
    a, b = as_vector(a), as_vector(b)
    _check(a, b)
    return clamp(a + b, bounds)


def subtract(a, b, bounds: Optional[Bounds] = None) -> np.ndarray:
    a, b = as_vector(a), as_vector(b)
    _check(a, b)
    return clamp(a - b, bounds)


def distance(a, b) -> float:
    # squared euclidean; the root is never taken
    a, b = as_vector(a), as_vector(b)
    _check(a, b)
    return float(sq_dists(a[None, :], b[None, :])[0, 0])


def sq_dists(X: np.ndarray, C: np.ndarray) -> np.ndarray:
    """(N, D) x (K, D) -> (N, K) squared distances."""
    diff = X[:, None, :] - C[None, :, :]
    return (diff * diff).sum(axis=-1)


def centroid(vectors: Sequence) -> np.ndarray:
    m = as_matrix(vectors)
    if len(m) == 0:
        raise EmptyInputError("centroid of an empty set")
    return m.mean(axis=0)
