"""Nearest-codeword search. Ties go to the lowest index."""
from __future__ import annotations

from typing import Tuple

import numpy as np

from .errors import DimensionMismatchError, EmptyCodebookError, EmptyInputError
from .vector import as_matrix, as_vector, sq_dists

CHUNK = 4096   # rows per distance matrix, bounds the (n, K, D) temporary


def _codebook(codebook) -> np.ndarray:
    cb = as_matrix(codebook)
    if len(cb) == 0:
        raise EmptyCodebookError("codebook has no codewords")
    return cb


def classify(vector, codebook) -> Tuple[int, float]:
    cb = _codebook(codebook)
    v  = as_vector(vector)
    if v.shape[0] != cb.shape[1]:
        raise DimensionMismatchError(
            f"vector has {v.shape[0]} components, codebook has {cb.shape[1]}")
    d = sq_dists(v[None, :], cb)[0]
    i = int(np.argmin(d))          # argmin returns the first minimum
    return i, float(d[i])


def classify_many(vectors, codebook) -> Tuple[np.ndarray, np.ndarray]:
    """Classify every row of ``vectors``; returns (indices, distances)."""
    cb = _codebook(codebook)
    X  = as_matrix(vectors)
    if len(X) == 0:
        raise EmptyInputError("no vectors to classify")
    if X.shape[1] != cb.shape[1]:
        raise DimensionMismatchError(
            f"vectors have {X.shape[1]} components, codebook has {cb.shape[1]}")
    idx  = np.empty(len(X), np.int64)
    dist = np.empty(len(X), np.float64)
    for st in range(0, len(X), CHUNK):
        d = sq_dists(X[st:st + CHUNK], cb)
        i = d.argmin(axis=1)
        idx[st:st + CHUNK]  = i
        dist[st:st + CHUNK] = d[np.arange(len(i)), i]
    return idx, dist
