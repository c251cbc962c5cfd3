"""Initial codebooks: binary splitting or random sampling of the training set."""
from __future__ import annotations

from typing import Optional

import numpy as np
from loguru import logger

from ..config import QuantCfg, TrainingCfg
from .errors import EmptyInputError, InsufficientDataError
from .lbg import refine
from .vector import Bounds, as_matrix, centroid, clamp


def _check(X: np.ndarray, codes: int) -> None:
    if len(X) == 0:
        raise EmptyInputError("empty training set")
    if codes < 1:
        raise ValueError(f"codebook size must be >= 1, got {codes}")


def split(codebook: np.ndarray, perturbation: float,
          bounds: Optional[Bounds] = None) -> np.ndarray:
    """Replace every codeword c by c+p and c-p, in that order."""
    p = np.full(codebook.shape[1], perturbation, np.float64)
    kids = np.empty((2 * len(codebook), codebook.shape[1]), np.float64)
    kids[0::2] = clamp(codebook + p, bounds)
    kids[1::2] = clamp(codebook - p, bounds)
    return kids


def init_split(vectors, codes: int, perturbation: float = 1.0,
               bounds: Optional[Bounds] = None,
               training: Optional[TrainingCfg] = None) -> np.ndarray:
    """Grow a codebook from the global centroid by repeated splitting.

    Each split doubles the codebook, truncates it to ``codes`` entries and
    refines it before the next split.  Refinement may drop codewords whose
    cluster is empty; when a split no longer grows the codebook the
    smaller codebook is returned.
    """
    X = as_matrix(vectors)
    _check(X, codes)
    t  = training or TrainingCfg()
    cb = clamp(centroid(X), bounds)[None, :]
    while len(cb) < codes:
        before = len(cb)
        cb = split(cb, perturbation, bounds)[:codes]
        cb = refine(X, cb, t.policy, t.rounds, t.max_rounds, t.workers).codebook
        logger.debug("split {} -> {} codewords", before, len(cb))
        if len(cb) <= before:
            logger.warning("splitting stalled at {} of {} codewords", len(cb), codes)
            break
    return cb


def init_random(vectors, codes: int, rng=None) -> np.ndarray:
    """First ``codes`` vectors of a uniform random permutation of the set."""
    X = as_matrix(vectors)
    _check(X, codes)
    if len(X) < codes:
        raise InsufficientDataError(
            f"{codes} codewords requested from {len(X)} training vectors")
    if rng is None or isinstance(rng, (int, np.integer)):
        rng = np.random.RandomState(rng)
    perm = rng.permutation(len(X))
    return X[perm[:codes]].copy()


def get_codebook(vectors, cfg: QuantCfg,
                 training: Optional[TrainingCfg] = None) -> np.ndarray:
    if cfg.init == "split":
        cb = init_split(vectors, cfg.codes, cfg.perturbation, cfg.bounds, training)
    else:
        cb = init_random(vectors, cfg.codes, cfg.seed)
    logger.info("initial codebook ({}): {} x {}", cfg.init, *cb.shape)
    return cb
