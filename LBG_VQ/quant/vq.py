from __future__ import annotations

from typing import Optional

import numpy as np
from loguru import logger

from ..config import QuantCfg, TrainingCfg
from .classify import classify, classify_many
from .codebook import get_codebook
from .errors import DimensionMismatchError, IndexOutOfRangeError
from .lbg import RefineResult, refine
from .vector import as_matrix


def encode(vector, codebook) -> int:
    return classify(vector, codebook)[0]


def decode(index: int, codebook) -> np.ndarray:
    cb = as_matrix(codebook)
    if not 0 <= index < len(cb):
        raise IndexOutOfRangeError(f"index {index} outside codebook of size {len(cb)}")
    return cb[int(index)].copy()


def reconstruct(vector, codebook) -> np.ndarray:
    return decode(encode(vector, codebook), codebook)


def encode_many(vectors, codebook) -> np.ndarray:
    return classify_many(vectors, codebook)[0]


def decode_many(indices, codebook) -> np.ndarray:
    cb  = as_matrix(codebook)
    idx = np.asarray(indices, dtype=np.int64)
    bad = (idx < 0) | (idx >= len(cb))
    if bad.any():
        raise IndexOutOfRangeError(
            f"index {int(idx[bad][0])} outside codebook of size {len(cb)}")
    return cb[idx]


def reconstruct_many(vectors, codebook) -> np.ndarray:
    return decode_many(encode_many(vectors, codebook), codebook)


def train_codebook(vectors, cfg: QuantCfg,
                   training: Optional[TrainingCfg] = None) -> RefineResult:
    """Initialise with ``cfg.init`` and refine under ``training.policy``."""
    t = training or TrainingCfg()
    X = as_matrix(vectors)
    if cfg.dim is not None and X.shape[1] != cfg.dim:
        raise DimensionMismatchError(
            f"training vectors have {X.shape[1]} components, expected {cfg.dim}")
    cb  = get_codebook(X, cfg, t)
    res = refine(X, cb, t.policy, t.rounds, t.max_rounds, t.workers)
    if len(res.codebook) < cfg.codes:
        logger.warning("trained codebook has {} of {} requested codewords",
                       len(res.codebook), cfg.codes)
    logger.info("trained {} codewords in {} rounds (converged={}), distortion={:.4f}",
                len(res.codebook), res.rounds, res.converged,
                res.history[-1] if res.history else float("nan"))
    return res


class VQQuant:
    """A codebook trained once and then applied read-only."""

    def __init__(self, cfg: Optional[QuantCfg] = None,
                 training: Optional[TrainingCfg] = None):
        self.cfg      = cfg or QuantCfg()
        self.training = training or TrainingCfg()
        self.codebook: Optional[np.ndarray] = None
        self.result: Optional[RefineResult] = None

    def fit(self, vectors) -> "VQQuant":
        self.result   = train_codebook(vectors, self.cfg, self.training)
        cb            = np.array(self.result.codebook, np.float64)
        cb.flags.writeable = False
        self.codebook = cb
        return self

    def _cb(self) -> np.ndarray:
        if self.codebook is None:
            raise RuntimeError("VQQuant used before fit()")
        return self.codebook

    def encode(self, vectors) -> np.ndarray:
        return encode_many(vectors, self._cb())

    def decode(self, indices) -> np.ndarray:
        return decode_many(indices, self._cb())

    def reconstruct(self, vectors) -> np.ndarray:
        return reconstruct_many(vectors, self._cb())
