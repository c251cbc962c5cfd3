"""Lloyd / LBG refinement.

Every round partitions the whole training set against the codebook it is
given, moves each codeword to the centroid of its cluster and drops the
codewords whose cluster came out empty.  Rounds never share state: the
codebook goes in as an argument and a freshly built one comes out.
"""
from __future__ import annotations

from contextlib import nullcontext
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from .classify import classify_many
from .errors import DimensionMismatchError, EmptyCodebookError, EmptyInputError, RoundFailedError
from .vector import as_matrix, centroid

POLICIES = ("converge", "fixed")
ALIASES  = {"fixed-rounds": "fixed"}


def policy_name(policy: str) -> str:
    name = ALIASES.get(policy, policy)
    if name not in POLICIES:
        raise ValueError(f"unknown policy {policy!r}, expected one of {POLICIES + tuple(ALIASES)}")
    return name


@dataclass
class Partition:
    assign: np.ndarray      # (N,) codeword index per training vector
    dist: np.ndarray        # (N,) squared distance to that codeword
    size: int               # number of codewords partitioned against

    @property
    def counts(self) -> np.ndarray:
        return np.bincount(self.assign, minlength=self.size)

    @property
    def distortion(self) -> float:
        return float(self.dist.sum())

    def clusters(self) -> List[np.ndarray]:
        """One buffer of training-set row numbers per codeword index."""
        order = np.argsort(self.assign, kind="stable")
        ends  = np.cumsum(self.counts)
        return np.split(order, ends[:-1])


@dataclass
class RefineResult:
    codebook: np.ndarray
    rounds: int = 0
    converged: bool = False
    history: List[float] = field(default_factory=list)
    partition: Optional[Partition] = None


def _fan_out(pool: ThreadPoolExecutor, fn, jobs):
    futs = [pool.submit(fn, *j) for j in jobs]
    done, pending = wait(futs, return_when=FIRST_EXCEPTION)
    for f in pending:
        f.cancel()
    # results in submission order; the first failure is re-raised
    for f in futs:
        if f in done and f.exception() is not None:
            raise f.exception()
    return [f.result() for f in futs]


def partition(X: np.ndarray, codebook: np.ndarray,
              pool: Optional[ThreadPoolExecutor] = None, workers: int = 1) -> Partition:
    if pool is None or workers <= 1:
        idx, dist = classify_many(X, codebook)
    else:
        chunks = [c for c in np.array_split(X, workers) if len(c)]
        parts  = _fan_out(pool, classify_many, [(c, codebook) for c in chunks])
        idx    = np.concatenate([p[0] for p in parts])
        dist   = np.concatenate([p[1] for p in parts])
    return Partition(idx, dist, len(codebook))


def refine_round(vectors, codebook, workers: int = 1) -> Tuple[np.ndarray, Partition]:
    X  = as_matrix(vectors)
    cb = as_matrix(codebook)
    with ThreadPoolExecutor(max_workers=workers) if workers > 1 else nullcontext() as pool:
        part = partition(X, cb, pool, workers)
        members = [m for m in part.clusters() if len(m)]
        if workers > 1:
            cents = _fan_out(pool, lambda m: centroid(X[m]), [(m,) for m in members])
        else:
            cents = [centroid(X[m]) for m in members]
    dropped = part.size - len(members)
    if dropped:
        logger.warning("dropped {} empty cluster(s), codebook {} -> {}",
                       dropped, part.size, len(members))
    new = np.stack(cents)
    new.flags.writeable = False
    return new, part


def refine(vectors, codebook, policy: str = "converge", rounds: int = 10,
           max_rounds: int = 1000, workers: int = 1) -> RefineResult:
    """Run refinement rounds until the stopping policy is met.

    ``converge`` stops once two consecutive rounds assign every training
    vector to the same index (capped at ``max_rounds``); ``fixed`` runs
    exactly ``rounds`` rounds.  A failing round raises
    :class:`RoundFailedError` holding the last complete codebook.
    """
    policy = policy_name(policy)
    X  = as_matrix(vectors)
    cb = as_matrix(codebook)
    if len(X) == 0:
        raise EmptyInputError("empty training set")
    if len(cb) == 0:
        raise EmptyCodebookError("codebook has no codewords")
    if X.shape[1] != cb.shape[1]:
        raise DimensionMismatchError(
            f"training vectors have {X.shape[1]} components, codebook has {cb.shape[1]}")

    limit = rounds if policy == "fixed" else max_rounds
    res   = RefineResult(cb)
    prev: Optional[np.ndarray] = None
    for rd in range(1, limit + 1):
        try:
            new, part = refine_round(X, res.codebook, workers)
        except Exception as exc:
            raise RoundFailedError(f"refinement round {rd} failed: {exc}",
                                   res.codebook, rd) from exc
        res.codebook, res.partition, res.rounds = new, part, rd
        res.history.append(part.distortion)
        logger.debug("round {:>3} | K={} | distortion={:.4f}", rd, len(new), part.distortion)
        if policy == "converge" and prev is not None and np.array_equal(prev, part.assign):
            res.converged = True
            break
        prev = part.assign
    else:
        if policy == "converge":
            logger.warning("no convergence after {} rounds", limit)
    return res
