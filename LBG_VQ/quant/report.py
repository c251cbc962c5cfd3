"""Distortion and rate figures for a quantized set of vectors."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.metrics import mean_squared_error as _sk_mse

from .errors import EmptyInputError, LengthMismatchError


def mean_squared_error(originals, reconstructions) -> float:
    a = [np.asarray(v, dtype=np.float64).ravel() for v in originals]
    b = [np.asarray(v, dtype=np.float64).ravel() for v in reconstructions]
    if len(a) != len(b):
        raise LengthMismatchError(f"{len(a)} originals vs {len(b)} reconstructions")
    if not a:
        raise EmptyInputError("no vectors to compare")
    for i, (x, y) in enumerate(zip(a, b)):
        if x.shape != y.shape:
            raise LengthMismatchError(
                f"pair {i}: dimension {x.shape[0]} vs {y.shape[0]}")
    return float(_sk_mse(np.concatenate(a), np.concatenate(b)))


def psnr(mse: float, peak: float = 255.0) -> float:
    return math.inf if mse == 0 else 10.0 * math.log10(peak * peak / mse)


def index_bits(codebook_size: int) -> int:
    """ceil(log2(K)) bits per index, never less than one."""
    if codebook_size < 1:
        raise ValueError(f"codebook size must be >= 1, got {codebook_size}")
    return max(1, (codebook_size - 1).bit_length())


def compression_ratio(n_vectors: int, codebook_size: int, dim: int,
                      bits_per_component: int = 8,
                      n_components: Optional[int] = None) -> float:
    """Raw bits over index bits.

    ``n_components`` overrides the raw sample count when the vectors cover
    padding, e.g. edge tiles running past an image.
    """
    if n_components is None:
        n_components = n_vectors * dim
    original   = n_components * bits_per_component
    compressed = n_vectors * index_bits(codebook_size)
    if compressed == 0:
        raise EmptyInputError("no vectors to compress")
    return original / compressed


@dataclass
class Report:
    vectors: int
    codebook_size: int
    dim: int
    mse: float
    psnr: float
    bits_per_index: int
    ratio: float


def report(originals, reconstructions, codebook_size: int,
           bits_per_component: int = 8) -> Report:
    mse = mean_squared_error(originals, reconstructions)
    n   = len(originals)
    dim = int(np.asarray(originals[0]).size)
    return Report(
        vectors        = n,
        codebook_size  = codebook_size,
        dim            = dim,
        mse            = mse,
        psnr           = psnr(mse, float(2 ** bits_per_component - 1)),
        bits_per_index = index_bits(codebook_size),
        ratio          = compression_ratio(n, codebook_size, dim, bits_per_component),
    )


def image_report(image, recon, codebook_size: int, block: int,
                 bits_per_component: int = 8) -> Report:
    """Figures over the image pixels only; tile padding is not counted."""
    img = np.asarray(image, dtype=np.float64)
    rec = np.asarray(recon, dtype=np.float64)
    if img.shape != rec.shape:
        raise LengthMismatchError(f"image {img.shape} vs reconstruction {rec.shape}")
    H, W = img.shape
    n    = math.ceil(H / block) * math.ceil(W / block)
    mse  = mean_squared_error(img, rec)
    return Report(
        vectors        = n,
        codebook_size  = codebook_size,
        dim            = block * block,
        mse            = mse,
        psnr           = psnr(mse, float(2 ** bits_per_component - 1)),
        bits_per_index = index_bits(codebook_size),
        ratio          = compression_ratio(n, codebook_size, block * block,
                                           bits_per_component, n_components=H * W),
    )
