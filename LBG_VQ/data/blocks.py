"""Grey-level images <-> flattened square blocks."""
from __future__ import annotations

import math
from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image


def load_gray(path) -> np.ndarray:
    return np.array(Image.open(path).convert("L"), dtype=np.uint8)


def save_gray(arr: np.ndarray, path) -> Path:
    path = Path(path)
    img  = np.clip(np.rint(arr), 0, 255).astype(np.uint8)
    Image.fromarray(img).save(path)
    return path


def to_blocks(img: np.ndarray, block: int) -> np.ndarray:
    """Row-major tiles of ``block`` x ``block`` pixels, one vector per tile.

    Edge tiles that run past the image are zero-padded.
    """
    H, W = img.shape
    ph, pw = -H % block, -W % block
    pad = np.pad(img, ((0, ph), (0, pw)), constant_values=0)
    gh, gw = pad.shape[0] // block, pad.shape[1] // block
    return (pad.reshape(gh, block, gw, block)
               .swapaxes(1, 2)
               .reshape(gh * gw, block * block))


def from_blocks(vectors: np.ndarray, shape: Tuple[int, int], block: int) -> np.ndarray:
    H, W = shape
    gh, gw = math.ceil(H / block), math.ceil(W / block)
    vecs = np.asarray(vectors)
    if vecs.shape != (gh * gw, block * block):
        raise ValueError(f"expected {(gh * gw, block * block)} vectors, got {vecs.shape}")
    full = (vecs.reshape(gh, gw, block, block)
                .swapaxes(1, 2)
                .reshape(gh * block, gw * block))
    return full[:H, :W]


def codebook_mosaic(codebook: np.ndarray, block: int) -> np.ndarray:
    """Lay the codewords out on a square grid, unused cells left black."""
    cb = np.asarray(codebook)
    grid = math.ceil(math.sqrt(len(cb)))
    out  = np.zeros((grid * block, grid * block), np.float64)
    for i, word in enumerate(cb):
        y, x = (i // grid) * block, (i % grid) * block
        out[y:y + block, x:x + block] = word.reshape(block, block)
    return out
