"""Numerically stable softmax over the last axis of contiguous blocks."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from nnkernels.tensor import Tensor


@dataclass(frozen=True)
class SoftmaxParams:
    """``num_classes`` is the softmax axis length, ``num_blocks`` the row count."""

    num_classes: int
    num_blocks: int


def softmax(x, params: SoftmaxParams) -> np.ndarray:
    """Softmax of each of ``num_blocks`` consecutive rows of ``num_classes``.

    Each row is shifted by its maximum before exponentiation. A row whose
    exponentials sum to zero is left unnormalised.
    """
    if x is None:
        raise ValueError("x is required")
    if params is None:
        raise ValueError("params are required")
    if isinstance(x, Tensor):
        x = x.data
    array = np.asarray(x, dtype=np.float32)
    flat = array.reshape(-1)

    classes, blocks = params.num_classes, params.num_blocks
    if blocks < 0:
        raise ValueError(f"num_blocks must not be negative, got {blocks}")
    if blocks == 0:
        return np.zeros(0, dtype=np.float32)
    if classes < 1:
        raise ValueError(f"num_classes must be positive, got {classes}")
    total = classes * blocks
    if flat.size < total:
        raise ValueError(f"x has {flat.size} elements, {total} required")

    rows = flat[:total].reshape(blocks, classes)
    exps = np.exp(rows - rows.max(axis=1, keepdims=True))
    sums = exps.sum(axis=1, keepdims=True, dtype=np.float32)
    inv = np.float32(1.0) / np.where(sums > 0, sums, np.float32(1.0))
    out = (exps * inv).astype(np.float32, copy=False).reshape(-1)
    if math.prod(array.shape) == total:
        return out.reshape(array.shape)
    return out