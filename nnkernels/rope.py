"""Rotary position encoding for (S, H, d) float32 tensors."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from nnkernels.dtypes import DataType
from nnkernels.tensor import Tensor


@dataclass(frozen=True)
class RopeParams:
    """Sequence length, head dimension, head count and frequency base."""

    seq_len: int
    head_dim: int
    num_heads: int
    base: float = 10000.0


def _tables(params: RopeParams, half: int) -> tuple[np.ndarray, np.ndarray]:
    d = np.float32(params.head_dim)
    exponents = (np.arange(half, dtype=np.float32) * np.float32(2.0)) / d
    denom = np.power(np.float32(params.base), exponents).astype(np.float32)
    positions = np.arange(params.seq_len, dtype=np.float32)
    angles = (positions[:, None] / denom[None, :]).astype(np.float32)
    return np.cos(angles), np.sin(angles)


def _rotate(buffer: np.ndarray, params: RopeParams) -> None:
    half = params.head_dim // 2
    if half == 0 or params.seq_len == 0 or params.num_heads == 0:
        return
    block = buffer.reshape(params.seq_len, params.num_heads, params.head_dim)
    cos, sin = _tables(params, half)
    c = cos[:, None, :]
    s = sin[:, None, :]
    x0 = block[:, :, 0 : 2 * half : 2].copy()
    x1 = block[:, :, 1 : 2 * half : 2].copy()
    block[:, :, 0 : 2 * half : 2] = x0 * c - x1 * s
    block[:, :, 1 : 2 * half : 2] = x0 * s + x1 * c


def rope(x, params: RopeParams, in_place: bool = False) -> np.ndarray:
    """Rotate each consecutive pair of head dimensions by a position angle.

    Pair ``i`` at position ``pos`` turns by ``pos / base ** (2i / d)``.
    With ``in_place`` the float32 array (or F32 tensor data) is modified and
    returned; otherwise a new array is returned and ``x`` is left untouched.
    """
    if x is None:
        raise ValueError("x is required")
    if params is None:
        raise ValueError("params are required")
    for label, value in (
        ("seq_len", params.seq_len),
        ("head_dim", params.head_dim),
        ("num_heads", params.num_heads),
    ):
        if value < 0:
            raise ValueError(f"{label} must not be negative, got {value}")
    total = params.seq_len * params.num_heads * params.head_dim

    if isinstance(x, Tensor):
        if in_place and x.dtype != DataType.F32:
            raise ValueError(f"in-place rope needs an F32 tensor, got {x.dtype.name}")
        x = x.data

    if in_place:
        if not isinstance(x, np.ndarray) or x.dtype != np.float32:
            raise ValueError("in-place rope needs a float32 array")
        if not (x.flags.c_contiguous and x.flags.writeable):
            raise ValueError("in-place rope needs a contiguous, writable array")
        flat = x.reshape(-1)
        if flat.size < total:
            raise ValueError(f"x has {flat.size} elements, {total} required")
        _rotate(flat[:total], params)
        return x

    array = np.asarray(x, dtype=np.float32)
    flat = array.reshape(-1)
    if flat.size < total:
        raise ValueError(f"x has {flat.size} elements, {total} required")
    out = flat[:total].copy()
    _rotate(out, params)
    if math.prod(array.shape) == total:
        return out.reshape(array.shape)
    return out.reshape(params.seq_len, params.num_heads, params.head_dim)