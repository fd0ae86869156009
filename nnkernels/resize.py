"""Spatial resize of NCHW float32 tensors by nearest or bilinear sampling."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from nnkernels.tensor import Tensor


class ResizeMode(IntEnum):
    """Sampling used by ``resize``."""

    NEAREST = 0
    BILINEAR = 1


@dataclass(frozen=True)
class ResizeParams:
    """Input and output sizes of a resize, with the scale along H and W.

    Any ``mode`` other than bilinear samples the nearest input pixel.
    """

    scale_h: float
    scale_w: float
    n: int
    c: int
    h_in: int
    w_in: int
    h_out: int
    w_out: int
    mode: ResizeMode | int = ResizeMode.NEAREST


def _nearest(src: np.ndarray, params: ResizeParams) -> np.ndarray:
    rows = (np.arange(params.h_out, dtype=np.float32) / np.float32(params.scale_h)).astype(
        np.int64
    )
    cols = (np.arange(params.w_out, dtype=np.float32) / np.float32(params.scale_w)).astype(
        np.int64
    )
    rows = np.minimum(rows, params.h_in - 1)
    cols = np.minimum(cols, params.w_in - 1)
    return src[:, :, rows[:, None], cols[None, :]]


def _source_coords(count: int, scale: float, limit: int):
    half = np.float32(0.5)
    coords = (np.arange(count, dtype=np.float32) + half) / np.float32(scale) - half
    low = coords.astype(np.int64)
    high = np.minimum(low + 1, limit - 1)
    low = np.clip(low, 0, limit - 1)
    frac = (coords - low.astype(np.float32)).astype(np.float32)
    return low, high, frac


def _bilinear(src: np.ndarray, params: ResizeParams) -> np.ndarray:
    y0, y1, dy = _source_coords(params.h_out, params.scale_h, params.h_in)
    x0, x1, dx = _source_coords(params.w_out, params.scale_w, params.w_in)
    tl = src[:, :, y0[:, None], x0[None, :]]
    tr = src[:, :, y0[:, None], x1[None, :]]
    bl = src[:, :, y1[:, None], x0[None, :]]
    br = src[:, :, y1[:, None], x1[None, :]]
    one = np.float32(1.0)
    wy = dy[:, None]
    wx = dx[None, :]
    return (
        (one - wy) * (one - wx) * tl
        + (one - wy) * wx * tr
        + wy * (one - wx) * bl
        + wy * wx * br
    )


def resize(x, params: ResizeParams) -> np.ndarray:
    """Resize ``x`` (N, C, H_in, W_in) to an array of shape (N, C, H_out, W_out).

    Raises ValueError when the input or params are missing, when a size is
    negative or a scale is not positive, or when ``x`` is too short.
    """
    if x is None:
        raise ValueError("x is required")
    if params is None:
        raise ValueError("params are required")
    if isinstance(x, Tensor):
        x = x.data
    flat = np.asarray(x, dtype=np.float32).reshape(-1)

    sizes = {
        "n": params.n,
        "c": params.c,
        "h_in": params.h_in,
        "w_in": params.w_in,
        "h_out": params.h_out,
        "w_out": params.w_out,
    }
    for label, value in sizes.items():
        if value < 0:
            raise ValueError(f"{label} must not be negative, got {value}")

    out_shape = (params.n, params.c, params.h_out, params.w_out)
    if math.prod(out_shape) == 0:
        return np.zeros(out_shape, dtype=np.float32)
    if params.h_in == 0 or params.w_in == 0:
        raise ValueError("input has an empty spatial dimension")
    if not (params.scale_h > 0 and params.scale_w > 0):
        raise ValueError(
            f"scales must be positive, got {params.scale_h} and {params.scale_w}"
        )

    need = params.n * params.c * params.h_in * params.w_in
    if flat.size < need:
        raise ValueError(f"x has {flat.size} elements, {need} required")
    src = flat[:need].reshape(params.n, params.c, params.h_in, params.w_in)

    if int(params.mode) == ResizeMode.BILINEAR:
        out = _bilinear(src, params)
    else:
        out = _nearest(src, params)
    return np.ascontiguousarray(out, dtype=np.float32)