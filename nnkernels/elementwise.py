"""Elementwise float32 operators: broadcast subtraction and ternary select."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from nnkernels.tensor import Tensor


def _operand(value, name: str) -> tuple[np.ndarray, tuple[int, ...]]:
    """Return ``value`` as a flat float32 array together with its shape."""
    if value is None:
        raise ValueError(f"{name} is required")
    if isinstance(value, Tensor):
        value = value.data
    array = np.asarray(value, dtype=np.float32)
    return array.reshape(-1), array.shape


def _require_params(params) -> None:
    if params is None:
        raise ValueError("params are required")


def _shaped(flat: np.ndarray, *shapes: tuple[int, ...]) -> np.ndarray:
    for shape in shapes:
        if math.prod(shape) == flat.size:
            return flat.reshape(shape)
    return flat


@dataclass(frozen=True)
class SubParams:
    """Sizes for ``sub``.

    ``numel`` is the number of output elements (that of ``a``); ``b_numel``
    is 1 for a scalar ``b``, otherwise the length of the trailing block that
    ``b`` repeats over.
    """

    numel: int
    b_numel: int


@dataclass(frozen=True)
class WhereParams:
    """Sizes for ``where``.

    A per-operand size of 0 or less means the operand has ``numel`` elements;
    a smaller positive size is repeated cyclically.
    """

    numel: int
    cond_numel: int = 0
    x_numel: int = 0
    y_numel: int = 0


def sub(a, b, params: SubParams) -> np.ndarray:
    """Return ``a - b`` with ``b`` a scalar or a block repeated across ``a``.

    Raises ValueError when an operand or the params are missing, when an
    operand is too short, or when ``numel`` is not a whole number of blocks.
    """
    lhs, lhs_shape = _operand(a, "a")
    rhs, _ = _operand(b, "b")
    _require_params(params)

    n, block = params.numel, params.b_numel
    if n < 0:
        raise ValueError(f"numel must not be negative, got {n}")
    if lhs.size < n:
        raise ValueError(f"a has {lhs.size} elements, {n} required")

    if block == 1:
        if rhs.size < 1:
            raise ValueError("b is empty")
        out = lhs[:n] - rhs[0]
    else:
        if block <= 0:
            raise ValueError(f"b_numel must be positive, got {block}")
        if n % block:
            raise ValueError(f"numel {n} is not a multiple of b_numel {block}")
        if rhs.size < block:
            raise ValueError(f"b has {rhs.size} elements, {block} required")
        out = (lhs[:n].reshape(-1, block) - rhs[:block]).reshape(-1)
    return _shaped(out, lhs_shape)


def where(condition, x, y, params: WhereParams) -> np.ndarray:
    """Select ``x`` where ``condition`` is non-zero and ``y`` elsewhere.

    Each operand is indexed cyclically by its own size, so shorter operands
    broadcast over the output.
    """
    cond, cond_shape = _operand(condition, "condition")
    xs, x_shape = _operand(x, "x")
    ys, y_shape = _operand(y, "y")
    _require_params(params)

    n = params.numel
    if n < 0:
        raise ValueError(f"numel must not be negative, got {n}")
    if n == 0:
        return np.zeros(0, dtype=np.float32)

    sizes = []
    for label, values, size in (
        ("condition", cond, params.cond_numel),
        ("x", xs, params.x_numel),
        ("y", ys, params.y_numel),
    ):
        size = size if size > 0 else n
        if values.size < size:
            raise ValueError(f"{label} has {values.size} elements, {size} required")
        sizes.append(size)

    idx = np.arange(n, dtype=np.int64)
    cond_n, x_n, y_n = sizes
    out = np.where(cond[idx % cond_n] != 0, xs[idx % x_n], ys[idx % y_n])
    return _shaped(out.astype(np.float32, copy=False), x_shape, cond_shape, y_shape)