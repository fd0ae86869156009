"""Dense host tensors with an optional device-side mirror."""

from __future__ import annotations

import math
import struct
from collections.abc import Iterable

import numpy as np

from nnkernels.dtypes import DataType, data_type_info

MAX_TENSOR_DIMS = 8


def f16_to_f32(bits: int) -> float:
    """Decode an IEEE 754 half-precision bit pattern."""
    if not 0 <= bits <= 0xFFFF:
        raise ValueError(f"not a 16-bit pattern: {bits!r}")
    sign = (bits & 0x8000) << 16
    exp = (bits >> 10) & 0x1F
    mant = (bits & 0x3FF) << 13
    if exp == 0:
        if mant == 0:
            out = sign
        else:
            while not mant & 0x800000:
                mant <<= 1
                exp -= 1
            exp += 1
            mant &= ~0x800000
            out = sign | ((exp + 127 - 15) << 23) | mant
    elif exp == 31:
        out = sign | 0x7F800000 | mant
    else:
        out = sign | ((exp + 127 - 15) << 23) | mant
    return struct.unpack("<f", struct.pack("<I", out & 0xFFFFFFFF))[0]


class Tensor:
    """A contiguous, zero-initialised tensor of up to 8 dimensions."""

    def __init__(self, dtype: DataType | int, shape: Iterable[int]):
        self.dtype = DataType(data_type_info(dtype).name and dtype)
        dims = tuple(int(d) for d in shape)
        if len(dims) > MAX_TENSOR_DIMS:
            raise ValueError(
                f"tensor has {len(dims)} dimensions, at most {MAX_TENSOR_DIMS}"
            )
        if any(d < 0 for d in dims):
            raise ValueError(f"negative dimension in shape {dims}")
        self.shape = dims
        self.data = np.zeros(dims, dtype=data_type_info(self.dtype).storage)
        self.device_data: np.ndarray | None = None

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def numel(self) -> int:
        return math.prod(self.shape)

    @property
    def nbytes(self) -> int:
        return self.numel * data_type_info(self.dtype).size

    def copy_to_device(self) -> None:
        """Create the device mirror from host data, unless it already exists."""
        if self.device_data is None:
            self.device_data = self.data.copy()

    def copy_to_host(self) -> None:
        """Copy the device mirror back into host data; no-op without one."""
        if self.device_data is not None:
            np.copyto(self.data, self.device_data)

    def allclose(self, other: Tensor | None, rtol: float, atol: float) -> bool:
        return allclose(self, other, rtol, atol)

    def _as_float32(self) -> np.ndarray:
        flat = np.ascontiguousarray(self.data).reshape(-1)
        size = data_type_info(self.dtype).size
        if size == 4:
            return flat.view(np.float32)
        if size == 2:
            return flat.view(np.uint16).view(np.float16).astype(np.float32)
        return np.zeros(flat.shape, dtype=np.float32)

    def __repr__(self) -> str:
        return f"Tensor(dtype={self.dtype.name}, shape={self.shape})"


def allclose(a: Tensor | None, b: Tensor | None, rtol: float, atol: float) -> bool:
    """Elementwise closeness of two tensors of the same type and size.

    Four-byte elements are read as float32 and two-byte elements as half
    precision; other element sizes read as zero.
    """
    if a is None or b is None or a.numel != b.numel:
        return False
    if a.dtype != b.dtype:
        return False
    va = a._as_float32()
    vb = b._as_float32()
    with np.errstate(invalid="ignore", over="ignore"):
        diff = np.abs(va - vb)
        largest = np.fmax(np.abs(va), np.abs(vb))
        bad = (diff > np.float32(atol)) & (diff > np.float32(rtol) * largest)
    return not bool(np.any(bad))