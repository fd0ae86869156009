"""Element data types supported by tensors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

import numpy as np


class DataType(IntEnum):
    """Element type of a tensor."""

    F32 = 0
    F16 = 1
    BF16 = 2
    I32 = 3
    I8 = 4
    U8 = 5
    I64 = 6


@dataclass(frozen=True)
class DataTypeInfo:
    """Static description of a data type.

    ``storage`` is the numpy dtype used to hold elements on the host; bf16
    has no numpy counterpart and is kept as its raw 16-bit pattern.
    """

    name: str
    size: int
    is_float: bool
    is_signed: bool
    storage: np.dtype


_TYPE_INFO: dict[DataType, DataTypeInfo] = {
    DataType.F32: DataTypeInfo("f32", 4, True, True, np.dtype(np.float32)),
    DataType.F16: DataTypeInfo("f16", 2, True, True, np.dtype(np.float16)),
    DataType.BF16: DataTypeInfo("bf16", 2, True, True, np.dtype(np.uint16)),
    DataType.I32: DataTypeInfo("i32", 4, False, True, np.dtype(np.int32)),
    DataType.I8: DataTypeInfo("i8", 1, False, True, np.dtype(np.int8)),
    DataType.U8: DataTypeInfo("u8", 1, False, False, np.dtype(np.uint8)),
    DataType.I64: DataTypeInfo("i64", 8, False, True, np.dtype(np.int64)),
}


def data_type_info(dtype: DataType | int) -> DataTypeInfo:
    """Return the description of ``dtype``.

    Raises ValueError for a value that names no data type.
    """
    try:
        key = DataType(dtype)
    except ValueError:
        raise ValueError(f"unknown data type: {dtype!r}") from None
    return _TYPE_INFO[key]