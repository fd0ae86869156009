# nnkernels

Plain CPU reference implementations of a few neural-network operators. They
work on NumPy `float32` arrays. The package also has a small `Tensor` type,
data-type metadata and a description of the host platform.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `nnkernels.dtypes` holds `DataType` (`F32`, `F16`, `BF16`, `I32`, `I8`,
  `U8`, `I64`) and `DataTypeInfo`. `data_type_info(dtype)` returns the name,
  the element size in bytes, whether the type is floating point, whether it is
  signed, and the NumPy storage dtype. BF16 is stored as raw `uint16`. An
  unknown value raises `ValueError`.
- `nnkernels.platform` holds `Platform`, which has `name`, `cache_line_size`,
  `core_count`, `simd_flags` and `pin_thread(cpu_id)`. It also holds
  `SimdFlag` and the following functions:
  - `init_platform()` detects the host.
  - `current_platform()` returns the platform.
  - `finalize_platform()` clears it and undoes any thread pinning.
  - `cache_line_size()` returns the cache line size. Before initialisation it
    returns 64.
  - `core_count()` returns the core count. Before initialisation it returns 1.

  `pin_thread` raises `ValueError` for a core that does not exist. On systems
  without CPU affinity support it does nothing.
- `nnkernels.tensor` holds `Tensor(dtype, shape)`, a zero-filled tensor of up
  to eight dimensions. It has the properties `data`, `shape`, `ndim`, `numel`
  and `nbytes`, and the methods `copy_to_device()`, `copy_to_host()` and
  `allclose(other, rtol, atol)`. The module also has a free function
  `allclose(a, b, rtol, atol)` and `f16_to_f32(bits)`, which decodes
  IEEE half-precision bit patterns.
- `nnkernels.elementwise` holds `sub(a, b, SubParams(numel, b_numel))`. Here
  `b` is either a scalar or a trailing block that repeats across `a`. The
  module also holds `where(condition, x, y, WhereParams(numel, cond_numel,
  x_numel, y_numel))`, in which shorter operands repeat cyclically.
- `nnkernels.softmax` holds `softmax(x, SoftmaxParams(num_classes, num_blocks))`.
  It is computed over consecutive rows, with the row maximum subtracted for
  stability.
- `nnkernels.resize` holds `resize(x, ResizeParams(...))`, which resizes an
  NCHW input with nearest or bilinear sampling (`ResizeMode`).
- `nnkernels.rope` holds `rope(x, RopeParams(seq_len, head_dim, num_heads,
  base), in_place=False)`, a rotary position encoding over an (S, H, d)
  layout. With `in_place=True` the float32 array is modified and returned.

Operators accept arrays, array-likes or `Tensor` objects and return NumPy
arrays. When an input or the parameters are missing, or when sizes are
inconsistent, they raise `ValueError`.

## Example

```python
import numpy as np
from nnkernels.softmax import SoftmaxParams, softmax
from nnkernels.rope import RopeParams, rope

x = np.array([1.0, 2.0, 3.0], dtype=np.float32)
probs = softmax(x, SoftmaxParams(num_classes=3, num_blocks=1))

q = np.ones((4, 2, 4), dtype=np.float32)
rotated = rope(q, RopeParams(seq_len=4, head_dim=4, num_heads=2))
```

## What it does not do

- There is no operator registry or lookup of kernels by name. Call the
  functions directly.
- There are no slicing, splitting, transposing or reshaping operators.
- There is no model loading, graph execution or command-line program.
- There is no accelerator backend. `Tensor.copy_to_device()` only keeps a
  second host-side copy in `device_data`, and `copy_to_host()` writes that
  copy back into `data`.