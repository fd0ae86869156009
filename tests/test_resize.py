import numpy as np
import pytest

from nnkernels.dtypes import DataType
from nnkernels.resize import ResizeMode, ResizeParams, resize
from nnkernels.tensor import Tensor


def _params(mode=ResizeMode.NEAREST):
    return ResizeParams(
        scale_h=2.0, scale_w=2.0, n=1, c=1, h_in=2, w_in=2, h_out=4, w_out=4, mode=mode
    )


def _input():
    t = Tensor(DataType.F32, (1, 1, 2, 2))
    t.data[...] = np.array([1.0, 2.0, 3.0, 4.0], dtype=np.float32).reshape(1, 1, 2, 2)
    return t


def test_resize_nearest_2x():
    out = resize(_input(), _params())
    expected = np.array(
        [
            [1, 1, 2, 2],
            [1, 1, 2, 2],
            [3, 3, 4, 4],
            [3, 3, 4, 4],
        ],
        dtype=np.float32,
    )
    assert out.shape == (1, 1, 4, 4)
    np.testing.assert_allclose(out[0, 0], expected, atol=0.001)


def test_resize_bilinear_2x():
    out = resize(_input(), _params(ResizeMode.BILINEAR))
    od = out.reshape(-1)
    assert od.size == 16
    assert np.all(np.isfinite(od))
    assert 1.0 < od[5] < 4.0
    assert od[0] < od[15]


def test_resize_null_check():
    with pytest.raises(ValueError):
        resize(None, None)
    buf = np.zeros(16, dtype=np.float32)
    with pytest.raises(ValueError):
        resize(buf, None)


def test_resize_unknown_mode_samples_nearest():
    nearest = resize(_input(), _params())
    other = resize(_input(), _params(mode=7))
    np.testing.assert_array_equal(nearest, other)


def test_resize_identity_scale_keeps_values():
    data = np.arange(12, dtype=np.float32)
    params = ResizeParams(1.0, 1.0, 1, 3, 2, 2, 2, 2)
    out = resize(data, params)
    np.testing.assert_array_equal(out.reshape(-1), data)


def test_resize_rejects_short_input():
    with pytest.raises(ValueError):
        resize(np.zeros(3, dtype=np.float32), _params())


def test_resize_rejects_non_positive_scale():
    params = ResizeParams(0.0, 2.0, 1, 1, 2, 2, 4, 4)
    with pytest.raises(ValueError):
        resize(np.zeros(4, dtype=np.float32), params)