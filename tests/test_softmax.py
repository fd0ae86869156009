import numpy as np
import pytest

from nnkernels.dtypes import DataType
from nnkernels.softmax import SoftmaxParams, softmax
from nnkernels.tensor import Tensor


def test_softmax_simple():
    t = Tensor(DataType.F32, (1, 3))
    t.data[0] = [1.0, 2.0, 3.0]
    out = softmax(t, SoftmaxParams(num_classes=3, num_blocks=1))
    assert out.shape == (1, 3)
    assert float(out.sum()) == pytest.approx(1.0, abs=0.001)
    np.testing.assert_allclose(out[0], [0.0900, 0.2447, 0.6652], atol=0.01)


def test_softmax_batch():
    x = np.array([[0, 0, 0, 0], [0, 1, 2, 3]], dtype=np.float32)
    out = softmax(x, SoftmaxParams(num_classes=4, num_blocks=2))
    np.testing.assert_allclose(out[0], [0.25] * 4, atol=0.001)
    assert float(out[1].sum()) == pytest.approx(1.0, abs=0.001)
    assert out[1, 0] < out[1, 1] < out[1, 2] < out[1, 3]


def test_softmax_null_check():
    buf = np.zeros(4, dtype=np.float32)
    with pytest.raises(ValueError):
        softmax(None, SoftmaxParams(num_classes=4, num_blocks=1))
    with pytest.raises(ValueError):
        softmax(buf, None)


def test_softmax_large_values_are_stable():
    out = softmax([1000.0, 1000.0], SoftmaxParams(num_classes=2, num_blocks=1))
    np.testing.assert_allclose(out, [0.5, 0.5], atol=1e-6)
    assert np.all(np.isfinite(out))


def test_softmax_input_too_short():
    with pytest.raises(ValueError):
        softmax([1.0, 2.0, 3.0], SoftmaxParams(num_classes=2, num_blocks=2))


def test_softmax_does_not_modify_input():
    x = np.array([1.0, 2.0, 3.0], dtype=np.float32)
    softmax(x, SoftmaxParams(num_classes=3, num_blocks=1))
    np.testing.assert_array_equal(x, [1.0, 2.0, 3.0])