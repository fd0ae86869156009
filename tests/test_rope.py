import math

import numpy as np
import pytest

from nnkernels.dtypes import DataType
from nnkernels.rope import RopeParams, rope
from nnkernels.tensor import Tensor

T_S, T_H, T_D = 4, 2, 4


def _random_input():
    rng = np.random.default_rng(42)
    return ((rng.random(T_S * T_H * T_D) - 0.5) * 2.0).astype(np.float32).reshape(
        T_S, T_H, T_D
    )


def _params():
    return RopeParams(seq_len=T_S, head_dim=T_D, num_heads=T_H, base=10000.0)


def test_rope_preserves_pair_magnitude():
    data = _random_input()
    out = rope(data, _params())
    pin = data.reshape(-1, 2)
    pout = out.reshape(-1, 2)
    mag_in = np.sqrt((pin * pin).sum(axis=1))
    mag_out = np.sqrt((pout * pout).sum(axis=1))
    assert np.max(np.abs(mag_out - mag_in)) < 1e-5


def test_rope_position_zero_unchanged():
    data = _random_input()
    out = rope(data, _params())
    np.testing.assert_array_equal(out[0], data[0])


def test_rope_does_not_modify_input():
    data = _random_input()
    before = data.copy()
    out = rope(data, _params())
    np.testing.assert_array_equal(data, before)
    assert not np.array_equal(out, data)


def test_rope_known_rotation():
    data = np.array([[[1.0, 0.0, 1.0, 0.0]], [[1.0, 0.0, 1.0, 0.0]]], dtype=np.float32)
    out = rope(data, RopeParams(seq_len=2, head_dim=4, num_heads=1))
    # Position 1: first pair turns by 1 rad, second by 1/100 rad.
    np.testing.assert_allclose(out[1, 0, 0:2], [math.cos(1.0), math.sin(1.0)], atol=1e-6)
    np.testing.assert_allclose(
        out[1, 0, 2:4], [math.cos(0.01), math.sin(0.01)], atol=1e-6
    )


def test_rope_in_place_matches_separate():
    data_a = _random_input()
    data_b = data_a.copy()
    returned = rope(data_a, _params(), in_place=True)
    separate = rope(data_b, _params())
    assert returned is data_a
    assert np.max(np.abs(data_a - separate)) < 1e-6


def test_rope_in_place_on_tensor():
    t = Tensor(DataType.F32, (T_S, T_H, T_D))
    t.data[...] = _random_input()
    expected = rope(t.data.copy(), _params())
    rope(t, _params(), in_place=True)
    np.testing.assert_allclose(t.data, expected, atol=1e-6)


def test_rope_in_place_rejects_non_float32():
    with pytest.raises(ValueError):
        rope(np.zeros((T_S, T_H, T_D), dtype=np.float64), _params(), in_place=True)


def test_rope_rejects_missing_arguments():
    with pytest.raises(ValueError):
        rope(None, _params())
    with pytest.raises(ValueError):
        rope(_random_input(), None)


def test_rope_rejects_short_input():
    with pytest.raises(ValueError):
        rope(np.zeros(5, dtype=np.float32), _params())