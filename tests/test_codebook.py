import numpy as np
import pytest

from LBG_VQ.config import QuantCfg, TrainingCfg
from LBG_VQ.quant.codebook import get_codebook, init_random, init_split, split
from LBG_VQ.quant.errors import EmptyInputError, InsufficientDataError
from LBG_VQ.quant.vector import Bounds


def test_split_children_order():
    kids = split(np.array([[5.0, 5.0]]), 1.0)
    np.testing.assert_array_equal(kids, [[6, 6], [4, 4]])
    kids = split(np.array([[0.0, 255.0], [9.0, 9.0]]), 1.0, Bounds(0, 255))
    np.testing.assert_array_equal(kids, [[1, 255], [0, 254], [10, 10], [8, 8]])


def test_scenario_b_uniform_set_collapses():
    X  = np.tile([5.0, 5.0], (6, 1))
    cb = init_split(X, 4, perturbation=1.0)
    np.testing.assert_array_equal(cb, [[5, 5]])


def test_split_truncates_to_exactly_k():
    X  = np.array([[0], [1], [100], [101], [200], [201]], dtype=float)
    cb = init_split(X, 3)
    assert cb.shape == (3, 1)
    np.testing.assert_allclose(np.sort(cb.ravel()), [0.5, 100.5, 200.5])


def test_split_reaches_power_of_two():
    rng = np.random.RandomState(0)
    X   = rng.randint(0, 256, (300, 4)).astype(float)
    cb  = init_split(X, 8, bounds=Bounds(0, 255),
                     training=TrainingCfg(policy="fixed", rounds=2))
    assert 1 <= len(cb) <= 8
    assert cb.min() >= 0 and cb.max() <= 255


def test_random_sampling_takes_training_vectors():
    X  = np.arange(40, dtype=float).reshape(20, 2)
    cb = init_random(X, 5, 0)
    assert cb.shape == (5, 2)
    rows = {tuple(r) for r in X}
    assert all(tuple(r) in rows for r in cb)
    assert len({tuple(r) for r in cb}) == 5
    np.testing.assert_array_equal(cb, init_random(X, 5, 0))


def test_random_sampling_needs_enough_data():
    with pytest.raises(InsufficientDataError):
        init_random(np.zeros((3, 2)), 4)
    with pytest.raises(EmptyInputError):
        init_split(np.zeros((0, 2)), 4)


def test_strategy_from_config():
    X = np.arange(40, dtype=float).reshape(20, 2)
    assert get_codebook(X, QuantCfg(codes=4, init="random", seed=1)).shape == (4, 2)
    assert len(get_codebook(X, QuantCfg(codes=4, init="split"))) <= 4
    with pytest.raises(ValueError):
        QuantCfg(init="kmeans")
