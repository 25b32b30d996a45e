import pytest

import numpy as np

from dem_contact.operator.contact.reference import (
    contact_force_loop,
    contact_force_iter,
    contact_force_for_each,
    contact_force_numpy,
)

REFERENCES = [contact_force_loop, contact_force_iter, contact_force_for_each, contact_force_numpy]


def _positions(n, seed):
    rng = np.random.default_rng(seed)
    return rng.random(n, dtype=np.float32), rng.random(n, dtype=np.float32)


@pytest.mark.parametrize("reference", REFERENCES)
def test_single_pair(reference):
    fx = np.zeros(1, dtype=np.float32)
    fy = np.zeros(1, dtype=np.float32)
    reference(
        np.array([1.0], dtype=np.float32),
        np.array([0.0], dtype=np.float32),
        fx,
        fy,
        np.array([0.0], dtype=np.float32),
        np.array([0.0], dtype=np.float32),
    )
    assert fx[0] == 100000.0
    assert fy[0] == 0.0


@pytest.mark.parametrize("reference", REFERENCES[1:])
def test_references_agree_with_loop(reference):
    dest_x, dest_y = _positions(40, seed=0)
    src_x, src_y = _positions(25, seed=1)

    expected_fx = np.zeros(40, dtype=np.float32)
    expected_fy = np.zeros(40, dtype=np.float32)
    contact_force_loop(dest_x, dest_y, expected_fx, expected_fy, src_x, src_y)

    fx = np.zeros(40, dtype=np.float32)
    fy = np.zeros(40, dtype=np.float32)
    reference(dest_x, dest_y, fx, fy, src_x, src_y)

    np.testing.assert_allclose(fx, expected_fx, rtol=1.0e-5, atol=1.0e-4 * 1.0e5 * 25)
    np.testing.assert_allclose(fy, expected_fy, rtol=1.0e-5, atol=1.0e-4 * 1.0e5 * 25)


@pytest.mark.parametrize("reference", REFERENCES)
def test_empty_sets(reference):
    empty = np.zeros(0, dtype=np.float32)
    fx = np.ones(3, dtype=np.float32)
    fy = np.ones(3, dtype=np.float32)
    reference(np.zeros(3, dtype=np.float32), np.zeros(3, dtype=np.float32), fx, fy, empty, empty)
    np.testing.assert_array_equal(fx, np.ones(3))

    reference(empty, empty, empty.copy(), empty.copy(), np.ones(3, dtype=np.float32), np.ones(3, dtype=np.float32))


@pytest.mark.parametrize("reference", REFERENCES)
def test_mismatched_lengths(reference):
    a = np.zeros(2, dtype=np.float32)
    b = np.zeros(3, dtype=np.float32)
    with pytest.raises(ValueError):
        reference(a, a, a.copy(), b, a, a)
    with pytest.raises(ValueError):
        reference(a, a, a.copy(), a.copy(), a, b)
