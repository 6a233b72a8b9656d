import numpy as np
import pytest

from raycaster.math_utils import clamp, dot, length, near, normalize

# --- Tests for near ---

@pytest.mark.parametrize("eps", [1e-7, 1e-3, 0.5])
def test_near_zero_zero(eps):
    """Two exact zeros are always near, whatever the tolerance."""
    assert near(0.0, 0.0, eps)


def test_near_zero_uses_squared_epsilon():
    """With one operand at zero the absolute difference is compared to eps^2."""
    assert near(1e-15, 0.0, 1e-7)
    assert near(0.0, -5e-15, 1e-7)
    assert not near(1e-13, 0.0, 1e-7)
    assert not near(1e-10, 0.0, 1e-7)


def test_near_relative_error():
    assert not near(1.0, 1.5, 0.1)
    assert near(1.0, 1.0 + 1e-9, 1e-7)
    assert near(1e6, 1e6 + 1e-3, 1e-7)


def test_near_exact_equality_shortcut():
    assert near(3.25, 3.25, 1e-12)
    assert near(-7.0, -7.0, 0.0)


@pytest.mark.parametrize("a, b, eps", [
    (1.0, 1.5, 0.1),
    (1e-10, 0.0, 1e-7),
    (1e-15, 0.0, 1e-7),
    (2.0, 2.0000001, 1e-7),
    (-1.0, 1.0, 0.5),
    (0.0, 0.0, 1e-7),
])
def test_near_is_symmetric(a, b, eps):
    assert near(a, b, eps) == near(b, a, eps)


# --- Tests for vector helpers ---

def test_normalize_homogeneous_vector_keeps_w():
    v = normalize(np.array([3.0, 0.0, 4.0, 0.0]))
    assert np.allclose(v, [0.6, 0.0, 0.8, 0.0])


def test_normalize_tiny_vector_is_zero():
    v = normalize(np.array([1e-12, 0.0, 0.0]))
    assert np.allclose(v, [0.0, 0.0, 0.0])


def test_dot_and_length_ignore_w():
    a = np.array([1.0, 2.0, 2.0, 1.0])
    b = np.array([2.0, 0.0, 1.0, 1.0])
    assert dot(a, b) == pytest.approx(4.0)
    assert length(a) == pytest.approx(3.0)


def test_clamp():
    assert clamp(1.7, 0.0, 1.0) == 1.0
    assert clamp(-0.2, 0.0, 1.0) == 0.0
    assert clamp(0.25, 0.0, 1.0) == 0.25
