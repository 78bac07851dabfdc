import numpy as np

from minimlp.core.activations import sigmoid, sigmoid_derivative, softmax
from minimlp.core.outputs import OutputActivationKind, resolve


def test_sigmoid_midpoint_and_symmetry():
    x = np.array([-2.0, 0.0, 2.0])
    y = sigmoid(x)
    assert y[1] == 0.5
    assert np.isclose(y[0] + y[2], 1.0)


def test_sigmoid_derivative_uses_output():
    y = sigmoid(np.array([0.0, 1.5]))
    assert np.allclose(sigmoid_derivative(y), y * (1.0 - y))
    assert sigmoid_derivative(np.array([0.5]))[0] == 0.25


def test_softmax_is_shift_invariant_and_stable():
    z = np.array([1000.0, 1001.0, 1002.0])
    p = softmax(z)
    assert np.all(np.isfinite(p))
    assert np.isclose(p.sum(), 1.0)
    assert np.allclose(p, softmax(z - 1000.0))


def test_softmax_rows_of_a_matrix():
    p = softmax(np.array([[0.0, 0.0], [0.0, np.log(3.0)]]))
    assert np.allclose(p, [[0.5, 0.5], [0.25, 0.75]])


def test_every_kind_has_a_strategy():
    for kind in OutputActivationKind:
        assert resolve(kind).kind is kind
    assert resolve("linear").kind is OutputActivationKind.LINEAR
