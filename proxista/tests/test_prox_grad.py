import pytest

import numpy as np

from proxista.solvers import ProxGradSolver
from proxista.contexts import HostContext, NumbaCUDAContext


random_state = 1265
n_samples, n_features = 20, 8

rng = np.random.RandomState(random_state)
X = rng.randn(n_samples, n_features)
y = rng.randn(n_samples)
w = rng.randn(n_features)
w_prime = rng.randn(n_features)

X_eye = np.eye(2)
y_eye = np.array([3., 5.])


contexts = [HostContext(), NumbaCUDAContext(threads_per_block=4)]


@pytest.mark.parametrize("context", contexts)
@pytest.mark.parametrize("dtype", [np.float32, np.float64])
def test_step_scenarios(context, dtype):
    solver = ProxGradSolver(L0=1., dtype=dtype, context=context)

    w_1 = solver.step(X_eye, y_eye, np.zeros(2), 1., 1.)
    np.testing.assert_array_equal(w_1, [5., 9.])

    w_2 = solver.step(X_eye, y_eye, w_1, 1., 1.)
    np.testing.assert_array_equal(w_2, [0., 0.])


@pytest.mark.parametrize("context", contexts)
def test_step_without_regularization(context):
    solver = ProxGradSolver(context=context)
    L = 300.

    w_new = solver.step(X, y, w, L, 0.)
    w_expected = w - 2. * X.T @ (X @ w - y) / L

    np.testing.assert_allclose(w_new, w_expected, rtol=1e-12)


@pytest.mark.parametrize("context", contexts)
def test_step_matches_host_soft_thresholding(context):
    solver = ProxGradSolver(context=context)
    L, threshold = 50., 20.

    w_mid = w - 2. * X.T @ (X @ w - y) / L
    w_expected = np.sign(w_mid) * np.maximum(np.abs(w_mid) - threshold / L, 0.)

    np.testing.assert_allclose(
        solver.step(X, y, w, L, threshold), w_expected, rtol=1e-12, atol=1e-14)


@pytest.mark.parametrize("context", contexts)
def test_step_is_deterministic_and_pure(context):
    solver = ProxGradSolver(context=context)
    X_copy, y_copy, w_copy = X.copy(), y.copy(), w.copy()

    w_1 = solver.step(X, y, w, 10., 1.)
    w_2 = solver.step(X, y, w, 10., 1.)

    np.testing.assert_array_equal(w_1, w_2)
    assert w_1 is not w_2

    np.testing.assert_array_equal(X, X_copy)
    np.testing.assert_array_equal(y, y_copy)
    np.testing.assert_array_equal(w, w_copy)


@pytest.mark.parametrize("dtype", [np.float32, np.float64])
def test_step_dtype(dtype):
    solver = ProxGradSolver(dtype=dtype, context=HostContext())

    w_new = solver.step(X.astype(dtype), y.astype(dtype), w.astype(dtype), 10., 1.)
    assert w_new.dtype == dtype


def test_objective():
    solver = ProxGradSolver(context=HostContext())

    np.testing.assert_allclose(
        solver.evaluate_objective(X, y, w), np.sum((X @ w - y) ** 2))
    np.testing.assert_allclose(solver.evaluate_objective(X_eye, y_eye, y_eye), 0.)

    for seed in range(10):
        w_rand = np.random.RandomState(seed).randn(n_features)
        assert solver.evaluate_objective(X, y, w_rand) >= 0.


@pytest.mark.parametrize("L", [1e-3, 1., 1e3])
def test_majorizer_tight_at_expansion_point(L):
    solver = ProxGradSolver(context=HostContext())

    np.testing.assert_allclose(
        solver.evaluate_majorizer(X, y, w, w, L),
        solver.evaluate_objective(X, y, w))


def test_majorizer_increasing_in_L():
    solver = ProxGradSolver(context=HostContext())
    Ls = [1e-2, 1e-1, 1., 10., 100.]

    values = [solver.evaluate_majorizer(X, y, w, w_prime, L) for L in Ls]
    assert np.all(np.diff(values) > 0.)


def test_majorizer_value():
    solver = ProxGradSolver(context=HostContext())
    L = 3.

    residual = X @ w_prime - y
    expected = (residual @ residual + 2. * (X.T @ residual) @ (w - w_prime)
                + L / 2. * np.sum((w - w_prime) ** 2))

    np.testing.assert_allclose(
        solver.evaluate_majorizer(X, y, w, w_prime, L), expected)


def test_majorizer_bounds_objective_for_large_L():
    solver = ProxGradSolver(context=HostContext())
    lipschitz = 2. * np.linalg.norm(X, ord=2) ** 2

    assert (solver.evaluate_objective(X, y, w)
            <= solver.evaluate_majorizer(X, y, w, w_prime, lipschitz))


@pytest.mark.parametrize("dtype", [None, np.int32, np.int64, np.complex128, bool, "U8"])
def test_unsupported_dtype(dtype):
    with pytest.raises(TypeError, match="floating point"):
        ProxGradSolver(dtype=dtype, context=HostContext())


def test_dimension_mismatch_propagates():
    solver = ProxGradSolver(context=HostContext())

    with pytest.raises(ValueError):
        solver.step(X, y, np.zeros(n_features + 1), 1., 1.)
    with pytest.raises(ValueError):
        solver.evaluate_objective(X, y[:-1], w)


def test_L0_is_not_validated_nor_modified():
    solver = ProxGradSolver(L0=-1., context=HostContext())
    solver.step(X, y, w, 10., 1.)

    assert solver.L0 == -1.


def test_kernel_compiled_once():
    class CountingContext(HostContext):
        n_compilations = 0

        def _compile(self, dtype):
            self.n_compilations += 1
            return super()._compile(dtype)

    context = CountingContext()
    solver = ProxGradSolver(dtype=np.float32, context=context)
    kernel = solver.soft_threshold

    for L in (1., 10., 100.):
        solver.step(X, y, w, L, 1.)

    assert context.n_compilations == 1
    assert solver.soft_threshold is kernel
    assert kernel.dtype == np.float32


if __name__ == '__main__':
    pass
