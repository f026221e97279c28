import numpy as np

from proxista.contexts import NumbaCUDAContext
from proxista.utils.jit_compilation import check_float_dtype


class ProxGradSolver:
    r"""Proximal gradient step for L1-regularized least squares.

    Provides the primitives of ISTA-type solvers with backtracking line search
    for the problem::

        min_w ||Xw - y||^2 + threshold * ||w||_1

    namely the smooth objective, its quadratic majorizer and one
    forward/backward step. The soft-thresholding operator runs as a compiled
    kernel on the accelerator of ``context``.

    Parameters
    ----------
    L0 : float, default 0.1
        Initial estimate of the curvature (Lipschitz constant of the gradient).
        Used as a seed by the iterative solvers; it is neither checked nor
        modified by this class.

    dtype : data-type, default np.float64
        Element type the kernel is specialized to, float32 or float64.

    context : instance of BaseContext, optional
        Accelerator context the kernel is compiled against.
        Defaults to a new ``NumbaCUDAContext``.

    Attributes
    ----------
    soft_threshold : instance of BaseSoftThreshold
        Kernel compiled at construction and reused by every step.

    Raises
    ------
    TypeError
        If ``dtype`` is not float32 or float64.
    """

    def __init__(self, L0=0.1, dtype=np.float64, context=None):
        self.L0 = L0
        self.dtype = check_float_dtype(dtype)
        self.context = context if context is not None else NumbaCUDAContext()
        self.soft_threshold = self.context.compile_soft_threshold(self.dtype)

    def evaluate_objective(self, X, y, w):
        """Compute ``||Xw - y||^2``.

        Parameters
        ----------
        X : array, shape (n_samples, n_features)
            Design matrix.

        y : array, shape (n_samples,)
            Target vector.

        w : array, shape (n_features,)
            Coefficient vector.

        Returns
        -------
        value : float
            Squared norm of the residuals.
        """
        residual = X @ w - y
        return float(residual @ residual)

    def evaluate_majorizer(self, X, y, w, w_prime, L):
        """Quadratic upper bound of the objective around ``w_prime``.

        Computes::

            f(w') + <grad f(w'), w - w'> + L / 2 * ||w - w'||^2

        with ``f(w) = ||Xw - y||^2`` and ``grad f(w) = 2 X^T (Xw - y)``.
        It matches the objective at ``w = w'`` whatever ``L``.

        Parameters
        ----------
        X : array, shape (n_samples, n_features)
            Design matrix.

        y : array, shape (n_samples,)
            Target vector.

        w : array, shape (n_features,)
            Point where the majorizer is evaluated.

        w_prime : array, shape (n_features,)
            Expansion point.

        L : float
            Curvature of the quadratic term.

        Returns
        -------
        value : float
            Value of the majorizer at ``w``.
        """
        residual = X @ w_prime - y
        taylor_term_0 = residual @ residual

        grad = 2. * (X.T @ residual)
        w_diff = w - w_prime

        taylor_term_1 = grad @ w_diff
        taylor_term_2 = L / 2. * (w_diff @ w_diff)

        return float(taylor_term_0 + taylor_term_1 + taylor_term_2)

    def step(self, X, y, w, L, threshold):
        """Perform one proximal gradient step.

        Parameters
        ----------
        X : array, shape (n_samples, n_features)
            Design matrix.

        y : array, shape (n_samples,)
            Target vector.

        w : array, shape (n_features,)
            Current coefficients, left untouched.

        L : float
            Curvature estimate, the step size is ``1 / L``.

        threshold : float
            Regularization strength, the soft-thresholding level is
            ``threshold / L``.

        Returns
        -------
        w_new : array, shape (n_features,)
            New coefficients, with the solver ``dtype``.
        """
        residual = X @ w - y
        grad = 2. * (X.T @ residual)

        # forward / backward
        step_size = 1. / L
        w_mid = w - step_size * grad
        return self.soft_threshold(w_mid, threshold * step_size)

    def __repr__(self):
        return (f"{self.__class__.__name__}(L0={self.L0}, dtype={self.dtype.name}, "
                f"context={self.context.__class__.__name__})")
