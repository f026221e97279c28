import numpy as np
from numpy.linalg import norm

from numba import njit


def compute_obj(X, y, alpha, w):
    """Value of ``||y - Xw||^2 + alpha * ||w||_1``."""
    return norm(y - X @ w) ** 2 + alpha * norm(w, ord=1)


def eval_opt_crit(X, y, alpha, w):
    """Distance of ``- grad`` to the subdifferential of ``alpha * ||.||_1`` at ``w``."""
    grad = 2. * X.T @ (X @ w - y)
    return dist_subdiff(w, grad, alpha)


def dist_subdiff(w, grad, alpha):
    """Max over coordinates of the distance of ``- grad_j`` to ``alpha * d|w_j|``."""
    return _compute_dist_subdiff(
        np.asarray(w, dtype=np.float64), np.asarray(grad, dtype=np.float64),
        float(alpha))


@njit("f8(f8[:], f8[:], f8)")
def _compute_dist_subdiff(w, grad, alpha):
    max_dist = 0.

    for i in range(len(w)):
        grad_i = grad[i]
        w_i = w[i]

        if w[i] == 0.:
            dist = max(abs(grad_i) - alpha, 0.)
        else:
            dist = abs(grad_i + np.sign(w_i) * alpha)

        max_dist = max(max_dist, dist)

    return max_dist
