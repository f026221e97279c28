import warnings
from sklearn.exceptions import ConvergenceWarning

import numpy as np

from proxista.solvers.backtracking import backtracking_step
from proxista.solvers.prox_grad import ProxGradSolver
from proxista.utils.host_utils import dist_subdiff
from proxista.utils.prox_funcs import ST_vec


class ISTA:
    r"""ISTA solver with backtracking line search.

    Solves::

        min_w ||y - Xw||^2 + alpha * ||w||_1

    The curvature estimate starts at ``L0`` and is only ever increased by the
    backtracking search, so the step size ``1 / L`` is non-increasing along
    the iterations.

    Parameters
    ----------
    max_iter : int, default 1000
        Maximum number of iterations.

    tol : float, default 1e-4
        Tolerance for convergence.

    L0 : float, default 0.1
        Initial curvature estimate.

    eta : float, default 2.
        Growth factor of the curvature estimate during backtracking.

    max_backtrack : int, default 100
        Maximum number of backtracking increases per iteration.

    opt_strategy : str, default "subdiff"
        Stopping criterion, ``"subdiff"`` or ``"fixpoint"``.

    dtype : data-type, default np.float64
        Element type of the computations, float32 or float64.

    context : instance of BaseContext, optional
        Accelerator context. Defaults to a new ``NumbaCUDAContext``.

    verbose : bool, default False
        Amount of verbosity. 0/False is silent.

    References
    ----------
    .. [1] Beck, A. and Teboulle M.
           "A Fast Iterative Shrinkage-Thresholding Algorithm for Linear Inverse
           problems", 2009, SIAM J. Imaging Sci.
           https://epubs.siam.org/doi/10.1137/080716542
    """

    _accelerated = False

    def __init__(self, max_iter=1000, tol=1e-4, L0=0.1, eta=2., max_backtrack=100,
                 opt_strategy="subdiff", dtype=np.float64, context=None, verbose=0):
        self.max_iter = max_iter
        self.tol = tol
        self.eta = eta
        self.max_backtrack = max_backtrack
        self.opt_strategy = opt_strategy
        self.verbose = verbose
        self.prox_grad = ProxGradSolver(L0, dtype=dtype, context=context)

    def solve(self, X, y, alpha, w_init=None):
        """Solve the Lasso problem.

        Parameters
        ----------
        X : array, shape (n_samples, n_features)
            Design matrix.

        y : array, shape (n_samples,)
            Target vector.

        alpha : float
            Regularization strength.

        w_init : array, shape (n_features,), optional
            Initial coefficients. Defaults to zeros.

        Returns
        -------
        w : ndarray, shape (n_features,)
            Coefficients, on the host.

        p_objs_out : ndarray, shape (n_iter,)
            The objective values at every iteration.

        stop_crit : float
            Value of stopping criterion at convergence.
        """
        if self.opt_strategy not in ("subdiff", "fixpoint"):
            raise ValueError(
                "Unknown error optimality strategy. Expected "
                f"`subdiff` or `fixpoint`. Got {self.opt_strategy}")

        prox_grad = self.prox_grad
        context, dtype = prox_grad.context, prox_grad.dtype
        xp = context.xp

        # transfer to device
        X = context.asarray(X, dtype=dtype)
        y = context.asarray(y, dtype=dtype)
        n_features = X.shape[1]

        if w_init is not None:
            w = context.asarray(w_init, dtype=dtype).copy()
        else:
            w = xp.zeros(n_features, dtype=dtype)
        z = w.copy()

        L = prox_grad.L0
        t_new = 1.
        p_objs_out = []
        stop_crit = np.inf

        for n_iter in range(self.max_iter):
            w_old = w
            if self._accelerated:
                t_old = t_new
                t_new = (1 + np.sqrt(1 + 4 * t_old ** 2)) / 2

            w, L = backtracking_step(
                prox_grad, X, y, z, L, alpha, self.eta, self.max_backtrack)

            if self._accelerated:
                # extrapolate
                z = w + ((t_old - 1.) / t_new) * (w - w_old)
            else:
                z = w

            stop_crit = self._stop_crit(X, y, w, L, alpha)

            p_obj = prox_grad.evaluate_objective(X, y, w) + alpha * float(
                xp.abs(w).sum())
            p_objs_out.append(p_obj)
            if self.verbose:
                print(
                    f"Iteration {n_iter+1}: {p_obj:.10f}, "
                    f"stopping crit: {stop_crit:.2e}"
                )

            if stop_crit < self.tol:
                if self.verbose:
                    print(f"Stopping criterion max violation: {stop_crit:.2e}")
                break
        else:
            warnings.warn(
                f"`{self.__class__.__name__}` did not converge for tol={self.tol:.3e} "
                f"and max_iter={self.max_iter}.\n"
                "Consider increasing `max_iter` and/or `tol`.",
                category=ConvergenceWarning,
            )

        # transfer back to host
        return context.to_host(w), np.array(p_objs_out), stop_crit

    def _stop_crit(self, X, y, w, L, alpha):
        context = self.prox_grad.context
        grad = context.to_host(2. * (X.T @ (X @ w - y)))
        w_cpu = context.to_host(w)

        if self.opt_strategy == "subdiff":
            return dist_subdiff(w_cpu, grad, alpha)

        opt = np.abs(w_cpu - ST_vec(w_cpu - grad / L, alpha / L))
        return float(np.max(opt))


class FISTA(ISTA):
    r"""ISTA solver with Nesterov acceleration (FISTA) and backtracking.

    The backtracking search is performed around the extrapolated point.
    Parameters are those of ``ISTA``.

    References
    ----------
    .. [1] Beck, A. and Teboulle M.
           "A Fast Iterative Shrinkage-Thresholding Algorithm for Linear Inverse
           problems", 2009, SIAM J. Imaging Sci.
           https://epubs.siam.org/doi/10.1137/080716542
    """

    _accelerated = True
