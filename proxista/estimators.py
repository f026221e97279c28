# License: BSD 3 clause

import numpy as np

from sklearn.utils.validation import check_X_y
from sklearn.linear_model._base import RegressorMixin, LinearModel

from proxista.solvers import ISTA, FISTA


class Lasso(RegressorMixin, LinearModel):
    r"""Lasso estimator solved with accelerator-dispatched proximal gradient.

    The optimization objective for Lasso is:

    .. math::
        1 / (2 xx n_"samples")  ||y - Xw||_2 ^ 2 + alpha ||w||_1

    Parameters
    ----------
    alpha : float, optional
        Penalty strength.

    max_iter : int, optional
        The maximum number of proximal gradient iterations.

    tol : float, optional
        Stopping criterion for the optimization.

    accelerated : bool, optional (default=True)
        Use FISTA when ``True``, ISTA otherwise.

    fit_intercept : bool, optional (default=True)
        Whether or not to fit an intercept.

    dtype : data-type, optional (default=np.float64)
        Element type of the computations, float32 or float64.

    context : instance of BaseContext, optional
        Accelerator context. Defaults to a new ``NumbaCUDAContext``.

    verbose : bool or int
        Amount of verbosity.

    Attributes
    ----------
    coef_ : array, shape (n_features,)
        parameter vector (:math:`w` in the cost function formula)

    intercept_ : float
        constant term in decision function.

    n_iter_ : int
        Number of iterations run by the solver.

    stop_crit_ : float
        Value of the stopping criterion at the end of the fit.
    """

    def __init__(self, alpha=1., max_iter=1000, tol=1e-4, accelerated=True,
                 fit_intercept=True, dtype=np.float64, context=None, verbose=0):
        super().__init__()
        self.alpha = alpha
        self.max_iter = max_iter
        self.tol = tol
        self.accelerated = accelerated
        self.fit_intercept = fit_intercept
        self.dtype = dtype
        self.context = context
        self.verbose = verbose

    def fit(self, X, y):
        """Fit the model according to the given training data.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Training data, where n_samples is the number of samples and
            n_features is the number of features.
        y : array-like, shape (n_samples,)
            Target vector relative to X.

        Returns
        -------
        self :
            Fitted estimator.
        """
        X, y = check_X_y(X, y, dtype=[np.float64, np.float32], y_numeric=True)
        n_samples, n_features = X.shape
        self.n_features_in_ = n_features

        if self.fit_intercept:
            X_offset, y_offset = X.mean(axis=0), y.mean()
            X, y = X - X_offset, y - y_offset
        else:
            X_offset, y_offset = np.zeros(n_features, dtype=X.dtype), 0.

        solver_cls = FISTA if self.accelerated else ISTA
        # curvature of ||y - Xw||^2 is 2 ||X||_2^2
        L0 = max(np.linalg.norm(X, ord=2) ** 2 / 2., 1e-10)
        solver = solver_cls(
            max_iter=self.max_iter, tol=self.tol * 2. * n_samples, L0=L0,
            dtype=self.dtype, context=self.context, verbose=self.verbose)

        # 1 / (2 n) ||y - Xw||^2 + alpha ||w||_1 and ||y - Xw||^2 + 2 n alpha ||w||_1
        # share their minimizers
        scaled_alpha = 2. * n_samples * self.alpha
        coef, p_objs, stop_crit = solver.solve(X, y, scaled_alpha)

        self.coef_ = coef
        self.intercept_ = float(y_offset - X_offset @ coef)
        self.n_iter_ = len(p_objs)
        self.stop_crit_ = stop_crit / (2. * n_samples)
        return self
