import warnings
from sklearn.exceptions import ConvergenceWarning


def backtracking_step(solver, X, y, w, L, threshold, eta=2., max_backtrack=100):
    """Proximal gradient step with backtracking on the curvature estimate.

    Starting from ``L``, performs ``solver.step`` and multiplies ``L`` by ``eta``
    until the new point satisfies the majorization condition::

        f(w_new) <= f(w) + <grad f(w), w_new - w> + L / 2 * ||w_new - w||^2

    Since ``f(w) = ||Xw - y||^2`` is quadratic, the condition is checked in
    increment form, ``||X (w_new - w)||^2 <= L / 2 * ||w_new - w||^2``, with
    no tolerance.

    Parameters
    ----------
    solver : instance of ProxGradSolver
        Provides the proximal gradient step.

    X : array, shape (n_samples, n_features)
        Design matrix.

    y : array, shape (n_samples,)
        Target vector.

    w : array, shape (n_features,)
        Current coefficients.

    L : float
        Initial curvature estimate.

    threshold : float
        Regularization strength.

    eta : float, default 2.
        Factor by which ``L`` grows after each rejected step.

    max_backtrack : int, default 100
        Maximum number of times ``L`` is increased.

    Returns
    -------
    w_new : array, shape (n_features,)
        Coefficients after the accepted step.

    L : float
        Curvature estimate for which the step was accepted.
    """
    if eta <= 1.:
        raise ValueError(f"`eta` must be greater than 1. Got eta={eta}.")
    if L <= 0.:
        raise ValueError(f"Curvature estimate must be positive. Got L={L}.")

    for _ in range(max_backtrack + 1):
        w_new = solver.step(X, y, w, L, threshold)

        # f is quadratic: f(w_new) - f(w) - <grad f(w), w_diff> = ||X w_diff||^2
        w_diff = w_new - w
        X_diff = X @ w_diff
        curvature = float(X_diff @ X_diff)
        upper_bound = L / 2. * float(w_diff @ w_diff)

        if curvature <= upper_bound:
            return w_new, L

        L *= eta

    L /= eta
    warnings.warn(
        f"Backtracking did not satisfy the majorization condition after "
        f"{max_backtrack} increases of L (last L={L:.3e}).\n"
        "Consider increasing `max_backtrack` or the initial `L`.",
        category=ConvergenceWarning,
    )
    return w_new, L
