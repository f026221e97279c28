"""
======================================
Compare accelerator contexts with FISTA
======================================
Solve the same Lasso problem with the CUDA context and the multi-core host
context, and compare timings, objectives and optimality conditions.
"""
import time

import numpy as np
from numpy.linalg import norm

from proxista.solvers import FISTA
from proxista.contexts import HostContext, NumbaCUDAContext

from proxista.utils.host_utils import compute_obj, eval_opt_crit


random_state = 1265
n_samples, n_features = 10_000, 500
reg = 1e-2

# generate dummy data
rng = np.random.RandomState(random_state)
X = rng.randn(n_samples, n_features)
y = rng.randn(n_samples)

# set alpha
alpha_max = 2 * norm(X.T @ y, ord=np.inf)
alpha = reg * alpha_max

# seed the curvature close to its true value to skip most backtracking
L0 = 2 * norm(X, ord=2) ** 2

results = {}
for name, context in (("gpu", NumbaCUDAContext()), ("cpu", HostContext())):
    solver = FISTA(max_iter=500, tol=1e-6, L0=L0, context=context)

    start = time.perf_counter()
    w = solver.solve(X, y, alpha)[0]
    end = time.perf_counter()

    print(f"{name} time: ", end - start)
    results[name] = w


print(
    "Objective\n"
    f"gpu    : {compute_obj(X, y, alpha, results['gpu']):.8f}\n"
    f"cpu    : {compute_obj(X, y, alpha, results['cpu']):.8f}"
)


print(
    "Optimality condition\n"
    f"gpu    : {eval_opt_crit(X, y, alpha, results['gpu']):.8f}\n"
    f"cpu    : {eval_opt_crit(X, y, alpha, results['cpu']):.8f}"
)
