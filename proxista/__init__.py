__version__ = '0.1dev'

from proxista.estimators import Lasso  # noqa F401
from proxista.solvers import (  # noqa F401
    ProxGradSolver, ISTA, FISTA, backtracking_step,
)
from proxista.contexts import HostContext, NumbaCUDAContext  # noqa F401
