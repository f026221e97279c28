from .backtracking import backtracking_step
from .ista import ISTA, FISTA
from .prox_grad import ProxGradSolver


__all__ = [backtracking_step, ISTA, FISTA, ProxGradSolver]
