from .base import BaseContext, BaseSoftThreshold
from .host_context import HostContext
from .numba_context import NumbaCUDAContext


__all__ = [BaseContext, BaseSoftThreshold, HostContext, NumbaCUDAContext]
