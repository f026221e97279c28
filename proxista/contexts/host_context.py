import numpy as np
from numba import njit, prange

from proxista.contexts.base import BaseContext, BaseSoftThreshold
from proxista.utils.jit_compilation import kernel_signature


class HostContext(BaseContext):
    """Multi-core CPU context.

    The soft-thresholding kernel is compiled with ``numba.njit(parallel=True)``
    and runs its elementwise loop over the CPU threads of numba's
    threading layer.
    """

    xp = np

    def _compile(self, dtype):
        kernel = njit(kernel_signature(dtype), parallel=True)(_soft_threshold)
        return HostSoftThreshold(kernel, dtype, self)


class HostSoftThreshold(BaseSoftThreshold):

    def __call__(self, value, level):
        value = np.ascontiguousarray(value, dtype=self.dtype)
        level = np.array([level], dtype=self.dtype)
        out = np.empty_like(value)

        self.kernel(value, out, level)
        return out


def _soft_threshold(value, out, threshold):
    level = threshold[0]

    for j in prange(value.shape[0]):
        value_j = value[j]

        if abs(value_j) <= level:
            out[j] = 0.
        elif value_j > level:
            out[j] = value_j - level
        else:
            out[j] = value_j + level
