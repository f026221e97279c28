import math
from abc import abstractmethod, ABC

import numpy as np

from proxista.utils.jit_compilation import check_float_dtype


# Built from GPU properties
MAX_1DIM_BLOCK = (1024,)
MAX_1DIM_GRID = (65535,)


class BaseContext(ABC):
    """Base class for accelerator contexts.

    A context owns the execution resources of one device (stream, queue, ...)
    and knows how to compile the soft-thresholding kernel for a given element
    type. It is handed to solvers explicitly.

    Attributes
    ----------
    xp : module
        Array module providing the linear algebra used around the kernel
        (``numpy`` or ``cupy``).
    """

    xp = np

    @abstractmethod
    def _compile(self, dtype):
        """Compile the soft-thresholding kernel for a resolved ``dtype``.

        Parameters
        ----------
        dtype : np.dtype
            float32 or float64.

        Returns
        -------
        kernel : instance of BaseSoftThreshold
            Compiled kernel, ready to be launched.
        """

    def compile_soft_threshold(self, dtype):
        """Compile the soft-thresholding kernel specialized to ``dtype``.

        Raises
        ------
        TypeError
            If ``dtype`` is neither float32 nor float64.
        """
        return self._compile(check_float_dtype(dtype))

    def asarray(self, a, dtype=None):
        """Convert ``a`` to an array of the context's array module."""
        return self.xp.asarray(a, dtype=dtype)

    def to_host(self, a):
        """Copy ``a`` back to a numpy array."""
        return np.asarray(a)

    def launch_config(self, n_elements, threads_per_block):
        """Number of blocks and threads for a 1-D launch over ``n_elements``."""
        n_threads = max(1, min(threads_per_block, MAX_1DIM_BLOCK[0], n_elements))
        n_blocks = max(1, min(math.ceil(n_elements / n_threads), MAX_1DIM_GRID[0]))
        return n_blocks, n_threads


class BaseSoftThreshold(ABC):
    """Compiled soft-thresholding kernel bound to a context.

    Calling the kernel computes ``sign(value) * max(|value| - level, 0)``
    entrywise and returns a new array; ``value`` is left untouched.

    Parameters
    ----------
    kernel : object
        Backend specific compiled program.

    dtype : np.dtype
        Element type the kernel was specialized to.

    context : instance of BaseContext
        Context the kernel was compiled against.
    """

    def __init__(self, kernel, dtype, context):
        self.kernel = kernel
        self.dtype = dtype
        self.context = context

    @abstractmethod
    def __call__(self, value, level):
        """Soft-threshold ``value`` at ``level`` and wait for the result."""

    def __repr__(self):
        return (f"{self.__class__.__name__}(dtype={self.dtype.name}, "
                f"context={self.context.__class__.__name__})")
