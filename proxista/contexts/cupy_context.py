import numpy as np
import cupy as cp

from proxista.contexts.base import BaseContext, BaseSoftThreshold
from proxista.utils.jit_compilation import SUPPORTED_DTYPES, c_type_name


softthreshold_kernel = r"""
extern "C" __global__
void SoftThreshold(const %(T)s* input, %(T)s* output, const %(T)s* threshold,
                   const long long n_features)
{
    long long j = (long long)blockDim.x * blockIdx.x + threadIdx.x;
    long long stride = (long long)blockDim.x * gridDim.x;

    for (long long jj = j; jj < n_features; jj += stride) {
        %(T)s value_j = input[jj];
        %(T)s signum = (%(T)s)((value_j > 0) ? 1 : ((value_j < 0) ? -1 : 0));

        %(T)s fragment = fabs(value_j) - threshold[0];
        %(T)s pos_part = (fragment >= (%(T)s)0) ? fragment : (%(T)s)0;

        output[jj] = signum * pos_part;
    }
}
"""

KERNEL_SOURCES = {
    dtype: softthreshold_kernel % dict(T=c_type_name(dtype))
    for dtype in SUPPORTED_DTYPES
}


class CuPyContext(BaseContext):
    """CUDA context driven by CuPy.

    Data is expected to live on the device as cupy arrays, so that the
    linear algebra around the kernel runs there as well. The kernel is
    compiled from CUDA C source with ``cupy.RawKernel``.

    Parameters
    ----------
    threads_per_block : int, default 256
        Upper bound on the number of threads of a block.

    device : int, optional
        Id of the device to run on. Defaults to the current device.
    """

    xp = cp

    def __init__(self, threads_per_block=256, device=None):
        self.threads_per_block = threads_per_block
        self.device = cp.cuda.Device(device)
        with self.device:
            self.stream = cp.cuda.Stream()

    def _compile(self, dtype):
        with self.device:
            kernel = cp.RawKernel(KERNEL_SOURCES[dtype], "SoftThreshold")
            kernel.compile()
        return CuPySoftThreshold(kernel, dtype, self)

    def asarray(self, a, dtype=None):
        with self.device:
            return cp.asarray(a, dtype=dtype)

    def to_host(self, a):
        return cp.asnumpy(a)


class CuPySoftThreshold(BaseSoftThreshold):

    def __call__(self, value, level):
        context = self.context

        with context.device, context.stream:
            value = cp.ascontiguousarray(value, dtype=self.dtype)
            n_features = value.shape[0]

            # threshold travels as a one element buffer
            level_gpu = cp.asarray([level], dtype=self.dtype)
            out = cp.empty_like(value)

            n_blocks, n_threads = context.launch_config(
                n_features, context.threads_per_block)
            self.kernel((n_blocks,), (n_threads,),
                        (value, out, level_gpu, np.int64(n_features)))

        context.stream.synchronize()
        return out
