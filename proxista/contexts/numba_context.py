import numpy as np
from numba import cuda

from proxista.contexts.base import BaseContext, BaseSoftThreshold
from proxista.utils.jit_compilation import kernel_signature


class NumbaCUDAContext(BaseContext):
    """CUDA context driven by ``numba.cuda``.

    Linear algebra stays on the host with numpy. Each soft-thresholding call
    transfers the half-step vector and the threshold to the device, enqueues
    the kernel on the context stream and copies the result back.

    Setting ``NUMBA_ENABLE_CUDASIM=1`` before importing numba runs the
    kernels on numba's CUDA simulator.

    Parameters
    ----------
    threads_per_block : int, default 256
        Upper bound on the number of threads of a block.
    """

    xp = np

    def __init__(self, threads_per_block=256):
        self.threads_per_block = threads_per_block
        self.stream = cuda.stream()

    def _compile(self, dtype):
        # explicit signature: compiled now, for this element type only
        kernel = cuda.jit(kernel_signature(dtype))(_soft_threshold)
        return NumbaSoftThreshold(kernel, dtype, self)


class NumbaSoftThreshold(BaseSoftThreshold):

    def __call__(self, value, level):
        value = np.ascontiguousarray(value, dtype=self.dtype)
        n_features = value.shape[0]
        stream = self.context.stream

        # transfer to device
        # threshold travels as a one element buffer
        value_gpu = cuda.to_device(value, stream=stream)
        level_gpu = cuda.to_device(np.array([level], dtype=self.dtype), stream=stream)
        out_gpu = cuda.device_array(n_features, dtype=self.dtype, stream=stream)

        n_blocks, n_threads = self.context.launch_config(
            n_features, self.context.threads_per_block)
        self.kernel[n_blocks, n_threads, stream](value_gpu, out_gpu, level_gpu)

        # transfer back to host
        out = out_gpu.copy_to_host(stream=stream)
        stream.synchronize()

        return out


def _soft_threshold(value, out, threshold):
    j = cuda.grid(1)

    n_features = value.shape[0]
    stride_y = cuda.gridDim.x * cuda.blockDim.x
    level = threshold[0]

    for jj in range(j, n_features, stride_y):
        value_j = value[jj]

        if abs(value_j) <= level:
            out[jj] = 0.
        elif value_j > level:
            out[jj] = value_j - level
        else:
            out[jj] = value_j + level
