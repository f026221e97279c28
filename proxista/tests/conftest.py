import os

# run numba.cuda kernels on the CUDA simulator unless told otherwise,
# must happen before numba is imported
os.environ.setdefault("NUMBA_ENABLE_CUDASIM", "1")
