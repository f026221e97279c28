import numpy as np
from numba import float32, float64


# element types a soft-thresholding kernel can be specialized to
SUPPORTED_DTYPES = {
    np.dtype(np.float32): float32,
    np.dtype(np.float64): float64,
}


def check_float_dtype(dtype):
    """Resolve ``dtype`` to a supported floating point numpy dtype.

    Parameters
    ----------
    dtype : data-type
        Anything ``np.dtype`` understands, e.g. ``np.float32`` or ``"float64"``.

    Returns
    -------
    dtype : np.dtype
        Either ``np.dtype(np.float32)`` or ``np.dtype(np.float64)``.

    Raises
    ------
    TypeError
        If ``dtype`` is not a single or double precision floating point type.
    """
    # np.dtype(None) is float64
    if dtype is None:
        resolved = None
    else:
        try:
            resolved = np.dtype(dtype)
        except TypeError:
            resolved = None

    if resolved not in SUPPORTED_DTYPES:
        raise TypeError(
            "Proximal gradient solvers can only be used with floating point "
            f"types float32 or float64. Got {dtype!r}."
        )
    return resolved


def numba_type(dtype):
    """Map a supported numpy dtype to its numba scalar type."""
    return SUPPORTED_DTYPES[check_float_dtype(dtype)]


def kernel_signature(dtype):
    """Signature of the soft-thresholding kernel for ``dtype``.

    The kernel reads an input vector and a one-element threshold buffer
    and writes an output vector, all of the same element type.

    Parameters
    ----------
    dtype : data-type
        float32 or float64.

    Returns
    -------
    signature : str
        e.g. ``"void(float32[:], float32[:], float32[:])"``.
    """
    scalar = numba_type(dtype)
    return f"void({scalar}[:], {scalar}[:], {scalar}[:])"


def c_type_name(dtype):
    """Name of the C scalar type matching ``dtype``."""
    resolved = check_float_dtype(dtype)
    return "float" if resolved == np.float32 else "double"
