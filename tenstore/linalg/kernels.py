"""Level-1 BLAS kernels on contiguous 1D storage buffers.

Thin wrappers around :mod:`scipy.linalg.blas`, selecting the routine for the dtype of the
buffers (``d*`` for float64, ``z*`` for complex128). All of them act in place where it makes
sense and handle empty buffers without calling BLAS.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3

import numpy as np
from scipy.linalg.blas import get_blas_funcs

__all__ = ['scal', 'nrm2', 'axpy']


def scal(alpha, x):
    """In place ``x *= alpha``.

    `alpha` needs to be representable in the dtype of `x`, i.e., real for real `x`.
    """
    if x.size == 0:
        return x
    if alpha == 0.:
        # BLAS scal does not reset NaN/inf entries
        x[:] = 0.
        return x
    func, = get_blas_funcs(('scal',), (x,))
    res = func(alpha, x)
    if res is not x:
        x[:] = res
    return x


def nrm2(x):
    """Euclidean norm ``sqrt(sum(abs(x)**2))`` of a 1D buffer."""
    if x.size == 0:
        return 0.
    func, = get_blas_funcs(('nrm2',), (x,))
    return float(func(x))


def axpy(alpha, x, y):
    """In place ``y += alpha * x`` for buffers of the same length.

    `y` needs to be complex if `x` or `alpha` is complex.
    """
    if y.size == 0:
        return y
    func, = get_blas_funcs(('axpy',), (x, y))
    res = func(np.asarray(x, dtype=y.dtype), y, a=alpha)
    if res is not y:
        y[:] = res
    return y
