"""The two scalar types of dense storage and the promotion rule between them."""
# Copyright (C) TeNPy Developers, GNU GPLv3
from __future__ import annotations

from enum import Enum
from numbers import Number
import numpy as np


__all__ = ['Dtype']


class Dtype(Enum):
    # value = num_bytes * 2 + int(not is_real)
    float64 = 16
    complex128 = 17

    @property
    def is_real(dtype):
        return dtype.value % 2 == 0

    @property
    def is_complex(dtype):
        return dtype.value % 2 == 1

    @property
    def to_complex(dtype):
        if dtype.is_complex:
            return dtype
        return Dtype(dtype.value + 1)

    @property
    def to_real(dtype):
        if dtype.is_real:
            return dtype
        return Dtype(dtype.value - 1)

    @property
    def python_type(dtype):
        if dtype.is_real:
            return float
        return complex

    @property
    def zero_scalar(dtype):
        return dtype.python_type(0)

    def __repr__(self) -> str:
        return f'Dtype.{self.name}'

    def common(*dtypes):
        """The dtype which can hold values of all `dtypes`: complex wins over real."""
        return Dtype(max(t.value for t in dtypes))

    def to_numpy_dtype(dtype):
        return _tenstore_dtype_to_numpy[dtype]

    @classmethod
    def from_numpy_dtype(cls, dtype):
        return _numpy_dtype_to_tenstore[dtype]

    @classmethod
    def from_scalar(cls, value) -> Dtype:
        """The dtype needed to store the scalar `value` without loss.

        Any complex number, even with vanishing imaginary part, requires complex storage.
        """
        if isinstance(value, (complex, np.complexfloating)):
            return Dtype.complex128
        if isinstance(value, (Number, np.number)):
            return Dtype.float64
        raise TypeError(f'Not a scalar: {type(value)}')


_numpy_dtype_to_tenstore = {
    np.float64: Dtype.float64,
    np.complex128: Dtype.complex128,
    np.dtype('float64'): Dtype.float64,
    np.dtype('complex128'): Dtype.complex128,
}


_tenstore_dtype_to_numpy = {
    Dtype.float64: np.float64,
    Dtype.complex128: np.complex128,
}
