"""Dense storage buffers and the slot which owns them.

There is a closed set of storage representations:

==================== ===================== ===========================================
class                :class:`StorageType`  buffer
==================== ===================== ===========================================
:class:`RealStorage`  ``RealDense``         1D numpy array of ``float64``
-------------------- --------------------- -------------------------------------------
:class:`ComplexStorage` ``ComplexDense``    1D numpy array of ``complex128``
==================== ===================== ===========================================

The length of a buffer is fixed to the number of elements of the owning tensor.
A buffer is never resized; an operation which needs a different representation (e.g. writing a
complex number into a :class:`RealStorage`) replaces the whole storage through the
:class:`ManageStore` mediator bound to the :class:`StorageSlot` of the tensor.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3
from __future__ import annotations

from enum import Enum
import numpy as np
import logging
logger = logging.getLogger(__name__)

from .dtypes import Dtype
from ..tools.misc import TenstoreError

__all__ = ['StorageType', 'DenseStorage', 'RealStorage', 'ComplexStorage', 'StorageSlot',
           'ManageStore', 'StorageReplacedError', 'storage_class_for']


class StorageType(Enum):
    """Tag identifying the storage representation, e.g. in serialized output."""
    RealDense = 'RealDense'
    ComplexDense = 'ComplexDense'


class StorageReplacedError(TenstoreError):
    """Raised if a handler tries to replace the storage of a slot twice in one dispatch."""
    pass


class DenseStorage:
    """Common base class of the dense storage representations.

    Parameters
    ----------
    data : int | 1D array_like | :class:`DenseStorage`
        Either the number of elements (initialized to `fill`), or the elements to be copied.
    fill : float | complex
        The initial value of the elements if `data` is an int.

    Attributes
    ----------
    data : 1D :class:`numpy.ndarray`
        The contiguous buffer.
    """
    dtype = None  #: :class:`~tenstore.linalg.dtypes.Dtype`, set by subclasses
    storage_type = None  #: :class:`StorageType`, set by subclasses

    def __init__(self, data, fill=0.):
        np_dtype = self.dtype.to_numpy_dtype()
        if isinstance(data, DenseStorage):
            data = data.data
        if isinstance(data, (int, np.integer)):
            if data < 0:
                raise ValueError(f'negative size {data}')
            self.data = np.full(int(data), fill, dtype=np_dtype)
        else:
            data = np.asarray(data)
            if np.iscomplexobj(data) and self.dtype.is_real:
                raise TypeError('can not store complex values in RealStorage')
            self.data = np.array(data, dtype=np_dtype, copy=True).reshape(-1)

    @property
    def size(self) -> int:
        return self.data.size

    def copy(self):
        return type(self)(self.data)

    def __getitem__(self, offset):
        return self.data[offset]

    def __setitem__(self, offset, value):
        self.data[offset] = value

    def __len__(self):
        return self.data.size

    def __iter__(self):
        return iter(self.data)

    def __repr__(self):
        return f'<{type(self).__name__} size={self.size:d}>'


class RealStorage(DenseStorage):
    """Dense storage of real (``float64``) elements."""
    dtype = Dtype.float64
    storage_type = StorageType.RealDense


class ComplexStorage(DenseStorage):
    """Dense storage of complex (``complex128``) elements.

    Constructed from a :class:`RealStorage`, the real values get copied as real parts with
    vanishing imaginary parts.
    """
    dtype = Dtype.complex128
    storage_type = StorageType.ComplexDense


_storage_classes = {
    Dtype.float64: RealStorage,
    Dtype.complex128: ComplexStorage,
}


def storage_class_for(dtype: Dtype):
    """The storage class holding elements of the given `dtype`."""
    return _storage_classes[dtype]


class StorageSlot:
    """The slot owning the storage of exactly one tensor.

    The slot is a tagged union over the storage classes: :attr:`storage` is an instance of
    exactly one of them, and only replaced as a whole, by :class:`ManageStore`.

    Parameters
    ----------
    storage : :class:`DenseStorage`
        The initial storage, now owned by the slot.
    """
    __slots__ = ('storage',)

    def __init__(self, storage: DenseStorage):
        if not isinstance(storage, DenseStorage):
            raise TypeError(f'expected DenseStorage, got {type(storage)}')
        self.storage = storage

    @property
    def storage_type(self) -> StorageType:
        return self.storage.storage_type

    def __repr__(self):
        return f'StorageSlot({self.storage!r})'


class ManageStore:
    """Mediator allowing a handler to replace the storage of one :class:`StorageSlot`.

    An instance lives for a single dispatch call and can replace the storage at most once.

    Parameters
    ----------
    slot : :class:`StorageSlot`
        The slot whose storage may be replaced.

    Attributes
    ----------
    slot : :class:`StorageSlot`
        The slot whose storage may be replaced.
    replaced : bool
        Whether :meth:`make_new_data` was already called.
    """
    def __init__(self, slot: StorageSlot):
        self.slot = slot
        self.replaced = False

    def make_new_data(self, cls, *args, **kwargs) -> DenseStorage:
        """Create a new storage ``cls(*args, **kwargs)`` and install it into the slot.

        The previous storage of the slot is dropped. Returns the new storage.
        """
        if self.replaced:
            raise StorageReplacedError("storage was already replaced in this operation")
        new = cls(*args, **kwargs)
        old = self.slot.storage
        logger.debug("replace %s by %s", type(old).__name__, cls.__name__)
        self.slot.storage = new
        self.replaced = True
        return new
