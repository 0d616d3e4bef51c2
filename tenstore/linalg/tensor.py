r"""Dense tensors owning a storage slot and a logical scale factor.

A :class:`DenseTensor` combines an :class:`~tenstore.linalg.indices.IndexSet` describing its axes
with a :class:`~tenstore.linalg.storage.StorageSlot` holding the elements, and a scale factor:
the actual elements are ``scale_factor * buffer``. Contractions normalize their result and
return the norm separately (see :mod:`~tenstore.linalg.contraction`); keeping it as scale factor
avoids over- and underflow in long chains of contractions.

All operations are carried out by dispatching a :mod:`~tenstore.linalg.tasks` object on the
storage, such that the storage representation may change, e.g.::

    >>> i, j = Index(2, 'i'), Index(3, 'j')
    >>> T = DenseTensor.zeros([i, j])
    >>> T.is_complex
    False
    >>> T.set((0, 1), 1.j)
    >>> T.is_complex
    True

Contraction sums over axes with the same identity::

    >>> k = Index(4, 'k')
    >>> A = DenseTensor.from_ndarray(np.ones((2, 3)), [i, j])
    >>> B = DenseTensor.from_ndarray(np.ones((3, 4)), [j, k])
    >>> C = contract(A, B)
    >>> C.to_ndarray()
    array([[3., 3., 3., 3.],
           [3., 3., 3., 3.]])
"""
# Copyright (C) TeNPy Developers, GNU GPLv3
from __future__ import annotations

import io
import sys
import numpy as np
import logging
logger = logging.getLogger(__name__)

from . import tasks
from .dispatching import dispatch
from .dtypes import Dtype
from .indices import Index, IndexSet
from .printing import default_print_options
from .storage import DenseStorage, StorageSlot, storage_class_for

__all__ = ['DenseTensor', 'contract', 'ncprod', 'add']


class DenseTensor:
    """A dense tensor with column-major storage of its elements.

    Parameters
    ----------
    index_set : :class:`~tenstore.linalg.indices.IndexSet` | list of :class:`~.indices.Index`
        The axes.
    storage : :class:`~tenstore.linalg.storage.DenseStorage` | None
        The buffer, with ``index_set.size`` elements. Defaults to real zeros.
        The tensor takes ownership, i.e., the storage is not copied.
    scale_factor : float | complex
        Factor multiplying the buffer to give the actual elements.

    Attributes
    ----------
    index_set : :class:`~tenstore.linalg.indices.IndexSet`
        The axes.
    scale_factor : float | complex
        Factor multiplying the buffer to give the actual elements.
    """
    def __init__(self, index_set, storage: DenseStorage = None, scale_factor=1.):
        if not isinstance(index_set, IndexSet):
            index_set = IndexSet(index_set)
        if storage is None:
            storage = storage_class_for(Dtype.float64)(index_set.size)
        if storage.size != index_set.size:
            raise ValueError(f"storage of size {storage.size:d} for {index_set.size:d} elements")
        self.index_set = index_set
        self._slot = StorageSlot(storage)
        self.scale_factor = scale_factor

    @classmethod
    def zeros(cls, index_set, dtype: Dtype = Dtype.float64) -> DenseTensor:
        """A tensor with all elements zero."""
        if not isinstance(index_set, IndexSet):
            index_set = IndexSet(index_set)
        return cls(index_set, storage_class_for(dtype)(index_set.size))

    @classmethod
    def from_ndarray(cls, array, index_set) -> DenseTensor:
        """Convert a numpy array with ``array.shape == index_set.extents`` into a tensor."""
        if not isinstance(index_set, IndexSet):
            index_set = IndexSet(index_set)
        array = np.asarray(array)
        if array.shape != index_set.extents:
            raise ValueError(f"shape {array.shape!r} does not match extents {index_set.extents!r}")
        dtype = Dtype.complex128 if np.iscomplexobj(array) else Dtype.float64
        data = array.reshape(-1, order='F')
        return cls(index_set, storage_class_for(dtype)(data))

    @classmethod
    def from_scalar(cls, value) -> DenseTensor:
        """A rank-0 tensor holding the single element `value`."""
        return cls(IndexSet([]), storage_class_for(Dtype.from_scalar(value))([value]))

    @property
    def storage(self) -> DenseStorage:
        """The current storage; may be replaced by operations."""
        return self._slot.storage

    @property
    def rank(self) -> int:
        return self.index_set.rank

    @property
    def size(self) -> int:
        return self.index_set.size

    @property
    def dtype(self) -> Dtype:
        """Dtype of the (logical) elements, taking into account the scale factor."""
        return Dtype.common(self.storage.dtype, Dtype.from_scalar(self.scale_factor))

    @property
    def is_complex(self) -> bool:
        return self.dtype.is_complex

    def _dispatch(self, task, other=None):
        if isinstance(other, DenseTensor):
            other = other._slot
        return dispatch(task, self._slot, other)

    def copy(self) -> DenseTensor:
        """Deep copy of the storage; the (identical) index set is shared."""
        return DenseTensor(self.index_set, self.storage.copy(), self.scale_factor)

    def get(self, multi_index=()):
        """The element at the (0-based) `multi_index`; the default `()` is for rank 0."""
        task = tasks.GetElement(self.index_set, tuple(multi_index))
        return self.scale_factor * self._dispatch(task)

    def set(self, multi_index, value):
        """Set the element at the (0-based) `multi_index` to `value`.

        Setting a complex `value` turns the storage complex.
        """
        self.normalize_scale()
        self._dispatch(tasks.SetElement(self.index_set, tuple(multi_index), value))

    def fill(self, value):
        """Set all elements to `value`."""
        self.scale_factor = 1.
        self._dispatch(tasks.Fill(value))
        return self

    def normalize_scale(self):
        """Multiply the scale factor into the buffer, such that ``scale_factor == 1``."""
        if self.scale_factor != 1.:
            self._dispatch(tasks.Scale(self.scale_factor))
            self.scale_factor = 1.
        return self

    def __imul__(self, value):
        self.scale_factor = self.scale_factor * value
        return self

    def __mul__(self, value):
        res = self.copy()
        res *= value
        return res

    __rmul__ = __mul__

    def __itruediv__(self, value):
        self.scale_factor = self.scale_factor / value
        return self

    def __truediv__(self, value):
        res = self.copy()
        res /= value
        return res

    def __iadd__(self, other):
        return add(self, other)

    def norm(self) -> float:
        """The Euclidean norm of all elements, including the scale factor."""
        return abs(self.scale_factor) * self._dispatch(tasks.Norm())

    def iconj(self):
        """Complex conjugate in place."""
        self._dispatch(tasks.Conjugate())
        self.scale_factor = np.conj(self.scale_factor).item()
        return self

    def conj(self) -> DenseTensor:
        """Complex conjugate copy."""
        return self.copy().iconj()

    def real(self) -> DenseTensor:
        """Copy holding the real parts of the elements, with real storage."""
        res = self.copy()
        if Dtype.from_scalar(res.scale_factor).is_complex:
            res.normalize_scale()
        res._dispatch(tasks.TakeReal())
        return res

    def imag(self) -> DenseTensor:
        """Copy holding the imaginary parts of the elements, with real storage."""
        res = self.copy()
        if Dtype.from_scalar(res.scale_factor).is_complex:
            res.normalize_scale()
        res._dispatch(tasks.TakeImag())
        return res

    def sum(self):
        """Sum of all elements."""
        return self.scale_factor * self._dispatch(tasks.SumElements())

    def to_ndarray(self) -> np.ndarray:
        """The elements as numpy array of shape ``index_set.extents``."""
        data = self.scale_factor * self.storage.data
        return data.reshape(self.index_set.extents, order='F')

    def print(self, stream=None, print_data=None, options=None):
        """Print a summary and the non-vanishing elements.

        Parameters
        ----------
        stream : file-like | None
            Where to print to; defaults to ``sys.stdout``.
        print_data : bool | None
            Whether to list the elements; defaults to ``options.print_data``.
        options : :class:`~tenstore.linalg.printing.PrintOptions` | None
            Threshold and precision.
        """
        if stream is None:
            stream = sys.stdout
        if options is None:
            options = default_print_options
        self._dispatch(tasks.Print(self.index_set, stream, self.scale_factor, print_data,
                                   options))

    def write(self, writer):
        """Hand the storage over to `writer`, see :mod:`~tenstore.tools.hdf5_io`."""
        self._dispatch(tasks.Write(writer))

    def save_hdf5(self, h5gr):
        """Export `self` into a HDF5 group.

        The axes are saved as the datasets ``'extents'`` and ``'names'``, the storage with a
        :class:`~tenstore.tools.hdf5_io.Hdf5Writer` in the subgroup ``'storage'``.
        The identity of the axes is not preserved.
        """
        from ..tools.hdf5_io import Hdf5Writer
        h5gr.create_dataset('extents', data=np.array(self.index_set.extents, dtype=np.int64))
        names = [(ind.name or '').encode('utf-8') for ind in self.index_set]
        h5gr.create_dataset('names', data=np.array(names, dtype=np.bytes_ if names else 'S1'))
        h5gr.attrs['scale_factor'] = self.scale_factor
        self.write(Hdf5Writer(h5gr.create_group('storage')))

    @classmethod
    def from_hdf5(cls, h5gr) -> DenseTensor:
        """Load a tensor saved with :meth:`save_hdf5`; the axes are new indices."""
        from ..tools.hdf5_io import read_storage_hdf5
        extents = [int(e) for e in h5gr['extents'][()]]
        names = [bytes(n).decode('utf-8') for n in h5gr['names'][()]]
        index_set = IndexSet([Index(e, n or None) for e, n in zip(extents, names)])
        storage = read_storage_hdf5(h5gr['storage'])
        return cls(index_set, storage, h5gr.attrs['scale_factor'].item())

    def __repr__(self):
        return (f'<DenseTensor {self.index_set!s} {type(self.storage).__name__} '
                f'scale_factor={self.scale_factor!r}>')

    def __str__(self):
        res = io.StringIO()
        self.print(res)
        return res.getvalue()


def contract(a: DenseTensor, b: DenseTensor, result_inds=None) -> DenseTensor:
    """Contract `a` and `b` over all axes with matching identity.

    Parameters
    ----------
    a, b : :class:`DenseTensor`
        The operands; not modified.
    result_inds : :class:`~.indices.IndexSet` | list of :class:`~.indices.Index` | None
        The order of the axes of the result; needs to be a permutation of the free axes.
        Defaults to the free axes of `a` followed by the free axes of `b`.

    Returns
    -------
    res : :class:`DenseTensor`
        The contraction, with normalized storage and the scale factor tracked separately.
    """
    if result_inds is not None and not isinstance(result_inds, IndexSet):
        result_inds = IndexSet(result_inds)
    slot = StorageSlot(a.storage)
    task = tasks.Contract(a.index_set, b.index_set, result_inds)
    dispatch(task, slot, b._slot)
    logger.debug("contract: %s x %s -> %s, scale factor %r", a.index_set, b.index_set,
                 task.result_inds, task.scale_factor)
    return DenseTensor(task.result_inds, slot.storage,
                       a.scale_factor * b.scale_factor * task.scale_factor)


def ncprod(a: DenseTensor, b: DenseTensor) -> DenseTensor:
    """Non-commutative product: axes with matching identity are multiplied elementwise.

    The result has the free axes of `a`, then the free axes of `b`, then the shared axes.
    """
    slot = StorageSlot(a.storage)
    task = tasks.NonCommutativeProduct(a.index_set, b.index_set)
    dispatch(task, slot, b._slot)
    logger.debug("ncprod: %s x %s -> %s, scale factor %r", a.index_set, b.index_set,
                 task.result_inds, task.scale_factor)
    return DenseTensor(task.result_inds, slot.storage,
                       a.scale_factor * b.scale_factor * task.scale_factor)


def add(dest: DenseTensor, src: DenseTensor, factor=1.) -> DenseTensor:
    """In place ``dest += factor * src``, matching the axes of `src` and `dest` by identity.

    Returns `dest`.
    """
    dest.normalize_scale()
    task = tasks.PermutedAccumulate(dest.index_set, src.index_set, factor * src.scale_factor)
    dest._dispatch(task, src)
    return dest
