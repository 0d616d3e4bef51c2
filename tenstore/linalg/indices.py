r"""Axes with a stable identity and ordered sets of them.

An :class:`Index` is one axis of a tensor: an extent plus an identity which survives copying
and is used to match axes of different tensors, e.g. in :func:`~tenstore.linalg.tensor.contract`.
Two :class:`Index` instances are equal if and only if they have the same identity; the `name`
is just for printing.

An :class:`IndexSet` is the ordered collection of the axes of one tensor. It defines the
layout of the dense storage buffer: axis 0 is the fastest, i.e. for extents ``(d0, d1, d2)``
the multi-index ``(i0, i1, i2)`` sits at the linear offset ``i0 + d0 * (i1 + d1 * i2)``.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3
from __future__ import annotations

import itertools
from math import prod
from typing import Sequence

from .ranges import Range

__all__ = ['Index', 'IndexSet']


_next_id = itertools.count(1)


class Index:
    """A single axis with a stable identity.

    Parameters
    ----------
    extent : int
        The number of values the index can take; must be positive.
    name : str, optional
        A name used for printing only.

    Attributes
    ----------
    extent : int
        The number of values the index can take.
    name : str | None
        A name used for printing only.
    id : int
        The identity of the index, unique within the process.
    """
    def __init__(self, extent: int, name: str = None):
        extent = int(extent)
        if extent < 1:
            raise ValueError(f'Index extent must be positive, got {extent}')
        self.extent = extent
        self.name = name
        self.id = next(_next_id)

    def sim(self) -> Index:
        """A new index with the same extent and name, but a new identity."""
        return Index(self.extent, self.name)

    def __eq__(self, other):
        if not isinstance(other, Index):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f'Index({self.extent:d}, {self.name!r}, id={self.id:d})'

    def __str__(self):
        name = 'i' if self.name is None else self.name
        return f'({name},{self.extent:d},{self.id:d})'


class IndexSet:
    """Ordered set of the :class:`Index` axes of one tensor.

    Parameters
    ----------
    indices : sequence of :class:`Index`
        The axes. Each index may appear at most once.

    Attributes
    ----------
    indices : tuple of :class:`Index`
        The axes.
    extents : tuple of int
        The extent of each axis.
    strides : tuple of int
        The stride of each axis in the linear storage; axis 0 is the fastest.
    """
    def __init__(self, indices: Sequence[Index] = ()):
        indices = tuple(indices)
        for i in indices:
            if not isinstance(i, Index):
                raise TypeError(f'expected Index, got {type(i)}')
        if len(set(indices)) != len(indices):
            raise ValueError(f'Duplicate indices in {indices!r}')
        self.indices = indices
        self.extents = tuple(i.extent for i in indices)
        strides = []
        stride = 1
        for extent in self.extents:
            strides.append(stride)
            stride *= extent
        self.strides = tuple(strides)

    @property
    def rank(self) -> int:
        return len(self.indices)

    @property
    def size(self) -> int:
        """Total number of elements; 1 for a rank-0 index set."""
        return prod(self.extents)

    def extent(self, i: int) -> int:
        return self.extents[i]

    def stride(self, i: int) -> int:
        return self.strides[i]

    def offset(self, multi_index: Sequence[int]) -> int:
        """Linear offset of the (0-based) `multi_index` in the storage buffer."""
        if len(multi_index) != self.rank:
            raise ValueError(f'wrong number of indices: {len(multi_index):d} != {self.rank:d}')
        off = 0
        for n, (i, extent, stride) in enumerate(zip(multi_index, self.extents, self.strides)):
            if not 0 <= i < extent:
                raise IndexError(f'index {i} out of range for axis {n:d} with extent {extent:d}')
            off += i * stride
        return off

    def find(self, index: Index) -> int:
        """Position of `index` in `self`, or -1 if it is not contained."""
        for n, i in enumerate(self.indices):
            if i == index:
                return n
        return -1

    def permutation_to(self, other: IndexSet) -> list[int]:
        """The permutation `perm` such that ``other[perm[i]] == self[i]``.

        Raises a ValueError if `other` does not contain the same indices as `self`.
        """
        if other.rank != self.rank:
            raise ValueError(f'Different ranks: {self.rank:d} != {other.rank:d}')
        perm = [other.find(i) for i in self.indices]
        if -1 in perm:
            raise ValueError(f'Index sets do not match: {self!s} vs {other!s}')
        return perm

    def range(self) -> Range:
        """The :class:`~tenstore.linalg.ranges.Range` spanned by all multi-indices."""
        return Range(self.extents, self.strides)

    def __contains__(self, index):
        return index in self.indices

    def __iter__(self):
        return iter(self.indices)

    def __getitem__(self, i):
        return self.indices[i]

    def __len__(self):
        return len(self.indices)

    def __bool__(self):
        # an index set is always a valid (possibly rank 0) object
        return True

    def __eq__(self, other):
        if not isinstance(other, IndexSet):
            return NotImplemented
        return self.indices == other.indices

    def __hash__(self):
        return hash(self.indices)

    def __repr__(self):
        return f'IndexSet({list(self.indices)!r})'

    def __str__(self):
        return ' '.join(str(i) for i in self.indices)
