"""Iteration over all multi-indices of a strided N-dimensional range.

A :class:`Range` describes an N-dimensional index space by its extents and the strides of each
axis in a linear buffer. A :class:`RangeIter` walks through all multi-indices of a range like an
odometer: axis 0 is incremented in each step, and overflows carry into the next axis.
The linear offset is updated incrementally along the way, so a step costs O(1) amortized.

Example::

    >>> rng = Range([2, 3])
    >>> [offset for index, offset in rng]
    [0, 1, 2, 3, 4, 5]
    >>> it = RangeIter(rng)
    >>> it.increment(); it.increment()
    >>> it.index, it.offset
    ((0, 1), 2)
"""
# Copyright (C) TeNPy Developers, GNU GPLv3
from __future__ import annotations

import sys
from typing import Sequence

from ..tools.misc import TenstoreError
from ..tools.optimization import optimize, OptimizationFlag

__all__ = ['Range', 'RangeIter', 'END_OFFSET', 'RangeMismatchError', 'RangeIterError']

#: offset of a :class:`RangeIter` after the last multi-index; no valid offset can reach it.
END_OFFSET = sys.maxsize


class RangeMismatchError(TenstoreError):
    """Raised when comparing :class:`RangeIter` instances made from different ranges."""
    pass


class RangeIterError(TenstoreError):
    """Raised when incrementing a :class:`RangeIter` of a rank-0 range."""
    pass


class Range:
    """Immutable descriptor of an N-dimensional strided index space.

    Parameters
    ----------
    extents : sequence of int
        The number of values of each axis.
    strides : sequence of int, optional
        The stride of each axis. Defaults to the contiguous layout with axis 0 fastest.
    """
    __slots__ = ('_extents', '_strides')

    def __init__(self, extents: Sequence[int], strides: Sequence[int] = None):
        extents = tuple(int(e) for e in extents)
        if any(e < 0 for e in extents):
            raise ValueError(f'negative extent in {extents}')
        if strides is None:
            strides = []
            stride = 1
            for e in extents:
                strides.append(stride)
                stride *= e
        strides = tuple(int(s) for s in strides)
        if len(strides) != len(extents):
            raise ValueError('need one stride per extent')
        self._extents = extents
        self._strides = strides

    @property
    def rank(self) -> int:
        return len(self._extents)

    @property
    def extents(self) -> tuple[int, ...]:
        return self._extents

    @property
    def strides(self) -> tuple[int, ...]:
        return self._strides

    def extent(self, i: int) -> int:
        return self._extents[i]

    def stride(self, i: int) -> int:
        return self._strides[i]

    @property
    def is_empty(self) -> bool:
        return any(e == 0 for e in self._extents)

    def begin(self) -> RangeIter:
        return RangeIter(self)

    def end(self) -> RangeIter:
        return RangeIter.make_end(self)

    def __iter__(self):
        """Yield ``(index, offset)`` for each multi-index, axis 0 fastest."""
        it = RangeIter(self)
        while it.not_done():
            yield it.index, it.offset
            if self.rank == 0:
                return
            it.increment()

    def __repr__(self):
        return f'Range({list(self._extents)!r}, {list(self._strides)!r})'


class RangeIter:
    """Odometer iterator over the multi-indices of a :class:`Range`.

    The iterator only holds a reference to the range; the range must not be modified during
    the lifetime of the iterator.

    Parameters
    ----------
    rng : :class:`Range`
        The range to iterate over.

    Attributes
    ----------
    range : :class:`Range`
        The range we iterate over.
    offset : int
        The linear offset of the current multi-index, :data:`END_OFFSET` when done.
    """
    __slots__ = ('range', 'offset', '_ind')

    def __init__(self, rng: Range):
        self.range = rng
        self._ind = [0] * rng.rank
        self.offset = END_OFFSET if rng.is_empty else 0

    @classmethod
    def make_end(cls, rng: Range) -> RangeIter:
        """The terminal iterator of `rng`, to compare against."""
        end = cls.__new__(cls)
        end.range = rng
        end._ind = [0] * rng.rank
        end.offset = END_OFFSET
        return end

    @property
    def index(self) -> tuple[int, ...]:
        """The current multi-index (0-based)."""
        return tuple(self._ind)

    def not_done(self) -> bool:
        return self.offset != END_OFFSET

    def increment(self):
        """Advance to the next multi-index."""
        rng = self.range
        r = rng.rank
        if r == 0:
            if not optimize(OptimizationFlag.skip_arg_checks):
                raise RangeIterError("Can't increment RangeIter made from rank 0 range")
            self.offset = END_OFFSET
            return
        ind = self._ind
        ind[0] += 1
        self.offset += rng.stride(0)
        if ind[0] == rng.extent(0):
            for n in range(1, r):
                ind[n - 1] = 0
                self.offset -= rng.extent(n - 1) * rng.stride(n - 1)
                ind[n] += 1
                self.offset += rng.stride(n)
                if ind[n] < rng.extent(n):
                    return
            # only reached when totally done
            self.offset = END_OFFSET

    def __getitem__(self, n: int) -> int:
        return self._ind[n]

    def __len__(self):
        return len(self._ind)

    def __iter__(self):
        """Iterate over the axes of the current multi-index."""
        return iter(tuple(self._ind))

    def __eq__(self, other):
        if not isinstance(other, RangeIter):
            return NotImplemented
        if self.range is not other.range and not optimize(OptimizationFlag.skip_arg_checks):
            raise RangeMismatchError("Can't compare RangeIter created from different range objects")
        return self.offset == other.offset

    def __ne__(self, other):
        res = self.__eq__(other)
        if res is NotImplemented:
            return res
        return not res

    __hash__ = None

    def __str__(self):
        return f'{self.offset:3d} ({",".join(str(i) for i in self._ind)})'

    def __repr__(self):
        return f'<RangeIter {self.index!r} offset={self.offset}>'
