"""Operation descriptors ("tasks") to be passed to :func:`~tenstore.linalg.dispatching.dispatch`.

Each task class corresponds to one operation. A task carries the index metadata of the
operands and the scalar arguments; some tasks have output fields (like :attr:`Contract.result_inds`
and :attr:`Contract.scale_factor`) which are filled in by the handler.
A task instance is meant to be used for a single dispatch call.

The set of task classes is closed: :data:`ALL_TASKS` lists them, together with the number of
storage operands they act on.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TextIO, Sequence

from .indices import IndexSet
from .printing import PrintOptions, default_print_options

__all__ = ['Task', 'GetElement', 'SetElement', 'Fill', 'Scale', 'Norm', 'Conjugate', 'TakeReal',
           'TakeImag', 'SumElements', 'Print', 'Write', 'Contract', 'NonCommutativeProduct',
           'PermutedAccumulate', 'ALL_TASKS']


class Task:
    """Common base class of the operation descriptors."""
    num_operands = 1  #: number of storage operands the task acts on


@dataclass
class GetElement(Task):
    """Read the element at `multi_index` (0-based)."""
    index_set: IndexSet
    multi_index: Sequence[int]


@dataclass
class SetElement(Task):
    """Write `value` to the element at `multi_index` (0-based).

    A complex `value` requires complex storage, even if its imaginary part vanishes.
    """
    index_set: IndexSet
    multi_index: Sequence[int]
    value: Any


@dataclass
class Fill(Task):
    """Set all elements to `value`."""
    value: Any


@dataclass
class Scale(Task):
    """Multiply all elements by `value`."""
    value: Any


@dataclass
class Norm(Task):
    """The Euclidean norm of the raw buffer, not including any scale factor of the tensor."""
    pass


@dataclass
class Conjugate(Task):
    """Complex conjugate all elements."""
    pass


@dataclass
class TakeReal(Task):
    """Replace the elements by their real parts."""
    pass


@dataclass
class TakeImag(Task):
    """Replace the elements by their imaginary parts."""
    pass


@dataclass
class SumElements(Task):
    """The sum of all elements."""
    pass


@dataclass
class Print(Task):
    """Print a summary and the (scaled) elements to `stream`.

    Parameters
    ----------
    index_set : :class:`~tenstore.linalg.indices.IndexSet`
        The axes of the tensor, defining the multi-indices.
    stream : file-like
        Where to write the text.
    scale_factor : float | complex
        The elements are printed as ``scale_factor * element``.
    print_data : bool | None
        Whether to list the elements. ``None`` defaults to ``options.print_data``.
    options : :class:`~tenstore.linalg.printing.PrintOptions`
        Threshold and precision of the output.
    """
    index_set: IndexSet
    stream: TextIO
    scale_factor: Any = 1.
    print_data: bool = None
    options: PrintOptions = default_print_options

    def __post_init__(self):
        if self.print_data is None:
            self.print_data = self.options.print_data


@dataclass
class Write(Task):
    """Hand the storage over to `writer`, see :mod:`tenstore.tools.hdf5_io`."""
    writer: Any


@dataclass
class Contract(Task):
    """Contract two tensors over all axes with matching identity.

    If `result_inds` is None, the handler fills it in with the free axes of the left operand
    followed by the free axes of the right operand; otherwise it must be a permutation of
    those. After the dispatch, `scale_factor` holds the factor by which the new (normalized)
    storage needs to be multiplied to give the actual result.
    """
    num_operands = 2
    left_inds: IndexSet
    right_inds: IndexSet
    result_inds: IndexSet = None
    scale_factor: float = field(default=1., init=False)


@dataclass
class NonCommutativeProduct(Task):
    """Product of two tensors, where axes with matching identity are *not* summed over.

    Shared axes appear once in the result and are multiplied elementwise.
    The handler fills in `result_inds` and `scale_factor` as for :class:`Contract`.
    """
    num_operands = 2
    left_inds: IndexSet
    right_inds: IndexSet
    result_inds: IndexSet = field(default=None, init=False)
    scale_factor: float = field(default=1., init=False)


@dataclass
class PermutedAccumulate(Task):
    """``dest += factor * permuted(src)``.

    Parameters
    ----------
    dest_inds, src_inds : :class:`~tenstore.linalg.indices.IndexSet`
        The axes of the destination and the source.
    factor : float | complex
        The multiplier of the source.
    perm : list of int | None
        Axis ``i`` of the source is axis ``perm[i]`` of the destination.
        ``None`` is deduced from the index sets with
        :meth:`~tenstore.linalg.indices.IndexSet.permutation_to`.
    """
    num_operands = 2
    dest_inds: IndexSet
    src_inds: IndexSet
    factor: Any = 1.
    perm: Sequence[int] = None

    def __post_init__(self):
        if self.perm is None:
            self.perm = self.src_inds.permutation_to(self.dest_inds)
        self.perm = list(self.perm)


#: all task classes
ALL_TASKS = (GetElement, SetElement, Fill, Scale, Norm, Conjugate, TakeReal, TakeImag,
             SumElements, Print, Write, Contract, NonCommutativeProduct, PermutedAccumulate)
