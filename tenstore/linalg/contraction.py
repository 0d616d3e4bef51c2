r"""Contraction planner and strided kernels for dense storage.

Contraction of two tensors matches their axes by identity: an
:class:`~tenstore.linalg.indices.Index` contained in both index sets is summed over, all others
are "free" and form the axes of the result. Internally, each axis gets an integer *label*
(:func:`compute_labels`), equal labels for matching axes. The actual work is done by
:func:`contract_views` on strided numpy views of the buffers (:func:`make_view`) with Einstein
summation semantics:

.. math ::

    R_{l_R} = \sum_{\text{shared labels}} A_{l_A} B_{l_B}

The non-commutative product (:func:`ncprod_index_set`) uses the same machinery, but keeps the
shared labels in the result, such that shared axes are multiplied elementwise instead of summed.

After either operation, the result is normalized and the norm returned as a separate scale
factor (:func:`compute_scale_factor`), which keeps the numbers in long chains of contractions
close to unity.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3
from __future__ import annotations

import numpy as np
import logging
logger = logging.getLogger(__name__)

from .indices import IndexSet
from .kernels import axpy, nrm2, scal
from ..tools.misc import TenstoreError, inverse_permutation, is_trivial_permutation
from ..tools.optimization import optimize, OptimizationFlag

__all__ = ['ContractionError', 'MAX_LABELS', 'compute_labels', 'contract_index_set',
           'labels_for_result', 'ncprod_index_set', 'make_view', 'contract_views',
           'compute_scale_factor', 'contract_storages', 'ncprod_storages', 'permuted_accumulate']


class ContractionError(TenstoreError):
    """Raised if the axes of a contraction can not be matched or are too many."""
    pass


#: maximal number of distinct axes (shared and free) in a single contraction
MAX_LABELS = 52


def compute_labels(left_inds: IndexSet, right_inds: IndexSet) -> tuple[list[int], list[int]]:
    """Assign integer labels to the axes of two operands.

    Axes with the same identity in both index sets get the same label ``0, 1, ...``
    (in the order of `left_inds`), the remaining free axes get distinct labels following those,
    first for `left_inds`, then for `right_inds`.

    Returns
    -------
    left_labels, right_labels : list of int
        One label for each axis of `left_inds` and `right_inds`, respectively.
    """
    left_labels = [None] * left_inds.rank
    right_labels = [None] * right_inds.rank
    n = 0
    for i, ind in enumerate(left_inds):
        j = right_inds.find(ind)
        if j >= 0:
            left_labels[i] = right_labels[j] = n
            n += 1
    for labels in [left_labels, right_labels]:
        for i, lab in enumerate(labels):
            if lab is None:
                labels[i] = n
                n += 1
    return left_labels, right_labels


def _free_axes(inds, labels, other_labels):
    other = set(other_labels)
    return [(ind, lab) for ind, lab in zip(inds, labels) if lab not in other]


def contract_index_set(left_inds: IndexSet, left_labels: list[int],
                       right_inds: IndexSet, right_labels: list[int]
                       ) -> tuple[IndexSet, list[int]]:
    """Result axes of a contraction: free axes of the left followed by free axes of the right."""
    free = _free_axes(left_inds, left_labels, right_labels) + \
        _free_axes(right_inds, right_labels, left_labels)
    return IndexSet([ind for ind, _ in free]), [lab for _, lab in free]


def labels_for_result(result_inds: IndexSet,
                      left_inds: IndexSet, left_labels: list[int],
                      right_inds: IndexSet, right_labels: list[int]) -> list[int]:
    """Look up the label of each axis of a requested `result_inds` in the operands.

    Raises
    ------
    ContractionError
        If an axis of `result_inds` is found in neither operand, or if `result_inds` is not a
        permutation of the free axes.
    """
    result_labels = []
    for ind in result_inds:
        j = left_inds.find(ind)
        if j >= 0:
            result_labels.append(left_labels[j])
            continue
        j = right_inds.find(ind)
        if j >= 0:
            result_labels.append(right_labels[j])
            continue
        raise ContractionError(f'result index {ind!s} not found in either operand')
    _, free_labels = contract_index_set(left_inds, left_labels, right_inds, right_labels)
    if sorted(result_labels) != sorted(free_labels):
        raise ContractionError(f'result indices {result_inds!s} are not the free indices of '
                               'the operands')
    return result_labels


def ncprod_index_set(left_inds: IndexSet, left_labels: list[int],
                     right_inds: IndexSet, right_labels: list[int]
                     ) -> tuple[IndexSet, list[int]]:
    """Result axes of a non-commutative product.

    The free axes of the left, then the free axes of the right, then the shared axes in the
    order in which they appear in the left operand.
    """
    free = _free_axes(left_inds, left_labels, right_labels) + \
        _free_axes(right_inds, right_labels, left_labels)
    right = set(right_labels)
    shared = [(ind, lab) for ind, lab in zip(left_inds, left_labels) if lab in right]
    axes = free + shared
    return IndexSet([ind for ind, _ in axes]), [lab for _, lab in axes]


def make_view(data: np.ndarray, index_set: IndexSet, writeable: bool = False) -> np.ndarray:
    """Strided N-dimensional view of the 1D buffer `data` with the layout of `index_set`.

    Axis ``i`` of the view has extent ``index_set.extent(i)`` and stride
    ``index_set.stride(i)`` elements. No data is copied.
    """
    if data.size != index_set.size:
        raise ValueError(f'buffer size {data.size:d} does not match {index_set.size:d}')
    view = data.reshape(index_set.extents, order='F')
    if not writeable:
        view = view.view()
        view.flags.writeable = False
    return view


def _dense_labels(*label_lists):
    """Map the distinct labels to ``0, 1, ...`` in order of appearance."""
    relabel = {}
    for labels in label_lists:
        for lab in labels:
            relabel.setdefault(lab, len(relabel))
    if len(relabel) > MAX_LABELS:
        raise ContractionError(f"{len(relabel):d} distinct axes, at most {MAX_LABELS:d} supported")
    return relabel


def contract_views(a: np.ndarray, a_labels: list[int],
                   b: np.ndarray, b_labels: list[int],
                   out: np.ndarray, out_labels: list[int]):
    """Einstein summation ``out[out_labels] = sum a[a_labels] * b[b_labels]``.

    Labels appearing in `a` or `b` but not in `out` are summed over.
    `out` is overwritten in place.
    At most :data:`MAX_LABELS` distinct labels are supported by :func:`numpy.einsum`;
    more raise a :class:`ContractionError`.
    """
    relabel = _dense_labels(a_labels, b_labels, out_labels)
    res = np.einsum(a, [relabel[l] for l in a_labels],
                    b, [relabel[l] for l in b_labels],
                    [relabel[l] for l in out_labels])
    out[...] = res


def compute_scale_factor(data: np.ndarray) -> float:
    """Normalize `data` in place and return the previous norm.

    A vanishing buffer is left alone, with scale factor 1.
    """
    norm = nrm2(data)
    if norm == 0.:
        return 1.
    scal(1. / norm, data)
    return norm


def _binary_product(task, left, right, manage, result_cls, result_inds, result_labels,
                    left_labels, right_labels):
    t1 = make_view(left.data, task.left_inds)
    t2 = make_view(right.data, task.right_inds)
    _dense_labels(left_labels, right_labels, result_labels)
    rsize = result_inds.size
    new = manage.make_new_data(result_cls, rsize)
    tr = make_view(new.data, result_inds, writeable=True)
    contract_views(t1, left_labels, t2, right_labels, tr, result_labels)
    task.result_inds = result_inds
    task.scale_factor = 1.
    if rsize > 1:
        task.scale_factor = compute_scale_factor(new.data)


def contract_storages(task, left, right, manage, result_cls):
    """Execute a :class:`~tenstore.linalg.tasks.Contract` task.

    The new storage of class `result_cls` replaces `left` in its slot via `manage`.
    """
    left_labels, right_labels = compute_labels(task.left_inds, task.right_inds)
    if task.result_inds is None:
        result_inds, result_labels = contract_index_set(task.left_inds, left_labels,
                                                        task.right_inds, right_labels)
    else:
        result_inds = task.result_inds
        result_labels = labels_for_result(result_inds, task.left_inds, left_labels,
                                          task.right_inds, right_labels)
    logger.debug("contract %r x %r -> %r", left_labels, right_labels, result_labels)
    _binary_product(task, left, right, manage, result_cls, result_inds, result_labels,
                    left_labels, right_labels)


def ncprod_storages(task, left, right, manage, result_cls):
    """Execute a :class:`~tenstore.linalg.tasks.NonCommutativeProduct` task."""
    left_labels, right_labels = compute_labels(task.left_inds, task.right_inds)
    result_inds, result_labels = ncprod_index_set(task.left_inds, left_labels,
                                                  task.right_inds, right_labels)
    logger.debug("ncprod %r x %r -> %r", left_labels, right_labels, result_labels)
    _binary_product(task, left, right, manage, result_cls, result_inds, result_labels,
                    left_labels, right_labels)


def permuted_accumulate(task, dest, src):
    """Execute a :class:`~tenstore.linalg.tasks.PermutedAccumulate` task in place on `dest`.

    `dest` needs to be complex if `src` or ``task.factor`` is.
    """
    if not optimize(OptimizationFlag.skip_arg_checks):
        if dest.size != src.size:
            raise ValueError(f"Mismatched sizes in permuted accumulate: "
                             f"{dest.size:d} != {src.size:d}")
    if is_trivial_permutation(task.perm):
        axpy(task.factor, src.data, dest.data)
        return
    ref1 = make_view(dest.data, task.dest_inds, writeable=True)
    ref2 = make_view(src.data, task.src_inds)
    ref1 += task.factor * np.transpose(ref2, inverse_permutation(task.perm))
