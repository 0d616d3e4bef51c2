"""A collection of tests for :mod:`tenstore.linalg.contraction`."""
# Copyright (C) TeNPy Developers, GNU GPLv3

import itertools as it
import numpy as np
import numpy.testing as npt
import pytest

import tenstore.linalg  # registers the handlers
from tenstore.linalg import tasks
from tenstore.linalg.contraction import (compute_labels, contract_index_set, labels_for_result,
                                         ncprod_index_set, make_view, ContractionError,
                                         compute_scale_factor, MAX_LABELS)
from tenstore.linalg.dispatching import dispatch
from tenstore.linalg.indices import Index, IndexSet
from tenstore.linalg.storage import RealStorage, ComplexStorage, StorageSlot
from tenstore.tools.optimization import temporary_level, OptimizationFlag


def to_storage(cls, array):
    return cls(np.asarray(array).reshape(-1, order='F'))


def from_storage(storage, index_set, scale_factor=1.):
    return scale_factor * storage.data.reshape(index_set.extents, order='F')


def test_labels():
    i, j, k, l = Index(2), Index(3), Index(4), Index(5)
    L = IndexSet([i, j, k])
    R = IndexSet([l, k, i])
    left_labels, right_labels = compute_labels(L, R)
    assert left_labels[0] == right_labels[2]
    assert left_labels[2] == right_labels[1]
    assert len(set(left_labels + right_labels)) == 4
    assert sorted([left_labels[0], left_labels[2]]) == [0, 1]
    res, res_labels = contract_index_set(L, left_labels, R, right_labels)
    assert list(res) == [j, l]
    assert res_labels == [left_labels[1], right_labels[0]]
    labels = labels_for_result(IndexSet([l, j]), L, left_labels, R, right_labels)
    assert labels == [right_labels[0], left_labels[1]]
    with pytest.raises(ContractionError):
        labels_for_result(IndexSet([Index(3), l]), L, left_labels, R, right_labels)
    with pytest.raises(ContractionError):
        labels_for_result(IndexSet([i, j, l]), L, left_labels, R, right_labels)
    res, res_labels = ncprod_index_set(L, left_labels, R, right_labels)
    assert list(res) == [j, l, i, k]


def test_make_view():
    I = IndexSet([Index(2), Index(3)])
    data = np.arange(6.)
    view = make_view(data, I)
    assert view.shape == (2, 3)
    assert view[1, 2] == data[I.offset((1, 2))]
    assert view.strides == tuple(s * data.itemsize for s in I.strides)
    with pytest.raises(ValueError):
        view[0, 0] = 1.
    view = make_view(data, I, writeable=True)
    view[1, 0] = -1.
    assert data[1] == -1.
    assert make_view(np.array([3.]), IndexSet([])).shape == ()


@pytest.mark.parametrize('cls1, cls2', list(it.product([RealStorage, ComplexStorage], repeat=2)))
def test_contract_brute_force(cls1, cls2, np_random):
    i, k, j = Index(2), Index(3), Index(2)
    A = np_random.standard_normal((2, 3))
    B = np_random.standard_normal((3, 2))
    if cls1 is ComplexStorage:
        A = A + 1.j * np_random.standard_normal((2, 3))
    if cls2 is ComplexStorage:
        B = B + 1.j * np_random.standard_normal((3, 2))
    I_A = IndexSet([i, k])
    I_B = IndexSet([k, j])
    slot = StorageSlot(to_storage(cls1, A))
    old = slot.storage
    task = tasks.Contract(I_A, I_B)
    dispatch(task, slot, StorageSlot(to_storage(cls2, B)))
    assert list(task.result_inds) == [i, j]
    expect_cls = RealStorage if cls1 is cls2 is RealStorage else ComplexStorage
    assert type(slot.storage) is expect_cls
    npt.assert_array_equal(old.data, A.reshape(-1, order='F'))  # input untouched
    # normalized buffer, norm in the scale factor
    assert np.linalg.norm(slot.storage.data) == pytest.approx(1.)
    res = from_storage(slot.storage, task.result_inds, task.scale_factor)
    for a, b in it.product(range(2), repeat=2):
        expect = sum(A[a, c] * B[c, b] for c in range(3))
        assert res[a, b] == pytest.approx(expect)


def test_contract_result_order(np_random):
    i, j, k, l = Index(2), Index(3), Index(4), Index(5)
    A = np_random.standard_normal((2, 3, 4))
    B = np_random.standard_normal((5, 4, 2))
    I_A = IndexSet([i, j, k])
    I_B = IndexSet([l, k, i])
    expect = np.einsum('ijk,lki->jl', A, B)
    task = tasks.Contract(I_A, I_B)
    slot = StorageSlot(to_storage(RealStorage, A))
    dispatch(task, slot, to_storage(RealStorage, B))
    assert list(task.result_inds) == [j, l]
    npt.assert_allclose(from_storage(slot.storage, task.result_inds, task.scale_factor), expect)
    # requested order
    R = IndexSet([l, j])
    task = tasks.Contract(I_A, I_B, R)
    slot = StorageSlot(to_storage(RealStorage, A))
    dispatch(task, slot, to_storage(RealStorage, B))
    assert task.result_inds is R
    npt.assert_allclose(from_storage(slot.storage, R, task.scale_factor), expect.T)
    # axis not in either operand
    task = tasks.Contract(I_A, I_B, IndexSet([l, Index(3)]))
    slot = StorageSlot(to_storage(RealStorage, A))
    with pytest.raises(ContractionError):
        dispatch(task, slot, to_storage(RealStorage, B))
    assert type(slot.storage) is RealStorage


def test_contract_full_and_outer(np_random):
    i, j = Index(3), Index(4)
    A = np_random.standard_normal((3, 4))
    B = np_random.standard_normal((4, 3)) + 1.j * np_random.standard_normal((4, 3))
    # full contraction to a scalar: no normalization
    task = tasks.Contract(IndexSet([i, j]), IndexSet([j, i]))
    slot = StorageSlot(to_storage(RealStorage, A))
    dispatch(task, slot, to_storage(ComplexStorage, B))
    assert task.result_inds.rank == 0
    assert task.scale_factor == 1.
    assert slot.storage.size == 1
    assert slot.storage.data[0] == pytest.approx(np.sum(A * B.T))
    # outer product
    k = Index(2)
    C = np_random.standard_normal(2)
    task = tasks.Contract(IndexSet([i, j]), IndexSet([k]))
    slot = StorageSlot(to_storage(RealStorage, A))
    dispatch(task, slot, to_storage(RealStorage, C))
    assert list(task.result_inds) == [i, j, k]
    res = from_storage(slot.storage, task.result_inds, task.scale_factor)
    npt.assert_allclose(res, A[:, :, np.newaxis] * C[np.newaxis, np.newaxis, :])


def test_contract_too_many_axes():
    n = MAX_LABELS // 2 + 1
    L = IndexSet([Index(1) for _ in range(n)])
    R = IndexSet([Index(1) for _ in range(n)])
    task = tasks.Contract(L, R)
    left = RealStorage([1.])
    slot = StorageSlot(left)
    with pytest.raises(ContractionError):
        dispatch(task, slot, RealStorage([2.]))
    assert slot.storage is left
    # the same number of axes is fine if shared
    task = tasks.Contract(L, IndexSet(list(L)[::-1]))
    slot = StorageSlot(RealStorage([3.]))
    dispatch(task, slot, RealStorage([2.]))
    assert slot.storage.data[0] == 6.


def test_scale_factor():
    data = np.array([3., 0., 4., 0.])
    assert compute_scale_factor(data) == pytest.approx(5.)
    npt.assert_allclose(data, [0.6, 0., 0.8, 0.])
    data = np.zeros(3)
    assert compute_scale_factor(data) == 1.
    npt.assert_array_equal(data, np.zeros(3))
    # zero result of a contraction
    i, j, k = Index(2), Index(2), Index(2)
    task = tasks.Contract(IndexSet([i, j]), IndexSet([j, k]))
    slot = StorageSlot(RealStorage(4))
    dispatch(task, slot, RealStorage([1., 2., 3., 4.]))
    assert task.scale_factor == 1.
    npt.assert_array_equal(slot.storage.data, np.zeros(4))


@pytest.mark.parametrize('cls1, cls2', list(it.product([RealStorage, ComplexStorage], repeat=2)))
def test_ncprod(cls1, cls2, np_random):
    i, j, k = Index(2), Index(3), Index(4)
    A = np_random.standard_normal((2, 3))
    B = np_random.standard_normal((3, 4))
    if cls2 is ComplexStorage:
        B = B - 2.j * np_random.standard_normal((3, 4))
    task = tasks.NonCommutativeProduct(IndexSet([i, j]), IndexSet([j, k]))
    slot = StorageSlot(to_storage(cls1, A))
    dispatch(task, slot, to_storage(cls2, B))
    assert list(task.result_inds) == [i, k, j]
    expect_cls = RealStorage if cls1 is cls2 is RealStorage else ComplexStorage
    assert type(slot.storage) is expect_cls
    res = from_storage(slot.storage, task.result_inds, task.scale_factor)
    npt.assert_allclose(res, np.einsum('ij,jk->ikj', A, B))
    # not commutative in the axis order
    task2 = tasks.NonCommutativeProduct(IndexSet([j, k]), IndexSet([i, j]))
    slot2 = StorageSlot(to_storage(cls2, B))
    dispatch(task2, slot2, to_storage(cls1, A))
    assert list(task2.result_inds) == [k, i, j]
    res2 = from_storage(slot2.storage, task2.result_inds, task2.scale_factor)
    npt.assert_allclose(res2, np.transpose(res, [1, 0, 2]))


def test_permuted_accumulate(np_random):
    i, j, k = Index(2), Index(3), Index(4)
    D = IndexSet([i, j, k])
    dest = np_random.standard_normal(D.extents)
    for p in it.permutations(range(3)):
        S = IndexSet([D[n] for n in p])
        src = np_random.standard_normal(S.extents)
        factor = np_random.standard_normal()
        task = tasks.PermutedAccumulate(D, S, factor)
        # source axis m is destination axis p[m]
        assert task.perm == list(p)
        slot = StorageSlot(to_storage(RealStorage, dest))
        dispatch(task, slot, to_storage(RealStorage, src))
        res = from_storage(slot.storage, D)
        for I, _ in D.range():
            src_index = tuple(I[p[m]] for m in range(3))
            assert res[I] == pytest.approx(dest[I] + factor * src[src_index])


def test_permuted_accumulate_identity():
    I = IndexSet([Index(2), Index(2)])
    slot = StorageSlot(RealStorage([1., 2., 3., 4.]))
    task = tasks.PermutedAccumulate(I, I, 2.)
    assert task.perm == [0, 1]
    dispatch(task, slot, RealStorage([1., 1., 1., 1.]))
    npt.assert_array_equal(slot.storage.data, [3., 4., 5., 6.])


def test_permuted_accumulate_promotion():
    i, j = Index(2), Index(3)
    D = IndexSet([i, j])
    S = IndexSet([j, i])
    src = np.arange(6.).reshape((3, 2)) * 1.j
    slot = StorageSlot(to_storage(RealStorage, np.ones((2, 3))))
    dispatch(tasks.PermutedAccumulate(D, S), slot, to_storage(ComplexStorage, src))
    assert type(slot.storage) is ComplexStorage
    npt.assert_allclose(from_storage(slot.storage, D), 1. + src.T)
    # complex factor
    slot = StorageSlot(to_storage(RealStorage, np.ones((2, 3))))
    dispatch(tasks.PermutedAccumulate(D, D, 1.j), slot, to_storage(RealStorage, np.ones((2, 3))))
    assert type(slot.storage) is ComplexStorage
    npt.assert_allclose(slot.storage.data, 1. + 1.j)
    # real source into complex destination
    slot = StorageSlot(to_storage(ComplexStorage, np.ones((2, 3))))
    dispatch(tasks.PermutedAccumulate(D, S, 2.), slot, to_storage(RealStorage, src.imag))
    assert type(slot.storage) is ComplexStorage
    npt.assert_allclose(from_storage(slot.storage, D), 1. + 2. * src.imag.T)


def test_permuted_accumulate_size_mismatch():
    I = IndexSet([Index(2)])
    J = IndexSet([Index(3)])
    task = tasks.PermutedAccumulate(I, I, perm=[0])
    task.src_inds = J
    with pytest.raises(ValueError):
        dispatch(task, StorageSlot(RealStorage(2)), RealStorage(3))
    with temporary_level(OptimizationFlag.none):
        with pytest.raises(ValueError):
            dispatch(task, StorageSlot(RealStorage(2)), RealStorage(3))
