"""A collection of tests for :mod:`tenstore.linalg.indices`."""
# Copyright (C) TeNPy Developers, GNU GPLv3

import numpy as np
import pytest

from tenstore.linalg.indices import Index, IndexSet


def test_index_identity():
    i = Index(3, 'i')
    j = Index(3, 'i')
    assert i != j
    assert i == i
    assert len({i, j, i}) == 2
    k = i.sim()
    assert k != i
    assert k.extent == 3 and k.name == 'i'
    with pytest.raises(ValueError):
        Index(0)


def test_index_set_layout():
    i, j, k = Index(2), Index(3), Index(4)
    I = IndexSet([i, j, k])
    assert I.rank == 3
    assert I.extents == (2, 3, 4)
    assert I.strides == (1, 2, 6)
    assert I.size == 24
    assert I.extent(1) == 3
    assert I.stride(2) == 6
    # column-major: compare with numpy
    A = np.arange(24).reshape((2, 3, 4), order='F')
    for idx in [(0, 0, 0), (1, 2, 3), (1, 0, 2), (0, 2, 1)]:
        assert I.offset(idx) == A[idx]
    with pytest.raises(IndexError):
        I.offset((2, 0, 0))
    with pytest.raises(ValueError):
        I.offset((0, 0))


def test_index_set_rank0():
    I = IndexSet([])
    assert I.rank == 0
    assert I.size == 1
    assert I.offset(()) == 0
    assert bool(I)
    assert list(I.range()) == [((), 0)]


def test_index_set_lookup():
    i, j, k = Index(2), Index(3), Index(4)
    I = IndexSet([i, j])
    assert I.find(j) == 1
    assert I.find(k) == -1
    assert j in I and k not in I
    assert I[0] is i
    assert list(I) == [i, j]
    assert len(I) == 2
    assert I == IndexSet([i, j])
    assert I != IndexSet([j, i])
    with pytest.raises(ValueError):
        IndexSet([i, j, i])
    with pytest.raises(TypeError):
        IndexSet([i, 3])


def test_permutation_to():
    i, j, k = Index(2), Index(3), Index(4)
    I = IndexSet([i, j, k])
    J = IndexSet([k, i, j])
    perm = I.permutation_to(J)
    assert perm == [1, 2, 0]
    for n, p in enumerate(perm):
        assert J[p] == I[n]
    with pytest.raises(ValueError):
        I.permutation_to(IndexSet([i, j, Index(4)]))
    with pytest.raises(ValueError):
        I.permutation_to(IndexSet([i, j]))
