"""Provide test configuration.

=============================  ======================  ===========================================
Fixture                        Depends on / # cases    Description
=============================  ======================  ===========================================
np_random                      -                       A numpy random Generator. Use this for
                                                       reproducibility.
-----------------------------  ----------------------  -------------------------------------------
storage_cls                    Generates 2 cases       Goes over the storage classes.
-----------------------------  ----------------------  -------------------------------------------
make_tensor                    np_random               RNG for :class:`DenseTensor` with given
                                                       axes. ``make(indices, real=True)``
=============================  ======================  ===========================================
"""
# Copyright (C) TeNPy Developers, GNU GPLv3
from __future__ import annotations
import numpy as np
import pytest

from tenstore.linalg import tensor, dispatching
from tenstore.tools import misc


misc.skip_logging_setup = True


@pytest.fixture
def np_random() -> np.random.Generator:
    return np.random.default_rng(seed=12345)


@pytest.fixture(params=dispatching.STORAGE_CLASSES, ids=lambda cls: cls.__name__)
def storage_cls(request):
    return request.param


@pytest.fixture
def make_tensor(np_random):
    def make(indices, real=True):
        shape = tuple(i.extent for i in indices)
        data = np_random.standard_normal(shape)
        if not real:
            data = data + 1.j * np_random.standard_normal(shape)
        return tensor.DenseTensor.from_ndarray(data, indices)
    return make
