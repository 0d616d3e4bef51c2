"""Handlers of all tasks acting on :class:`~tenstore.linalg.storage.ComplexStorage`.

Complex storage can hold the result of any operation; only :class:`~tenstore.linalg.tasks.TakeReal`
and :class:`~tenstore.linalg.tasks.TakeImag` replace it by a
:class:`~tenstore.linalg.storage.RealStorage`.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3

import numpy as np

from . import tasks
from .dispatching import register
from .storage import RealStorage, ComplexStorage
from .kernels import scal, nrm2
from .printing import print_dense
from .contraction import contract_storages, ncprod_storages, permuted_accumulate

__all__ = []  # only registers handlers


@register(tasks.GetElement, ComplexStorage)
def get_element(task, storage):
    return complex(storage.data[task.index_set.offset(task.multi_index)])


@register(tasks.SetElement, ComplexStorage)
def set_element(task, storage):
    storage.data[task.index_set.offset(task.multi_index)] = task.value


@register(tasks.Fill, ComplexStorage)
def fill(task, storage):
    storage.data[:] = task.value


@register(tasks.Scale, ComplexStorage)
def scale(task, storage):
    scal(complex(task.value), storage.data)


@register(tasks.Norm, ComplexStorage)
def norm(task, storage):
    return nrm2(storage.data)


@register(tasks.Conjugate, ComplexStorage)
def conjugate(task, storage):
    np.conjugate(storage.data, out=storage.data)


@register(tasks.TakeReal, ComplexStorage, manage=True)
def take_real(task, storage, manage):
    manage.make_new_data(RealStorage, storage.data.real)


@register(tasks.TakeImag, ComplexStorage, manage=True)
def take_imag(task, storage, manage):
    manage.make_new_data(RealStorage, storage.data.imag)


@register(tasks.SumElements, ComplexStorage)
def sum_elements(task, storage):
    return complex(np.sum(storage.data))


@register(tasks.Print, ComplexStorage)
def print_storage(task, storage):
    print_dense(task, storage.data, 'Dense Cplx', nrm2(storage.data))


@register(tasks.Write, ComplexStorage)
def write(task, storage):
    task.writer.write_type(storage.storage_type, storage)


@register(tasks.Contract, ComplexStorage, RealStorage, manage=True)
def contract_complex_real(task, left, right, manage):
    contract_storages(task, left, right, manage, ComplexStorage)


@register(tasks.Contract, ComplexStorage, ComplexStorage, manage=True)
def contract_complex_complex(task, left, right, manage):
    contract_storages(task, left, right, manage, ComplexStorage)


@register(tasks.NonCommutativeProduct, ComplexStorage, RealStorage, manage=True)
def ncprod_complex_real(task, left, right, manage):
    ncprod_storages(task, left, right, manage, ComplexStorage)


@register(tasks.NonCommutativeProduct, ComplexStorage, ComplexStorage, manage=True)
def ncprod_complex_complex(task, left, right, manage):
    ncprod_storages(task, left, right, manage, ComplexStorage)


@register(tasks.PermutedAccumulate, ComplexStorage, RealStorage)
def accumulate_complex_real(task, dest, src):
    permuted_accumulate(task, dest, src)


@register(tasks.PermutedAccumulate, ComplexStorage, ComplexStorage)
def accumulate_complex_complex(task, dest, src):
    permuted_accumulate(task, dest, src)
