"""Handlers of all tasks acting on :class:`~tenstore.linalg.storage.RealStorage`.

Operations which need complex numbers (a complex value to set, fill or scale with, or a complex
second operand) never touch the real buffer; instead they *promote*: a
:class:`~tenstore.linalg.storage.ComplexStorage` with the real values (and vanishing imaginary
parts) is installed into the slot through the :class:`~tenstore.linalg.storage.ManageStore`
mediator, and the operation is carried out on the new storage.

Binary tasks with a real first and a complex second operand are registered here as well.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3

import numpy as np
import logging
logger = logging.getLogger(__name__)

from . import tasks
from .dispatching import register
from .dtypes import Dtype
from .storage import RealStorage, ComplexStorage
from .kernels import scal, nrm2
from .printing import print_dense
from .contraction import contract_storages, ncprod_storages, permuted_accumulate

__all__ = []  # only registers handlers


def promote(storage, manage):
    """Install a complex copy of the real `storage` via `manage` and return it."""
    logger.debug("promote RealStorage of size %d to ComplexStorage", storage.size)
    return manage.make_new_data(ComplexStorage, storage)


def is_complex_scalar(value) -> bool:
    return Dtype.from_scalar(value).is_complex


@register(tasks.GetElement, RealStorage)
def get_element(task, storage):
    return float(storage.data[task.index_set.offset(task.multi_index)])


@register(tasks.SetElement, RealStorage, manage=True)
def set_element(task, storage, manage):
    if is_complex_scalar(task.value):
        storage = promote(storage, manage)
    storage.data[task.index_set.offset(task.multi_index)] = task.value


@register(tasks.Fill, RealStorage, manage=True)
def fill(task, storage, manage):
    if is_complex_scalar(task.value):
        manage.make_new_data(ComplexStorage, storage.size, fill=task.value)
        return
    storage.data[:] = task.value


@register(tasks.Scale, RealStorage, manage=True)
def scale(task, storage, manage):
    value = task.value
    if is_complex_scalar(value):
        storage = promote(storage, manage)
    else:
        value = float(value)
    scal(value, storage.data)


@register(tasks.Norm, RealStorage)
def norm(task, storage):
    return nrm2(storage.data)


@register(tasks.Conjugate, RealStorage)
def conjugate(task, storage):
    pass


@register(tasks.TakeReal, RealStorage)
def take_real(task, storage):
    pass


@register(tasks.TakeImag, RealStorage)
def take_imag(task, storage):
    storage.data[:] = 0.


@register(tasks.SumElements, RealStorage)
def sum_elements(task, storage):
    return float(np.sum(storage.data))


@register(tasks.Print, RealStorage)
def print_storage(task, storage):
    print_dense(task, storage.data, 'Dense Real', nrm2(storage.data))


@register(tasks.Write, RealStorage)
def write(task, storage):
    task.writer.write_type(storage.storage_type, storage)


@register(tasks.Contract, RealStorage, RealStorage, manage=True)
def contract_real_real(task, left, right, manage):
    contract_storages(task, left, right, manage, RealStorage)


@register(tasks.Contract, RealStorage, ComplexStorage, manage=True)
def contract_real_complex(task, left, right, manage):
    contract_storages(task, left, right, manage, ComplexStorage)


@register(tasks.NonCommutativeProduct, RealStorage, RealStorage, manage=True)
def ncprod_real_real(task, left, right, manage):
    ncprod_storages(task, left, right, manage, RealStorage)


@register(tasks.NonCommutativeProduct, RealStorage, ComplexStorage, manage=True)
def ncprod_real_complex(task, left, right, manage):
    ncprod_storages(task, left, right, manage, ComplexStorage)


@register(tasks.PermutedAccumulate, RealStorage, RealStorage, manage=True)
def accumulate_real_real(task, dest, src, manage):
    if is_complex_scalar(task.factor):
        dest = promote(dest, manage)
    else:
        task.factor = float(task.factor)
    permuted_accumulate(task, dest, src)


@register(tasks.PermutedAccumulate, RealStorage, ComplexStorage, manage=True)
def accumulate_real_complex(task, dest, src, manage):
    dest = promote(dest, manage)
    permuted_accumulate(task, dest, src)
