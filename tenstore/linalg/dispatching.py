"""Double dispatch of tasks on storage.

The behavior of an operation depends on the kind of operation (the class of the task, see
:mod:`~tenstore.linalg.tasks`) *and* on the concrete storage representation(s) involved
(see :mod:`~tenstore.linalg.storage`). The handlers are kept in a dispatch table
mapping ``(TaskClass, StorageClass)`` or ``(TaskClass, StorageClass1, StorageClass2)`` to a
function, filled with the :func:`register` decorator by the modules
:mod:`~tenstore.linalg.real` and :mod:`~tenstore.linalg.cplx`.

A handler is called as ``handler(task, storage[, storage2][, manage])``, where `manage` is a
:class:`~tenstore.linalg.storage.ManageStore` bound to the slot of the first operand, passed
only if the handler was registered with ``manage=True``. The handler may mutate the storage(s)
in place, replace the first storage through `manage`, fill in output fields of the task and/or
return a value; :func:`dispatch` returns that value.

The table is exhaustive over all tasks and storage combinations; a missing entry is a
programming error and raises a :class:`DispatchError`.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3
from __future__ import annotations

import itertools

from .storage import StorageSlot, DenseStorage, ManageStore, RealStorage, ComplexStorage
from .tasks import Task, ALL_TASKS
from ..tools.misc import TenstoreError

__all__ = ['DispatchError', 'register', 'dispatch', 'registered_combinations',
           'missing_combinations', 'STORAGE_CLASSES']

#: the closed set of storage representations handled by the dispatch
STORAGE_CLASSES = (RealStorage, ComplexStorage)

#: the dispatch table: key -> (handler, manage)
_dispatch_table = {}


class DispatchError(TenstoreError, NotImplementedError):
    """Raised when no handler is registered for a combination of task and storage classes."""
    pass


def register(task_cls, *storage_classes, manage=False):
    """Decorator registering a handler in the dispatch table.

    Parameters
    ----------
    task_cls : type
        Subclass of :class:`~tenstore.linalg.tasks.Task`.
    *storage_classes : type
        The storage class of each operand.
    manage : bool
        Whether the handler expects a :class:`~tenstore.linalg.storage.ManageStore` as last
        argument.
    """
    if len(storage_classes) != task_cls.num_operands:
        raise ValueError(f'{task_cls.__name__} acts on {task_cls.num_operands:d} operands')
    key = (task_cls, *storage_classes)

    def decorator(func):
        if key in _dispatch_table:
            raise ValueError(f'handler for {_key_str(key)} registered twice')
        _dispatch_table[key] = (func, manage)
        return func

    return decorator


def dispatch(task: Task, slot: StorageSlot, other: StorageSlot | DenseStorage = None):
    """Execute `task` on the storage of `slot` (and `other` for binary tasks).

    Parameters
    ----------
    task : :class:`~tenstore.linalg.tasks.Task`
        What to do.
    slot : :class:`~tenstore.linalg.storage.StorageSlot`
        The slot of the first operand; its storage may get replaced.
    other : :class:`~.storage.StorageSlot` | :class:`~.storage.DenseStorage`
        The second operand, only for binary tasks. Never modified.

    Returns
    -------
    result :
        Whatever the handler returns, e.g. the element for a
        :class:`~tenstore.linalg.tasks.GetElement` task, ``None`` for in-place operations.
    """
    storages = [slot.storage]
    if other is not None:
        if isinstance(other, StorageSlot):
            other = other.storage
        storages.append(other)
    if len(storages) != task.num_operands:
        raise ValueError(f'{type(task).__name__} needs {task.num_operands:d} operands, '
                         f'got {len(storages):d}')
    key = (type(task), *(type(s) for s in storages))
    try:
        func, manage = _dispatch_table[key]
    except KeyError:
        raise DispatchError(f'no handler registered for {_key_str(key)}') from None
    if manage:
        return func(task, *storages, ManageStore(slot))
    return func(task, *storages)


def registered_combinations():
    """List of all keys ``(TaskClass, StorageClass[, StorageClass])`` of the dispatch table."""
    return list(_dispatch_table.keys())


def missing_combinations():
    """List of keys for which no handler is registered; empty if the table is exhaustive."""
    missing = []
    for task_cls in ALL_TASKS:
        for storage_classes in itertools.product(STORAGE_CLASSES, repeat=task_cls.num_operands):
            key = (task_cls, *storage_classes)
            if key not in _dispatch_table:
                missing.append(key)
    return missing


def _key_str(key):
    return '(' + ', '.join(cls.__name__ for cls in key) + ')'
