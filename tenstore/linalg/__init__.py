r"""Dense storage, operation dispatch and contraction of dense tensors.

The tensor class :class:`~tenstore.linalg.tensor.DenseTensor` owns a storage slot, on which all
operations are carried out by dispatching a task (:mod:`~tenstore.linalg.tasks`) to the handler
registered for the task and the storage representation (:mod:`~tenstore.linalg.dispatching`).
The handlers are defined in :mod:`~tenstore.linalg.real` and :mod:`~tenstore.linalg.cplx`;
importing this package registers them.

.. rubric:: Submodules

.. autosummary::
    :toctree: .

    tensor
    indices
    ranges
    dtypes
    storage
    tasks
    dispatching
    real
    cplx
    contraction
    kernels
    printing

"""
# Copyright (C) TeNPy Developers, GNU GPLv3

from . import (dtypes, indices, ranges, storage, kernels, printing, tasks, dispatching,
               contraction, real, cplx, tensor)
from .dtypes import *
from .indices import *
from .ranges import *
from .storage import *
from .printing import *
from .tasks import *
from .dispatching import *
from .contraction import *
from .tensor import *

__all__ = ['dtypes', 'indices', 'ranges', 'storage', 'kernels', 'printing', 'tasks',
           'dispatching', 'contraction', 'real', 'cplx', 'tensor',
           *dtypes.__all__,
           *indices.__all__,
           *ranges.__all__,
           *storage.__all__,
           *printing.__all__,
           *tasks.__all__,
           *dispatching.__all__,
           *contraction.__all__,
           *tensor.__all__,
           ]
