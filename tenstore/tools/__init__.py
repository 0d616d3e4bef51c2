r"""A collection of tools: short yet quite useful functions.

Common to all tools is that they are not specific to the dense storage, but fairly general.

.. rubric:: Submodules

.. autosummary::
    :toctree: .

    hdf5_io
    params
    misc
    optimization
"""
# Copyright (C) TeNPy Developers, GNU GPLv3

from . import hdf5_io, misc, optimization, params
from .hdf5_io import *
from .misc import *
from .optimization import *
from .params import *

__all__ = [
    *[n for n in hdf5_io.__all__ if n.upper() != n],
    *misc.__all__,
    *optimization.__all__,
    *params.__all__,
]
