"""tenstore - the dense-tensor data core of a tensor network library

Dense tensors with real or complex storage, where every operation (element access, filling,
scaling, norms, conjugation, contraction, ...) is dispatched on the kind of the operation and the
storage representation(s) involved. Operations needing complex numbers transparently promote real
storage to complex storage.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3
# This file marks this directory as a python package.

import logging

# main logger for tenstore
logger = logging.getLogger(__name__)

# load and provide sub packages on first input
# note that the order matters!
from . import tools
from . import linalg
from . import version  # needs to be after tools!

# provide the more important functions and classes directly from the main namespace:
from .linalg.indices import Index, IndexSet
from .linalg.dtypes import Dtype
from .linalg.tensor import DenseTensor, contract, ncprod, add
from .linalg.printing import PrintOptions
from .tools.hdf5_io import save, load, save_to_hdf5, load_from_hdf5
from .tools.misc import setup_logging, TenstoreError, TenstoreWarning
from .tools.params import Config, asConfig, load_yaml_with_py_eval

#: hard-coded version string
__version__ = version.version

#: full version from git description, and numpy/scipy/python versions
__full_version__ = version.full_version

__all__ = [
    # subpackages
    'linalg', 'tools', 'version',
    # from tenstore.linalg
    'Index', 'IndexSet', 'Dtype', 'DenseTensor', 'contract', 'ncprod', 'add', 'PrintOptions',
    # from tenstore.tools
    'save', 'load', 'save_to_hdf5', 'load_from_hdf5', 'setup_logging', 'TenstoreError',
    'TenstoreWarning', 'Config', 'asConfig', 'load_yaml_with_py_eval',
    # from tenstore.__init__, i.e. defined below
    'show_config',
]


def show_config():
    """Print information about the version of tenstore and used libraries.

    The information printed is :attr:`tenstore.version.version_summary`.
    """
    print(version.version_summary)
