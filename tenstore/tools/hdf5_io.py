"""Tools to save and load dense tensors to disk.

The functions :func:`save` and :func:`load` are convenience functions for saving and loading
objects to/from files, guessing the file type (and hence protocol for reading/writing) from the
file ending.

The storage of a tensor is handed over to a *writer* by the
:class:`~tenstore.linalg.tasks.Write` task: the writer receives the tag of the storage
representation (a :class:`~tenstore.linalg.storage.StorageType`) and the raw buffer.
:class:`Hdf5Writer` stores them in a HDF5 group, :class:`PickleWriter` in a binary stream;
:func:`read_storage_hdf5` and :func:`read_storage_pickle` reconstruct the storage.

Classes like :class:`~tenstore.linalg.tensor.DenseTensor` can be exported with
:func:`save_to_hdf5` if they implement a method ``save_hdf5(h5gr)`` and a classmethod
``from_hdf5(h5gr)``; the class is recorded in the attributes of the group.

.. note ::
    To use the export/import features to HDF5, you need to install the
    `h5py <http://docs.h5py.org>`_ python package
    (and hence some version of the HDF5 library).

.. warning ::
    Like loading a pickle file, loading data from a manipulated HDF5 file with the functions
    provided below has the potential to cause arbitrary code execution.
    Only load data from trusted sources!
"""
# Copyright (C) TeNPy Developers, GNU GPLv3

import pickle
import gzip
import importlib
import numpy as np

try:
    import h5py
except ImportError:
    h5py = None

__all__ = [
    'save', 'load', 'find_global', 'Hdf5FormatError', 'Hdf5ExportError', 'Hdf5ImportError',
    'Hdf5Writer', 'PickleWriter', 'read_storage_hdf5', 'read_storage_pickle', 'save_to_hdf5',
    'load_from_hdf5', 'REPR_HDF5EXPORTABLE', 'ATTR_TYPE', 'ATTR_CLASS', 'ATTR_MODULE'
]


def save(data, filename, mode='w'):
    """Save `data` to file with given `filename`.

    This function guesses the type of the file from the filename ending.
    Supported endings:

    ============ ===============================
    ending       description
    ============ ===============================
    .pkl         Pickle without compression
    ------------ -------------------------------
    .pklz        Pickle with gzip compression.
    ------------ -------------------------------
    .hdf5, .h5   HDF5 file (using `h5py`).
    ============ ===============================

    Parameters
    ----------
    filename : str
        The name of the file where to save the data.
    mode : str
        File mode for opening the file. ``'w'`` for write (discard existing file),
        ``'a'`` for append (add data to exisiting file).
        See :py:func:`open` for more details.
    """
    filename = str(filename)
    if filename.endswith('.pkl'):
        with open(filename, mode + 'b') as f:
            pickle.dump(data, f)
    elif filename.endswith('.pklz'):
        with gzip.open(filename, mode + 'b') as f:
            pickle.dump(data, f)
    elif filename.endswith('.hdf5') or filename.endswith('.h5'):
        with h5py.File(filename, mode) as f:
            save_to_hdf5(f, data)
    else:
        raise ValueError("Don't recognise file ending of " + repr(filename))


def load(filename):
    """Load data from file with given `filename`.

    Guess the type of the file from the filename ending, see :func:`save` for possible endings.

    Parameters
    ----------
    filename : str
        The name of the file to load.

    Returns
    -------
    data : obj
        The object loaded from the file.
    """
    filename = str(filename)
    if filename.endswith('.pkl'):
        with open(filename, 'rb') as f:
            data = pickle.load(f)
    elif filename.endswith('.pklz'):
        with gzip.open(filename, 'rb') as f:
            data = pickle.load(f)
    elif filename.endswith('.hdf5') or filename.endswith('.h5'):
        with h5py.File(filename, 'r') as f:
            data = load_from_hdf5(f)
    else:
        raise ValueError("Don't recognise file ending of " + repr(filename))
    return data


def find_global(module, qualified_name):
    """Get the object of the `qualified_name` in a given python `module`.

    Parameters
    ----------
    module : str
        Name of the module containing the object. The module gets imported.
    qualified_name : str
        Name of the object to be retrieved. May contain dots if the object is part of a class etc.
    """
    mod = importlib.import_module(module)
    obj = mod
    for subpath in qualified_name.split('.'):
        obj = getattr(obj, subpath)
    return obj


#: saved object is instance of a class implementing ``save_hdf5`` and ``from_hdf5``
REPR_HDF5EXPORTABLE = "instance"

ATTR_TYPE = "type"  #: Attribute name for the type of the saved object or storage
ATTR_CLASS = "class"  #: Attribute name for the class name of an exportable object
ATTR_MODULE = "module"  #: Attribute name for the module where ATTR_CLASS can be retrieved


class Hdf5FormatError(Exception):
    """Common base class for errors regarding our HDF5 format."""
    pass


class Hdf5ExportError(Hdf5FormatError):
    """This exception is raised when something went wrong during export to hdf5."""
    pass


class Hdf5ImportError(Hdf5FormatError):
    """This exception is raised when something went wrong during import from hdf5."""
    pass


def _storage_class_for_tag(tag):
    from ..linalg.storage import StorageType, RealStorage, ComplexStorage
    if isinstance(tag, bytes):
        tag = tag.decode()
    try:
        storage_type = StorageType(tag)
    except ValueError:
        raise Hdf5ImportError(f"unknown storage type {tag!r}") from None
    classes = {StorageType.RealDense: RealStorage, StorageType.ComplexDense: ComplexStorage}
    return classes[storage_type]


class Hdf5Writer:
    """Writer storing a storage buffer in a HDF5 group.

    The tag of the storage is saved as attribute ``ATTR_TYPE`` of the group, the raw buffer as
    dataset `name` in it.

    Parameters
    ----------
    h5group : :class:`Group`
        The HDF5 group (or h5py :class:`File`) to write to.
    name : str
        Name of the dataset for the buffer.
    """
    def __init__(self, h5group, name='data'):
        self.h5group = h5group
        self.name = name

    def write_type(self, storage_type, storage):
        """Called by the :class:`~tenstore.linalg.tasks.Write` handlers."""
        if self.name in self.h5group:
            raise Hdf5ExportError(f"dataset {self.name!r} exists already")
        self.h5group.attrs[ATTR_TYPE] = storage_type.value
        self.h5group.create_dataset(self.name, data=storage.data)


def read_storage_hdf5(h5group, name='data'):
    """Reconstruct the storage written by :class:`Hdf5Writer`."""
    if ATTR_TYPE not in h5group.attrs:
        raise Hdf5ImportError(f"missing attribute {ATTR_TYPE!r} in {h5group.name!r}")
    cls = _storage_class_for_tag(h5group.attrs[ATTR_TYPE])
    return cls(np.asarray(h5group[name][()]))


class PickleWriter:
    """Writer appending ``(tag, buffer)`` records to a binary `stream` with :mod:`pickle`."""
    def __init__(self, stream):
        self.stream = stream

    def write_type(self, storage_type, storage):
        """Called by the :class:`~tenstore.linalg.tasks.Write` handlers."""
        pickle.dump((storage_type.value, storage.data), self.stream)


def read_storage_pickle(stream):
    """Read the next record written by :class:`PickleWriter` and reconstruct the storage."""
    tag, data = pickle.load(stream)
    cls = _storage_class_for_tag(tag)
    return cls(data)


def save_to_hdf5(h5group, obj, path='/'):
    """Save an object `obj` into a hdf5 file or group.

    `obj` needs to implement a method ``save_hdf5(h5gr)``.

    Parameters
    ----------
    h5group : :class:`Group`
        The HDF5 group (or h5py :class:`File`) to which `obj` should be saved.
    obj : object
        The object (=data) to be saved.
    path : str
        Path within `h5group` under which the `obj` should be saved.
        To avoid unwanted overwriting of important data, the group should not yet exist,
        except if `path` is the default ``'/'``.

    Returns
    -------
    h5gr : :class:`Group`
        The h5py group under which `obj` was saved.
    """
    if not hasattr(obj, 'save_hdf5'):
        raise Hdf5ExportError(f"Can't save object of type {type(obj)!r} to HDF5")
    h5gr = h5group if path == '/' else h5group.create_group(path)
    h5gr.attrs[ATTR_TYPE] = REPR_HDF5EXPORTABLE
    h5gr.attrs[ATTR_CLASS] = type(obj).__qualname__
    h5gr.attrs[ATTR_MODULE] = type(obj).__module__
    obj.save_hdf5(h5gr)
    return h5gr


def load_from_hdf5(h5group, path=None):
    """Load an object saved with :func:`save_to_hdf5` from a hdf5 file or group.

    Parameters
    ----------
    h5group : :class:`Group`
        The HDF5 group (or h5py :class:`File`) to be loaded.
    path : None | str
        Path within `h5group` to be used for loading. Defaults to the `h5group` itself.

    Returns
    -------
    obj : object
        The Python object loaded from `h5group` (specified by `path`).
    """
    h5gr = h5group if path is None else h5group[path]
    attrs = h5gr.attrs
    if attrs.get(ATTR_TYPE) != REPR_HDF5EXPORTABLE:
        raise Hdf5ImportError(f"{h5gr.name!r} does not hold an exported object")
    try:
        cls = find_global(attrs[ATTR_MODULE], attrs[ATTR_CLASS])
    except (ImportError, AttributeError) as e:
        raise Hdf5ImportError(f"Can't find class for {h5gr.name!r}") from e
    return cls.from_hdf5(h5gr)
