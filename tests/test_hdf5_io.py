"""Test output to and import from hdf5 and pickle."""
# Copyright (C) TeNPy Developers, GNU GPLv3

import io
import numpy as np
import numpy.testing as npt
import pytest

from tenstore.tools import hdf5_io
from tenstore.linalg.indices import Index
from tenstore.linalg.storage import RealStorage, ComplexStorage
from tenstore.linalg.tensor import DenseTensor


def test_pickle_writer(storage_cls):
    stream = io.BytesIO()
    writer = hdf5_io.PickleWriter(stream)
    T = DenseTensor([Index(2), Index(3)], storage_cls(np.arange(6.)))
    T.write(writer)
    T.write(writer)
    stream.seek(0)
    for _ in range(2):
        s = hdf5_io.read_storage_pickle(stream)
        assert type(s) is storage_cls
        npt.assert_array_equal(s.data, np.arange(6.))


def test_save_load_pickle(tmp_path, np_random):
    A = np_random.standard_normal((2, 3)) + 1.j * np_random.standard_normal((2, 3))
    T = DenseTensor.from_ndarray(A, [Index(2, 'i'), Index(3, 'j')]) * 2.
    for ending in ['.pkl', '.pklz']:
        filename = tmp_path / ('tensor' + ending)
        hdf5_io.save({'T': T}, filename)
        data = hdf5_io.load(filename)
        npt.assert_allclose(data['T'].to_ndarray(), 2. * A)
    with pytest.raises(ValueError):
        hdf5_io.save(T, tmp_path / 'tensor.txt')


def test_hdf5_writer(storage_cls, tmp_path):
    h5py = pytest.importorskip('h5py')
    filename = tmp_path / 'storage.h5'
    with h5py.File(str(filename), 'w') as f:
        writer = hdf5_io.Hdf5Writer(f.create_group('s'))
        DenseTensor([Index(4)], storage_cls([1., 2., 3., 4.])).write(writer)
        with pytest.raises(hdf5_io.Hdf5ExportError):
            DenseTensor([Index(4)], storage_cls(4)).write(writer)
        f.create_group('bad').attrs[hdf5_io.ATTR_TYPE] = 'DiagReal'
        f['bad'].create_dataset('data', data=np.zeros(3))
    with h5py.File(str(filename), 'r') as f:
        assert f['s'].attrs[hdf5_io.ATTR_TYPE] == storage_cls.storage_type.value
        s = hdf5_io.read_storage_hdf5(f['s'])
        assert type(s) is storage_cls
        npt.assert_array_equal(s.data, [1., 2., 3., 4.])
        with pytest.raises(hdf5_io.Hdf5FormatError):
            hdf5_io.read_storage_hdf5(f['bad'])


def test_save_load_hdf5(tmp_path, np_random):
    pytest.importorskip('h5py')
    A = np_random.standard_normal((2, 3, 4))
    T = DenseTensor.from_ndarray(A, [Index(2, 'i'), Index(3), Index(4, 'k')]) * -0.5
    filename = tmp_path / 'tensor.h5'
    hdf5_io.save(T, filename)
    T2 = hdf5_io.load(filename)
    assert isinstance(T2, DenseTensor)
    assert isinstance(T2.storage, RealStorage)
    assert T2.index_set.extents == (2, 3, 4)
    assert [ind.name for ind in T2.index_set] == ['i', None, 'k']
    assert T2.scale_factor == -0.5
    npt.assert_allclose(T2.to_ndarray(), -0.5 * A)
    C = DenseTensor.from_scalar(1.j)
    hdf5_io.save(C, tmp_path / 'scalar.hdf5')
    C2 = hdf5_io.load(tmp_path / 'scalar.hdf5')
    assert isinstance(C2.storage, ComplexStorage)
    assert C2.get() == 1.j
