# Copyright (C) TeNPy Developers, GNU GPLv3
from setuptools import setup, find_packages

import os


def read_version():
    """Read the hard-coded version from tenstore/version.py without importing the package."""
    with open(os.path.join(os.path.dirname(__file__), 'tenstore', 'version.py')) as f:
        for line in f:
            if line.startswith('version = '):
                return line.split('=', 1)[1].strip().strip("'\"")
    raise RuntimeError("no version found in tenstore/version.py")


if __name__ == '__main__':
    setup(
        name='tenstore',
        version=read_version(),
        description='Dense tensor storage with dispatch on real and complex representations',
        license='GPLv3',
        packages=find_packages(include=['tenstore', 'tenstore.*']),
        python_requires='>=3.8',
        install_requires=['numpy>=1.19', 'scipy>=1.5', 'pyyaml'],
        extras_require={
            'io': ['h5py'],
            'test': ['pytest', 'h5py'],
        },
    )
