"""Version of tenstore and of the libraries it runs with.

.. autodata :: version
.. autodata :: released
.. autodata :: git_revision
.. autodata :: full_version
.. autodata :: version_summary
"""
# Copyright (C) TeNPy Developers, GNU GPLv3

import sys
import subprocess
import os

__all__ = ["version", "released", "git_revision", "full_version", "version_summary"]

#: current release version as a string, ``major.minor.revision``
version = '0.1.0'

#: whether this is a released version, or a development version from git
released = False


def _git_output(*args):
    """Output of ``git *args`` run in the source directory, ``None`` if that fails."""
    try:
        out = subprocess.check_output(['git', *args],
                                      cwd=os.path.dirname(os.path.abspath(__file__)),
                                      stderr=subprocess.DEVNULL)
    except (subprocess.SubprocessError, OSError):
        return None
    return out.decode().strip()


def _commits_since_tag():
    descr = _git_output('describe', '--tags', '--long')  # e.g. 'v0.1.0-12-gabcdef0'
    try:
        return int(descr.rsplit('-', 2)[1])
    except (AttributeError, IndexError, ValueError):
        return 0


#: hash of the last git commit, or ``'unknown'``
git_revision = _git_output('rev-parse', 'HEAD') or 'unknown'

#: version with the number of commits and revision appended for development versions
full_version = version
if not released:
    full_version = f'{version}.dev{_commits_since_tag():d}+{git_revision[:7]}'


def _get_version_summary():
    from .tools.optimization import get_level
    import numpy
    import scipy
    return (f"tenstore {full_version} (optimization level {get_level().name}),\n"
            f"git revision {git_revision} using\n"
            f"python {sys.version}\n"
            f"numpy {numpy.version.full_version}, scipy {scipy.version.full_version}")


#: summary of the tenstore, python, numpy and scipy versions
version_summary = _get_version_summary()
