"""Global level of sanity checks for this library.

Most of the checks done in :mod:`tenstore.linalg` are cheap compared to the actual numerics.
A few of them are not, e.g. comparing buffer sizes before every accumulation or checking that
two :class:`~tenstore.linalg.ranges.RangeIter` share the same range on every comparison.
Those "debug-only" checks can be switched off *dynamically* (i.e., during runtime) with
:func:`set_level`. The possible choices for this global level are given by the
:class:`OptimizationFlag`. The default initial value can be adjusted by the environment
variable `TENSTORE_OPTIMIZE`.

.. warning ::
    When the unsafe level is enabled, we skip (some) sanity checks.
    Thus, errors will not be detected that easily, and debugging is much harder!
    Enable it only for code which you successfully have run before with checks enabled.
    The context manager :class:`temporary_level` can help with that.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3

import os
from enum import IntEnum

__all__ = [
    'OptimizationFlag',
    'temporary_level',
    'to_OptimizationFlag',
    'set_level',
    'get_level',
    'optimize',
]


class OptimizationFlag(IntEnum):
    """Options for the global 'optimization level'.

    A higher level *includes* all the previous optimizations.

    ===== ================ =======================================================================
    Level Flag             Description
    ===== ================ =======================================================================
    0     none             Run all sanity checks, including the expensive ones.
                           Used for testing.
    ----- ---------------- -----------------------------------------------------------------------
    1     default          Run the debug-only checks (buffer sizes, range identity).
    ----- ---------------- -----------------------------------------------------------------------
    2     safe             Same checks as `default`.
    ----- ---------------- -----------------------------------------------------------------------
    3     skip_arg_checks  Unsafe! Skip the debug-only checks of contract violations.
    ===== ================ =======================================================================
    """

    none = 0
    default = 1
    safe = 2
    skip_arg_checks = 3


class temporary_level:
    """Context manager to temporarily set the optimization level to a different value.

    Parameters
    ----------
    temporary_level : int | OptimizationFlag | str | None
        The optimization level to be set during the context.
        `None` defaults to the current value of the optimization level.

    Examples
    --------
    It is recommended to use this context manager in a ``with`` statement::

        with temporary_level(OptimizationFlag.skip_arg_checks):
            add(dest, src)  # no size check of the buffers
        # back to the previous level here
    """

    def __init__(self, temporary_level):
        self.temporary_level = temporary_level

    def __enter__(self):
        """Enter the context manager."""
        self._old_level = get_level()
        if self.temporary_level is not None:
            set_level(self.temporary_level)

    def __exit__(self, exc_type, exc_value, traceback):
        """Exit the context manager."""
        set_level(self._old_level)


def to_OptimizationFlag(level):
    """Convert strings and int to a valid OptimizationFlag.

    ``None`` defaults to the current level.
    """
    if level is None:
        return get_level()
    if isinstance(level, str):
        try:
            level = int(level)
        except ValueError:
            level = OptimizationFlag[level]
    return OptimizationFlag(level)


def set_level(level=1):
    """Set the global optimization level.

    Parameters
    ----------
    level : int | OptimizationFlag | str | None
        The new global optimization level to be set.
        ``None`` defaults to keeping the current level.
    """
    global _level
    _level = to_OptimizationFlag(level)


def get_level():
    """Return the global optimization level."""
    global _level
    return _level


def optimize(level_compare=OptimizationFlag.default):
    """Check whether checks belonging to `level_compare` should be skipped.

    Parameters
    ----------
    level_compare : OptimizationFlag
        At which level to start optimization, i.e., how safe the suggested optimization is.

    Returns
    -------
    optimize : bool
        True if the global "optimization level" is equal or higher than `level_compare`.
    """
    global _level
    return _level >= level_compare


# private global variables
_level = OptimizationFlag.default  # set default optimization level
set_level(os.getenv('TENSTORE_OPTIMIZE', default=None))  # update from environment variable
