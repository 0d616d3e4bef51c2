"""Formatting of dense storage for human readable output.

There is no global print configuration: a :class:`PrintOptions` instance is passed explicitly
with each :class:`~tenstore.linalg.tasks.Print` task. It can be created from a
:class:`~tenstore.tools.params.Config` (or dict, or yaml file) with
:meth:`PrintOptions.from_config`.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3
from __future__ import annotations

import numpy as np

from ..tools.params import asConfig
from .ranges import RangeIter

__all__ = ['PrintOptions', 'default_print_options', 'format_value', 'print_dense']


class PrintOptions:
    """Options for printing dense storage.

    Parameters
    ----------
    threshold : float
        Only elements with squared magnitude ``abs(value)**2 > threshold`` are listed.
    precision : int
        Number of significant digits of printed values.
    print_data : bool
        Default for whether elements are listed at all, or only the summary line.
    """
    def __init__(self, threshold: float = 1.e-10, precision: int = 8, print_data: bool = True):
        self.threshold = float(threshold)
        self.precision = int(precision)
        self.print_data = bool(print_data)

    @classmethod
    def from_config(cls, options) -> PrintOptions:
        """Read the options from a :class:`~tenstore.tools.params.Config` or dict.

        .. cfg:config :: PrintOptions

            threshold : float
                See :class:`PrintOptions`.
            precision : int
                See :class:`PrintOptions`.
            print_data : bool
                See :class:`PrintOptions`.
        """
        options = asConfig(options, "PrintOptions")
        return cls(threshold=options.get('threshold', 1.e-10, 'real'),
                   precision=options.get('precision', 8, int),
                   print_data=options.get('print_data', True, bool))

    def __repr__(self):
        return (f'PrintOptions(threshold={self.threshold!r}, precision={self.precision!r}, '
                f'print_data={self.print_data!r})')


#: options used if a :class:`~tenstore.linalg.tasks.Print` task does not specify any
default_print_options = PrintOptions()


def format_value(value, precision: int = 8) -> str:
    """Format a real or complex scalar; complex values as ``a+bi``."""
    if np.iscomplexobj(value):
        value = complex(value)
        sign = '-' if value.imag < 0 else '+'
        return f'{value.real:.{precision}g}{sign}{abs(value.imag):.{precision}g}i'
    return f'{float(value):.{precision}g}'


def print_dense(task, data: np.ndarray, kind_name: str, norm: float):
    """Write the summary line and the elements of a dense buffer to ``task.stream``.

    Parameters
    ----------
    task : :class:`~tenstore.linalg.tasks.Print`
        The print task, providing `index_set`, `stream`, `scale_factor`, `print_data` and
        `options`.
    data : 1D array
        The buffer to print.
    kind_name : str
        Name of the storage representation for the summary line.
    norm : float
        Norm of the buffer, excluding the scale factor.
    """
    stream = task.stream
    options = task.options
    stream.write(f'{{{kind_name} size={data.size:d} norm={norm:.{options.precision}g}}}\n')
    index_set = task.index_set
    if index_set.rank == 0:
        stream.write('  ' + format_value(task.scale_factor * data[0], options.precision) + '\n')
        return
    if not task.print_data:
        return
    it = RangeIter(index_set.range())
    while it.not_done():
        val = task.scale_factor * data[it.offset]
        if abs(val)**2 > options.threshold:
            idx = ','.join(str(1 + i) for i in it)
            stream.write(f'({idx}) {format_value(val, options.precision)}\n')
        it.increment()
