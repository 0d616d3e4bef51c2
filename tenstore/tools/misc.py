"""Miscellaneous tools: permutations, logging setup and the common error classes."""
# Copyright (C) TeNPy Developers, GNU GPLv3

import os.path
import numpy as np

__all__ = [
    'to_iterable', 'inverse_permutation', 'is_trivial_permutation', 'setup_logging',
    'TenstoreError', 'TenstoreWarning'
]

_not_set = object()  # sentinel

#: default for the `skip_setup` option of :func:`setup_logging`; the test suite sets it to True
skip_logging_setup = False


class TenstoreError(Exception):
    """Common base class for violated usage contracts of this library.

    These errors indicate programming errors of the caller (e.g. a dispatch of an unregistered
    combination, or comparing iterators of different ranges); they are not meant to be caught
    and recovered from.
    """
    pass


class TenstoreWarning(UserWarning):
    """Warning category for suspicious, but not invalid usage."""
    pass


def to_iterable(a):
    """If `a` is a not iterable or a string, return ``[a]``, else return ``a``."""
    if type(a) == str:
        return [a]
    try:
        iter(a)
    except TypeError:
        return [a]
    else:
        return a


def inverse_permutation(perm):
    """Reverse a permutation.

    Parameters
    ----------
    perm : 1D array_like
        The permutation to be reversed. *Assumes* that it is a permutation with unique indices.

    Returns
    -------
    inv_perm : 1D array (int)
        The inverse permutation of `perm` such that ``inv_perm[perm[j]] = j = perm[inv_perm[j]]``.
    """
    perm = np.asarray(perm, dtype=np.intp)
    inv_perm = np.empty_like(perm)
    inv_perm[perm] = np.arange(perm.shape[0], dtype=perm.dtype)
    return inv_perm


def is_trivial_permutation(perm):
    """Whether `perm` is ``None`` or the identity ``[0, 1, 2, ...]``."""
    if perm is None:
        return True
    return all(p == i for i, p in enumerate(perm))


def setup_logging(output_filename=None,
                  *,
                  filename=_not_set,
                  to_stdout="INFO",
                  to_file="INFO",
                  format="%(levelname)-8s: %(message)s",
                  datefmt=None,
                  logger_levels={},
                  dict_config=None,
                  capture_warnings=None,
                  skip_setup=None):
    """Configure the :mod:`logging` module.

    The default logging setup is given by the following equivalent `dict_config`
    (here in yaml format for better readability).

    .. code-block :: yaml

        version: 1  # mandatory for logging config
        disable_existing_loggers: False  # keep module-based loggers already defined!
        formatters:
            custom:
                format: "%(levelname)-8s: %(message)s"   # options['format']
        handlers:
            to_stdout:
                class: logging.StreamHandler
                level: INFO         # options['to_stdout']
                formatter: custom
                stream: ext://sys.stdout
            to_file:
                class: logging.FileHandler
                level: INFO         # options['to_file']
                formatter: custom
                filename: output_filename.log   # options['filename']
                mode: a
        root:
            handlers: [to_stdout, to_file]
            level: DEBUG

    .. note ::
        We **remove** any previously configured logging handlers.

    Parameters
    ----------
    output_filename : None | str
        The filename for where results are saved. The `filename` for the
        log-file defaults to this, but replacing the extension with ``.log``.
    skip_setup: bool
        If True, don't change anything in the logging setup; just return.
        This is useful for testing purposes, where `pytest` handles the logging setup.
        All other options are ignored in this case.
    to_stdout : None | ``"DEBUG" | "INFO" | "WARNING" | "ERROR" | "CRITICAL"``
        If not None, print log with (at least) the given level to stdout.
    to_file : None | ``"DEBUG" | "INFO" | "WARNING" | "ERROR" | "CRITICAL"``
        If not None, save log with (at least) the given level to a file.
        The filename is given by `filename`.
    filename : str
        Filename for the logfile.
        If not set, it defaults  to `output_filename` with the extension replaced to ".log".
        If ``None``, no log-file will be created, even with `to_file` set.
    logger_levels : dict(str, str)
        Set levels for certain loggers, e.g. ``{'tenstore.linalg.contraction': 'WARNING'}`` to
        suppress the contraction plan logs.
    format : str
        Formatting string, `fmt` argument of :class:`logging.Formatter`.
        The style of the formatter is chosen depending on whether the format string
        contains ``'%' '{' '$'``, respectively.
    datefmt : str
        Formatting string for the `asctime` key in the `format`.
    dict_config : dict
        Alternatively, a full configuration dictionary for :func:`logging.config.dictConfig`.
        If used, all other options except `skip_setup` and `capture_warnings` are ignored.
    capture_warnings : bool
        Whether to call :func:`logging.captureWarnings` to include the warnings into the log.
    """
    import logging
    import logging.config
    if filename is _not_set:
        if output_filename is not None:
            root, ext = os.path.splitext(output_filename)
            assert ext != '.log'
            filename = root + '.log'
        else:
            filename = None
    if capture_warnings is None:
        capture_warnings = dict_config is not None or to_stdout or to_file
    if skip_setup is None:
        skip_setup = skip_logging_setup
    if skip_setup:
        return
    if dict_config is None:
        handlers = {}
        if to_stdout:
            handlers['to_stdout'] = {
                'class': 'logging.StreamHandler',
                'level': to_stdout,
                'formatter': 'custom',
                'stream': 'ext://sys.stdout',
            }
        if to_file and filename is not None:
            handlers['to_file'] = {
                'class': 'logging.FileHandler',
                'level': to_file,
                'formatter': 'custom',
                'filename': filename,
                'mode': 'a',
            }
        dict_config = {
            'version': 1,  # mandatory
            'disable_existing_loggers': False,
            'formatters': {
                'custom': {
                    'format': format,
                    'datefmt': datefmt
                }
            },
            'handlers': handlers,
            'root': {
                'handlers': list(handlers.keys()),
                'level': 'DEBUG'
            },
            'loggers': {},
        }
        if '%' not in format:
            if '{' in format:
                assert '$' not in format
                style = '{'
            else:
                assert '$' in format
                style = '$'
            dict_config['formatters']['custom']['style'] = style
        for name, level in logger_levels.items():
            if name == 'root':
                dict_config['root']['level'] = level
            else:
                dict_config['loggers'].setdefault(name, {})['level'] = level
    else:
        dict_config.setdefault('disable_existing_loggers', False)
    # note: dictConfig cleans up previously existing handlers etc
    logging.config.dictConfig(dict_config)
    if capture_warnings:
        logging.captureWarnings(True)
