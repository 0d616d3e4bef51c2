"""Option dictionaries for configurable parts like :class:`~tenstore.linalg.printing.PrintOptions`.

A :class:`Config` is a read-only view of a plain dictionary which logs the options as they are
read out, fills in the defaults of :meth:`Config.get`, and warns about keys that were never
read, which usually indicates a typo. It can be loaded from yaml files with the additional
``!py_eval`` tag, see :func:`load_yaml_with_py_eval`.
"""
# Copyright (C) TeNPy Developers, GNU GPLv3

import warnings
import numbers
import os
from collections.abc import Mapping
import numpy as np
import yaml
import logging
logger = logging.getLogger(__name__)

__all__ = ["Config", "asConfig", "load_yaml_with_py_eval"]


class Config(Mapping):
    """Read-only mapping of option keys to values, tracking which options were used.

    Parameters
    ----------
    options : dict
        The option keys and values. Defaults of :meth:`get` get inserted into it.
    name : str
        Descriptive name used in log messages and warnings, e.g. ``'PrintOptions'``.

    Attributes
    ----------
    name : str
        Descriptive name.
    options : dict
        The option keys and values.
    unused : set
        Keys of :attr:`options` that were not read out so far.
    """
    def __init__(self, options, name):
        self.options = options
        self.name = name
        self.unused = set(options)

    @classmethod
    def from_yaml(cls, filename, name=None):
        """Read the options from a yaml file, see :func:`load_yaml_with_py_eval`.

        `name` defaults to the basename of `filename`.
        """
        if name is None:
            name = os.path.basename(filename)
        options = load_yaml_with_py_eval(filename)
        if options is None:
            options = {}
        return cls(options, name)

    def __getitem__(self, key):
        val = self.options[key]
        self.log(key)
        self.unused.discard(key)
        return val

    def __contains__(self, key):
        return key in self.options

    def __iter__(self):
        return iter(self.options)

    def __len__(self):
        return len(self.options)

    def __repr__(self):
        return f"Config(<{len(self.options):d} options>, {self.name!r})"

    def __del__(self):
        self.warn_unused()

    def get(self, key, default, expect_type=None):
        """Read out `key`, inserting `default` into :attr:`options` if it is not set.

        Parameters
        ----------
        key : str
            The option to read.
        default :
            Value used (and stored) if `key` is not set.
        expect_type : None | ``'real'`` | type | list of type
            If given, warn if the value (unless ``None``) is not an instance of one of these.

        Returns
        -------
        val :
            The value of the option.
        """
        use_default = key not in self.options
        val = self.options.setdefault(key, default)
        self.log(key, use_default)
        self.unused.discard(key)
        if expect_type is not None and val is not None:
            if expect_type == 'real':
                expect_type = numbers.Real
            if isinstance(expect_type, type):
                expect_type = [expect_type]
            types = tuple(expect_type)
            if not isinstance(val, types):
                names = ", ".join(t.__name__ for t in types)
                warnings.warn(f"Invalid type for key {key!r} of {self.name}: expected {names}, "
                              f"got {type(val).__name__}", stacklevel=2)
        return val

    def log(self, key, use_default=False):
        """Log the value of `key` when it is read the first time."""
        if use_default:
            logger.debug("%s: reading %r=%r (default)", self.name, key, self.options[key])
        elif key in self.unused:
            logger.info("%s: reading %r=%r", self.name, key, self.options[key])

    def warn_unused(self):
        """Warn about options which were never read; called upon deletion."""
        unused = getattr(self, 'unused', None)
        if not unused:
            return
        warnings.warn(f"unused options for config {self.name!s}: {sorted(unused)!s}")
        unused.clear()


def asConfig(config, name):
    """Convert `config` to a :class:`Config` with the given `name`, unless it is one already.

    ``None`` gives an empty :class:`Config`.
    """
    if isinstance(config, Config):
        return config
    if config is None:
        config = {}
    return Config(config, name)


def _py_eval_constructor(loader, node):
    cmd = loader.construct_scalar(node)
    if not isinstance(cmd, str):
        raise ValueError("expect string argument to `!py_eval`")
    try:
        return eval(cmd, loader.eval_context)
    except Exception:
        logger.error("Error while evaluating the yaml tag !py_eval %r", cmd)
        raise


def load_yaml_with_py_eval(filename=None, yaml_content=None, context=None):
    """Load yaml with support for an additional ``!py_eval`` tag, e.g.

    .. code :: yaml

        threshold: !py_eval "np.finfo(float).eps"
        precision: 6

    .. warning ::
        The python code gets evaluated: only load yaml from trusted sources!

    Parameters
    ----------
    filename : str | None
        The yaml file to load.
    yaml_content : str | None
        Alternatively to `filename`, the yaml content itself.
    context : dict | None
        The globals for the evaluation; defaults to ``{'np': numpy}``.
    """
    if context is None:
        context = {'np': np}

    class Loader(yaml.FullLoader):
        eval_context = context

    Loader.add_constructor("!py_eval", _py_eval_constructor)
    if filename is not None:
        with open(filename, 'r') as stream:
            return yaml.load(stream, Loader=Loader)
    if yaml_content is not None:
        return yaml.load(yaml_content, Loader=Loader)
    raise ValueError("pass either `filename` or `yaml_content`")
