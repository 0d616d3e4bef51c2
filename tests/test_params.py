"""A collection of tests for :mod:`tenstore.tools.params` and the configuration of printing."""
# Copyright (C) TeNPy Developers, GNU GPLv3

import logging
import numpy as np
import pytest

from tenstore.tools.params import Config, asConfig, load_yaml_with_py_eval
from tenstore.linalg.printing import PrintOptions


def test_print_options_from_config():
    options = PrintOptions.from_config(None)
    assert (options.threshold, options.precision, options.print_data) == (1.e-10, 8, True)
    config = Config({'precision': 3}, 'PrintOptions')
    options = PrintOptions.from_config(config)
    assert options.precision == 3
    assert options.threshold == 1.e-10
    # defaults are filled in
    assert config.options == {'precision': 3, 'threshold': 1.e-10, 'print_data': True}
    assert len(config.unused) == 0
    options = PrintOptions.from_config({'threshold': 1, 'print_data': False})
    assert options.threshold == 1.
    assert not options.print_data


def test_print_options_wrong_type():
    config = asConfig({'precision': 2.5}, 'PrintOptions')
    with pytest.warns(UserWarning, match="Invalid type for key 'precision'"):
        options = PrintOptions.from_config(config)
    assert options.precision == 2
    # None always passes
    assert asConfig({'x': None}, 'test').get('x', 1, int) is None


def test_unused_options_warn():
    config = Config({'precision': 4, 'treshold': 0.1}, 'PrintOptions')
    PrintOptions.from_config(config)
    assert config.unused == {'treshold'}
    with pytest.warns(UserWarning, match=r"unused options for config PrintOptions: \['treshold'\]"):
        config.warn_unused()
    assert len(config.unused) == 0
    config.warn_unused()  # no second warning


def test_config_mapping(caplog):
    config = Config({'a': 1, 'b': 2}, 'test')
    assert 'a' in config and 'c' not in config
    assert config.unused == {'a', 'b'}
    assert sorted(config) == ['a', 'b']
    assert len(config) == 2
    with caplog.at_level(logging.INFO, logger='tenstore.tools.params'):
        assert config['a'] == 1
    assert "test: reading 'a'=1" in caplog.text
    assert config.unused == {'b'}
    assert asConfig(config, 'other') is config
    config.unused.clear()


def test_yaml(tmp_path):
    yaml_content = 'threshold: !py_eval "np.finfo(float).eps"\nprecision: 4\n'
    options = load_yaml_with_py_eval(yaml_content=yaml_content)
    assert options['threshold'] == np.finfo(float).eps
    print_options = PrintOptions.from_config(options)
    assert print_options.threshold == np.finfo(float).eps
    assert print_options.precision == 4
    assert print_options.print_data
    filename = tmp_path / 'print_options.yml'
    filename.write_text('precision: !py_eval "2 * 3"\nprint_data: false\n')
    config = Config.from_yaml(str(filename))
    assert config.name == 'print_options.yml'
    print_options = PrintOptions.from_config(config)
    assert print_options.precision == 6
    assert not print_options.print_data
    with pytest.raises(ValueError):
        load_yaml_with_py_eval()
