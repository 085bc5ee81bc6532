"""
Script configuration.

Loads the YAML config shared by run_factor.py and benchmark_factor.py.
Missing keys fall back to DEFAULT_CONFIG.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_CONFIG_PATH = Path('config/default.yaml')

DEFAULT_CONFIG: Dict[str, Any] = {
    'min_bound': 0,
    'sorted_divisors': True,
    'benchmark': {
        'seed': 0,
        'bound': 200000,
        'iterations': 500,
        'options': [13071985783, 16510398467, 14387119589, 25092948337, 32149278989],
    },
}


def _check_int(value, name: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValueError(f"config: {name} must be an integer >= {minimum}, got {value!r}")
    return value


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load and validate a config file.

    Parameters
    ----------
    path : Path, optional
        YAML file to read. When omitted, config/default.yaml is read if it
        exists, otherwise the built-in defaults are used.

    Returns
    -------
    dict
        Config with every key of DEFAULT_CONFIG present.

    Raises
    ------
    OSError
        If an explicitly given path cannot be read.
    yaml.YAMLError
        If the file is not valid YAML.
    ValueError
        If a value has the wrong type or range.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return config
        path = DEFAULT_CONFIG_PATH

    with open(path) as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"config: expected a mapping at top level of {path}")

    benchmark = loaded.pop('benchmark', None) or {}
    if not isinstance(benchmark, dict):
        raise ValueError("config: benchmark must be a mapping")
    config.update(loaded)
    config['benchmark'].update(benchmark)

    _check_int(config['min_bound'], 'min_bound', 0)
    if not isinstance(config['sorted_divisors'], bool):
        raise ValueError("config: sorted_divisors must be true or false")

    bench = config['benchmark']
    _check_int(bench['seed'], 'benchmark.seed', 0)
    _check_int(bench['bound'], 'benchmark.bound', 0)
    _check_int(bench['iterations'], 'benchmark.iterations', 0)
    if not bench['options']:
        raise ValueError("config: benchmark.options must be a non-empty list")
    for value in bench['options']:
        _check_int(value, 'benchmark.options entry', 1)

    return config
