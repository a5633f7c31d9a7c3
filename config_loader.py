#config_loader.py
"""
Loads and provides the library configuration from a YAML file.

The configuration is loaded from ``config.yaml`` in the working directory by
default, but can be overridden via the ``ROBOT_COMMANDS_CONFIG_FILE``
environment variable. Values found in the file are merged over ``DEFAULTS``,
so a missing file or a partial file is fine. After loading, the log
directory is expanded to an absolute path and exported as ``LOG_DIR``.
"""

import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'ROBOT_COMMANDS_CONFIG_FILE'

DEFAULTS: Dict[str, Any] = {
    'commands': {
        'tick_period_ms': 20,
    },
    'logging': {
        'level': 'INFO',
        'log_dir': 'logs',
        'to_file': False,
        'log_max_size_mb': 25,
        'log_backup_count': 5,
    },
}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""
    pass


def _deep_merge_dicts(d1, d2):
    """
    Recursively merges dictionary d2 into dictionary d1.
    Modifies d1 in place.
    """
    for k, v in d2.items():
        if k in d1 and isinstance(d1[k], dict) and isinstance(v, dict):
            _deep_merge_dicts(d1[k], v)
        else:
            d1[k] = v
    return d1


def _validate(config: Dict[str, Any]):
    for section in ('commands', 'logging'):
        if not isinstance(config.get(section), dict):
            raise ConfigError(f"Config section '{section}' must be a mapping.")

    cmd_cfg = config['commands']
    try:
        period_ms = float(cmd_cfg['tick_period_ms'])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid 'commands.tick_period_ms': {e}") from e
    if period_ms <= 0:
        raise ConfigError("'commands.tick_period_ms' must be > 0.")


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load, merge and validate the configuration.

    Args:
        path: Explicit YAML file. Falls back to the environment variable and
            then to ``config.yaml``.

    Returns:
        A fresh configuration dictionary with ``logging.log_dir`` made absolute.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
    """
    config_file = path or os.environ.get(CONFIG_ENV_VAR, 'config.yaml')
    config = copy.deepcopy(DEFAULTS)

    if os.path.exists(config_file):
        try:
            with open(config_file, 'r') as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse config file '{config_file}': {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config file '{config_file}' must contain a mapping.")
        _deep_merge_dicts(config, loaded)
        base_dir = os.path.dirname(os.path.abspath(config_file))
    else:
        if path:
            raise ConfigError(f"Config file '{config_file}' not found.")
        logger.debug(f"Config file '{config_file}' not found; using defaults.")
        base_dir = os.getcwd()

    _validate(config)

    log_dir_rel = config['logging'].get('log_dir', 'logs')
    config['logging']['log_dir'] = os.path.abspath(os.path.join(base_dir, log_dir_rel))
    return config


CONFIG = load_config()

# Export absolute log directory for convenience
LOG_DIR: str = CONFIG['logging']['log_dir']
