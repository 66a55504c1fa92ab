"""
Server configuration.

Values are layered: built-in defaults, then the JSON config file (if any),
then MDSERVE_* environment variables. Command-line flags are applied on top
by the CLI.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "mdserve.json"
ENV_PREFIX = "MDSERVE_"

DEFAULT_CONFIG: Dict[str, Any] = {
    'root': '.',
    'prefix': '/docs/',
    'middleware': False,
    'log_dir': 'logs',
    'log_level': 'INFO',
    'debug': False,
    'highlight_style': 'default',
}

_BOOL_KEYS = {'middleware', 'debug'}
_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def normalize_prefix(prefix: str) -> str:
    """'docs' -> '/docs/', '' -> '/'"""
    prefix = (prefix or '').strip().strip('/')
    return f"/{prefix}/" if prefix else "/"


def _from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    values = {}
    for key in DEFAULT_CONFIG:
        raw = environ.get(ENV_PREFIX + key.upper())
        if raw is None:
            continue
        values[key] = raw.strip().lower() in _TRUE_VALUES if key in _BOOL_KEYS else raw
    return values


def load_config(config_file: Optional[Union[str, Path]] = None,
                environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Load configuration; a missing or broken config file is not fatal."""
    config = dict(DEFAULT_CONFIG)
    config_path = Path(config_file) if config_file else Path.cwd() / CONFIG_FILE_NAME

    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
            if not isinstance(loaded, dict):
                raise ValueError("top level must be an object")
            unknown = set(loaded) - set(DEFAULT_CONFIG)
            if unknown:
                logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
            config.update({k: v for k, v in loaded.items() if k in DEFAULT_CONFIG})
            logger.info(f"Loaded config from {config_path}")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load config {config_path}: {e}")

    config.update(_from_env(os.environ if environ is None else environ))
    config['prefix'] = normalize_prefix(config['prefix'])
    return config
