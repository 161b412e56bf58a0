from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

from refhelper import __version__
from .structured_data import load_structured_file

DEFAULT_CONFIG: Dict[str, Any] = {
    "data": {
        "root": "datasets",
        "source": "datasets",
        "default_language": "html",
    },
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": f"refhelper/{__version__}",
    },
    "ui": {
        "theme": "light",
    },
}

SOURCE_ENV_VAR = "REFHELPER_SOURCE"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Path = Path("refhelper.yaml")) -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    if config_path.exists():
        user_config = load_structured_file(config_path)
        if not isinstance(user_config, dict):
            raise RuntimeError(f"Config file {config_path} must contain a mapping/object.")
        config = _deep_merge(config, user_config)

    source_override = os.getenv(SOURCE_ENV_VAR, "").strip()
    if source_override:
        config = _deep_merge(config, {"data": {"source": source_override}})
    return config
