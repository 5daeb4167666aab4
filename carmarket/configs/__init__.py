"""
Service configuration.

`env` holds secrets and connection settings from a .env file (or the
process environment); `configs` holds the settings in configs.yaml.
"""

import os
import re
import logging
from pathlib import Path
from typing import Optional

import yaml
from dotenv import dotenv_values

logger = logging.getLogger(__name__)

CONFIGS_DIR = Path(__file__).resolve().parent
REPO_ROOT = CONFIGS_DIR.parent.parent
CONFIGS_FILE = CONFIGS_DIR / "configs.yaml"

# Read from the process environment when no .env file is found
ENV_KEYS = [
    "APP_NAME",
    "DEBUG",
    "SECRET_KEY",
    "MONGO_URI",
    "MONGO_DB",
]

_PLACEHOLDER = re.compile(r"\$\{(\w+)\}")


def _env_file_candidates(repo_root: Path) -> list:
    candidates = [repo_root / ".env"]
    env_file_dir: Optional[str] = os.environ.get("ENV_FILE_DIR")
    if env_file_dir:
        candidates.append(Path(env_file_dir) / ".env")
    return candidates


def load_env(repo_root: Path = REPO_ROOT) -> dict:
    """
    Loads the repository's .env file, falling back to $ENV_FILE_DIR/.env,
    then to the known keys of the process environment.
    """
    for path in _env_file_candidates(repo_root):
        if path.is_file():
            logger.debug(f"Loading environment from '{path}'")
            return dict(dotenv_values(path))
    return {key: os.environ.get(key) for key in ENV_KEYS}


def _resolve_placeholders(data, original_data: dict):
    """
    Recursively replaces '${key}' placeholders in a dictionary or list
    using top-level values from original_data.
    """
    if isinstance(data, dict):
        return {k: _resolve_placeholders(v, original_data) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_placeholders(item, original_data) for item in data]
    elif isinstance(data, str):
        return _PLACEHOLDER.sub(lambda m: f"{original_data.get(m.group(1))}", data)
    return data


def load_configs(path: Path = CONFIGS_FILE) -> dict:
    """Loads configs.yaml with its '${key}' placeholders resolved."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Config file not found at '{path}'")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"Error loading YAML file '{path}': {e}")
        return {}
    return _resolve_placeholders(data, data)


env: dict = load_env()
configs: dict = load_configs()
