"""
Configuration module for BioLens.

Settings come from three layers, later ones winning:
1. Dataclass defaults below
2. YAML file (a given path, else config/settings.yaml in the working
   directory, else the one in the source checkout)
3. Environment variables (a .env file is loaded first)

Environment overrides:
    DEEPSEEK_API_KEY, DEEPSEEK_MODEL, DEEPSEEK_BASE_URL, BIOLENS_LOG_LEVEL
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "settings.yaml"

ENV_OVERRIDES = {
    "DEEPSEEK_API_KEY": "api_key",
    "DEEPSEEK_MODEL": "model",
    "DEEPSEEK_BASE_URL": "base_url",
    "BIOLENS_LOG_LEVEL": "log_level",
}


@dataclass
class Settings:
    """Runtime settings.

    Attributes:
        api_key: DeepSeek API key (None disables provider calls)
        base_url: OpenAI-compatible endpoint root
        model: Chat model name
        timeout_s: Provider request timeout in seconds
        max_tokens: Completion token cap
        command_temperature: Sampling temperature in command mode
        answer_temperature: Sampling temperature in answer mode
        host: HTTP bind address for ``serve``
        port: HTTP port for ``serve``
        log_level: Console log level
        log_file: Optional log file path
        max_batch_depth: Deepest allowed batch nesting
    """
    api_key: Optional[str] = None
    base_url: str = "https://api.deepseek.com"
    model: str = "deepseek-chat"
    timeout_s: float = 60.0
    max_tokens: int = 1200
    command_temperature: float = 0.0
    answer_temperature: float = 0.7
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    log_file: Optional[str] = None
    max_batch_depth: int = 8


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}
    if not isinstance(data, dict):
        if data is not None:
            logger.warning(f"Ignoring config {path}: top level is not a mapping")
        return {}
    return data


def _default_config_path() -> Optional[Path]:
    """config/settings.yaml under the working directory, then beside the source tree."""
    for candidate in (Path.cwd() / "config" / "settings.yaml", DEFAULT_CONFIG_PATH):
        if candidate.exists():
            return candidate
    logger.info("No config/settings.yaml found; using built-in defaults")
    return None


def load_settings(
    path: Optional[Union[str, Path]] = None,
    env_file: Optional[Union[str, Path]] = None,
) -> Settings:
    """Load settings from YAML and the environment.

    Args:
        path: YAML file, or None to search for config/settings.yaml
        env_file: .env file, or None to search from the working directory

    Returns:
        Settings with all layers applied
    """
    config_path = Path(path) if path else _default_config_path()
    if path and not config_path.exists():
        logger.warning(f"Config file {config_path} not found; using built-in defaults")
    data = _read_yaml(config_path) if config_path and config_path.exists() else {}

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning(f"Unknown config keys ignored: {', '.join(unknown)}")
    values = {k: v for k, v in data.items() if k in known}

    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    for env_name, attr in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            values[attr] = value

    return Settings(**values)
