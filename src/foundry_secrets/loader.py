"""Configuration loader for secret resolution.

This module loads and validates the ``secrets`` section of a YAML file into
a SecretsConfigModel.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import SecretsConfigError
from .models import OpenBAOConfigModel, SecretsConfigModel
from .token_store import get_config_dir

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "FOUNDRY_SECRETS_CONFIG"
OPENBAO_ADDR_ENV = "OPENBAO_ADDR"
CONFIG_FILE_NAME = "secrets.yaml"
LOCAL_CONFIG_FILE_NAME = "foundry-secrets.yaml"


def find_config_file() -> Path | None:
    """Locate the secrets config file.

    Looks for:
    1. FOUNDRY_SECRETS_CONFIG environment variable
    2. <config dir>/secrets.yaml
    3. ./foundry-secrets.yaml
    """
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()

    candidates = [get_config_dir() / CONFIG_FILE_NAME, Path.cwd() / LOCAL_CONFIG_FILE_NAME]
    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


def load_secrets_config(config_path: Path | None = None) -> SecretsConfigModel:
    """Load secrets configuration from a YAML file.

    Args:
        config_path: Optional explicit path. If not provided, find_config_file()
                    decides; no file at all yields the defaults.

    Returns:
        SecretsConfigModel with OPENBAO_ADDR applied

    Raises:
        FileNotFoundError: If an explicitly requested file doesn't exist
        SecretsConfigError: If the file is not valid YAML or fails validation
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            logger.info("No secrets config file found, using defaults")
            return _apply_env_overrides(SecretsConfigModel())

    if not config_path.exists():
        raise FileNotFoundError(f"Secrets config file not found at {config_path}")

    logger.debug(f"Loading secrets config from: {config_path}")

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SecretsConfigError(f"Failed to parse YAML config file {config_path}: {e}") from e

    if not raw_config:
        logger.info("Empty secrets config file, using defaults")
        return _apply_env_overrides(SecretsConfigModel())

    if not isinstance(raw_config, dict):
        raise SecretsConfigError(f"Invalid secrets config in {config_path}: expected a mapping")

    try:
        config = build_secrets_config(raw_config.get("secrets") or {})
    except ValidationError as e:
        raise SecretsConfigError(f"Invalid secrets config in {config_path}: {e}") from e

    return _apply_env_overrides(config)


def build_secrets_config(section: dict[str, Any]) -> SecretsConfigModel:
    """Validate a ``secrets`` section dictionary."""
    return SecretsConfigModel.model_validate(section)


def _apply_env_overrides(config: SecretsConfigModel) -> SecretsConfigModel:
    address = os.environ.get(OPENBAO_ADDR_ENV)
    if not address:
        return config

    openbao = config.openbao or OpenBAOConfigModel()
    logger.debug(f"Using OpenBAO address from {OPENBAO_ADDR_ENV}")
    return config.model_copy(update={"openbao": openbao.model_copy(update={"address": address})})
