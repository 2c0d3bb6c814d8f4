"""Configuration loader for ssm-env."""
import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional
import yaml

from .models import AWSSettings
from .preferences import get_preference

logger = logging.getLogger(__name__)

PATH_ENV_VAR = "SSM_ENV_PATH"

_AWS_STRING_KEYS = ("profile", "region")
_AWS_TIMEOUT_KEYS = ("connect_timeout", "read_timeout")


class ConfigError(Exception):
    """Configuration error exception."""
    pass


def default_config_path() -> Path:
    return Path.home() / ".config" / "ssm-env" / "config.yml"


def _get_config_path() -> Optional[str]:
    """
    Get config file path using XDG Base Directory standard.

    Priority order:
    1. User preference (stored in ~/.config/ssm-env/preferences.json)
    2. Default location: ~/.config/ssm-env/config.yml

    Returns:
        Absolute path to config file, or None when no config file exists.
        The config file is optional: without one the ambient AWS
        credential chain is used as-is.
    """
    config_path_pref = get_preference("config_path")
    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            logger.info(f"Using config from preference: {config_path}")
            return str(config_path)
        else:
            logger.warning(f"Config path from preference doesn't exist: {config_path}")

    default_config = default_config_path()
    if default_config.exists():
        logger.info(f"Using default config location: {default_config}")
        return str(default_config)

    logger.debug("No config file found, using ambient AWS configuration")
    return None


def _validate_aws_section(aws: Any, config_path: str) -> None:
    if not isinstance(aws, dict):
        raise ConfigError(
            f"'aws' section in {config_path} must be a mapping\n"
            f"Required format:\n"
            f"aws:\n"
            f"  profile: my-profile\n"
            f"  region: eu-west-1"
        )

    for key in _AWS_STRING_KEYS:
        if key in aws and not isinstance(aws[key], str):
            raise ConfigError(f"'aws.{key}' in {config_path} must be a string")

    for key in _AWS_TIMEOUT_KEYS:
        if key not in aws:
            continue
        timeout = aws[key]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"'aws.{key}' in {config_path} must be a positive number of seconds")


def _validate_ssm_section(ssm: Any, config_path: str) -> None:
    if not isinstance(ssm, dict):
        raise ConfigError(
            f"'ssm' section in {config_path} must be a mapping\n"
            f"Required format:\n"
            f"ssm:\n"
            f"  path: /my-app/prod"
        )

    if 'path' in ssm and not isinstance(ssm['path'], str):
        raise ConfigError(f"'ssm.path' in {config_path} must be a string")


def load_config() -> Dict[str, Any]:
    """
    Load and validate configuration from YAML file.

    Returns:
        Dict containing the optional sections:
        - aws: dict with profile, region, connect_timeout, read_timeout
        - ssm: dict with path
        An empty dict when no config file exists or the file is empty.

    Raises:
        ConfigError: If the config file cannot be read, parsed or validated
    """
    # Resolved on every call so preference changes apply immediately
    config_path = _get_config_path()
    if config_path is None:
        return {}

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}")

    if config is None:
        logger.debug(f"Config file at {config_path} is empty")
        return {}

    if not isinstance(config, dict):
        raise ConfigError(f"Config file at {config_path} must contain a YAML mapping")

    if 'aws' in config:
        _validate_aws_section(config['aws'], config_path)

    if 'ssm' in config:
        _validate_ssm_section(config['ssm'], config_path)

    logger.info(f"Configuration loaded successfully from {config_path}")
    return config


def get_aws_settings(config: Dict[str, Any]) -> AWSSettings:
    aws = config.get('aws') or {}
    return AWSSettings(
        profile=aws.get('profile'),
        region=aws.get('region'),
        connect_timeout=aws.get('connect_timeout'),
        read_timeout=aws.get('read_timeout'),
    )


def resolve_path(cli_path: Optional[str], config: Dict[str, Any]) -> str:
    """
    Resolve the parameter path to load.

    Priority order:
    1. Path given on the command line
    2. SSM_ENV_PATH environment variable
    3. 'ssm.path' in the config file

    Returns:
        The resolved path, or "" when none is configured
    """
    if cli_path is not None:
        return cli_path

    env_path = os.getenv(PATH_ENV_VAR)
    if env_path:
        logger.debug(f"Using {PATH_ENV_VAR} from environment: {env_path}")
        return env_path

    ssm = config.get('ssm') or {}
    return ssm.get('path', "")
