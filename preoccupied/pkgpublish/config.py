"""
Configuration model and loading for the pkgpublish pipeline step.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, field_validator

from .exceptions import ConfigError, HostContextError


logger = logging.getLogger(__name__)


HOST_CONTEXT_VAR = 'REEVE_API'


# environment variable, config key, and the label used when it is missing
REQUIRED_SETTINGS = (
    ('API_URL', 'api_url', 'API url'),
    ('API_USER', 'api_user', 'API user'),
    ('API_PASSWORD', 'api_password', 'API password'),
    ('PACKAGE_OWNER', 'package_owner', 'package owner'),
    ('PACKAGE_NAME', 'package_name', 'package name'),
    ('PACKAGE_VERSION', 'package_version', 'package version'),
    ('FILES', 'files', 'file patterns'))


OPTIONAL_SETTINGS = (
    ('PACKAGE_REPOSITORY', 'package_repository'),
    ('SKIP_EXISTING', 'skip_existing'))


class PublishConfig(BaseModel):
    """
    Settings for a single publish run
    """

    api_url: str
    api_user: str
    api_password: str

    package_owner: str
    package_name: str
    package_version: str

    files: str

    package_repository: Optional[str] = None
    skip_existing: bool = False


    @field_validator('api_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')


    @field_validator('package_repository', mode='before')
    @classmethod
    def empty_repository(cls, v: Any) -> Any:
        return v or None


    @field_validator('skip_existing', mode='before')
    @classmethod
    def exact_true(cls, v: Any) -> Any:
        """
        Only the exact string "true" enables the check when the value
        comes from the environment.
        """

        if isinstance(v, str):
            return v == 'true'
        if v is None:
            return False
        return v


def check_host_context(environ: Mapping[str, str]) -> None:
    """
    Refuse to run outside of a Reeve CI pipeline.
    """

    if not environ.get(HOST_CONTEXT_VAR):
        raise HostContextError('This docker image is a Reeve CI pipeline step'
                               ' and is not intended to be used on its own.')


def config_from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    """
    Build a configuration dictionary from the environment, leaving out
    any variable which is not set.
    """

    result = {}
    pairs = [(env_var, key) for env_var, key, _label in REQUIRED_SETTINGS]
    pairs.extend(OPTIONAL_SETTINGS)

    for env_var, config_key in pairs:
        value = environ.get(env_var)
        if value is not None:
            result[config_key] = value

    return result


def config_from_file(config_path: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file holding baseline settings.
    """

    if not os.path.exists(config_path):
        raise ConfigError(f'Config file not found: {config_path}')

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f'Error reading config file {config_path} - {e}') from e

    if config_data is None:
        return {}

    if not isinstance(config_data, dict):
        raise ConfigError(f'Config file {config_path} must contain a mapping')

    return config_data


def load_config(environ: Optional[Mapping[str, str]] = None) -> PublishConfig:
    """
    Validate the host context and load the publish configuration.
    Settings from the environment override those from the optional
    file named by CONFIG_PATH.
    """

    if environ is None:
        environ = os.environ

    check_host_context(environ)

    config_data = {}
    config_path = environ.get('CONFIG_PATH')
    if config_path:
        config_data.update(config_from_file(config_path))
    config_data.update(config_from_env(environ))

    missing = [label for _env_var, key, label in REQUIRED_SETTINGS
               if not config_data.get(key)]
    if missing:
        raise ConfigError(f'Missing {", ".join(missing)}')

    try:
        config = PublishConfig.model_validate(config_data)
    except ValueError as e:
        raise ConfigError(f'Invalid configuration - {e}') from e

    logger.debug(f'Loaded configuration for package {config.package_owner}/'
                 f'{config.package_name} {config.package_version}')
    return config


# The end.
