"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`) has
a dedicated AppConfig *Environment* within the shared AppConfig *Application*
identified by `APP_NAME`. Configuration data is stored as a JSON document under
a configuration profile (typically `backend-config`) and deployed to the
corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": { ... },
                "settings": {"link_ttl_days": 30, "shortcode_salt": "..."}
            },
            "redirect_url": {
                "redis": { ... },
                "settings": {"geoip_database": "/opt/GeoLite2-City.mmdb"}
            }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) from this AppConfig
document, determined by the current application environment.

Typical usage inside a Lambda handler:
    >>> from linkpulse.utils.config import load_config, settings_from_config
    >>> app_config = load_config('shorten_url')
    >>> app_config['redis']['host']
    'redis-15501.host.docker.internal'
    >>> settings_from_config(app_config).link_ttl
    datetime.timedelta(days=30)
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass
from datetime import timedelta
from collections.abc import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import boto3

from linkpulse.types import LambdaConfiguration
from linkpulse.constants import ENV, TTL, ANALYTICS_TIMEZONE, DEFAULT_SHORTCODE_LENGTH, DEFAULT_SHORTCODE_SALT
from linkpulse.exceptions import BadConfigurationError
from linkpulse.utils.helpers import require_environment
from linkpulse.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs as <app name>:<app env>, None if APP_NAME is not set."""
    return None if app_name() is None else f'{app_name()}:{app_env()}'


@dataclass(frozen=True)
class Settings:
    """Application settings shared by the Lambda handlers."""

    link_ttl: timedelta = TTL.LINK
    shortcode_salt: str = DEFAULT_SHORTCODE_SALT
    shortcode_length: int = DEFAULT_SHORTCODE_LENGTH
    geoip_database: str | None = None
    analytics_timezone: ZoneInfo = ZoneInfo(ANALYTICS_TIMEZONE)


def settings_from_config(app_config: LambdaConfiguration) -> Settings:
    """Build Settings from the 'settings' section of a lambda's config

    Missing keys fall back to the defaults in linkpulse.constants.

    Raises:
        BadConfigurationError:
            If a value has the wrong type or is out of range.
    """
    raw = app_config.get('settings') or {}

    try:
        ttl_days = int(raw.get('link_ttl_days', TTL.LINK.days))
        length = int(raw.get('shortcode_length', DEFAULT_SHORTCODE_LENGTH))
    except (TypeError, ValueError) as e:
        raise BadConfigurationError(f'Invalid numeric setting: {e}') from e
    if ttl_days <= 0:
        raise BadConfigurationError(f'link_ttl_days must be positive (given value: {ttl_days})')
    if length <= 0:
        raise BadConfigurationError(f'shortcode_length must be positive (given value: {length})')

    timezone_name = raw.get('analytics_timezone', ANALYTICS_TIMEZONE)
    try:
        timezone = ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise BadConfigurationError(f'Unknown analytics_timezone {timezone_name!r}') from e

    return Settings(
        link_ttl=timedelta(days=ttl_days),
        shortcode_salt=raw.get('shortcode_salt') or DEFAULT_SHORTCODE_SALT,
        shortcode_length=length,
        geoip_database=raw.get('geoip_database') or None,
        analytics_timezone=timezone,
    )


def _lambda_section(config: dict, lambda_name: str) -> LambdaConfiguration:
    backend = config['active_backend']
    section = config['configs'][lambda_name]
    return {backend: section[backend], 'settings': section.get('settings', {})}


def _sam_load_local_appconfig(func: Callable) -> Callable:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM.

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local
          AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     : Base URL of the local AppConfig Agent (e.g., http://appconfig-agent:2772).
        APPCONFIG_PROFILE_NAME  : Optional profile name (default: "backend-config").
    """

    def __validate_appconfig_url(url: str) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            config = json.load(r)

        data = _lambda_section(config, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
        return data

    return wrapper


@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig.

    Fetches the AppConfig JSON once and returns the section relevant to the
    requested Lambda function (e.g., 'shorten_url', 'redirect_url'): the active
    backend's connection parameters plus the lambda's 'settings' block.

    Example:
        >>> app_config = load_config('shorten_url')
        >>> sorted(app_config)
        ['redis', 'settings']
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    data = _lambda_section(config, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
    return data
