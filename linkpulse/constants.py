from datetime import timedelta
from enum import StrEnum


class TTL:
    """Link lifetime durations."""

    # Default lifetime of a short link, counted from its creation
    LINK = timedelta(days=30)


# Bounded retries for shortcode collisions at link creation
MAX_SHORTCODE_ATTEMPTS = 5

# Default shortcode generator parameters
DEFAULT_SHORTCODE_LENGTH = 7
DEFAULT_SHORTCODE_SALT = 'linkpulse'

# Reference time zone for daily analytics buckets
ANALYTICS_TIMEZONE = 'UTC'

# Label used by the aggregator for visits without a classified value
UNKNOWN = 'unknown'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
