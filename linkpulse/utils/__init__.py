from linkpulse.utils.config import app_env, app_name, app_prefix, load_config, settings_from_config
from linkpulse.utils.helpers import base_url, get_short_url, get_user_agent, get_source_address, require_environment
from linkpulse.utils.runtime import running_locally, get_user_id
from linkpulse.utils.shortener import generate_shortcode
from linkpulse.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'settings_from_config',
    'base_url',
    'get_short_url',
    'get_user_agent',
    'get_source_address',
    'require_environment',
    'running_locally',
    'get_user_id',
    'initialize_logging',
]
