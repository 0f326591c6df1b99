"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given shortcode
    get_header() -> str | None
        Case-insensitive header lookup on an API Gateway event
    get_user_agent() -> str | None
        Extract the client's User-Agent from an API Gateway event
    get_source_address() -> str | None
        Extract the client's address from an API Gateway event
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(func) -> Callable
        Decorator: Turn unhandled exceptions into a 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from linkpulse.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import logging
import functools
from typing import Any
from collections.abc import Callable

from linkpulse.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from linkpulse.exceptions import MissingEnvironmentVariableError
from linkpulse.utils.runtime import running_locally
from linkpulse.utils.responses import response_500


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    Works seamlessly with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://lnk.example.com"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(shortcode: str, event: dict[str, Any]) -> str:
    """Get string representation of shortened URL"""
    return f'{base_url(event).rstrip("/")}/{shortcode}'


def get_header(event: dict[str, Any], name: str) -> str | None:
    headers = event.get('headers') or {}
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def get_user_agent(event: dict[str, Any]) -> str | None:
    user_agent = get_header(event, 'User-Agent')
    if user_agent is None:
        user_agent = event.get('requestContext', {}).get('identity', {}).get('userAgent')
    return user_agent


def get_source_address(event: dict[str, Any]) -> str | None:
    """Extract the client's address from an API Gateway event

    The first hop of X-Forwarded-For wins over the API Gateway source IP,
    which is the last proxy's address when the client sits behind a CDN.
    Returns None when neither is present.
    """
    forwarded_for = get_header(event, 'X-Forwarded-For')
    if forwarded_for:
        first_hop = forwarded_for.split(',')[0].strip()
        if first_hop:
            return first_hop
    return event.get('requestContext', {}).get('identity', {}).get('sourceIp')


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: APPCONFIG_APP_ID, APPCONFIG_ENV_ID
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {", ".join(missing)}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(func: Callable) -> Callable:
    """Decorator: convert any unhandled exception into a 500 Lambda Proxy response.

    When running locally the original exception is re-raised so it shows up
    in the SAM console.
    """

    @functools.wraps(func)
    def wrapper(event: dict[str, Any], context: Any) -> dict[str, Any]:
        try:
            return func(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in Lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
