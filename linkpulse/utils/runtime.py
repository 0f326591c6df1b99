"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if lambda is running in local SAM, False otherwise.
    get_user_id(event) -> str | None:
        Identity of the authenticated caller, None if unauthenticated.
"""

import os

from linkpulse.types import LambdaEvent
from linkpulse.constants import ENV


def running_locally() -> bool:
    """Return True if running in SAM local invoke/api, False otherwise."""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def get_user_id(event: LambdaEvent) -> str | None:
    """Return the Cognito subject of the caller

    API Gateway's Cognito authorizer validates the JWT before the Lambda runs
    and forwards its claims; a missing 'sub' means the request is unauthenticated.
    """
    claims = (event.get('requestContext') or {}).get('authorizer', {}).get('claims', {})
    return claims.get('sub') or None
