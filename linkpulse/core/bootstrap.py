"""Startup routine creating the default owner profile.

ensure_default_user() is idempotent and owns its failure handling: storage
errors are logged and reported through the return value, never raised, so a
deployment can't be blocked by it. It runs only when called explicitly (see
bootstrap/seed_default_user.py), never on import.
"""

import logging

from linkpulse.dao.base import UserBaseDAO
from linkpulse.dao.exceptions import DAOError, UserAlreadyExistsError
from linkpulse.models import UserModel


logger = logging.getLogger(__name__)


def ensure_default_user(user_dao: UserBaseDAO, user_id: str, email: str) -> bool:
    """Create the default user unless it already exists

    Args:
        user_dao (UserBaseDAO):
            Storage collaborator for user profiles.
        user_id (str):
            Identity provider subject of the default user.
        email (str):
            Email of the default user.

    Returns:
        bool: True if the user exists afterwards, False if storage failed.

    Example:
        >>> ensure_default_user(UserRedisDAO(prefix='linkpulse:dev'), 'default-user', 'owner@example.com')
        True
    """
    try:
        if user_dao.get(user_id) is not None:
            logger.debug('Default user already exists.', extra={'userId': user_id})
            return True

        user_dao.insert(UserModel(user_id=user_id, email=email))
    except UserAlreadyExistsError:
        # Created concurrently by another process
        return True
    except DAOError:
        logger.exception('Failed to create default user. Continuing without it.', extra={'userId': user_id})
        return False

    logger.info('Default user created.', extra={'userId': user_id})
    return True
