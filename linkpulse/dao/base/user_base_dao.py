"""Abstract base class for user profile data access objects (DAOs).

Only the default user bootstrap needs user profiles. Credentials are owned by
the identity provider and never stored here.

Example:
    >>> from linkpulse.dao.redis import UserRedisDAO
    >>> dao = UserRedisDAO(...)
    >>> dao.get('user-123') is None
    True
    >>> dao.insert(UserModel(user_id='user-123', email='owner@example.com'))
    <UserRedisDAO>
"""

from abc import ABC, abstractmethod

from linkpulse.models import UserModel


class UserBaseDAO(ABC):
    """Interface for user profile data access objects (DAOs)

    Methods:
        get(user_id: str, **kwargs) -> UserModel | None:
            Retrieve a user profile, None if it does not exist.
            Raises DataStoreError on read failure.

        insert(user: UserModel, **kwargs) -> UserBaseDAO:
            Insert a new user profile.
            Raises UserAlreadyExistsError if the user already exists.
            Raises DataStoreError on write failure.
    """

    @abstractmethod
    def get(self, user_id: str, **kwargs) -> UserModel | None:
        pass

    @abstractmethod
    def insert(self, user: UserModel, **kwargs) -> 'UserBaseDAO':
        pass
