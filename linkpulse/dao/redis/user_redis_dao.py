from datetime import datetime, UTC

from beartype import beartype

from linkpulse.models import UserModel
from linkpulse.dao.base import UserBaseDAO
from linkpulse.dao.redis.mixins import RedisClientMixin
from linkpulse.dao.redis.helpers import handle_redis_connection_error, decode
from linkpulse.dao.exceptions import UserAlreadyExistsError


class UserRedisDAO(RedisClientMixin, UserBaseDAO):
    """Redis-based DAO for owner profiles (users:<user_id> hash)."""

    @handle_redis_connection_error
    @beartype
    def get(self, user_id: str, **kwargs) -> UserModel | None:
        data = self.redis.hgetall(self.keys.user_key(user_id))
        if not data:
            return None

        fields = {decode(k): decode(v) for k, v in data.items()}
        created_at = fields.get('created_at')
        return UserModel(
            user_id=user_id,
            email=fields['email'],
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )

    @handle_redis_connection_error
    @beartype
    def insert(self, user: UserModel, **kwargs) -> 'UserRedisDAO':
        user_key = self.keys.user_key(user.user_id)
        created_at = user.created_at or datetime.now(UTC)

        # HSETNX on the email field doubles as the existence check, so two
        # concurrent inserts of the same user can't both succeed.
        if not self.redis.hsetnx(user_key, 'email', user.email):
            raise UserAlreadyExistsError(f"User with ID '{user.user_id}' already exists.")
        self.redis.hset(user_key, 'created_at', created_at.isoformat())
        return self
