from linkpulse.dao.redis.redis_key_schema import RedisKeySchema
from linkpulse.dao.redis.mixins import RedisClientMixin
from linkpulse.dao.redis.link_redis_dao import LinkRedisDAO
from linkpulse.dao.redis.user_redis_dao import UserRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'LinkRedisDAO',
    'UserRedisDAO',
]
