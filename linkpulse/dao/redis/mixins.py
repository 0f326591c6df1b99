"""Client wiring shared by the Redis DAOs

RedisClientMixin adopts a ready client or builds one from AppConfig's redis
section, namespaces keys under the DAO prefix, registers the DAO's Lua
scripts and pings Redis once, so a misconfigured endpoint fails when the
DAO is built instead of halfway through a request.

Example:
    >>> class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    ...     LUA_SCRIPTS = {'append_visit': scripts.APPEND_VISIT}
    ...
    >>> dao = LinkRedisDAO(redis_host='redis.internal', prefix='linkpulse:prod')
    >>> dao.scripts['append_visit'](keys=[...], args=[...])
    1
"""

import redis

from linkpulse.dao.redis.redis_key_schema import RedisKeySchema
from linkpulse.dao.redis.helpers import CONNECTIVITY_ERRORS, describe_endpoint
from linkpulse.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Redis client, key schema and registered scripts for a DAO

    Attributes:
        redis (redis.Redis):
            Client used for every command.
        keys (RedisKeySchema):
            Builds namespaced key names.
        scripts (dict[str, redis.commands.core.Script]):
            Callables for the entries of LUA_SCRIPTS, by name.
    """

    # name -> Lua source, overridden by DAOs running server-side scripts
    LUA_SCRIPTS: dict[str, str] = {}

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_socket_timeout: float | None = None,
        redis_decode_responses: bool = True,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        """Connection parameters are ignored when `redis_client` is given.

        Port and db may arrive as strings from the AppConfig document.

        Raises:
            DataStoreError:
                If Redis doesn't answer the initial PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
                decode_responses=redis_decode_responses,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)
        # NOTE: register_script() doesn't talk to Redis, the script is
        #       loaded through EVALSHA on its first call.
        self.scripts = {name: self.redis.register_script(source) for name, source in self.LUA_SCRIPTS.items()}

        self.ping(raise_error=True)

    def ping(self, raise_error: bool = False) -> bool:
        """Check that Redis answers; on failure raise DataStoreError or return False."""
        try:
            self.redis.ping()
        except CONNECTIVITY_ERRORS as e:
            if raise_error:
                raise DataStoreError(f"Can't connect to Redis at {describe_endpoint(self.redis)}. Check the provided configuration parameters.") from e
            return False
        return True
