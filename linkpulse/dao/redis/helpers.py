import functools
from typing import TypeVar, Any
from collections.abc import Callable

import redis

from linkpulse.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])

# Both mean the data store could not be reached
CONNECTIVITY_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def describe_endpoint(client: redis.Redis) -> str:
    """Return 'host:port/db' of a client's connection pool, for error messages."""
    info = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


def handle_redis_connection_error[F](method: F) -> F:
    """Turn Redis connectivity failures of a DAO method into DataStoreError

    Only CONNECTIVITY_ERRORS are translated. Anything else Redis raises
    (e.g. ResponseError from a bad script) propagates unchanged.

    Example:
        >>> @handle_redis_connection_error
        ... def count(self):
        ...     return self.redis.get(self.keys.counter_key())
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except CONNECTIVITY_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {describe_endpoint(self.redis)}.") from e

    return wrapper


def decode(value: str | bytes | None) -> str | None:
    """Return a Redis reply as str regardless of the client's decode_responses setting."""
    if isinstance(value, (bytes, bytearray)):
        return value.decode('utf-8')
    return value
