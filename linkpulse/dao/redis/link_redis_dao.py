"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides a Redis-based implementation of LinkBaseDAO.

Responsibilities:
    - Insert, look up, toggle and delete links;
    - Append visit records atomically with the click counter increment;
    - Maintain the per-owner link index;
    - Increment the global counter feeding the shortcode generator;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Redis layout (all keys namespaced by the DAO prefix):
    links:<shortcode>           hash  target, owner_id, created_at, expires_at, is_active, total_clicks
    links:<shortcode>:visits    list  JSON visit records, oldest first
    users:<owner_id>:links      set   shortcodes owned by <owner_id>
    links:counter               str   global counter

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkRecord in a Redis datastore.

Example:
    >>> dao = LinkRedisDAO(prefix="linkpulse:dev")
    >>> dao.insert(link)
    <LinkRedisDAO>
    >>> dao.find_active("abc123").target
    'https://example.com/page'
    >>> dao.append_visit("abc123", visit)
    1
"""

import json
from datetime import datetime
from typing import Any

import redis
from beartype import beartype

from linkpulse.models import LinkRecord, VisitRecord
from linkpulse.dao.base import LinkBaseDAO
from linkpulse.dao.redis import scripts
from linkpulse.dao.redis.mixins import RedisClientMixin
from linkpulse.dao.redis.helpers import handle_redis_connection_error, decode
from linkpulse.dao.exceptions import DuplicateShortCodeError, LinkNotFoundError


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short links

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        scripts (dict):
            Registered APPEND_VISIT, SET_ACTIVE, DEACTIVATE and DELETE_LINK scripts.

    Every write that depends on a check (existence, ownership) is executed
    server-side in a Lua script or under WATCH, so it is atomic with that check.
    """

    LUA_SCRIPTS = {
        'append_visit': scripts.APPEND_VISIT,
        'set_active': scripts.SET_ACTIVE,
        'deactivate': scripts.DEACTIVATE,
        'delete_link': scripts.DELETE_LINK,
    }

    @handle_redis_connection_error
    @beartype
    def insert(self, link: LinkRecord, **kwargs) -> 'LinkRedisDAO':
        """Insert a link and index it under its owner

        The existence check and the writes run under WATCH, so two concurrent
        inserts of the same shortcode can't both succeed.

        Raises:
            DuplicateShortCodeError:
                If a link with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        link_key = self.keys.link_key(link.shortcode)
        user_links_key = self.keys.user_links_key(link.owner_id)

        with self.redis.pipeline() as pipe:
            try:
                pipe.watch(link_key)
                if pipe.exists(link_key):
                    raise DuplicateShortCodeError(f"Link with code '{link.shortcode}' already exists.")
                pipe.multi()
                pipe.hset(link_key, mapping=self._to_hash(link))
                pipe.sadd(user_links_key, link.shortcode)
                pipe.execute()
            except redis.exceptions.WatchError as e:
                raise DuplicateShortCodeError(f"Link with code '{link.shortcode}' already exists.") from e
        return self

    @handle_redis_connection_error
    @beartype
    def find_active(self, shortcode: str, **kwargs) -> LinkRecord | None:
        data = self.redis.hgetall(self.keys.link_key(shortcode))
        if not data:
            return None

        link = self._from_hash(shortcode, data)
        return link if link.is_active else None

    @handle_redis_connection_error
    @beartype
    def find_by_owner(self, shortcode: str, owner_id: str, include_visits: bool = False, **kwargs) -> LinkRecord | None:
        """Look up a link owned by owner_id

        With include_visits=True the hash and the visit list are read inside one
        MULTI transaction, so the click counter and the log length describe the
        same point in time.
        """
        link_key = self.keys.link_key(shortcode)

        raw_visits = None
        if include_visits:
            with self.redis.pipeline(transaction=True) as pipe:
                pipe.hgetall(link_key)
                pipe.lrange(self.keys.link_visits_key(shortcode), 0, -1)
                data, raw_visits = pipe.execute()
        else:
            data = self.redis.hgetall(link_key)

        if not data:
            return None

        link = self._from_hash(shortcode, data, raw_visits)
        return link if link.owner_id == owner_id else None

    @handle_redis_connection_error
    @beartype
    def append_visit(self, shortcode: str, visit: VisitRecord, **kwargs) -> int:
        """Append a visit and increment the click counter as one atomic unit

        NOTE: RPUSH and HINCRBY run inside a single Lua script. Concurrent
              appends on the same link are serialized by Redis, so neither a
              count nor a log entry can be lost, and a link deleted in between
              is never resurrected by a partial write.

        Raises:
            LinkNotFoundError:
                If the link doesn't exist (nothing is written).
            DataStoreError:
                If Redis connectivity issues occur.
        """
        total = self.scripts['append_visit'](
            keys=[self.keys.link_key(shortcode), self.keys.link_visits_key(shortcode)],
            args=[json.dumps(visit.to_dict())],
        )
        if int(total) < 0:
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
        return int(total)

    @handle_redis_connection_error
    @beartype
    def set_active(self, shortcode: str, owner_id: str, is_active: bool, **kwargs) -> LinkRecord:
        updated = self.scripts['set_active'](
            keys=[self.keys.link_key(shortcode)],
            args=[owner_id, '1' if is_active else '0'],
        )
        if not int(updated):
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")

        data = self.redis.hgetall(self.keys.link_key(shortcode))
        if not data:  # pragma: no cover
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
        return self._from_hash(shortcode, data)

    @handle_redis_connection_error
    @beartype
    def deactivate(self, shortcode: str, **kwargs) -> bool:
        return bool(int(self.scripts['deactivate'](keys=[self.keys.link_key(shortcode)])))

    @handle_redis_connection_error
    @beartype
    def delete(self, shortcode: str, owner_id: str, **kwargs) -> None:
        deleted = self.scripts['delete_link'](
            keys=[
                self.keys.link_key(shortcode),
                self.keys.link_visits_key(shortcode),
                self.keys.user_links_key(owner_id),
            ],
            args=[owner_id, shortcode],
        )
        if not int(deleted):
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")

    @handle_redis_connection_error
    @beartype
    def list_by_owner(self, owner_id: str, **kwargs) -> list[LinkRecord]:
        shortcodes = sorted(decode(code) for code in self.redis.smembers(self.keys.user_links_key(owner_id)))
        if not shortcodes:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for shortcode in shortcodes:
                pipe.hgetall(self.keys.link_key(shortcode))
            rows = pipe.execute()

        links = [
            self._from_hash(shortcode, data)
            for shortcode, data in zip(shortcodes, rows)
            if data  # index may briefly reference a link deleted concurrently
        ]
        links = [link for link in links if link.owner_id == owner_id]
        return sorted(links, key=lambda link: link.created_at, reverse=True)

    @handle_redis_connection_error
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve global link counter

        Example:
            >>> dao.count(increment=False)
            123
            >>> dao.count(increment=True)
            124
        """
        if increment:
            return int(self.redis.incr(self.keys.counter_key()))
        else:
            return int(self.redis.get(self.keys.counter_key()) or 0)

    @staticmethod
    def _to_hash(link: LinkRecord) -> dict[str, Any]:
        return {
            'target': link.target,
            'owner_id': link.owner_id,
            'created_at': link.created_at.isoformat(),
            'expires_at': link.expires_at.isoformat(),
            'is_active': '1' if link.is_active else '0',
            'total_clicks': link.total_clicks,
        }

    @staticmethod
    def _from_hash(shortcode: str, data: dict, raw_visits: list | None = None) -> LinkRecord:
        fields = {decode(k): decode(v) for k, v in data.items()}

        visits = None
        if raw_visits is not None:
            visits = tuple(VisitRecord.from_dict(json.loads(decode(raw))) for raw in raw_visits)

        return LinkRecord(
            shortcode=shortcode,
            target=fields['target'],
            owner_id=fields['owner_id'],
            created_at=datetime.fromisoformat(fields['created_at']),
            expires_at=datetime.fromisoformat(fields['expires_at']),
            is_active=fields.get('is_active', '1') == '1',
            total_clicks=int(fields.get('total_clicks') or 0),
            visit_history=visits,
        )
