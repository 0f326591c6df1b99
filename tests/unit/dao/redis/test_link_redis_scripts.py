"""LinkRedisDAO against an in-process Redis that executes the Lua scripts.

Test coverage includes:

1. APPEND_VISIT: nothing is written for a missing link; concurrent appends
   keep total_clicks equal to the visit log length
2. SET_ACTIVE / DELETE_LINK: a foreign owner changes nothing
3. DELETE_LINK: removes the hash, the visit log and the owner index entry
4. DEACTIVATE: flips an active link exactly once
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, UTC

import fakeredis
import pytest

from linkpulse.models import DeviceClass, LinkRecord, VisitRecord
from linkpulse.dao.exceptions import LinkNotFoundError
from linkpulse.dao.redis import LinkRedisDAO


LINK_KEY = 'testapp:test:links:abc123'
VISITS_KEY = 'testapp:test:links:abc123:visits'
USER_LINKS_KEY = 'testapp:test:users:user-1:links'

NOW = datetime(2025, 10, 15, tzinfo=UTC)


def make_visit(minute: int = 0) -> VisitRecord:
    return VisitRecord(
        timestamp=NOW + timedelta(minutes=minute),
        device_class=DeviceClass.DESKTOP,
        browser_family='Firefox',
        source_address='203.0.113.7',
    )


class TestLinkRedisScripts:
    dao: LinkRedisDAO
    redis_client: fakeredis.FakeRedis

    @pytest.fixture(autouse=True)
    def setup(self, app_prefix: str):
        self.redis_client = fakeredis.FakeRedis(decode_responses=True)
        self.redis_client.flushall()
        self.dao = LinkRedisDAO(redis_client=self.redis_client, prefix=app_prefix)
        self.dao.insert(
            LinkRecord(
                shortcode='abc123',
                target='https://example.com/test',
                owner_id='user-1',
                created_at=NOW,
                expires_at=NOW + timedelta(days=30),
            )
        )
        yield
        self.redis_client.flushall()

    # -------------------------------
    # 1. APPEND_VISIT
    # -------------------------------

    def test_append_visit_to_missing_link_writes_nothing(self):
        with pytest.raises(LinkNotFoundError):
            self.dao.append_visit('zzz999', make_visit())

        assert self.redis_client.exists('testapp:test:links:zzz999:visits') == 0
        assert self.redis_client.exists('testapp:test:links:zzz999') == 0

    def test_append_visit_after_delete_does_not_resurrect_link(self):
        self.dao.delete('abc123', 'user-1')

        with pytest.raises(LinkNotFoundError):
            self.dao.append_visit('abc123', make_visit())

        assert self.redis_client.exists(LINK_KEY, VISITS_KEY) == 0

    def test_concurrent_appends_keep_counter_and_log_consistent(self):
        with ThreadPoolExecutor(max_workers=8) as pool:
            totals = list(pool.map(lambda minute: self.dao.append_visit('abc123', make_visit(minute)), range(50)))

        assert sorted(totals) == list(range(1, 51))
        assert int(self.redis_client.hget(LINK_KEY, 'total_clicks')) == 50
        assert self.redis_client.llen(VISITS_KEY) == 50

        link = self.dao.find_by_owner('abc123', 'user-1', include_visits=True)
        assert link.total_clicks == len(link.visit_history) == 50

    # -------------------------------
    # 2. Foreign owners
    # -------------------------------

    def test_set_active_by_foreign_owner_changes_nothing(self):
        before = self.redis_client.hgetall(LINK_KEY)

        with pytest.raises(LinkNotFoundError):
            self.dao.set_active('abc123', 'user-2', False)

        assert self.redis_client.hgetall(LINK_KEY) == before
        assert before['is_active'] == '1'

    def test_delete_by_foreign_owner_changes_nothing(self):
        self.dao.append_visit('abc123', make_visit())
        before = self.redis_client.hgetall(LINK_KEY)

        with pytest.raises(LinkNotFoundError):
            self.dao.delete('abc123', 'user-2')

        assert self.redis_client.hgetall(LINK_KEY) == before
        assert self.redis_client.llen(VISITS_KEY) == 1
        assert self.redis_client.smembers(USER_LINKS_KEY) == {'abc123'}

    def test_set_active_by_owner(self):
        link = self.dao.set_active('abc123', 'user-1', False)

        assert link.is_active is False
        assert self.redis_client.hget(LINK_KEY, 'is_active') == '0'
        assert self.dao.find_active('abc123') is None

    # -------------------------------
    # 3. DELETE_LINK
    # -------------------------------

    def test_delete_removes_link_visits_and_owner_index(self):
        self.dao.append_visit('abc123', make_visit())

        self.dao.delete('abc123', 'user-1')

        assert self.redis_client.exists(LINK_KEY) == 0
        assert self.redis_client.exists(VISITS_KEY) == 0
        assert self.redis_client.sismember(USER_LINKS_KEY, 'abc123') == 0
        assert self.dao.list_by_owner('user-1') == []

    # -------------------------------
    # 4. DEACTIVATE
    # -------------------------------

    def test_deactivate_flips_once(self):
        assert self.dao.deactivate('abc123') is True
        assert self.dao.deactivate('abc123') is False
        assert self.redis_client.hget(LINK_KEY, 'is_active') == '0'

    def test_deactivate_missing_link(self):
        assert self.dao.deactivate('zzz999') is False
        assert self.redis_client.exists('testapp:test:links:zzz999') == 0

    def test_concurrent_deactivations_flip_once(self):
        with ThreadPoolExecutor(max_workers=8) as pool:
            flipped = list(pool.map(lambda _: self.dao.deactivate('abc123'), range(20)))

        assert flipped.count(True) == 1
