"""Unit tests for LinkService.

Test coverage includes:

1. Link creation: validation, expiry stamping, bounded shortcode retries
2. Owner scoping of every operation
3. Toggle semantics (explicit value or flip)
4. Analytics over a snapshot, including the create-then-resolve round trip
"""

from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest

from linkpulse.constants import MAX_SHORTCODE_ATTEMPTS
from linkpulse.core.classifier import VisitClassifier
from linkpulse.core.links import LinkService, validate_target
from linkpulse.core.recorder import VisitRecorder
from linkpulse.core.resolver import RedirectResolver, ResolveStatus
from linkpulse.dao.exceptions import DataStoreError, LinkNotFoundError
from linkpulse.exceptions import InvalidTargetURLError, LinkCreationError


T0 = datetime(2025, 10, 1, tzinfo=UTC)


class TestLinkService:
    service: LinkService

    @pytest.fixture(autouse=True)
    def setup(self, memory_dao):
        self.dao = memory_dao
        self.service = LinkService(memory_dao, generate_code=lambda counter: f'code{counter}', clock=lambda: T0)

    # -------------------------------
    # 1. Link creation
    # -------------------------------

    def test_create_link(self):
        link = self.service.create_link('https://example.com/x', owner_id='user-1')

        assert link.shortcode == 'code1'
        assert link.target == 'https://example.com/x'
        assert link.owner_id == 'user-1'
        assert link.created_at == T0
        assert link.expires_at == T0 + timedelta(days=30)
        assert link.is_active is True
        assert link.total_clicks == 0
        assert self.dao.find_active('code1') == link

    def test_create_link_with_custom_ttl(self, memory_dao):
        service = LinkService(memory_dao, generate_code=str, ttl=timedelta(days=7), clock=lambda: T0)
        assert service.create_link('https://example.com', 'user-1').expires_at == T0 + timedelta(days=7)

    def test_create_link_retries_on_collision(self):
        self.service.create_link('https://example.com/a', 'user-1')
        self.dao.counter = 0

        link = self.service.create_link('https://example.com/b', 'user-1')

        assert link.shortcode == 'code2'

    def test_create_link_gives_up_after_bounded_attempts(self):
        service = LinkService(self.dao, generate_code=lambda counter: 'taken', clock=lambda: T0)
        service.create_link('https://example.com/a', 'user-1')
        self.dao.counter = 0

        with pytest.raises(LinkCreationError, match=f'after {MAX_SHORTCODE_ATTEMPTS} attempts'):
            service.create_link('https://example.com/b', 'user-1')

        assert self.dao.counter == MAX_SHORTCODE_ATTEMPTS
        assert self.dao.find_active('taken').target == 'https://example.com/a'

    def test_create_link_does_not_retry_storage_errors(self):
        dao = MagicMock()
        dao.count.return_value = 1
        dao.insert.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")

        with pytest.raises(DataStoreError):
            LinkService(dao, generate_code=str).create_link('https://example.com', 'user-1')

        dao.insert.assert_called_once()

    @pytest.mark.parametrize('target', ['', '   ', 'example.com', 'ftp://example.com/file', 'javascript:alert(1)', 'https://', 'https://' + 'a' * 2048])
    def test_create_link_rejects_invalid_targets(self, target):
        with pytest.raises(InvalidTargetURLError):
            self.service.create_link(target, 'user-1')

        assert self.dao.counter == 0

    def test_validate_target_strips_whitespace(self):
        assert validate_target('  https://example.com/x \n') == 'https://example.com/x'

    # -------------------------------
    # 2. Owner scoping
    # -------------------------------

    def test_list_links_newest_first(self):
        clock = iter([T0, T0 + timedelta(hours=1)])
        service = LinkService(self.dao, generate_code=lambda counter: f'code{counter}', clock=lambda: next(clock))
        service.create_link('https://example.com/old', 'user-1')
        service.create_link('https://example.com/new', 'user-1')
        self.service.create_link('https://example.com/other', 'user-2')

        assert [link.target for link in self.service.list_links('user-1')] == ['https://example.com/new', 'https://example.com/old']

    def test_analytics_of_foreign_link(self):
        link = self.service.create_link('https://example.com', 'user-1')

        with pytest.raises(LinkNotFoundError):
            self.service.link_analytics(link.shortcode, 'user-2')

    def test_analytics_of_missing_link(self):
        with pytest.raises(LinkNotFoundError):
            self.service.link_analytics('zzz999', 'user-1')

    def test_delete_foreign_link(self):
        link = self.service.create_link('https://example.com', 'user-1')

        with pytest.raises(LinkNotFoundError):
            self.service.delete_link(link.shortcode, 'user-2')

        assert self.dao.find_active(link.shortcode) is not None

    def test_delete_link(self):
        link = self.service.create_link('https://example.com', 'user-1')

        self.service.delete_link(link.shortcode, 'user-1')

        assert self.dao.find_active(link.shortcode) is None
        assert self.service.list_links('user-1') == []

    # -------------------------------
    # 3. Toggle semantics
    # -------------------------------

    def test_set_link_active_explicitly(self):
        link = self.service.create_link('https://example.com', 'user-1')

        assert self.service.set_link_active(link.shortcode, 'user-1', False).is_active is False
        assert self.service.set_link_active(link.shortcode, 'user-1', False).is_active is False
        assert self.service.set_link_active(link.shortcode, 'user-1', True).is_active is True

    def test_set_link_active_flips_without_value(self):
        link = self.service.create_link('https://example.com', 'user-1')

        assert self.service.set_link_active(link.shortcode, 'user-1').is_active is False
        assert self.service.set_link_active(link.shortcode, 'user-1').is_active is True

    def test_flip_foreign_link(self):
        link = self.service.create_link('https://example.com', 'user-1')

        with pytest.raises(LinkNotFoundError):
            self.service.set_link_active(link.shortcode, 'user-2')

    # -------------------------------
    # 4. Analytics
    # -------------------------------

    def test_analytics_of_fresh_link(self):
        link = self.service.create_link('https://example.com', 'user-1')

        summary = self.service.link_analytics(link.shortcode, 'user-1')

        assert summary.total_clicks == 0
        assert summary.device_stats == summary.browser_stats == summary.location_stats == summary.clicks_over_time == {}

    def test_create_resolve_then_analytics(self, immediate_executor):
        link = self.service.create_link('https://example.com/x', 'user-1')
        recorder = VisitRecorder(self.dao, VisitClassifier(), executor=immediate_executor)
        resolver = RedirectResolver(self.dao, recorder, clock=lambda: T0 + timedelta(days=1))

        outcome = resolver.resolve(link.shortcode, user_agent='garbage')
        summary = self.service.link_analytics(link.shortcode, 'user-1')

        assert outcome.status == ResolveStatus.HIT
        assert outcome.target == 'https://example.com/x'
        assert summary.total_clicks == 1
        assert summary.device_stats == {'desktop': 1}
        assert summary.browser_stats == {'unknown': 1}
        assert summary.location_stats == {'unknown': 1}
        assert summary.clicks_over_time == {'2025-10-02': 1}
