"""Unit tests for the fire-and-forget VisitRecorder.

Test coverage includes:

1. Successful recording through the atomic append
2. Failures on the append path are logged and never raised
3. Concurrent appends on one link lose neither counts nor log entries
4. Shut down executors drop visits instead of raising; the shared pool survives recorder shutdown
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest

from linkpulse.core.classifier import VisitClassifier
from linkpulse.core.recorder import VisitRecorder, default_executor, shutdown_default_executor
from linkpulse.dao.base import LinkBaseDAO
from linkpulse.dao.exceptions import DataStoreError, LinkNotFoundError
from linkpulse.models import DeviceClass, LinkRecord


NOW = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def link(memory_dao) -> LinkRecord:
    link = LinkRecord(
        shortcode='abc123',
        target='https://example.com',
        owner_id='user-1',
        created_at=NOW,
        expires_at=NOW + timedelta(days=30),
    )
    memory_dao.insert(link)
    return link


# -------------------------------
# 1. Successful recording
# -------------------------------


def test_record_appends_classified_visit(memory_dao, immediate_executor, link):
    recorder = VisitRecorder(memory_dao, VisitClassifier(), executor=immediate_executor)

    future = recorder.record('abc123', user_agent='garbage', source_address='203.0.113.7', timestamp=NOW)

    assert future.result() == 1
    stored = memory_dao.find_by_owner('abc123', 'user-1', include_visits=True)
    assert stored.total_clicks == 1
    assert len(stored.visit_history) == 1
    assert stored.visit_history[0].timestamp == NOW
    assert stored.visit_history[0].device_class is DeviceClass.DESKTOP
    assert stored.visit_history[0].source_address == '203.0.113.7'


def test_record_does_not_wait_for_the_append():
    dao = MagicMock(spec=LinkBaseDAO)
    executor = MagicMock()
    recorder = VisitRecorder(dao, VisitClassifier(), executor=executor)

    recorder.record('abc123', timestamp=NOW)

    executor.submit.assert_called_once()
    dao.append_visit.assert_not_called()


def test_default_executor_is_shared():
    assert default_executor() is default_executor()
    assert VisitRecorder(MagicMock(spec=LinkBaseDAO), VisitClassifier()).executor is default_executor()


# -------------------------------
# 2. Failures are swallowed
# -------------------------------


@pytest.mark.parametrize(
    'error, message',
    [
        (LinkNotFoundError("Link with code 'abc123' not found."), 'Link vanished before its visit was recorded'),
        (DataStoreError("Can't connect to Redis at redis.test:6379/0."), 'Failed to record visit'),
        (RuntimeError('boom'), 'Unexpected error while recording visit'),
    ],
)
def test_append_failures_are_logged_and_dropped(immediate_executor, caplog, error, message):
    caplog.set_level(logging.INFO, logger='linkpulse.core.recorder')
    dao = MagicMock(spec=LinkBaseDAO)
    dao.append_visit.side_effect = error
    recorder = VisitRecorder(dao, VisitClassifier(), executor=immediate_executor)

    future = recorder.record('abc123', timestamp=NOW)

    assert future.result() is None
    assert message in caplog.text


def test_visit_to_deleted_link_is_not_resurrected(memory_dao, immediate_executor, link):
    memory_dao.delete('abc123', 'user-1')
    recorder = VisitRecorder(memory_dao, VisitClassifier(), executor=immediate_executor)

    assert recorder.record('abc123', timestamp=NOW).result() is None
    assert memory_dao.find_by_owner('abc123', 'user-1') is None


# -------------------------------
# 3. Concurrent appends
# -------------------------------


def test_concurrent_appends_keep_counter_and_log_consistent(memory_dao, link):
    visits = 200
    with ThreadPoolExecutor(max_workers=16) as executor:
        recorder = VisitRecorder(memory_dao, VisitClassifier(), executor=executor)
        futures = [recorder.record('abc123', user_agent='garbage', timestamp=NOW) for _ in range(visits)]
        results = [future.result() for future in futures]

    stored = memory_dao.find_by_owner('abc123', 'user-1', include_visits=True)
    assert stored.total_clicks == visits
    assert len(stored.visit_history) == visits
    assert sorted(results) == list(range(1, visits + 1))


def test_two_simultaneous_visits_count_twice(memory_dao, link):
    with ThreadPoolExecutor(max_workers=2) as executor:
        recorder = VisitRecorder(memory_dao, VisitClassifier(), executor=executor)
        first = recorder.record('abc123', timestamp=NOW)
        second = recorder.record('abc123', timestamp=NOW)
        first.result()
        second.result()

    assert memory_dao.find_by_owner('abc123', 'user-1').total_clicks == 2


# -------------------------------
# 4. Shutdown
# -------------------------------


def test_record_after_shutdown_drops_visit(memory_dao, immediate_executor, link, caplog):
    recorder = VisitRecorder(memory_dao, VisitClassifier(), executor=immediate_executor)
    recorder.shutdown()

    future = recorder.record('abc123', timestamp=NOW)

    assert future.result() is None
    assert memory_dao.find_by_owner('abc123', 'user-1').total_clicks == 0
    assert 'Visit recorder is shut down' in caplog.text


def test_recorder_shutdown_leaves_shared_pool_running(memory_dao, link):
    VisitRecorder(memory_dao, VisitClassifier()).shutdown()

    recorder = VisitRecorder(memory_dao, VisitClassifier())

    assert recorder.record('abc123', timestamp=NOW).result(timeout=5) == 1
    assert memory_dao.find_by_owner('abc123', 'user-1').total_clicks == 1


def test_shutdown_default_executor_starts_fresh_pool(memory_dao, link):
    recorder = VisitRecorder(memory_dao, VisitClassifier())
    old_pool = recorder.executor

    shutdown_default_executor()

    assert default_executor() is not old_pool
    assert recorder.executor is default_executor()
    assert recorder.record('abc123', timestamp=NOW).result(timeout=5) == 1
