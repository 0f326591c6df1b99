from unittest.mock import MagicMock

import pytest
import redis

from linkpulse.dao.redis import scripts


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def script_mocks() -> dict[str, MagicMock]:
    """One mock per Lua script, keyed by script source."""
    return {
        scripts.APPEND_VISIT: MagicMock(name='append_visit_script'),
        scripts.SET_ACTIVE: MagicMock(name='set_active_script'),
        scripts.DEACTIVATE: MagicMock(name='deactivate_script'),
        scripts.DELETE_LINK: MagicMock(name='delete_script'),
    }


@pytest.fixture
def redis_client(script_mocks: dict[str, MagicMock]) -> redis.Redis:
    """Mock a Redis pipeline-compatible client."""
    client = MagicMock(spec=redis.client.Pipeline)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    client.exists.return_value = False
    client.pipeline.return_value = client
    client.__enter__.return_value = client
    client.__exit__.return_value = None
    client.register_script = MagicMock(side_effect=lambda source: script_mocks[source])
    return client
