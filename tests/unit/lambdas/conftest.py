from typing import cast

import pytest

from linkpulse.types import LambdaConfiguration, LambdaContext, LambdaEvent


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'pytest'})


@pytest.fixture
def config() -> LambdaConfiguration:
    return cast(
        LambdaConfiguration,
        {
            'redis': {'host': 'redis.test', 'port': 6379, 'db': 0},
            'settings': {'link_ttl_days': 30, 'shortcode_salt': 'pytest', 'analytics_timezone': 'UTC'},
        },
    )


@pytest.fixture
def apigw_event() -> LambdaEvent:
    """Authenticated API Gateway (REST, Lambda Proxy) event."""
    return cast(
        LambdaEvent,
        {
            'body': None,
            'resource': '/links/{shortcode}',
            'headers': {'User-Agent': 'pytest', 'Authorization': 'Bearer fake-jwt-token'},
            'httpMethod': 'GET',
            'path': '/links/abc123',
            'pathParameters': {'shortcode': 'abc123'},
            'requestContext': {
                'resourcePath': '/links/{shortcode}',
                'httpMethod': 'GET',
                'domainName': 'lnk.example.com',
                'stage': 'test',
                'identity': {'sourceIp': '203.0.113.7'},
                'authorizer': {
                    'claims': {'sub': 'user123', 'email': 'pytest@example.com', 'cognito:username': 'pytest-user', 'email_verified': 'true'}
                },
            },
        },
    )


@pytest.fixture
def anonymous_event(apigw_event: LambdaEvent) -> LambdaEvent:
    del apigw_event['requestContext']['authorizer']
    return apigw_event
