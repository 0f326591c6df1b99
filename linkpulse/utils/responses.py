"""API Gateway (Lambda Proxy) response builders shared by the Lambda handlers.

Error bodies are structured as {"message": ..., "errorCode": ...}.
"""

import json
from typing import Any


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type,Authorization',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET,PATCH,DELETE',
}


def _response(status_code: int, body: dict[str, Any] | None, headers: dict[str, str] | None = None) -> dict:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body if body is not None else {}),
    }


def _error(status_code: int, base: str, message: str | None, error_code: str | None) -> dict:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return _response(status_code, body)


def response_200(body: dict[str, Any]) -> dict:
    return _response(200, body)


def response_201(body: dict[str, Any]) -> dict:
    return _response(201, body)


def response_204() -> dict:
    return {'statusCode': 204, 'headers': dict(CORS_HEADERS), 'body': ''}


def response_302(*, location: str) -> dict:
    return {
        'statusCode': 302,
        'headers': {'Location': location, 'Cache-Control': 'no-store', **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None) -> dict:
    return _error(400, 'Bad Request', message, error_code)


def response_401(message: str | None = None, error_code: str | None = None) -> dict:
    return _error(401, 'Unauthorized', message, error_code)


def response_404(message: str | None = None, error_code: str | None = None) -> dict:
    return _error(404, 'Not Found', message, error_code)


def response_410(message: str | None = None, error_code: str | None = None) -> dict:
    return _error(410, 'Gone', message, error_code)


def response_500(message: str | None = None, error_code: str | None = None) -> dict:
    return _error(500, 'Internal Server Error', message, error_code)
