import json
import logging
import functools

from linkpulse.types import LambdaEvent, LambdaContext, LambdaResponse
from linkpulse.core.links import LinkService
from linkpulse.dao.redis import LinkRedisDAO
from linkpulse.dao.exceptions import DataStoreError
from linkpulse.exceptions import ConfigurationError, InvalidTargetURLError, LinkCreationError
from linkpulse.utils import generate_shortcode, load_config, settings_from_config, get_short_url, get_user_id, app_prefix
from linkpulse.utils.helpers import guarantee_500_response
from linkpulse.utils.responses import response_201, response_400, response_401, response_500
from linkpulse.lambdas.shorten_url.constants import (
    INVALID_JSON,
    MISSING_TARGET_URL,
    INVALID_TARGET_URL,
    MISSING_USER_ID,
    SHORTCODE_ALLOCATION_FAILED,
    STORAGE_UNAVAILABLE,
    LINK_CREATED,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract Amazon Cognito user id from Lambda event
    - Step 2: Extract original URL from request body
    - Step 3: Create the link (shortcode generation with bounded retries)
    - Step 4: Respond to user with 201 Created

    HTTP responses:
        201: Link created
            shortUrl: newly generated short url
            originalUrl: original url (provided in request)
            expiresAt: ISO-8601 expiration time
            shortcode: newly generated shortcode
        400: Bad client request
            message: invalid JSON, missing or invalid 'url'
        401: Unauthorized
            message: missing Cognito user id
        500: Internal server error
            message: shortcode allocation failed or data store unavailable

    Example:
        >>> event = {'body': '{"url": "https://example.com"}', 'requestContext': {'authorizer': {'claims': {'sub': 'user123'}}}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['shortUrl']
        'http://localhost:3000/abc1234'
    """
    # 0- Get application's config
    try:
        app_config = load_config('shorten_url')
        settings = settings_from_config(app_config)
    except (FileNotFoundError, ConfigurationError):
        logger.exception('Failed to load AppConfig for shorten URL function. Responding with 500.')
        return response_500()
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract user id from Cognito
    user_id = get_user_id(event)
    if user_id is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': MISSING_USER_ID})
        return response_401(message="missing 'sub' in JWT claims", error_code=MISSING_USER_ID)

    # 2- Extract original URL from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON)

    target_url = request_body.get('url') if isinstance(request_body, dict) else None
    if not target_url:
        logger.info("Missing 'url' in JSON body. Responding with 400.", extra={'event': MISSING_TARGET_URL})
        return response_400(message="missing 'url' in JSON body", error_code=MISSING_TARGET_URL)

    # 3- Create the link
    try:
        link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
        service = LinkService(
            link_dao,
            generate_code=functools.partial(generate_shortcode, salt=settings.shortcode_salt, length=settings.shortcode_length),
            ttl=settings.link_ttl,
        )
        link = service.create_link(target_url, owner_id=user_id)
    except InvalidTargetURLError as e:
        logger.info('Invalid target URL. Responding with 400.', extra={'event': INVALID_TARGET_URL, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_TARGET_URL)
    except LinkCreationError:
        logger.exception('Failed to allocate a shortcode. Responding with 500.', extra={'event': SHORTCODE_ALLOCATION_FAILED})
        return response_500(message='failed to allocate a shortcode', error_code=SHORTCODE_ALLOCATION_FAILED)
    except DataStoreError:
        logger.exception('Data store unavailable while creating link. Responding with 500.', extra={'event': STORAGE_UNAVAILABLE})
        return response_500(message='data store unavailable', error_code=STORAGE_UNAVAILABLE)

    # 4- Return successful response to user
    short_url = get_short_url(link.shortcode, event)
    logger.info('Link created. Responding with 201.', extra={'shortcode': link.shortcode, 'event': LINK_CREATED})
    return response_201(
        {
            'shortUrl': short_url,
            'originalUrl': link.target,
            'expiresAt': link.expires_at.isoformat(),
            'shortcode': link.shortcode,
        }
    )
