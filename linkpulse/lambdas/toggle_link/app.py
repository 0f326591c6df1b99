import json
import logging

from linkpulse.types import LambdaEvent, LambdaContext, LambdaResponse
from linkpulse.core.links import LinkService
from linkpulse.dao.redis import LinkRedisDAO
from linkpulse.dao.exceptions import DataStoreError, LinkNotFoundError
from linkpulse.exceptions import ConfigurationError
from linkpulse.utils import generate_shortcode, load_config, get_short_url, get_user_id, app_prefix
from linkpulse.utils.helpers import guarantee_500_response
from linkpulse.utils.responses import response_200, response_400, response_401, response_404, response_500
from linkpulse.lambdas.toggle_link.constants import (
    MISSING_SHORTCODE,
    MISSING_USER_ID,
    INVALID_JSON,
    INVALID_IS_ACTIVE,
    SHORT_URL_NOT_FOUND,
    STORAGE_UNAVAILABLE,
    TOGGLE_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Enable or disable one of the caller's links

    The JSON body may carry {"isActive": true|false}. Without it (or with an
    empty body) the link's current state is flipped.

    HTTP responses:
        200: Updated link {shortcode, shortUrl, originalUrl, createdAt, expiresAt, isActive, totalClicks}
        400: Missing shortcode, invalid JSON or non-boolean 'isActive'
        401: Missing Cognito user id
        404: Link doesn't exist or belongs to another owner
        500: Internal server error
    """
    try:
        app_config = load_config('toggle_link')
    except (FileNotFoundError, ConfigurationError):
        logger.exception('Failed to load AppConfig for toggle link function. Responding with 500.')
        return response_500()
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    user_id = get_user_id(event)
    if user_id is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': MISSING_USER_ID})
        return response_401(message="missing 'sub' in JWT claims", error_code=MISSING_USER_ID)

    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON)
    if not isinstance(request_body, dict):
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON)

    is_active = request_body.get('isActive')
    if is_active is not None and not isinstance(is_active, bool):
        logger.info("Non-boolean 'isActive'. Responding with 400.", extra={'event': INVALID_IS_ACTIVE})
        return response_400(message="'isActive' must be a boolean", error_code=INVALID_IS_ACTIVE)

    try:
        link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
        link = LinkService(link_dao, generate_code=generate_shortcode).set_link_active(shortcode, user_id, is_active)
    except LinkNotFoundError:
        logger.info('Link not found for owner. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
        return response_404(message=f"link '{shortcode}' doesn't exist", error_code=SHORT_URL_NOT_FOUND)
    except DataStoreError:
        logger.exception('Data store unavailable while toggling link. Responding with 500.', extra={'event': STORAGE_UNAVAILABLE})
        return response_500(message='data store unavailable', error_code=STORAGE_UNAVAILABLE)

    logger.info(
        'Link toggled. Responding with 200.',
        extra={'shortcode': shortcode, 'isActive': link.is_active, 'event': TOGGLE_SUCCESS},
    )
    return response_200({**link.to_dict(), 'shortUrl': get_short_url(link.shortcode, event)})
