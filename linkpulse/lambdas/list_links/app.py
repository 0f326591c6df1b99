import logging

from linkpulse.types import LambdaEvent, LambdaContext, LambdaResponse
from linkpulse.core.links import LinkService
from linkpulse.dao.redis import LinkRedisDAO
from linkpulse.dao.exceptions import DataStoreError
from linkpulse.exceptions import ConfigurationError
from linkpulse.utils import generate_shortcode, load_config, get_short_url, get_user_id, app_prefix
from linkpulse.utils.helpers import guarantee_500_response
from linkpulse.utils.responses import response_200, response_401, response_500
from linkpulse.lambdas.list_links.constants import MISSING_USER_ID, STORAGE_UNAVAILABLE, LIST_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """List the caller's links, newest first

    HTTP responses:
        200: {"links": [{shortcode, shortUrl, originalUrl, createdAt, expiresAt, isActive, totalClicks}, ...]}
        401: Missing Cognito user id
        500: Internal server error
    """
    try:
        app_config = load_config('list_links')
    except (FileNotFoundError, ConfigurationError):
        logger.exception('Failed to load AppConfig for list links function. Responding with 500.')
        return response_500()
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    user_id = get_user_id(event)
    if user_id is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': MISSING_USER_ID})
        return response_401(message="missing 'sub' in JWT claims", error_code=MISSING_USER_ID)

    try:
        link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
        links = LinkService(link_dao, generate_code=generate_shortcode).list_links(user_id)
    except DataStoreError:
        logger.exception('Data store unavailable while listing links. Responding with 500.', extra={'event': STORAGE_UNAVAILABLE})
        return response_500(message='data store unavailable', error_code=STORAGE_UNAVAILABLE)

    logger.info('Listed links. Responding with 200.', extra={'count': len(links), 'event': LIST_SUCCESS})
    return response_200({'links': [{**link.to_dict(), 'shortUrl': get_short_url(link.shortcode, event)} for link in links]})
