import logging

from linkpulse.types import LambdaEvent, LambdaContext, LambdaResponse
from linkpulse.core.classifier import VisitClassifier
from linkpulse.core.geo import geo_oracle
from linkpulse.core.recorder import VisitRecorder
from linkpulse.core.resolver import RedirectResolver, ResolveStatus
from linkpulse.dao.redis import LinkRedisDAO
from linkpulse.dao.exceptions import DataStoreError
from linkpulse.exceptions import ConfigurationError
from linkpulse.utils import load_config, settings_from_config, get_short_url, get_user_agent, get_source_address, app_prefix
from linkpulse.utils.helpers import guarantee_500_response
from linkpulse.utils.responses import response_302, response_400, response_404, response_410, response_500
from linkpulse.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    SHORT_URL_EXPIRED,
    REDIRECT_SUCCESS,
    STORAGE_UNAVAILABLE,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve the shortcode (lazily expiring the link if needed)
    - Step 3: Redirect client to target URL

    The visit is recorded in the background; the response never waits on it.

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
            message: short URL doesn't exist or was disabled
        410: Gone
            message: short URL expired (reported once, then 404)
        500: Internal server error
            message: server experienced an internal error

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71TCN'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_url')
        settings = settings_from_config(app_config)
    except (FileNotFoundError, ConfigurationError):
        logger.exception('Failed to load AppConfig for redirect URL function. Responding with 500.')
        return response_500()
    else:
        logger.debug('Assuming Redis as the backend database for links')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info(
            'Missing "shortcode" in path. Responding with 400.',
            extra={'event': MISSING_SHORTCODE},
        )
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 2- Resolve the shortcode
    try:
        link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
        classifier = VisitClassifier(geo_oracle=geo_oracle(settings.geoip_database))
        resolver = RedirectResolver(link_dao, VisitRecorder(link_dao, classifier))
        outcome = resolver.resolve(shortcode, user_agent=get_user_agent(event), source_address=get_source_address(event))
    except DataStoreError:
        logger.exception(
            'Data store unavailable while resolving short URL. Responding with 500.',
            extra={'shortcode': shortcode, 'event': STORAGE_UNAVAILABLE},
        )
        return response_500(message='data store unavailable', error_code=STORAGE_UNAVAILABLE)

    if outcome.status == ResolveStatus.NOT_FOUND:
        logger.info(
            'Short URL not found or inactive. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    if outcome.status == ResolveStatus.EXPIRED:
        logger.info(
            'Short URL expired. Responding with 410.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_EXPIRED},
        )
        return response_410(message=f'short url {get_short_url(shortcode, event)} has expired', error_code=SHORT_URL_EXPIRED)

    # 3- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=outcome.target)
