import logging

from linkpulse.types import LambdaEvent, LambdaContext, LambdaResponse
from linkpulse.core.aggregator import fill_daily_window
from linkpulse.core.links import LinkService
from linkpulse.dao.redis import LinkRedisDAO
from linkpulse.dao.exceptions import DataStoreError, LinkNotFoundError
from linkpulse.exceptions import ConfigurationError
from linkpulse.utils import generate_shortcode, load_config, settings_from_config, get_user_id, app_prefix
from linkpulse.utils.helpers import guarantee_500_response
from linkpulse.utils.responses import response_200, response_400, response_401, response_404, response_500
from linkpulse.lambdas.link_analytics.constants import (
    MISSING_SHORTCODE,
    MISSING_USER_ID,
    SHORT_URL_NOT_FOUND,
    STORAGE_UNAVAILABLE,
    ANALYTICS_SUCCESS,
)


logger = logging.getLogger(__name__)

# Days covered by the zero-filled 'recentClicks' histogram
RECENT_DAYS = 7


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Return aggregated analytics for one of the caller's links

    HTTP responses:
        200: Analytics summary
            shortcode, totalClicks, deviceStats, browserStats, locationStats,
            clicksOverTime, recentClicks (last 7 days, zero-filled)
        400: Missing shortcode in path
        401: Missing Cognito user id
        404: Link doesn't exist or belongs to another owner
        500: Internal server error
    """
    # 0- Get application's config
    try:
        app_config = load_config('link_analytics')
        settings = settings_from_config(app_config)
    except (FileNotFoundError, ConfigurationError):
        logger.exception('Failed to load AppConfig for link analytics function. Responding with 500.')
        return response_500()
    else:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Identify caller and link
    user_id = get_user_id(event)
    if user_id is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': MISSING_USER_ID})
        return response_401(message="missing 'sub' in JWT claims", error_code=MISSING_USER_ID)

    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    # 2- Aggregate a snapshot of the visit log
    try:
        link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
        service = LinkService(link_dao, generate_code=generate_shortcode, analytics_timezone=settings.analytics_timezone)
        summary = service.link_analytics(shortcode, owner_id=user_id)
    except LinkNotFoundError:
        logger.info('Link not found for owner. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
        return response_404(message=f"link '{shortcode}' doesn't exist", error_code=SHORT_URL_NOT_FOUND)
    except DataStoreError:
        logger.exception('Data store unavailable while reading analytics. Responding with 500.', extra={'event': STORAGE_UNAVAILABLE})
        return response_500(message='data store unavailable', error_code=STORAGE_UNAVAILABLE)

    body = {'shortcode': shortcode, **summary.to_dict()}
    body['recentClicks'] = fill_daily_window(summary.clicks_over_time, days=RECENT_DAYS, tz=settings.analytics_timezone)

    logger.info('Analytics aggregated. Responding with 200.', extra={'shortcode': shortcode, 'event': ANALYTICS_SUCCESS})
    return response_200(body)
