"""Owner-facing link operations: create, list, toggle, delete and analytics.

Every operation is scoped to the owner resolved at the API boundary. A link
owned by someone else behaves exactly like a missing one (LinkNotFoundError),
so owners cannot discover each other's links.
"""

import logging
from collections.abc import Callable
from datetime import datetime, UTC, timedelta
from urllib.parse import urlparse
from zoneinfo import ZoneInfo

from linkpulse.constants import TTL, MAX_SHORTCODE_ATTEMPTS, ANALYTICS_TIMEZONE
from linkpulse.core.aggregator import aggregate
from linkpulse.core.lifecycle import compute_expiry
from linkpulse.dao.base import LinkBaseDAO
from linkpulse.dao.exceptions import DuplicateShortCodeError, LinkNotFoundError
from linkpulse.exceptions import InvalidTargetURLError, LinkCreationError
from linkpulse.models import AnalyticsSummary, LinkRecord


logger = logging.getLogger(__name__)

# Longest target URL accepted at creation
MAX_TARGET_URL_LENGTH = 2048


def validate_target(target: str) -> str:
    """Return the stripped target URL, or raise InvalidTargetURLError

    Only absolute http(s) URLs with a host are accepted.
    """
    if not isinstance(target, str) or not target.strip():
        raise InvalidTargetURLError('target URL is required')

    target = target.strip()
    if len(target) > MAX_TARGET_URL_LENGTH:
        raise InvalidTargetURLError(f'target URL is longer than {MAX_TARGET_URL_LENGTH} characters')

    components = urlparse(target)
    if components.scheme not in {'http', 'https'} or not components.netloc:
        raise InvalidTargetURLError(f'{target!r} is not an absolute http(s) URL')
    return target


class LinkService:
    """Link management on top of a LinkBaseDAO.

    Args:
        link_dao (LinkBaseDAO):
            Storage collaborator.
        generate_code (Callable[[int], str]):
            Shortcode generator, fed with the DAO's global counter.
        ttl (timedelta):
            Lifetime of new links.
        clock (Callable[[], datetime]):
            Source of creation timestamps.
    """

    def __init__(
        self,
        link_dao: LinkBaseDAO,
        generate_code: Callable[[int], str],
        ttl: timedelta = TTL.LINK,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
        analytics_timezone: ZoneInfo = ZoneInfo(ANALYTICS_TIMEZONE),
    ):
        self.link_dao = link_dao
        self.generate_code = generate_code
        self.ttl = ttl
        self.clock = clock
        self.analytics_timezone = analytics_timezone

    def create_link(self, target: str, owner_id: str) -> LinkRecord:
        """Create a link with a freshly generated shortcode

        Shortcode collisions are retried with a new code, at most
        MAX_SHORTCODE_ATTEMPTS times.

        Raises:
            InvalidTargetURLError:
                If the target is not an absolute http(s) URL.
            LinkCreationError:
                If every attempt collided.
            DataStoreError:
                If the data store is unavailable (not retried).
        """
        target = validate_target(target)
        created_at = self.clock()
        expires_at = compute_expiry(created_at, self.ttl)

        for attempt in range(1, MAX_SHORTCODE_ATTEMPTS + 1):
            shortcode = self.generate_code(self.link_dao.count(increment=True))
            link = LinkRecord(
                shortcode=shortcode,
                target=target,
                owner_id=owner_id,
                created_at=created_at,
                expires_at=expires_at,
            )
            try:
                self.link_dao.insert(link)
            except DuplicateShortCodeError:
                logger.info(
                    'Shortcode collision on attempt %s/%s.',
                    attempt,
                    MAX_SHORTCODE_ATTEMPTS,
                    extra={'shortcode': shortcode},
                )
                continue
            else:
                logger.info('Created link.', extra={'shortcode': shortcode, 'ownerId': owner_id})
                return link

        raise LinkCreationError(f'Failed to generate a unique shortcode after {MAX_SHORTCODE_ATTEMPTS} attempts')

    def list_links(self, owner_id: str) -> list[LinkRecord]:
        return self.link_dao.list_by_owner(owner_id)

    def set_link_active(self, shortcode: str, owner_id: str, is_active: bool | None = None) -> LinkRecord:
        """Set a link's active flag, or flip it when is_active is None."""
        if is_active is None:
            link = self.link_dao.find_by_owner(shortcode, owner_id)
            if link is None:
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
            is_active = not link.is_active
        return self.link_dao.set_active(shortcode, owner_id, is_active)

    def delete_link(self, shortcode: str, owner_id: str) -> None:
        self.link_dao.delete(shortcode, owner_id)
        logger.info('Deleted link.', extra={'shortcode': shortcode, 'ownerId': owner_id})

    def link_analytics(self, shortcode: str, owner_id: str) -> AnalyticsSummary:
        """Aggregate analytics for an owned link from a point-in-time snapshot

        Raises:
            LinkNotFoundError:
                If the link is missing or owned by someone else.
        """
        link = self.link_dao.find_by_owner(shortcode, owner_id, include_visits=True)
        if link is None:
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
        return aggregate(link, tz=self.analytics_timezone)
