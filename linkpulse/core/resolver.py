"""Redirect resolution with lazy expiration.

Given a shortcode, the resolver decides between three outcomes:

    NOT_FOUND   the code doesn't exist, or the link is inactive
    EXPIRED     the link was active but past its expiry; it is deactivated now
    HIT         the link is live; a visit is handed to the recorder

Expiration is enforced only here, at access time. The resolution that flips
`is_active` to False after expiry reports EXPIRED; every other one, concurrent
or later, reports NOT_FOUND.

Storage errors on the lookup and on the deactivation propagate as
DataStoreError, so callers can tell "no such link" from "could not check".
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, UTC
from enum import StrEnum

from linkpulse.core.lifecycle import is_expired
from linkpulse.core.recorder import VisitRecorder
from linkpulse.dao.base import LinkBaseDAO


logger = logging.getLogger(__name__)


class ResolveStatus(StrEnum):
    HIT = 'hit'
    NOT_FOUND = 'not_found'
    EXPIRED = 'expired'


@dataclass(frozen=True)
class RedirectOutcome:
    status: ResolveStatus
    target: str | None = None  # Set only for HIT


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RedirectResolver:
    def __init__(self, link_dao: LinkBaseDAO, recorder: VisitRecorder, clock: Callable[[], datetime] = _utcnow):
        self.link_dao = link_dao
        self.recorder = recorder
        self.clock = clock

    def resolve(self, shortcode: str, user_agent: str | None = None, source_address: str | None = None) -> RedirectOutcome:
        """Resolve a shortcode to a redirect outcome

        Request context (user agent, source address) is only used to classify
        the visit; it never influences the outcome.

        Raises:
            DataStoreError:
                If the link could not be looked up or deactivated.
        """
        link = self.link_dao.find_active(shortcode)
        if link is None:
            return RedirectOutcome(ResolveStatus.NOT_FOUND)

        now = self.clock()
        if is_expired(link, now):
            # Only the resolution that actually flips the flag reports EXPIRED.
            # A concurrent one, or one racing a delete, sees the link as gone.
            if not self.link_dao.deactivate(shortcode):
                logger.debug('Expired link already deactivated or deleted.', extra={'shortcode': shortcode})
                return RedirectOutcome(ResolveStatus.NOT_FOUND)
            logger.info('Link expired. Deactivated.', extra={'shortcode': shortcode, 'expiresAt': link.expires_at.isoformat()})
            return RedirectOutcome(ResolveStatus.EXPIRED)

        self.recorder.record(shortcode, user_agent=user_agent, source_address=source_address, timestamp=now)
        return RedirectOutcome(ResolveStatus.HIT, target=link.target)
