"""Visit classification: turn raw request context into a VisitRecord.

Defaulting policy:
    - no device type from the user agent   -> DeviceClass.DESKTOP
    - no browser name from the user agent  -> 'unknown'
    - no geo match for the source address  -> geo_country and geo_city are None

classify() is total: parser or oracle failures are logged and replaced by the
defaults above, never raised.
"""

import logging
from collections.abc import Callable
from datetime import datetime, UTC

from linkpulse.constants import UNKNOWN
from linkpulse.core.geo import GeoOracle, NullGeoOracle
from linkpulse.core.useragent import parse_user_agent
from linkpulse.models import DeviceClass, GeoLocation, ParsedUserAgent, VisitRecord


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VisitClassifier:
    """Build VisitRecords from a User-Agent string and a source address.

    Args:
        geo_oracle (GeoOracle):
            Oracle used to resolve source addresses. Defaults to NullGeoOracle.
        ua_parser (Callable[[str | None], ParsedUserAgent]):
            User-Agent parser. Defaults to parse_user_agent.
        clock (Callable[[], datetime]):
            Source of the visit timestamp when none is passed to classify().

    Example:
        >>> classifier = VisitClassifier()
        >>> visit = classifier.classify('garbage', None)
        >>> visit.device_class, visit.browser_family
        (<DeviceClass.DESKTOP: 'desktop'>, 'unknown')
    """

    def __init__(
        self,
        geo_oracle: GeoOracle | None = None,
        ua_parser: Callable[[str | None], ParsedUserAgent] = parse_user_agent,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.geo_oracle = geo_oracle or NullGeoOracle()
        self.ua_parser = ua_parser
        self.clock = clock

    def classify(self, user_agent: str | None, source_address: str | None, timestamp: datetime | None = None) -> VisitRecord:
        parsed = self._parse(user_agent)
        location = self._locate(source_address)

        return VisitRecord(
            timestamp=timestamp or self.clock(),
            device_class=DeviceClass.from_value(parsed.device_type) if parsed.device_type else DeviceClass.DESKTOP,
            browser_family=parsed.browser_name or UNKNOWN,
            source_address=source_address or None,
            geo_country=location.country if location else None,
            geo_city=location.city if location else None,
        )

    def _parse(self, user_agent: str | None) -> ParsedUserAgent:
        try:
            return self.ua_parser(user_agent)
        except Exception:
            logger.warning('Failed to parse User-Agent. Using classification defaults.', exc_info=True, extra={'userAgent': user_agent})
            return ParsedUserAgent()

    def _locate(self, source_address: str | None) -> GeoLocation | None:
        if not source_address:
            return None
        try:
            return self.geo_oracle.lookup(source_address)
        except Exception:
            logger.warning('Geo lookup failed. Recording visit without geo data.', exc_info=True, extra={'sourceAddress': source_address})
            return None
