"""Data models shared by the DAO layer, the core services and the Lambda handlers.

Classes:
    DeviceClass:
        Device categories a visit can be classified under.
    GeoLocation:
        Result of a geo oracle lookup.
    ParsedUserAgent:
        Result of parsing a raw User-Agent header.
    VisitRecord:
        One recorded redirect event.
    LinkRecord:
        A short link with its lifecycle flags and (optionally) its visit log.
    AnalyticsSummary:
        Aggregated statistics over a link's visit log.
    UserModel:
        Owner profile used by the default user bootstrap.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class DeviceClass(StrEnum):
    MOBILE = 'mobile'
    TABLET = 'tablet'
    DESKTOP = 'desktop'
    UNKNOWN = 'unknown'

    @classmethod
    def from_value(cls, value: str | None) -> 'DeviceClass':
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


# fmt: off
@dataclass(frozen=True)
class GeoLocation:
    country: str | None = None      # ISO 3166-1 alpha-2 country code
    city: str | None = None         # City name, if resolved


@dataclass(frozen=True)
class ParsedUserAgent:
    device_type: str | None = None  # 'mobile', 'tablet' or None when undetermined
    browser_name: str | None = None # Browser family, None when undetermined
# fmt: on


@dataclass(frozen=True)
class VisitRecord:
    """Represent a single redirect event.

    Geo fields are None when the geo oracle had no match for the source
    address. They are never filled with a placeholder string, so the
    aggregator can tell "no geo data" apart from a classification default.

    Attributes:
        timestamp (datetime):
            When the redirect occurred (timezone-aware, UTC).
        device_class (DeviceClass):
            Device category, `desktop` when the user agent gave no device type.
        browser_family (str):
            Browser family name, `'unknown'` when the user agent gave none.
        source_address (str | None):
            Client address, absent behind some proxies.
        geo_country (str | None):
            Country resolved from the source address.
        geo_city (str | None):
            City resolved from the source address.
    """

    timestamp: datetime
    device_class: DeviceClass = DeviceClass.DESKTOP
    browser_family: str = 'unknown'
    source_address: str | None = None
    geo_country: str | None = None
    geo_city: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'timestamp': self.timestamp.isoformat(),
            'deviceClass': str(self.device_class),
            'browserFamily': self.browser_family,
            'sourceAddress': self.source_address,
            'geoCountry': self.geo_country,
            'geoCity': self.geo_city,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'VisitRecord':
        return cls(
            timestamp=datetime.fromisoformat(data['timestamp']),
            device_class=DeviceClass.from_value(data.get('deviceClass')),
            browser_family=data.get('browserFamily') or 'unknown',
            source_address=data.get('sourceAddress'),
            geo_country=data.get('geoCountry'),
            geo_city=data.get('geoCity'),
        )


@dataclass(frozen=True)
class LinkRecord:
    """Represent a short link mapping and its lifecycle state.

    `visit_history` is None when the read that produced this record did not
    load the visit log. When it is loaded, `total_clicks == len(visit_history)`.

    Attributes:
        shortcode (str):
            Globally unique short identifier, immutable.
        target (str):
            Redirect destination, immutable.
        owner_id (str):
            Identifier of the owning principal.
        created_at (datetime):
            Creation time.
        expires_at (datetime):
            Expiration time, computed once at creation.
        is_active (bool):
            False once the owner disables the link or it is found expired.
        total_clicks (int):
            Number of recorded visits.
        visit_history (tuple[VisitRecord, ...] | None):
            Visit log in chronological order, or None if not loaded.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime.now(UTC)
        >>> link = LinkRecord(
        ...     shortcode='abc123',
        ...     target='https://example.com/x',
        ...     owner_id='user-1',
        ...     created_at=now,
        ...     expires_at=now + timedelta(days=30),
        ... )
        >>> link.is_active
        True
        >>> link.total_clicks
        0
    """

    shortcode: str
    target: str
    owner_id: str
    created_at: datetime
    expires_at: datetime
    is_active: bool = True
    total_clicks: int = 0
    visit_history: tuple[VisitRecord, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'shortcode': self.shortcode,
            'originalUrl': self.target,
            'createdAt': self.created_at.isoformat(),
            'expiresAt': self.expires_at.isoformat(),
            'isActive': self.is_active,
            'totalClicks': self.total_clicks,
        }


@dataclass(frozen=True)
class AnalyticsSummary:
    total_clicks: int = 0
    device_stats: dict[str, int] = field(default_factory=dict)
    browser_stats: dict[str, int] = field(default_factory=dict)
    location_stats: dict[str, int] = field(default_factory=dict)
    clicks_over_time: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            'totalClicks': self.total_clicks,
            'deviceStats': dict(self.device_stats),
            'browserStats': dict(self.browser_stats),
            'locationStats': dict(self.location_stats),
            'clicksOverTime': dict(self.clicks_over_time),
        }


# fmt: off
@dataclass(frozen=True)
class UserModel:
    user_id: str                        # Identity provider subject (Cognito 'sub')
    email: str                          # Contact email of the owner
    created_at: datetime | None = None  # Set by the DAO on insert
# fmt: on
