"""Geo oracles: best-effort lookup of a client address to a country and city.

Classes:
    GeoOracle:
        Interface. lookup() returns a GeoLocation or None, and has no side effects.
    NullGeoOracle:
        Oracle that never resolves anything (no geo database configured).
    GeoIP2Oracle:
        Oracle backed by a MaxMind GeoIP2/GeoLite2 City database.

Functions:
    geo_oracle(database_path) -> GeoOracle:
        Return a process-wide oracle for a database path (or a NullGeoOracle).
"""

import functools
import ipaddress
import logging
from abc import ABC, abstractmethod

import geoip2.database
import geoip2.errors
from maxminddb.errors import InvalidDatabaseError

from linkpulse.models import GeoLocation


logger = logging.getLogger(__name__)


class GeoOracle(ABC):
    @abstractmethod
    def lookup(self, source_address: str) -> GeoLocation | None:
        pass


class NullGeoOracle(GeoOracle):
    def lookup(self, source_address: str) -> GeoLocation | None:
        return None


class GeoIP2Oracle(GeoOracle):
    """Geo oracle reading a local MaxMind City database

    Private, loopback and malformed addresses are never looked up.

    Example:
        >>> oracle = GeoIP2Oracle('/opt/geoip/GeoLite2-City.mmdb')
        >>> oracle.lookup('81.2.69.142')
        GeoLocation(country='GB', city='London')
        >>> oracle.lookup('10.0.0.1') is None
        True
    """

    def __init__(self, database_path: str | None = None, reader: geoip2.database.Reader | None = None):
        if reader is None:
            reader = geoip2.database.Reader(database_path)
        self.reader = reader

    def lookup(self, source_address: str) -> GeoLocation | None:
        try:
            address = ipaddress.ip_address(source_address.strip())
        except ValueError:
            return None
        if not address.is_global:
            return None

        try:
            response = self.reader.city(str(address))
        except geoip2.errors.AddressNotFoundError:
            return None

        country = response.country.iso_code
        city = response.city.name
        if country is None and city is None:
            return None
        return GeoLocation(country=country, city=city)

    def close(self) -> None:
        self.reader.close()


@functools.cache
def geo_oracle(database_path: str | None) -> GeoOracle:
    """Return a cached oracle for `database_path`

    The database is opened once per process. A missing or unreadable database
    degrades to a NullGeoOracle: geo enrichment is best-effort and must not
    take the redirect path down.
    """
    if not database_path:
        return NullGeoOracle()

    try:
        return GeoIP2Oracle(database_path)
    except (OSError, InvalidDatabaseError):
        logger.exception('Failed to open GeoIP database. Geo enrichment disabled.', extra={'geoipDatabase': database_path})
        return NullGeoOracle()
