"""Link lifecycle: expiry stamping at creation, lazy expiry checks at access.

There is no background sweep. A link past its expiry that is never visited
again stays active in storage until the next resolution attempt flips it.
"""

from datetime import datetime, timedelta

from linkpulse.constants import TTL
from linkpulse.models import LinkRecord


def compute_expiry(created_at: datetime, ttl: timedelta = TTL.LINK) -> datetime:
    """Return the expiry of a link created at `created_at`.

    Example:
        >>> from datetime import datetime, UTC
        >>> compute_expiry(datetime(2025, 10, 1, tzinfo=UTC))
        datetime.datetime(2025, 10, 31, 0, 0, tzinfo=datetime.timezone.utc)
    """
    if ttl <= timedelta(0):
        raise ValueError(f'Link TTL must be positive (given value: {ttl}).')
    return created_at + ttl


def is_expired(link: LinkRecord, now: datetime) -> bool:
    return now >= link.expires_at
