"""Analytics aggregation over a link's visit log.

aggregate() folds a point-in-time snapshot of the visit log into grouped
counts in a single pass. Nothing is cached; every call recomputes from the
full log.
"""

from collections import Counter
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from linkpulse.constants import ANALYTICS_TIMEZONE, UNKNOWN
from linkpulse.models import AnalyticsSummary, LinkRecord


def aggregate(link: LinkRecord, tz: ZoneInfo = ZoneInfo(ANALYTICS_TIMEZONE)) -> AnalyticsSummary:
    """Summarize a link's visits by device, browser, country and calendar day

    Visits without a country are counted under 'unknown'. Day keys are
    'YYYY-MM-DD' in the `tz` reference zone.

    Args:
        link (LinkRecord):
            Link read with its visit log (include_visits=True).
        tz (ZoneInfo):
            Reference zone for daily buckets. Defaults to UTC.

    Returns:
        AnalyticsSummary: total_clicks is the snapshot's visit count.

    Raises:
        ValueError:
            If the link's visit log was not loaded.

    Example:
        >>> summary = aggregate(link)
        >>> summary.device_stats
        {'mobile': 3, 'desktop': 1}
        >>> summary.clicks_over_time
        {'2025-10-14': 1, '2025-10-15': 3}
    """
    if link.visit_history is None:
        raise ValueError(f"Visit log of link '{link.shortcode}' was not loaded.")

    devices = Counter()
    browsers = Counter()
    locations = Counter()
    days = Counter()

    # Fold over the snapshot only; appends landing after the read are not part of it
    visits = link.visit_history
    for visit in visits:
        devices[str(visit.device_class)] += 1
        browsers[visit.browser_family or UNKNOWN] += 1
        locations[visit.geo_country or UNKNOWN] += 1
        days[visit.timestamp.astimezone(tz).date().isoformat()] += 1

    return AnalyticsSummary(
        total_clicks=len(visits),
        device_stats=dict(devices),
        browser_stats=dict(browsers),
        location_stats=dict(locations),
        clicks_over_time=dict(sorted(days.items())),
    )


def fill_daily_window(clicks_over_time: dict[str, int], days: int = 7, today: date | None = None, tz: ZoneInfo = ZoneInfo(ANALYTICS_TIMEZONE)) -> dict[str, int]:
    """Window a daily histogram to the last `days` days, filling gaps with zero

    Example:
        >>> fill_daily_window({'2025-10-14': 2}, days=3, today=date(2025, 10, 15))
        {'2025-10-13': 0, '2025-10-14': 2, '2025-10-15': 0}
    """
    if days <= 0:
        raise ValueError(f'Window must span at least one day (given value: {days}).')

    today = today or datetime.now(tz).date()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    return {day.isoformat(): clicks_over_time.get(day.isoformat(), 0) for day in window}
