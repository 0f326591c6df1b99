"""User-Agent parsing backed by the `user-agents` library."""

from user_agents import parse

from linkpulse.models import ParsedUserAgent


# Family reported by ua-parser when it recognizes nothing
_UNRECOGNIZED_FAMILY = 'Other'


def parse_user_agent(user_agent: str | None) -> ParsedUserAgent:
    """Parse a raw User-Agent header into a device type and a browser name

    device_type is 'tablet' or 'mobile' when the parser recognizes a handheld
    device and None otherwise; the desktop default is the classifier's call.
    browser_name is None when the parser doesn't recognize the browser.

    Example:
        >>> parse_user_agent('Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) ... Mobile/15E148 Safari/604.1')
        ParsedUserAgent(device_type='mobile', browser_name='Mobile Safari')
        >>> parse_user_agent('definitely not a browser')
        ParsedUserAgent(device_type=None, browser_name=None)
    """
    if not user_agent:
        return ParsedUserAgent()

    parsed = parse(user_agent)

    if parsed.is_tablet:
        device_type = 'tablet'
    elif parsed.is_mobile:
        device_type = 'mobile'
    else:
        device_type = None

    family = parsed.browser.family
    browser_name = family if family and family != _UNRECOGNIZED_FAMILY else None
    return ParsedUserAgent(device_type=device_type, browser_name=browser_name)
