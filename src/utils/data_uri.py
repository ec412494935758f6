"""
Data URI helpers.
"""
import re

_DATA_URI_RE = re.compile(
    r"^data:(?P<media_type>[\w.+-]+/[\w.+-]+)"
    r"(?:;[\w.+-]+=[\w.+-]+)*"
    r";base64,(?P<payload>\S+)$"
)


def parse_media_type(value: str) -> str | None:
    """
    Return the media type of a base64 data URI, or None if malformed.

    Only the shape is checked: the payload is not decoded.

    Examples:
        >>> parse_media_type("data:image/png;base64,AAA=")
        'image/png'
        >>> parse_media_type("https://example.com/a.png") is None
        True
    """
    match = _DATA_URI_RE.match(value)
    if not match:
        return None
    return match.group("media_type").lower()
