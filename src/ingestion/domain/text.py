import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

_WHITESPACE = re.compile(r"\s+")

EXCERPT_MAX_LENGTH = 200


def collapse_whitespace(value: str | None) -> str:
    return _WHITESPACE.sub(" ", value or "").strip()


def excerpt_from_text(value: str | None, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    clean = collapse_whitespace(value)
    if len(clean) <= max_length:
        return clean
    return f"{clean[:max_length].rstrip()}..."


def format_iso(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return format_iso(datetime.now(timezone.utc))


def parse_datetime(value: str | None) -> datetime | None:
    """Parse RFC 822 (feed) or ISO-8601 (meta tags) timestamps."""
    text = collapse_whitespace(value)
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def to_iso_date(value: str | None) -> str | None:
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    return format_iso(parsed)
