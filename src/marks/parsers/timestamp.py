"""
Timestamp parser for Marks.

Parses org-mode SCHEDULED/DEADLINE timestamps such as

    SCHEDULED: <2021-08-28 Sat>
    DEADLINE: [2020-12-24 Thu 13:30-22:35 +1y]

Only ISO 8601 dates are supported. The weekday is accepted but not checked
against the date. A `<...>--<...>` range keeps only its first timestamp.
"""

import re
import logging
from datetime import datetime
from typing import Optional

from ..errors import TimestampParseError
from ..models.org import OrgDatePlan, OrgDateTime


logger = logging.getLogger(__name__)

TIMESTAMP_PATTERN = re.compile(
    r"""
    ^\s*
    (?:(?P<label>DEADLINE|SCHEDULED):\s*)?
    (?P<open>[<\[])
    (?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})
    (?:\s+(?P<weekday>[A-Za-z]{3}))?
    (?:\s+(?P<start_hour>\d{2}):(?P<start_minute>\d{2})
        (?:-(?P<end_hour>\d{2}):(?P<end_minute>\d{2}))?)?
    (?:\s+(?P<interval>[^>\]\s][^>\]]*?))?
    \s*
    (?P<close>[>\]])
    """,
    re.VERBOSE | re.IGNORECASE
)

PLAN_LABELS = {
    'DEADLINE': OrgDatePlan.DEADLINE,
    'SCHEDULED': OrgDatePlan.SCHEDULED,
}

CLOSERS = {'<': '>', '[': ']'}

WEEKDAYS = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']


def is_timestamp_line(line: str) -> bool:
    """Check if a line starts with a DEADLINE: or SCHEDULED: label, ignoring case and indentation."""
    stripped = line.lstrip().upper()
    return stripped.startswith('DEADLINE:') or stripped.startswith('SCHEDULED:')


def parse_org_timestamp(line: str) -> OrgDateTime:
    """
    Parse a single timestamp, optionally labelled with DEADLINE: or SCHEDULED:.

    Args:
        line: Text holding the timestamp. Anything after the closing bracket is ignored.

    Returns:
        Parsed OrgDateTime. Time defaults to 00:00 when absent.

    Raises:
        TimestampParseError: On malformed digits, a missing or mismatched
            closing bracket, or an impossible date or time
    """
    match = TIMESTAMP_PATTERN.match(line)
    if not match:
        raise TimestampParseError(f"Malformed timestamp: {line.strip()!r}", text=line)

    if CLOSERS[match.group('open')] != match.group('close'):
        raise TimestampParseError(f"Mismatched timestamp brackets: {line.strip()!r}", text=line)

    label = match.group('label')
    plan = PLAN_LABELS[label.upper()] if label else OrgDatePlan.PLAIN

    year, month, day = (int(match.group(name)) for name in ('year', 'month', 'day'))
    start_hour = int(match.group('start_hour') or 0)
    start_minute = int(match.group('start_minute') or 0)

    try:
        start = datetime(year, month, day, start_hour, start_minute)
        end = None
        if match.group('end_hour') is not None:
            end = datetime(year, month, day, int(match.group('end_hour')), int(match.group('end_minute')))
    except ValueError as e:
        raise TimestampParseError(f"Invalid date or time in {line.strip()!r}: {e}", text=line) from e

    interval = match.group('interval')
    return OrgDateTime(
        plan=plan,
        is_active=match.group('open') == '<',
        start=start,
        end=end,
        interval=interval.strip() if interval else None
    )


def format_org_timestamp(timestamp: OrgDateTime) -> str:
    """
    Serialize a timestamp back into org syntax.

    Args:
        timestamp: Timestamp to serialize

    Returns:
        Text that parse_org_timestamp reads back into an equal OrgDateTime
    """
    opener, closer = ('<', '>') if timestamp.is_active else ('[', ']')
    start = timestamp.start

    parts = [f"{start:%Y-%m-%d}", WEEKDAYS[start.weekday()]]
    if timestamp.has_time() or timestamp.end is not None:
        time_part = f"{start:%H:%M}"
        if timestamp.end is not None:
            time_part += f"-{timestamp.end:%H:%M}"
        parts.append(time_part)
    if timestamp.interval:
        parts.append(timestamp.interval)

    text = f"{opener}{' '.join(parts)}{closer}"
    if timestamp.plan is not OrgDatePlan.PLAIN:
        text = f"{timestamp.plan.name}: {text}"
    return text


def timestamp_from_argument(value: str, plan: OrgDatePlan) -> OrgDateTime:
    """
    Build a schedule criterion from a command line value.

    Accepts a bare `YYYY-MM-DD[ HH:MM]` or a bracketed timestamp; the given
    plan always wins over a label inside the value.

    Raises:
        TimestampParseError: If the value is not a valid timestamp
    """
    text = value.strip()
    if is_timestamp_line(text):
        text = text.split(':', 1)[1].strip()
    if not text.startswith(('<', '[')):
        text = f"<{text}>"

    parsed = parse_org_timestamp(text)
    return parsed.model_copy(update={'plan': plan})


def try_parse_org_timestamp(line: str) -> Optional[OrgDateTime]:
    """Parse a timestamp, returning None instead of raising on malformed input."""
    try:
        return parse_org_timestamp(line)
    except TimestampParseError as e:
        logger.debug(f"Ignoring timestamp: {e.message}")
        return None
