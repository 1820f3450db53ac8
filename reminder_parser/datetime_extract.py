"""Generic date/time extraction for text the recurrence detector did not resolve.

Clock times are read with local patterns so we always know whether an am/pm
marker was written; everything else (today, next friday, March 5, in 3 days)
goes through dateparser's search. Bare hours are then disambiguated: 1-7
without a marker become afternoon/evening (see ``disambiguate_hour``).
"""
import logging
import re
from collections import namedtuple
from datetime import datetime, timedelta

from . import config
from .models import DateTimeMatch
from .preprocess import preprocess
from .recurrence import strip_recurrence_phrases
from .utils import (
    MONTH_ABBR_PATTERN,
    MONTH_PATTERN,
    at_hour,
    next_month_day,
    resolve_now,
    search_date_phrases,
)

logger = logging.getLogger(__name__)

TimeToken = namedtuple('TimeToken', ['hour', 'minute', 'explicit_meridiem', 'start', 'end', 'text'])

TIME_WITH_MERIDIEM_RE = re.compile(
    r'(?:(?:\bat|@)\s*)?\b(\d{1,2})(?:[:.](\d{2}))?\s*([ap])\.?m\b\.?',
    re.IGNORECASE,
)
TIME_AT_RE = re.compile(
    r'(?:\bat|@)\s*(\d{1,2})(?::(\d{2}))?\b(?!\s*(?:st|nd|rd|th)\b)(?![/.-]\d)',
    re.IGNORECASE,
)
NAMED_TIME_RE = re.compile(r'(?:\bat\s+)?\b(noon|midday|midnight)\b', re.IGNORECASE)

# Spans from dateparser that carry their own clock time ("in 2 hours").
RELATIVE_TIME_RE = re.compile(
    r'\b\d+\s*(?:minutes?|mins?|hours?|hrs?|seconds?|secs?)\b|\b(?:an?|one)\s+(?:hour|minute)\b',
    re.IGNORECASE,
)

# "on 20", "on the 15th", "the 1st" - but not "on 20 March" or "on 5:30"
DAY_OF_MONTH_RE = re.compile(
    r'(?:\bon\s+(?:the\s+)?(\d{1,2})(?:st|nd|rd|th)?|\bthe\s+(\d{1,2})(?:st|nd|rd|th))\b'
    r'(?!\s*(?:of\s+)?(?:' + MONTH_PATTERN + '|' + MONTH_ABBR_PATTERN + r')\b)'
    r'(?![:/.-]\d)(?!\s*[ap]\.?m\b)'
    r'(?!\s*(?:minutes?|mins?|hours?|hrs?|days?|weeks?|months?|years?)\b)',
    re.IGNORECASE,
)

NUMBER_WORDS = {
    'zero', 'one', 'two', 'three', 'four', 'five', 'six', 'seven', 'eight',
    'nine', 'ten', 'eleven', 'twelve',
}

# Single tokens dateparser will happily read as dates but which are usually
# ordinary words in reminder text.
AMBIGUOUS_TOKENS = {
    'now', 'second', 'sec', 'min', 'mon', 'tue', 'wed', 'thu', 'fri', 'sat', 'sun',
    'a', 'an', 'at', 'on', 'in', 'to', 'by',
}


def find_time_token(text: str) -> TimeToken | None:
    """Return the first explicit clock time in ``text``."""
    for pattern in (TIME_WITH_MERIDIEM_RE, TIME_AT_RE, NAMED_TIME_RE):
        for m in pattern.finditer(text):
            token = _time_token(m, pattern)
            if token is not None:
                return token
    return None


def _time_token(m: re.Match, pattern) -> TimeToken | None:
    if pattern is NAMED_TIME_RE:
        hour = 0 if m.group(1).lower() == 'midnight' else 12
        return TimeToken(hour, 0, True, m.start(), m.end(), m.group(0))
    hour = int(m.group(1))
    minute = int(m.group(2) or 0)
    if minute > 59:
        return None
    if pattern is TIME_WITH_MERIDIEM_RE:
        if not 1 <= hour <= 12:
            return None
        if m.group(3).lower() == 'p' and hour != 12:
            hour += 12
        elif m.group(3).lower() == 'a' and hour == 12:
            hour = 0
        return TimeToken(hour, minute, True, m.start(), m.end(), m.group(0))
    if hour > 23:
        return None
    return TimeToken(hour, minute, False, m.start(), m.end(), m.group(0))


def disambiguate_hour(hour: int, explicit_meridiem: bool) -> int:
    """Resolve a bare hour with no am/pm marker.

    This is a heuristic, not a rule: reminders are rarely wanted between 1am
    and 7am, so hours 1..AMBIGUOUS_PM_MAX_HOUR move to the afternoon/evening
    (7 -> 19:00). 8-11 stay morning; 12 and 24h values are left alone.
    """
    if explicit_meridiem or not config.ASSUME_PM_FOR_BARE_HOURS:
        return hour
    # 12 and above would leave the day
    if 1 <= hour <= min(config.AMBIGUOUS_PM_MAX_HOUR, 11):
        return hour + 12
    return hour


def extract_day_of_month(text: str) -> int | None:
    """Day number from phrases like "on 20", "on the 15th" or "the 1st"."""
    m = DAY_OF_MONTH_RE.search(text or '')
    if not m:
        return None
    day = int(m.group(1) or m.group(2))
    if 1 <= day <= 31:
        return day
    return None


def date_for_day_of_month(day: int, now: datetime | None = None, hour: int | None = None,
                          minute: int = 0) -> datetime:
    """Nearest future datetime on day-of-month ``day`` (default hour unless given)."""
    now = resolve_now(now)
    return next_month_day(day, now, hour, minute, same_day=True)


def _usable_match(phrase: str) -> bool:
    token = phrase.strip()
    if not token:
        return False
    if token.isdigit() or token.lower() in NUMBER_WORDS or token.lower() in AMBIGUOUS_TOKENS:
        return False
    # modal "may" rather than the month
    return token != 'may'


def _first_date_phrase(text: str, now: datetime) -> tuple[str, datetime] | None:
    for phrase, dt in search_date_phrases(text, now):
        if _usable_match(phrase):
            return phrase, dt
        logger.debug('ignoring ambiguous date match %r', phrase)
    return None


def extract_date_time(text: str, now: datetime | None = None,
                      strip_recurrence: bool = True) -> DateTimeMatch | None:
    """Resolve the date/time a reminder text refers to.

    Returns None when no date or time expression is present. Without a stated
    time the result is at DEFAULT_REMINDER_HOUR. A time with no date means
    today, or tomorrow once that time has passed.

    With ``strip_recurrence`` (the default) repeat phrases and "until ..."
    clauses are removed first so an end date is never read as the first
    occurrence. Pass False for text with no recurrence, where "until Friday"
    is the only date given.
    """
    if not text:
        return None
    now = resolve_now(now)
    processed = preprocess(strip_recurrence_phrases(text) if strip_recurrence else text)

    token = find_time_token(processed)
    remainder = processed
    if token is not None:
        remainder = processed[:token.start] + ' ' + processed[token.end:]

    found = _first_date_phrase(remainder, now)
    if found is None and token is None:
        return None

    matched: list[str] = []
    if found is not None:
        phrase, dt = found
        matched.append(phrase)
        if token is None and RELATIVE_TIME_RE.search(phrase):
            return DateTimeMatch(
                date=dt.replace(second=0, microsecond=0),
                matched_text=tuple(matched),
                has_time=True,
            )
        day = dt.date()
    else:
        day = now.date()

    if token is None:
        return DateTimeMatch(date=at_hour(day, now), matched_text=tuple(matched))

    hour = disambiguate_hour(token.hour, token.explicit_meridiem)
    result = at_hour(day, now, hour, token.minute)
    if found is None and result <= now:
        result += timedelta(days=1)
    matched.append(token.text.strip())
    return DateTimeMatch(
        date=result,
        matched_text=tuple(matched),
        has_time=True,
        explicit_meridiem=token.explicit_meridiem,
    )
