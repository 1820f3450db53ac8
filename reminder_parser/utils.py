import calendar
import logging
from datetime import date, datetime, timedelta, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import dateparser
import dateparser.search

from . import config

logger = logging.getLogger(__name__)

# Weekday spellings accepted after recurrence keywords ("every thurs").
# Values are Python weekday numbers (Monday == 0).
WEEKDAY_NUMBERS = {
    'monday': 0, 'mon': 0,
    'tuesday': 1, 'tues': 1, 'tue': 1,
    'wednesday': 2, 'wed': 2,
    'thursday': 3, 'thurs': 3, 'thur': 3, 'thu': 3,
    'friday': 4, 'fri': 4,
    'saturday': 5, 'sat': 5,
    'sunday': 6, 'sun': 6,
}

WEEKDAY_CODES = ('MO', 'TU', 'WE', 'TH', 'FR', 'SA', 'SU')

WEEKDAY_NAMES = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')

MONTH_NAMES = (
    'january', 'february', 'march', 'april', 'may', 'june',
    'july', 'august', 'september', 'october', 'november', 'december',
)

# Regex alternation of weekday spellings, longest first so 'thursday' wins
# over 'thu'.
WEEKDAY_PATTERN = '(?:' + '|'.join(sorted(WEEKDAY_NUMBERS, key=len, reverse=True)) + ')'
FULL_WEEKDAY_PATTERN = '(?:' + '|'.join(n.lower() for n in WEEKDAY_NAMES) + ')'
MONTH_PATTERN = '(?:' + '|'.join(MONTH_NAMES) + ')'
MONTH_ABBR_PATTERN = (
    r'(?:jan|feb|mar|apr|may|jun|jul|aug|sept?|oct|nov|dec)\.?'
)

ORDINAL_POSITIONS = {
    'first': 1, '1st': 1,
    'second': 2, '2nd': 2,
    'third': 3, '3rd': 3,
    'fourth': 4, '4th': 4,
    'last': -1,
}


def weekday_code(name: str) -> str:
    """Return the two-letter RRULE code ('MO'..'SU') for a weekday spelling."""
    return WEEKDAY_CODES[WEEKDAY_NUMBERS[name.lower()]]


def resolve_now(now: datetime | None = None) -> datetime:
    """Return the reference instant for relative date math.

    A caller-supplied ``now`` is used as-is (naive values are treated as local
    wall time). Otherwise the real clock is read in DEFAULT_TIMEZONE.
    """
    if now is not None:
        return now
    try:
        tz = ZoneInfo(config.DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning('unknown DEFAULT_TIMEZONE %r, falling back to UTC', config.DEFAULT_TIMEZONE)
        tz = ZoneInfo('UTC')
    return datetime.now(tz)


def at_hour(day: date, now: datetime, hour: int | None = None, minute: int = 0) -> datetime:
    """Build a datetime on ``day`` in the same timezone as ``now``."""
    if hour is None:
        hour = config.DEFAULT_REMINDER_HOUR
    return datetime.combine(day, time(hour, minute), tzinfo=now.tzinfo)


def add_months(year: int, month: int, n: int = 1) -> tuple[int, int]:
    idx = year * 12 + (month - 1) + n
    return idx // 12, idx % 12 + 1


def next_weekday(weekday: int, now: datetime) -> datetime:
    """Next occurrence of ``weekday`` strictly after today, at the default hour.

    When today is already that weekday the result is a week away.
    """
    days_until = (weekday - now.weekday()) % 7
    if days_until == 0:
        days_until = 7
    return at_hour(now.date() + timedelta(days=days_until), now)


def nth_weekday_in_month(year: int, month: int, weekday: int, position: int) -> date:
    """Return the Nth (1-4) or last (-1) ``weekday`` of a month."""
    if position == -1:
        last_day = calendar.monthrange(year, month)[1]
        last = date(year, month, last_day)
        return last - timedelta(days=(last.weekday() - weekday) % 7)
    first = date(year, month, 1)
    first_occurrence = 1 + (weekday - first.weekday()) % 7
    return date(year, month, first_occurrence + (position - 1) * 7)


def next_nth_weekday_of_month(weekday: int, position: int, now: datetime) -> datetime:
    """First month-position occurrence after today, checking this month then the next."""
    candidate = nth_weekday_in_month(now.year, now.month, weekday, position)
    if candidate <= now.date():
        year, month = add_months(now.year, now.month)
        candidate = nth_weekday_in_month(year, month, weekday, position)
    return at_hour(candidate, now)


def next_month_day(day: int, now: datetime, hour: int | None = None, minute: int = 0,
                   same_day: bool = False) -> datetime:
    """Next date whose day-of-month is ``day``.

    By default the date is strictly after today. With ``same_day`` today still
    counts while the requested time has not passed yet. Months that lack the
    day (31 in April) are skipped, the way an RRULE BYMONTHDAY expands.
    """
    year, month = now.year, now.month
    for _ in range(13):
        if day <= calendar.monthrange(year, month)[1]:
            candidate = at_hour(date(year, month, day), now, hour, minute)
            if same_day:
                if candidate > now:
                    return candidate
            elif candidate.date() > now.date():
                return candidate
        year, month = add_months(year, month)
    raise ValueError(f'day of month out of range: {day}')


def tomorrow_at_default_hour(now: datetime) -> datetime:
    return at_hour(now.date() + timedelta(days=1), now)


def grammar_settings(now: datetime, **overrides) -> dict:
    """dateparser settings anchored at ``now``.

    dateparser works on naive wall time here; callers re-attach ``now``'s
    tzinfo to whatever comes back.
    """
    settings = {
        'RELATIVE_BASE': now.replace(tzinfo=None),
        'PREFER_DATES_FROM': 'future',
        'RETURN_AS_TIMEZONE_AWARE': False,
    }
    settings.update(overrides)
    return settings


def parse_date_phrase(phrase: str, now: datetime, **overrides) -> datetime | None:
    """Parse a short, self-contained date phrase ("Dec 2026", "next friday").

    Returns None when the grammar finds nothing or fails on odd input.
    """
    if not phrase or not phrase.strip():
        return None
    try:
        dt = dateparser.parse(
            phrase,
            languages=config.PARSER_LANGUAGES,
            settings=grammar_settings(now, **overrides),
        )
    except Exception:
        logger.exception('dateparser failed on phrase %r', phrase)
        return None
    if dt is None:
        return None
    return dt.replace(tzinfo=now.tzinfo)


def search_date_phrases(text: str, now: datetime) -> list[tuple[str, datetime]]:
    """Find every date expression in free text as (matched substring, datetime)."""
    if not text or not text.strip():
        return []
    try:
        results = dateparser.search.search_dates(
            text,
            languages=config.PARSER_LANGUAGES,
            settings=grammar_settings(now),
        )
    except Exception:
        logger.exception('dateparser search failed on %r', text)
        return []
    return [(matched, dt.replace(tzinfo=now.tzinfo)) for matched, dt in (results or [])]
