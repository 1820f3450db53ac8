"""Detect repeat patterns in reminder text.

Patterns are tried in a fixed priority order (``RECURRENCE_RULES``) and the
first one that matches wins. The order is narrowest first: a birthday beats
"every week", "every other Monday" must be seen before a plain weekly
keyword, and so on. Tests pin this order.

For patterns a generic date grammar gets wrong ("last Saturday of the
month", "day 20 of the month") the first occurrence is computed here and
returned as ``calculated_date``.
"""
import logging
import re
from collections import namedtuple
from datetime import datetime

from .models import RecurrenceInfo
from .utils import (
    ORDINAL_POSITIONS,
    WEEKDAY_NUMBERS,
    WEEKDAY_PATTERN,
    next_month_day,
    next_nth_weekday_of_month,
    next_weekday,
    parse_date_phrase,
    resolve_now,
    tomorrow_at_default_hour,
    weekday_code,
)

logger = logging.getLogger(__name__)

BIRTHDAY_RE = re.compile(r'\b(?:birthday|bday|b-day)\b', re.IGNORECASE)
ANNIVERSARY_RE = re.compile(r'\b(?:anniversary|anniversaries)\b', re.IGNORECASE)

# "until" clause runs to the end of the text or the next , . ;
UNTIL_RE = re.compile(r'\buntil\s+(.+?)\s*(?=$|[,.;])', re.IGNORECASE)

EVERY_WEEKDAY_RE = re.compile(r'\bevery\s+(' + WEEKDAY_PATTERN + r')s?\b', re.IGNORECASE)
ALTERNATING_WEEKDAY_RE = re.compile(
    r'\b(?:alternat(?:e|ing)\s+|every\s+other\s+|every\s+(?:2|two)\s+weeks?\s+(?:on\s+)?)'
    r'(' + WEEKDAY_PATTERN + r')s?\b',
    re.IGNORECASE,
)
MONTH_POSITION_RE = re.compile(
    r'\b(' + '|'.join(ORDINAL_POSITIONS) + r')\s+(' + WEEKDAY_PATTERN + r')s?\s+'
    r'(?:of|in)\s+(?:the\s+|each\s+|every\s+)?month\b',
    re.IGNORECASE,
)
MONTH_DAY_RE = re.compile(
    r'\bday\s+(\d{1,2})\s+of\s+(?:the\s+|each\s+|every\s+)?month\b'
    r'|\b(\d{1,2})(?:st|nd|rd|th)?\s+of\s+(?:every|each)\s+month\b'
    r'|\b(?:every\s+month|monthly)\s+on\s+(?:the\s+)?(\d{1,2})(?:st|nd|rd|th)?\b',
    re.IGNORECASE,
)
YEARLY_RE = re.compile(r'\b(?:every\s+year|yearly|annual|annually)\b', re.IGNORECASE)
MONTHLY_RE = re.compile(r'\b(?:every\s+month|monthly)\b', re.IGNORECASE)
WEEKLY_RE = re.compile(r'\b(?:every\s+week|weekly)\b', re.IGNORECASE)
DAILY_RE = re.compile(r'\b(?:every\s*day|daily)\b', re.IGNORECASE)

RecurrenceRule = namedtuple('RecurrenceRule', ['name', 'pattern', 'handler'])


def parse_until_date(text: str, now: datetime | None = None) -> datetime | None:
    """Parse the end date named by an "until ..." clause, if any.

    The date resolves to the last second of the named day; a month-only phrase
    ("until Dec 2026") means the last day of that month.
    """
    m = UNTIL_RE.search(text or '')
    if not m:
        return None
    now = resolve_now(now)
    dt = parse_date_phrase(m.group(1), now, PREFER_DAY_OF_MONTH='last')
    if dt is None:
        logger.debug('could not parse until clause %r', m.group(1))
        return None
    return dt.replace(hour=23, minute=59, second=59, microsecond=0)


def _special_occasion(m: re.Match, until_date, now) -> RecurrenceInfo:
    # until clauses never apply: birthdays and anniversaries repeat forever
    is_birthday = bool(BIRTHDAY_RE.search(m.string))
    return RecurrenceInfo(
        type='yearly',
        is_birthday=is_birthday,
        is_anniversary=not is_birthday,
        needs_end_date=False,
    )


def _every_weekday(m: re.Match, until_date, now) -> RecurrenceInfo:
    name = m.group(1)
    return RecurrenceInfo(
        type='weekly',
        needs_end_date=until_date is None,
        by_day=weekday_code(name),
        until_date=until_date,
        calculated_date=next_weekday(WEEKDAY_NUMBERS[name.lower()], now),
    )


def _alternating_weekday(m: re.Match, until_date, now) -> RecurrenceInfo:
    # TODO: anchor the alternation to a stored creation date so two reminders
    # for "alternating Mondays" created a week apart share a cadence.
    name = m.group(1)
    return RecurrenceInfo(
        type='weekly',
        needs_end_date=until_date is None,
        interval=2,
        by_day=weekday_code(name),
        until_date=until_date,
        calculated_date=next_weekday(WEEKDAY_NUMBERS[name.lower()], now),
    )


def _month_position(m: re.Match, until_date, now) -> RecurrenceInfo:
    position = ORDINAL_POSITIONS[m.group(1).lower()]
    name = m.group(2)
    return RecurrenceInfo(
        type='monthly',
        needs_end_date=until_date is None,
        by_day=weekday_code(name),
        by_set_pos=position,
        until_date=until_date,
        calculated_date=next_nth_weekday_of_month(WEEKDAY_NUMBERS[name.lower()], position, now),
    )


def _month_day(m: re.Match, until_date, now) -> RecurrenceInfo | None:
    day = int(next(g for g in m.groups() if g))
    if not 1 <= day <= 31:
        return None
    return RecurrenceInfo(
        type='monthly',
        needs_end_date=until_date is None,
        by_month_day=day,
        until_date=until_date,
        calculated_date=next_month_day(day, now),
    )


def _keyword(kind: str):
    def handler(m: re.Match, until_date, now) -> RecurrenceInfo:
        return RecurrenceInfo(
            type=kind,
            needs_end_date=until_date is None,
            until_date=until_date,
            calculated_date=tomorrow_at_default_hour(now) if kind == 'daily' else None,
        )
    return handler


_SPECIAL_OCCASION_RE = re.compile(
    BIRTHDAY_RE.pattern + '|' + ANNIVERSARY_RE.pattern, re.IGNORECASE
)

RECURRENCE_RULES = (
    RecurrenceRule('special_occasion', _SPECIAL_OCCASION_RE, _special_occasion),
    RecurrenceRule('every_weekday', EVERY_WEEKDAY_RE, _every_weekday),
    RecurrenceRule('alternating_weekday', ALTERNATING_WEEKDAY_RE, _alternating_weekday),
    RecurrenceRule('month_position', MONTH_POSITION_RE, _month_position),
    RecurrenceRule('month_day', MONTH_DAY_RE, _month_day),
    RecurrenceRule('yearly', YEARLY_RE, _keyword('yearly')),
    RecurrenceRule('monthly', MONTHLY_RE, _keyword('monthly')),
    RecurrenceRule('weekly', WEEKLY_RE, _keyword('weekly')),
    RecurrenceRule('daily', DAILY_RE, _keyword('daily')),
)

# Phrases that describe the repeat rather than the task. Removed from the
# title and from the text handed to the generic date grammar.
RECURRENCE_PHRASE_PATTERNS = (
    UNTIL_RE,
    MONTH_POSITION_RE,
    MONTH_DAY_RE,
    ALTERNATING_WEEKDAY_RE,
    EVERY_WEEKDAY_RE,
    YEARLY_RE,
    MONTHLY_RE,
    WEEKLY_RE,
    DAILY_RE,
)


def strip_recurrence_phrases(text: str) -> str:
    for pattern in RECURRENCE_PHRASE_PATTERNS:
        text = pattern.sub(' ', text)
    return re.sub(r'\s{2,}', ' ', text).strip()


def detect_recurrence(text: str, now: datetime | None = None) -> RecurrenceInfo:
    """Return the recurrence described by ``text``.

    A ``type='none'`` record comes back when nothing matches.
    """
    if not text:
        return RecurrenceInfo()
    now = resolve_now(now)
    until_date = parse_until_date(text, now)
    for rule in RECURRENCE_RULES:
        m = rule.pattern.search(text)
        if not m:
            continue
        info = rule.handler(m, until_date, now)
        if info is not None:
            logger.debug('recurrence rule %s matched %r', rule.name, m.group(0))
            return info
    return RecurrenceInfo()
