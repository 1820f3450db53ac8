import logging
from datetime import datetime

from .datetime_extract import (
    date_for_day_of_month,
    disambiguate_hour,
    extract_date_time,
    extract_day_of_month,
    find_time_token,
)
from .models import ParseResult
from .preprocess import preprocess
from .recurrence import detect_recurrence, strip_recurrence_phrases
from .title import extract_title
from .utils import resolve_now

logger = logging.getLogger(__name__)


def _clean_unicode(text: str) -> str:
    # lone surrogates (bad decoding upstream) can't be encoded or validated
    cleaned = text.encode('utf-8', 'replace').decode('utf-8')
    if cleaned != text:
        logger.warning('replaced invalid characters in reminder text')
    return cleaned


def _explicit_time(text: str, recurring: bool) -> tuple[int, int, str] | None:
    """(hour, minute, matched text) of a clock time written in ``text``."""
    if recurring:
        text = strip_recurrence_phrases(text)
    token = find_time_token(preprocess(text))
    if token is None:
        return None
    return disambiguate_hour(token.hour, token.explicit_meridiem), token.minute, token.text.strip()


def parse_reminder(text: str, now: datetime | None = None) -> ParseResult:
    """Parse free-form reminder text into a title, a first occurrence and a recurrence.

    Stages run in a fixed order: the recurrence detector first (a date it
    computes wins), then the "on the 15th" day-of-month shortcut, then the
    generic date grammar. The title is always cut from the original text.
    ``date`` is None when nothing in the text resolves to a date.
    """
    if text is None or not text.strip():
        raise ValueError('reminder text is empty')
    text = _clean_unicode(text)
    now = resolve_now(now)

    recurrence = detect_recurrence(text, now)
    recurring = recurrence.is_recurring
    matched: tuple[str, ...] = ()
    date = None

    if recurrence.calculated_date is not None:
        date = recurrence.calculated_date
        clock = _explicit_time(text, recurring)
        if clock is not None:
            hour, minute, token_text = clock
            date = date.replace(hour=hour, minute=minute)
            matched = (token_text,)
        logger.debug('using date computed by recurrence detector: %s', date)
    else:
        day = extract_day_of_month(text)
        if day is not None:
            clock = _explicit_time(text, recurring)
            if clock is not None:
                hour, minute, token_text = clock
                date = date_for_day_of_month(day, now, hour, minute)
                matched = (token_text,)
            else:
                date = date_for_day_of_month(day, now)
            logger.debug('using day-of-month shortcut: %s', date)
        else:
            # "until" only marks an end date when something repeats
            found = extract_date_time(text, now, strip_recurrence=recurring)
            if found is not None:
                date = found.date
                matched = found.matched_text
                logger.debug('generic extractor matched %r -> %s', matched, date)

    return ParseResult(
        title=extract_title(text, matched, recurring=recurring),
        date=date,
        recurrence=recurrence,
    )
