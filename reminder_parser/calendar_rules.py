"""Turn a RecurrenceInfo into calendar recurrence rules and back.

``recurrence_to_rrule_string`` produces the RFC 5545 RRULE body (no leading
'RRULE:') a calendar API expects; ``build_rrule`` gives a dateutil rrule for
expanding occurrences locally.
"""
import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from dateutil import rrule as _rrule

from . import config
from .models import RecurrenceInfo
from .utils import WEEKDAY_CODES, WEEKDAY_NAMES

logger = logging.getLogger(__name__)

FREQ_BY_TYPE = {
    'yearly': 'YEARLY',
    'monthly': 'MONTHLY',
    'weekly': 'WEEKLY',
    'daily': 'DAILY',
}
TYPE_BY_FREQ = {v: k for k, v in FREQ_BY_TYPE.items()}

_DATEUTIL_FREQ = {
    'YEARLY': _rrule.YEARLY,
    'MONTHLY': _rrule.MONTHLY,
    'WEEKLY': _rrule.WEEKLY,
    'DAILY': _rrule.DAILY,
}
_DATEUTIL_WEEKDAY = {
    'MO': _rrule.MO, 'TU': _rrule.TU, 'WE': _rrule.WE, 'TH': _rrule.TH,
    'FR': _rrule.FR, 'SA': _rrule.SA, 'SU': _rrule.SU,
}

_POSITION_NAMES = {1: 'first', 2: 'second', 3: 'third', 4: 'fourth', -1: 'last'}


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo(config.DEFAULT_TIMEZONE))
    return dt.astimezone(timezone.utc)


def _sends_until(info: RecurrenceInfo) -> bool:
    return info.until_date is not None and not (info.is_birthday or info.is_anniversary)


def recurrence_to_rrule_string(info: RecurrenceInfo) -> str:
    """Export a recurrence as an RRULE value, e.g. 'FREQ=MONTHLY;BYDAY=-1SA'.

    INTERVAL is only written when greater than 1; UNTIL is a bare UTC
    timestamp and is never written for birthdays or anniversaries. Returns ''
    for a non-recurring record.
    """
    if not info.is_recurring:
        return ''
    parts = [f'FREQ={FREQ_BY_TYPE[info.type]}']
    if info.interval and info.interval > 1:
        parts.append(f'INTERVAL={info.interval}')
    if info.by_day:
        prefix = str(info.by_set_pos) if info.by_set_pos is not None else ''
        parts.append(f'BYDAY={prefix}{info.by_day}')
    if info.by_month_day is not None:
        parts.append(f'BYMONTHDAY={info.by_month_day}')
    if _sends_until(info):
        parts.append('UNTIL=' + _as_utc(info.until_date).strftime('%Y%m%dT%H%M%SZ'))
    return ';'.join(parts)


def rrule_string_to_recurrence(rule: str) -> RecurrenceInfo:
    """Read an RRULE value back into a RecurrenceInfo.

    Accepts an optional 'RRULE:' prefix and either a signed BYDAY ('-1SA') or
    BYDAY plus BYSETPOS. Raises ValueError for an unsupported FREQ.
    """
    body = (rule or '').strip()
    if body.upper().startswith('RRULE:'):
        body = body[len('RRULE:'):]
    if not body:
        return RecurrenceInfo()
    fields = {}
    for part in body.split(';'):
        if '=' not in part:
            continue
        key, value = part.split('=', 1)
        fields[key.strip().upper()] = value.strip()

    freq = fields.get('FREQ', '').upper()
    if freq not in TYPE_BY_FREQ:
        raise ValueError(f'unsupported FREQ: {freq!r}')

    by_day = None
    by_set_pos = None
    if 'BYDAY' in fields:
        days = fields['BYDAY'].split(',')
        if len(days) > 1:
            logger.debug('keeping only the first BYDAY value of %r', fields['BYDAY'])
        day = days[0].upper()
        by_day = day[-2:]
        if len(day) > 2:
            by_set_pos = int(day[:-2])
    if 'BYSETPOS' in fields:
        by_set_pos = int(fields['BYSETPOS'])

    until_date = None
    if 'UNTIL' in fields:
        raw = fields['UNTIL'].rstrip('Z')
        fmt = '%Y%m%dT%H%M%S' if 'T' in raw else '%Y%m%d'
        until_date = datetime.strptime(raw, fmt).replace(tzinfo=timezone.utc)

    interval = int(fields['INTERVAL']) if 'INTERVAL' in fields else None
    return RecurrenceInfo(
        type=TYPE_BY_FREQ[freq],
        needs_end_date=until_date is None,
        interval=interval if interval and interval > 1 else None,
        by_day=by_day,
        by_month_day=int(fields['BYMONTHDAY']) if 'BYMONTHDAY' in fields else None,
        by_set_pos=by_set_pos,
        until_date=until_date,
    )


def recurrence_to_rrule_params(info: RecurrenceInfo, tzinfo=None) -> dict:
    """Keyword arguments for ``dateutil.rrule.rrule``.

    ``tzinfo`` is the timezone of the intended DTSTART; UNTIL is converted to
    match it since dateutil refuses a mix of naive and aware values.
    """
    if not info.is_recurring:
        return {}
    params: dict = {'freq': _DATEUTIL_FREQ[FREQ_BY_TYPE[info.type]]}
    if info.interval:
        params['interval'] = info.interval
    if info.by_day:
        wd = _DATEUTIL_WEEKDAY[info.by_day]
        params['byweekday'] = (wd(info.by_set_pos) if info.by_set_pos is not None else wd,)
    if info.by_month_day is not None:
        params['bymonthday'] = info.by_month_day
    if _sends_until(info):
        until = _as_utc(info.until_date)
        if tzinfo is None:
            until = until.astimezone(ZoneInfo(config.DEFAULT_TIMEZONE)).replace(tzinfo=None)
        else:
            until = until.astimezone(tzinfo)
        params['until'] = until
    return params


def build_rrule(info: RecurrenceInfo, dtstart: datetime):
    """dateutil rrule for ``info`` anchored at ``dtstart`` (usually the parsed date)."""
    return _rrule.rrule(dtstart=dtstart, **recurrence_to_rrule_params(info, dtstart.tzinfo))


def describe_recurrence(info: RecurrenceInfo) -> str:
    """Short human description, e.g. 'last Saturday of every month'."""
    if not info.is_recurring:
        return ''
    day = WEEKDAY_NAMES[WEEKDAY_CODES.index(info.by_day)] if info.by_day else None
    if info.by_set_pos is not None and day:
        return f'{_POSITION_NAMES[info.by_set_pos]} {day} of every month'
    if info.by_month_day is not None:
        return f'day {info.by_month_day} of every month'
    if info.interval and info.interval > 1 and day:
        return f'every {info.interval} weeks on {day}'
    if day:
        return f'every {day}'
    if info.is_birthday:
        return 'every year (birthday)'
    if info.is_anniversary:
        return 'every year (anniversary)'
    return info.type
