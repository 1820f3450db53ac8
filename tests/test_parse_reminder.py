import json
import pathlib
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from reminder_parser.models import ParseResult
from reminder_parser.parser import parse_reminder

SCENARIOS = json.loads(
    (pathlib.Path(__file__).parent / 'reminder_scenarios.json').read_text(encoding='utf-8')
)
SCENARIO_NOW = datetime.fromisoformat(SCENARIOS['now'])


@pytest.mark.parametrize("item", SCENARIOS['items'], ids=lambda it: it['text'])
def test_scenarios(item):
    result = parse_reminder(item['text'], SCENARIO_NOW)
    assert result.title == item['title']
    expected = datetime.fromisoformat(item['date']) if item['date'] else None
    assert result.date == expected
    assert result.recurrence.type == item['type']


def test_recurrence_details_for_weekly(now):
    result = parse_reminder("Team standup every Friday", now)
    assert result.recurrence.by_day == 'FR'
    assert result.recurrence.needs_end_date is True


def test_birthday_has_no_date(now):
    result = parse_reminder("Mom's birthday", now)
    assert result.date is None
    assert result.recurrence.is_birthday is True
    assert result.recurrence.needs_end_date is False


def test_recurrence_with_until_and_no_date(now):
    result = parse_reminder("weekly sync until June 30", now)
    assert result.title == "Sync"
    assert result.date is None
    assert result.recurrence.type == 'weekly'
    assert result.recurrence.until_date is not None
    assert result.recurrence.needs_end_date is False


def test_negation_never_reaches_the_title(now):
    result = parse_reminder("not today, but tomorrow, check in with Raj", now)
    assert "not" not in result.title.lower().split()
    assert result.date.date() != now.date()


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_text_is_rejected(text, now):
    with pytest.raises(ValueError):
        parse_reminder(text, now)


def test_title_is_never_empty(now):
    result = parse_reminder("tomorrow at 3pm", now)
    assert result.title == "tomorrow at 3pm"
    assert result.date == datetime(2026, 10, 13, 15, 0)


def test_aware_now_keeps_its_timezone(now):
    tz = ZoneInfo('America/New_York')
    result = parse_reminder("Team standup every Friday", now.replace(tzinfo=tz))
    assert result.date == datetime(2026, 10, 16, 8, 0, tzinfo=tz)


def test_real_clock_used_without_now():
    result = parse_reminder("Team standup every Friday")
    assert result.date.tzinfo is not None
    assert result.date > datetime.now(result.date.tzinfo)


def test_results_are_frozen(now):
    result = parse_reminder("Call mom tomorrow at 3pm", now)
    assert isinstance(result, ParseResult)
    with pytest.raises(ValidationError):
        result.title = "something else"


def test_parsing_is_safe_across_threads(now):
    texts = [item['text'] for item in SCENARIOS['items']] * 3
    sequential = [parse_reminder(t, now) for t in texts]
    with ThreadPoolExecutor(max_workers=4) as pool:
        concurrent = list(pool.map(lambda t: parse_reminder(t, now), texts))
    assert concurrent == sequential


def test_until_date_is_the_date_of_a_one_off_reminder(now):
    result = parse_reminder("Don't reply until Friday", now)
    assert result.recurrence.type == 'none'
    assert result.date == datetime(2026, 10, 16, 8, 0)
    assert result.title == "Don't reply"


def test_until_still_ends_a_recurrence(now):
    result = parse_reminder("Yoga every Monday until Friday", now)
    assert result.date == datetime(2026, 10, 19, 8, 0)
    assert result.recurrence.until_date is not None


def test_malformed_meridiem_is_cut_from_the_title(now):
    result = parse_reminder("Dinner 7 :PM tomorrow", now)
    assert result.title == "Dinner"
    assert result.date == datetime(2026, 10, 13, 19, 0)


def test_invalid_unicode_does_not_escape(now):
    result = parse_reminder("\ud800 tomorrow call", now)
    assert isinstance(result, ParseResult)
    assert "\ud800" not in result.title
    assert result.date == datetime(2026, 10, 13, 8, 0)
