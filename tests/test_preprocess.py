import pytest

from reminder_parser.preprocess import normalize_time_tokens, preprocess, strip_negations


@pytest.mark.parametrize(
    "text,expected",
    [
        ("not today, but tomorrow, check in with Raj", "tomorrow, check in with Raj"),
        ("not Monday but Tuesday lunch", "Tuesday lunch"),
        ("Not this week, but next week review budget", "next week review budget"),
        ("not friday saturday hike", "saturday hike"),
    ],
)
def test_negated_day_phrases_are_removed(text, expected):
    assert preprocess(text) == expected


def test_negation_needs_a_day_phrase():
    # "not" on its own is ordinary text
    assert strip_negations("do not forget the keys") == "do not forget the keys"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Dinner at 7:PM", "Dinner at 7PM"),
        ("Dinner 7 :PM", "Dinner 7PM"),
        ("Dinner at 7: pm", "Dinner at 7pm"),
    ],
)
def test_malformed_meridiem_is_fixed(text, expected):
    assert normalize_time_tokens(text) == expected


def test_bare_clock_gets_at_inserted():
    assert preprocess("Meeting 5:00") == "Meeting at 5:00"
    assert preprocess("Standup 9:30am") == "Standup at 9:30am"
    assert preprocess("Meeting at 5:00") == "Meeting at 5:00"


@pytest.mark.parametrize(
    "text",
    [
        "not today, but tomorrow, check in with Raj",
        "Dinner 7 :PM",
        "Meeting 5:00 with team",
        "Call mom tomorrow at 3pm",
        "plain text with nothing to do",
    ],
)
def test_preprocess_is_idempotent(text):
    once = preprocess(text)
    assert preprocess(once) == once
