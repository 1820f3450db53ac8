import pytest

from reminder_parser.title import extract_title

TITLE_CASES = [
    ("Call mom tomorrow at 3pm", "Call mom"),
    ("Call dentist at 3pm tomorrow", "Call dentist"),
    ("Team standup every Friday", "Team standup"),
    ("Team standup every Friday at 10am", "Team standup"),
    ("last Saturday of the month brunch", "Brunch"),
    ("Remind me to pay rent on the 1st", "Pay rent"),
    ("Pay rent on 1st", "Pay rent"),
    ("Tomorrow is Mom's birthday", "Mom's birthday"),
    ("Sarah's anniversary on June 20 yearly", "Sarah's anniversary"),
    ("not today, but tomorrow, check in with Raj", "Check in with Raj"),
    ("Don't forget to water plants every day", "Water plants"),
    ("Meeting is on Friday at 10am", "Meeting"),
    ("Dentist on March 5", "Dentist"),
    ("Report due 10/15/2026", "Report due"),
    ("Therapy alternating Mondays until Dec 2026", "Therapy"),
    ("Book club day 20 of the month", "Book club"),
    ("renew passport", "Renew passport"),
]


@pytest.mark.parametrize("text,expected", TITLE_CASES)
def test_extract_title(text, expected):
    assert extract_title(text) == expected


@pytest.mark.parametrize("text,_expected", TITLE_CASES)
def test_title_is_stable_under_a_second_pass(text, _expected):
    once = extract_title(text)
    assert extract_title(once) == once


def test_matched_spans_are_removed_first():
    assert extract_title("Lunch with Sam sometime soonish", ["sometime soonish"]) == "Lunch with Sam"


def test_matched_span_removal_is_case_insensitive():
    assert extract_title("TOMORROW buy bread", ["tomorrow"]) == "Buy bread"


def test_falls_back_to_raw_text_when_nothing_left():
    assert extract_title("tomorrow at 3pm") == "tomorrow at 3pm"
    assert extract_title("every Friday") == "every Friday"


def test_negation_word_not_left_behind():
    title = extract_title("not today, but tomorrow, check in with Raj")
    assert "not" not in title.lower().split()


@pytest.mark.parametrize(
    "text",
    ["Dinner 7:PM", "Dinner 7 :PM", "Dinner at 7: PM", "Standup 9 : am"],
)
def test_malformed_meridiem_times_are_removed(text):
    assert extract_title(text) in ("Dinner", "Standup")


def test_one_off_title_keeps_until_wording():
    assert extract_title("Wait until tomorrow to call Bob", ["tomorrow"], recurring=False) == "Wait to call Bob"
    assert extract_title("Don't reply until Friday", ["Friday"], recurring=False) == "Don't reply"
    assert extract_title("Stay until the end", recurring=False) == "Stay until the end"
