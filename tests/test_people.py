import pytest

from reminder_parser.people import detect_names, primary_detected_name


@pytest.mark.parametrize(
    "text,name",
    [
        ("Call mom tomorrow", "Mom"),
        ("Dad's birthday", "Dad"),
        ("Lunch with grandma on Sunday", "Grandma"),
    ],
)
def test_relationship_terms_are_high_confidence(text, name):
    found = primary_detected_name(text)
    assert found.name == name
    assert found.confidence == 'high'
    assert found.source == 'relationship'


def test_proper_names_are_medium_confidence():
    names = detect_names("Lunch with Sarah on Friday")
    assert [(n.name, n.confidence) for n in names] == [("Sarah", "medium")]


def test_relationship_sorted_before_proper_names():
    names = detect_names("Pick up Sarah and mom from the station")
    assert [n.name for n in names] == ["Mom", "Sarah"]


def test_possessive_proper_name():
    assert primary_detected_name("Sarah's anniversary").name == "Sarah"


def test_sentence_start_needs_context():
    # "Water" opens the sentence and has no context word around it
    assert detect_names("Water the plants") == []


def test_calendar_words_are_not_names():
    assert detect_names("Meeting on Monday in March") == []


def test_no_duplicates():
    names = detect_names("Call Mom, then call mom again")
    assert [n.name for n in names] == ["Mom"]


def test_nothing_found():
    assert primary_detected_name("buy milk") is None
    assert detect_names("") == []
