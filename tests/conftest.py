import pathlib
import sys
from datetime import datetime

import pytest

# Make the project importable when pytest runs from a checkout without an
# editable install.
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from reminder_parser import config  # noqa: E402

# Reference "now" shared by the tests: Monday 12 October 2026, 10:00 local.
FIXED_NOW = datetime(2026, 10, 12, 10, 0)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Pin config values so a developer's environment can't change results."""
    monkeypatch.setattr(config, 'DEFAULT_TIMEZONE', 'UTC')
    monkeypatch.setattr(config, 'DEFAULT_REMINDER_HOUR', 8)
    monkeypatch.setattr(config, 'ASSUME_PM_FOR_BARE_HOURS', True)
    monkeypatch.setattr(config, 'AMBIGUOUS_PM_MAX_HOUR', 7)
    monkeypatch.setattr(config, 'PARSER_LANGUAGES', ['en'])


# Tests that should not depend on dateparser's search behaviour can swap in a
# deterministic phrase table:
#
#     def test_x(fake_date_search):
#         fake_date_search({'next friday': datetime(2026, 10, 16)})
#
@pytest.fixture
def fake_date_search(monkeypatch):
    from reminder_parser import datetime_extract

    def install(table: dict):
        def _search(text, now):
            lowered = text.lower()
            hits = [(phrase, dt) for phrase, dt in table.items() if phrase.lower() in lowered]
            hits.sort(key=lambda hit: lowered.find(hit[0].lower()))
            return hits
        monkeypatch.setattr(datetime_extract, 'search_date_phrases', _search)
    return install
