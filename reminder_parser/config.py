"""Runtime configuration for the reminder parser.

Settings are read from environment variables so behaviour can be tuned per
deployment without code changes. Parser functions look these up at call time,
so tests may monkeypatch them.
"""
import os


def _trueish(v: str | None) -> bool:
    if not v:
        return False
    return v.lower() in ('1', 'true', 'yes', 'on')


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


# IANA timezone used to build "now" when a caller does not pass a reference
# instant. Returned datetimes carry this tzinfo in that case.
DEFAULT_TIMEZONE = os.getenv('DEFAULT_TIMEZONE', 'UTC')

# Hour of day given to reminders whose text names a day but no time.
DEFAULT_REMINDER_HOUR = _int_env('DEFAULT_REMINDER_HOUR', 8)

# Bare hours without am/pm ("at 7") in 1..AMBIGUOUS_PM_MAX_HOUR are read as
# afternoon/evening. People rarely want a reminder at 1am-7am. Set
# ASSUME_PM_FOR_BARE_HOURS=0 to keep the hour exactly as written.
ASSUME_PM_FOR_BARE_HOURS = _trueish(os.getenv('ASSUME_PM_FOR_BARE_HOURS', '1'))
AMBIGUOUS_PM_MAX_HOUR = _int_env('AMBIGUOUS_PM_MAX_HOUR', 7)

# Languages handed to dateparser. Restricting this avoids language detection
# overhead and odd matches from other locales.
PARSER_LANGUAGES = [
    lang.strip() for lang in os.getenv('PARSER_LANGUAGES', 'en').split(',') if lang.strip()
]

# Optional local overrides: define variables in reminder_parser/local_config.py
# to override the defaults above. Keep that file out of version control.
try:
    from .local_config import *  # type: ignore  # noqa: F401,F403
except ImportError:
    pass
