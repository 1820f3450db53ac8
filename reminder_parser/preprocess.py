"""Text clean-up applied before the generic date grammar sees the input.

Negated day phrases are dropped ("not today, but tomorrow" -> "tomorrow") and
malformed time tokens are normalised ("7:PM" -> "7PM"). All transforms are
idempotent.
"""
import re

from .utils import WEEKDAY_NAMES

_NEGATED_TARGETS = ['today', 'tomorrow', r'this\s+week'] + [d.lower() for d in WEEKDAY_NAMES]

# "not today, but " / "not friday " - the negated phrase and its linker go away
NEGATION_RE = re.compile(
    r'\bnot\s+(?:' + '|'.join(_NEGATED_TARGETS) + r')\b,?\s*(?:but\s+)?',
    re.IGNORECASE,
)

# "7:PM", "7 :PM", "7: PM" -> "7PM"
MALFORMED_MERIDIEM_RE = re.compile(r'\b(\d{1,2})\s*:\s*([ap]m)\b', re.IGNORECASE)

# bare "5:00" or "5:00pm" without a leading "at"
BARE_CLOCK_RE = re.compile(r'(?<![\d:])(\d{1,2}:\d{2})(\s*[ap]m\b)?', re.IGNORECASE)
_AT_BEFORE_RE = re.compile(r'\bat\s*$', re.IGNORECASE)


def strip_negations(text: str) -> str:
    return NEGATION_RE.sub('', text)


def normalize_time_tokens(text: str) -> str:
    text = MALFORMED_MERIDIEM_RE.sub(lambda m: m.group(1) + m.group(2), text)

    def _insert_at(m: re.Match) -> str:
        if _AT_BEFORE_RE.search(text[:m.start()]):
            return m.group(0)
        return 'at ' + m.group(1) + (m.group(2) or '').strip()

    return BARE_CLOCK_RE.sub(_insert_at, text)


def preprocess(text: str) -> str:
    """Remove negation constructs and normalise time tokens."""
    processed = strip_negations(text)
    processed = normalize_time_tokens(processed)
    return re.sub(r'\s{2,}', ' ', processed).strip()
