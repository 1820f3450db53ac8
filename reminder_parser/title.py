"""Build a short display title from the raw reminder text.

Always works on the user's original wording. The substrings that produced the
date are removed first, by position, then a library of date, time, recurrence
and filler patterns cleans up whatever is left.
"""
import re
from typing import Iterable

from .preprocess import NEGATION_RE
from .recurrence import RECURRENCE_PHRASE_PATTERNS
from .utils import FULL_WEEKDAY_PATTERN, MONTH_PATTERN

_I = re.IGNORECASE

_DATE_TIME_PATTERNS = (
    # explicit times
    re.compile(r'(?:\b(?:at|by|@)\s*)?\b\d{1,2}\s*:\s*[ap]\.?m\b\.?', _I),
    re.compile(r'(?:\b(?:at|by|@)\s*)?\b\d{1,2}(?:[:.]\d{2})?\s*[ap]\.?m\b\.?', _I),
    re.compile(r'(?:\bat|\bby|@)\s*\d{1,2}(?::\d{2})?\b', _I),
    re.compile(r'\b\d{1,2}:\d{2}\b', _I),
    re.compile(r'(?:\bat\s+)?\b(?:noon|midday|midnight)\b', _I),
    # relative days and offsets
    re.compile(r'\b(?:today|tonight|tomorrow|yesterday)\b', _I),
    re.compile(r'\b(?:this|next|last)\s+(?:week(?:end)?|month|year|' + FULL_WEEKDAY_PATTERN + r')\b', _I),
    re.compile(r'\bin\s+(?:\d+|an?|one|two|three|a\s+couple\s+of)\s+'
               r'(?:minutes?|hours?|days?|weeks?|months?|years?)\b', _I),
    re.compile(r'\b(?:this|in\s+the)\s+(?:morning|afternoon|evening)\b', _I),
    # month-day-year forms
    re.compile(r'(?:\b(?:on|by)\s+)?\b' + MONTH_PATTERN + r'\s+\d{1,2}(?:st|nd|rd|th)?(?:,?\s+\d{4})?\b', _I),
    re.compile(r'(?:\b(?:on|by)\s+)?(?:\bthe\s+)?\b\d{1,2}(?:st|nd|rd|th)?\s+(?:of\s+)?' + MONTH_PATTERN
               + r'(?:,?\s+\d{4})?\b', _I),
    re.compile(r'\bin\s+' + MONTH_PATTERN + r'\b', _I),
    re.compile(r'(?:\b(?:on|by)\s+)?\b\d{4}-\d{1,2}-\d{1,2}\b', _I),
    re.compile(r'(?:\b(?:on|by)\s+)?\b\d{1,2}/\d{1,2}(?:/\d{2,4})?\b', _I),
    # day-of-month shortcuts
    re.compile(r'\bon\s+(?:the\s+)?\d{1,2}(?:st|nd|rd|th)?\b', _I),
    re.compile(r'\bthe\s+\d{1,2}(?:st|nd|rd|th)\b', _I),
    # weekday names
    re.compile(r'(?:\b(?:on|by)\s+)?\b' + FULL_WEEKDAY_PATTERN + r'\b', _I),
)

_LEADING_FILLER_RE = re.compile(
    r"^(?:remind\s+me\s+to|remind\s+me\s+that|remind\s+me|reminder|remember\s+to|remember\s+that"
    r"|don'?t\s+forget\s+to|don'?t\s+forget|it\s+is|it's|is|are|that)\b[\s,:]*",
    _I,
)
_LINKING_VERB_RE = re.compile(r'\b(?:is|are)\s+(?:on|at)\b', _I)
_TRAILING_LINK_RE = re.compile(r'\s+(?:is|are)$', _I)
_EDGE_PUNCT_LEADING_RE = re.compile(r'^[\s,.;:\-]+')
_EDGE_PUNCT_TRAILING_RE = re.compile(r'[\s,.;:\-]+$')
_INNER_COMMA_RE = re.compile(r'\s+([,;])')
_REPEATED_PUNCT_RE = re.compile(r'([,;])(?:\s*[,;])+')


def _remove_spans(text: str, spans: Iterable[str]) -> str:
    for span in spans:
        span = (span or '').strip()
        if not span:
            continue
        # "until Friday" on a one-off reminder: the linker goes with the date
        pattern = re.compile(r'(?:\b(?:until|till)\s+)?' + re.escape(span), _I)
        text = pattern.sub(' ', text, count=1)
    return text


def _clean_once(title: str, recurring: bool) -> str:
    title = NEGATION_RE.sub(' ', title)
    if recurring:
        for pattern in RECURRENCE_PHRASE_PATTERNS:
            title = pattern.sub(' ', title)
    for pattern in _DATE_TIME_PATTERNS:
        title = pattern.sub(' ', title)
    title = _LINKING_VERB_RE.sub(' ', title)
    title = re.sub(r'\s{2,}', ' ', title)
    title = _INNER_COMMA_RE.sub(r'\1', title)
    title = _REPEATED_PUNCT_RE.sub(r'\1', title)
    title = _EDGE_PUNCT_LEADING_RE.sub('', title)
    title = _EDGE_PUNCT_TRAILING_RE.sub('', title)
    title = _LEADING_FILLER_RE.sub('', title)
    title = _TRAILING_LINK_RE.sub('', title)
    return title.strip()


def extract_title(raw_text: str, matched_text: Iterable[str] = (), recurring: bool = True) -> str:
    """Return a display title for ``raw_text``.

    ``matched_text`` are the substrings that produced the date; they are cut
    out first. With ``recurring`` False the repeat and "until" phrases are
    kept, since they are part of the task wording. Falls back to the raw text
    when nothing is left.
    """
    if not raw_text or not raw_text.strip():
        return raw_text
    title = _remove_spans(raw_text, matched_text)
    # run to a fixed point so the output is stable under a second pass
    for _ in range(5):
        cleaned = _clean_once(title, recurring)
        if cleaned == title:
            break
        title = cleaned
    if not title:
        return raw_text
    return title[0].upper() + title[1:]
