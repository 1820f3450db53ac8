"""Spot the person a reminder is about ("Call mom", "Sarah's birthday")."""
import re

from .models import DetectedName

RELATIONSHIP_TERMS = {
    'mom', 'dad', 'mother', 'father',
    'sister', 'brother',
    'grandma', 'grandpa', 'grandmother', 'grandfather',
    'aunt', 'uncle', 'cousin',
    'wife', 'husband', 'partner',
    'son', 'daughter',
    'niece', 'nephew',
    'boyfriend', 'girlfriend',
    'fiance', 'fiancee',
}

# Capitalised words that are not names
EXCLUDED_WORDS = {
    'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
    'january', 'february', 'march', 'april', 'may', 'june',
    'july', 'august', 'september', 'october', 'november', 'december',
    'birthday', 'anniversary', 'meeting', 'appointment', 'lunch', 'dinner',
    'coffee', 'breakfast', 'call', 'text', 'email', 'remind', 'remember',
    'today', 'tomorrow', 'next', 'this', 'last', 'every', 'the', 'check',
    'get', 'buy', 'send', 'schedule', 'plan', 'book', 'make', 'pick',
    'doctor', 'dentist', 'vet', 'hospital', 'office', 'work', 'home',
    'happy', 'merry', 'new', 'year', 'christmas', 'easter', 'thanksgiving',
    'valentine', 'halloween', 'party', 'wedding', 'graduation', 'shower',
    'gift', 'present', 'card', 'flowers', 'cake',
}

_CONTEXT_BEFORE_RE = re.compile(r'^(?:call|text|meet|visit|see|for|with)$', re.IGNORECASE)
_CONTEXT_AFTER_RE = re.compile(r'^(?:birthday|appointment|meeting)$', re.IGNORECASE)
_PROPER_RE = re.compile(r'^[A-Z][a-z]+$')
_POSSESSIVE_RE = re.compile(r"^([A-Za-z]+)['’]s\b")


def _relationship(word: str) -> DetectedName:
    return DetectedName(name=word.capitalize(), confidence='high', source='relationship')


def detect_names(text: str) -> list[DetectedName]:
    """Names mentioned in ``text``, relationship terms ('high') before proper names ('medium')."""
    found: list[DetectedName] = []
    seen: set[str] = set()

    def add(candidate: DetectedName):
        key = candidate.name.lower()
        if key not in seen:
            seen.add(key)
            found.append(candidate)

    words = (text or '').split()
    for i, word in enumerate(words):
        clean = re.sub(r"[^A-Za-z'\-]", '', word)
        lower = clean.lower()

        if lower in RELATIONSHIP_TERMS:
            add(_relationship(clean))
            continue

        if len(clean) >= 2 and _PROPER_RE.match(clean) and lower not in EXCLUDED_WORDS:
            prev_word = words[i - 1] if i > 0 else ''
            next_word = words[i + 1] if i + 1 < len(words) else ''
            # a capitalised first word may just start the sentence
            sentence_start = i == 0 or prev_word.endswith(('.', '!', '?'))
            has_context = (
                bool(_CONTEXT_BEFORE_RE.match(prev_word))
                or bool(_CONTEXT_AFTER_RE.match(re.sub(r'[^A-Za-z]', '', next_word)))
            )
            if not sentence_start or has_context:
                add(DetectedName(name=clean, confidence='medium', source='proper'))

        m = _POSSESSIVE_RE.match(word)
        if m:
            name = m.group(1)
            if name.lower() in RELATIONSHIP_TERMS:
                add(_relationship(name))
            elif name.lower() not in EXCLUDED_WORDS and len(name) >= 2:
                add(DetectedName(name=name.capitalize(), confidence='medium', source='proper'))

    # stable sort keeps first-seen order within a confidence level
    return sorted(found, key=lambda d: d.confidence != 'high')


def primary_detected_name(text: str) -> DetectedName | None:
    names = detect_names(text)
    return names[0] if names else None
