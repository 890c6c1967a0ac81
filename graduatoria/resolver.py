"""
Name -> university id resolution.

Free-text university names differ across sources (ministerial feed, surveys,
enrollment table). Resolution goes:
  1. exact match on the normalized reference names
  2. curated aliases (entries with exclusion rules first)
  3. shared identifying word (len > 4, city names and legal words ignored)
"""

import re
import unicodedata

from .aliases import UNIVERSITY_ALIASES
from .enrollments import load_enrollments

QUOTES = re.compile(r"['\"\\`´‘’“”«»]")
SEPARATORS = re.compile(r"[-–—.,;:/()]")
WS = re.compile(r"\s+")

LEGAL_PREFIXES = [
    re.compile(r"\bALMA MATER STUDIORUM( UNIVERSITA( DI)?)? "),
    re.compile(r"\bUNIVERSITA DEGLI STUDI (DI |DEL |DELLA |DELLE |DELL)?"),
    re.compile(r"\bUNIVERSITA (DI |DEL |DELLA |DELLE |DELL)?"),
]

# Città con più atenei: un token comune non basta per decidere
CITY_STOPWORDS = {'MILANO', 'NAPOLI', 'ROMA', 'TORINO', 'FIRENZE', 'BOLOGNA', 'PALERMO', 'CATANIA', 'GENOVA'}
GENERIC_STOPWORDS = {'UNIVERSITA', 'DEGLI', 'STUDI', 'DELLA'}
MIN_TOKEN_LEN = 5


def strip_accents(text):
    decomposed = unicodedata.normalize('NFD', text)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def clean_name(name):
    """Uppercase, no accents/quotes/punctuation, single spaces."""
    if not isinstance(name, str):
        return ''
    s = strip_accents(name.upper())
    s = QUOTES.sub('', s)
    s = SEPARATORS.sub(' ', s)
    return WS.sub(' ', s).strip()


def normalize_name(name):
    """clean_name() plus removal of the legal-form prefixes."""
    s = clean_name(name)
    for pattern in LEGAL_PREFIXES:
        s = pattern.sub('', s)
    return WS.sub(' ', s).strip()


def identifying_tokens(normalized):
    return {
        w for w in normalized.split(' ')
        if len(w) >= MIN_TOKEN_LEN and w not in CITY_STOPWORDS and w not in GENERIC_STOPWORDS
    }


def _contains_phrase(haystack, phrase):
    return f" {phrase} " in f" {haystack} "


class UniversityResolver:
    """Resolve free-text names against a reference table of (id, name)."""

    def __init__(self, reference=None, aliases=None):
        if reference is None:
            reference = load_enrollments()
        if aliases is None:
            aliases = UNIVERSITY_ALIASES

        self.reference = reference
        self._raw = {}
        self._normalized = {}
        self._tokens = []
        for uni_id, name in zip(reference['id'], reference['name']):
            uni_id = str(uni_id)
            norm = normalize_name(name)
            self._raw.setdefault(name, uni_id)
            self._normalized.setdefault(norm, uni_id)
            self._tokens.append((uni_id, identifying_tokens(norm)))

        known = set(self._raw.values())
        entries = []
        for uni_id, entry in aliases.items():
            if uni_id not in known:
                continue
            entries.append((
                uni_id,
                [clean_name(a) for a in entry.get('aliases', [])],
                [clean_name(e) for e in entry.get('exclude_if', [])],
            ))
        # Specific entries (with exclusions) win over generic ones
        self._aliases = sorted(entries, key=lambda e: 0 if e[2] else 1)
        self._cache = {}

    def resolve(self, name):
        """Return the university id for `name`, or None."""
        if not isinstance(name, str) or not name.strip():
            return None
        if name in self._cache:
            return self._cache[name]
        uni_id = self._resolve(name)
        self._cache[name] = uni_id
        return uni_id

    def _resolve(self, name):
        if name in self._raw:
            return self._raw[name]

        normalized = normalize_name(name)
        if not normalized:
            return None
        if normalized in self._normalized:
            return self._normalized[normalized]

        cleaned = clean_name(name)
        for uni_id, aliases, excludes in self._aliases:
            if any(excl in cleaned for excl in excludes):
                continue
            for alias in aliases:
                if alias == normalized or _contains_phrase(cleaned, alias):
                    return uni_id

        search_tokens = identifying_tokens(normalized)
        if not search_tokens:
            return None
        for uni_id, tokens in self._tokens:
            if search_tokens & tokens:
                return uni_id
        return None

    def resolve_many(self, names):
        return {name: self.resolve(name) for name in dict.fromkeys(names)}

    def reference_row(self, uni_id):
        """Reference row for an id as a dict, or None."""
        if uni_id is None or uni_id not in self.reference.index:
            return None
        return self.reference.loc[uni_id].to_dict()
