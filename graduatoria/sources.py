"""
Provenance by label prefix, plus the survey deduplication contract used on the
ingestion side.

SRV-   -> internal_survey (questionario del sito)
UNIMI- -> unimi_survey
LOGI-  -> logica_survey
altro  -> ministerial
"""

import hashlib
import re

import pandas as pd

from .config import MINISTERIAL, RECORD_COLUMNS, SOURCE_PREFIXES, SOURCES, SUBJECTS, TOTAL_ENROLLED_STUDENTS
from .numeric import safe_ratio

LABEL_PATTERN = re.compile(r'^(SRV-|UNIMI-|LOGI-)?[A-Z0-9]+$')
# |score| <= 0.05 significa "materia non sostenuta"
NOT_TAKEN_EPSILON = 0.05


def classify_label(label):
    if not isinstance(label, str):
        return MINISTERIAL
    for prefix, source in SOURCE_PREFIXES.items():
        if label.startswith(prefix):
            return source
    return MINISTERIAL


def is_valid_label(label):
    return isinstance(label, str) and LABEL_PATTERN.match(label) is not None


def source_counts(students, total_enrolled=TOTAL_ENROLLED_STUDENTS):
    """Students per source + share of the enrolled population collected."""
    labels = students['label'] if len(students) else pd.Series(dtype='object')
    counts = labels.map(classify_label).value_counts()
    stats = {source: int(counts.get(source, 0)) for source in SOURCES}
    stats['total'] = int(len(labels))
    stats['collected_percent'] = safe_ratio(stats['total'], total_enrolled) * 100
    return stats


# ================= DEDUP (ingestione) =================

def normalize_username(username):
    if not isinstance(username, str):
        return ''
    return re.sub(r'[^a-z0-9]', '', username.lower())


def logica_label_for(username):
    """LOGI-<first 6 hex chars of md5(normalized nickname)>, uppercase."""
    nickname = normalize_username(username)
    digest = hashlib.md5(nickname.encode('utf-8')).hexdigest()
    return f"LOGI-{digest[:6].upper()}"


def score_fingerprint(university_id, physics, chemistry, biology):
    """'<id>-P.P-C.C-B.B', scores at one decimal (missing -> 0.0)."""
    parts = [str(university_id)]
    for score in (physics, chemistry, biology):
        value = 0.0 if score is None or pd.isna(score) else float(score)
        parts.append(f"{value:.1f}")
    return '-'.join(parts)


def _survey_labels(existing_records):
    """Labels already recorded by the LOGI-/UNIMI- surveys."""
    labels = existing_records['label'].dropna().astype(str)
    return set(labels[labels.str.startswith(('LOGI-', 'UNIMI-'))])


def _logica_fingerprints(existing_records):
    logi = existing_records[existing_records['label'].str.startswith('LOGI-')]
    if logi.empty:
        return set()
    wide = logi.pivot_table(index=['label', 'university_id'], columns='subject',
                            values='score', aggfunc='last')
    prints = set()
    for (label, uni_id), row in wide.iterrows():
        prints.add(score_fingerprint(uni_id, row.get('physics'), row.get('chemistry'), row.get('biology')))
    return prints


def deduplicate_submissions(submissions, existing_records):
    """Filter new survey submissions against what is already recorded.

    submissions: iterable of dicts {id, username?, university_id,
    university_name?, physics, chemistry, biology}.
    Returns (records DataFrame of the kept submissions, list of skipped ids).
    A submission is skipped when the LOGI- label derived from its username is
    already recorded, or its score fingerprint equals a LOGI- record of the
    same university.
    """
    known_labels = _survey_labels(existing_records)
    fingerprints = _logica_fingerprints(existing_records)

    rows = []
    skipped = []
    for sub in submissions:
        user = normalize_username(sub.get('username'))
        known_user = bool(user) and logica_label_for(user) in known_labels
        fp = score_fingerprint(sub.get('university_id'), sub.get('physics'),
                               sub.get('chemistry'), sub.get('biology'))
        if known_user or fp in fingerprints:
            skipped.append(sub.get('id'))
            continue

        label = f"SRV-{str(sub.get('id')).upper()}"
        for subject in SUBJECTS:
            score = sub.get(subject)
            if score is None or pd.isna(score) or abs(float(score)) <= NOT_TAKEN_EPSILON:
                continue
            rows.append({
                'label': label,
                'score': float(score),
                'subject': subject,
                'university_name': sub.get('university_name'),
                'university_id': None if sub.get('university_id') is None else str(sub.get('university_id')),
                'is_from_survey': True,
                'source': 'internal_survey',
            })

    records = pd.DataFrame(rows, columns=RECORD_COLUMNS)
    records['score'] = records['score'].astype(float)
    return records, skipped
