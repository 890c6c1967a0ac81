import numpy as np
import pandas as pd

from .config import DISTRIBUTION_RANGE, ITEMS_PER_PAGE, SUBJECTS
from .numeric import round_half_away


def _search(frame, search):
    """Case-insensitive match on label or university name."""
    if not search:
        return frame
    term = search.lower()
    label_hit = frame['label'].str.lower().str.contains(term, regex=False, na=False)
    uni_hit = frame['university_name'].fillna('').str.lower().str.contains(term, regex=False)
    return frame[label_hit | uni_hit]


def general_ranking(students, search=None):
    """Students with an average, best first, 1-based `position` before filtering."""
    ranked = students[students['average'].notna()]
    ranked = ranked.sort_values('average', ascending=False, kind='mergesort').reset_index(drop=True)
    ranked.insert(0, 'position', np.arange(1, len(ranked) + 1))
    return _search(ranked, search).reset_index(drop=True)


def subject_ranking(records, subject, search=None):
    if subject not in SUBJECTS:
        raise ValueError(f"Unknown subject: {subject}")
    ranked = records[records['subject'] == subject]
    ranked = ranked.sort_values('score', ascending=False, kind='mergesort').reset_index(drop=True)
    ranked.insert(0, 'position', np.arange(1, len(ranked) + 1))
    return _search(ranked, search).reset_index(drop=True)


def score_distribution(records, students, view='average', universities=None):
    """Count per integer score bin (-3..31) for the average or one subject.

    `universities` optionally restricts to a list of university names.
    """
    if view == 'average':
        data = students
        if universities:
            data = data[data['university_name'].isin(universities)]
        values = data['average'].dropna()
    elif view in SUBJECTS:
        data = records[records['subject'] == view]
        if universities:
            data = data[data['university_name'].isin(universities)]
        values = data['score'].dropna()
    else:
        raise ValueError(f"Unknown distribution view: {view}")

    low, high = DISTRIBUTION_RANGE
    bins = pd.Series(0, index=range(low, high + 1), dtype=int)
    counts = values.map(round_half_away).value_counts()
    # i punteggi fuori scala non finiscono in nessun bin
    counts = counts[counts.index.isin(bins.index)]
    bins.loc[counts.index] = counts.values
    return bins.rename_axis('score').reset_index(name='count')


def paginate(frame, page, per_page=ITEMS_PER_PAGE):
    """1-based page slice plus the total number of pages."""
    total_pages = max(1, -(-len(frame) // per_page))
    page = min(max(1, page), total_pages)
    start = (page - 1) * per_page
    return frame.iloc[start:start + per_page], total_pages
