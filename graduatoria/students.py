import pandas as pd

from .config import PASS_THRESHOLD, SUBJECTS
from .sources import classify_label

STUDENT_COLUMNS = [
    'label', 'physics', 'chemistry', 'biology', 'average', 'completed_exam_count',
    'all_completed_passed', 'fully_qualified', 'university_name', 'university_id',
    'is_from_survey', 'source',
]


def empty_students():
    df = pd.DataFrame({col: pd.Series(dtype='object') for col in STUDENT_COLUMNS})
    for col in SUBJECTS + ['average']:
        df[col] = df[col].astype(float)
    df['completed_exam_count'] = df['completed_exam_count'].astype(int)
    for col in ['all_completed_passed', 'fully_qualified', 'is_from_survey']:
        df[col] = df[col].astype(bool)
    return df


def aggregate_students(records, pass_threshold=PASS_THRESHOLD):
    """Fold exam records into one row per label (first-seen label order).

    - duplicated (label, subject): last record wins
    - average: mean of the completed subjects only
    - all_completed_passed: no completed subject below `pass_threshold`
    - fully_qualified: 3 subjects completed and all passed
    """
    if records is None or records.empty:
        return empty_students()

    order = pd.unique(records['label'])
    records = records.drop_duplicates(subset=['label', 'subject'], keep='last')

    wide = records.pivot(index='label', columns='subject', values='score')
    wide = wide.reindex(index=order, columns=SUBJECTS).astype(float)

    completed = wide.notna().sum(axis=1).astype(int)
    # NaN < soglia è False: le materie non sostenute non bocciano
    all_passed = ~(wide < pass_threshold).any(axis=1)

    last = records.drop_duplicates(subset='label', keep='last').set_index('label').reindex(order)
    from_survey = records.groupby('label', sort=False)['is_from_survey'].any().reindex(order)

    df = wide.copy()
    df['average'] = wide.mean(axis=1)
    df['completed_exam_count'] = completed
    df['all_completed_passed'] = all_passed
    df['fully_qualified'] = (completed == len(SUBJECTS)) & all_passed
    df['university_name'] = last['university_name']
    df['university_id'] = last['university_id']
    df['is_from_survey'] = from_survey.astype(bool)

    df = df.rename_axis('label').reset_index()
    df.columns.name = None
    df['source'] = df['label'].map(classify_label)
    return df[STUDENT_COLUMNS]


def potentially_qualified(students):
    """All completed subjects passed but fewer than three completed."""
    return students['all_completed_passed'] & ~students['fully_qualified']


def eligible_students(students):
    """Students that can compete for a seat, best average first."""
    mask = students['all_completed_passed'] & students['average'].notna()
    eligible = students[mask]
    return eligible.sort_values('average', ascending=False, kind='mergesort').reset_index(drop=True)
