"""
Per-university and per-region folding of the student aggregates.
"""

import numpy as np
import pandas as pd

from .config import SOURCES, SUBJECTS, SURVEY_SHARE_THRESHOLD, TOTAL_SPOTS
from .coverage import coverage_percent
from .enrollments import load_enrollments
from .resolver import UniversityResolver, strip_accents
from .students import potentially_qualified

UNIVERSITY_ENTITY_COLUMNS = (
    ['id', 'name', 'region']
    + [f'has_{s}' for s in SUBJECTS]
    + [f'students_{s}' for s in SUBJECTS]
    + ['student_count', 'average_score']
    + SOURCES
    + ['exam_count', 'is_from_survey', 'fully_qualified_count', 'potentially_qualified_count',
       'enrollment_id', 'coverage_percent']
)

REGION_COLUMNS = ['name', 'university_count', 'student_count', 'average_score',
                  'fully_qualified_count', 'potentially_qualified_count']


def collation_key(text):
    """Accent and case insensitive sort key (approximates Italian collation)."""
    if not isinstance(text, str):
        return ''
    return strip_accents(text).casefold()


def _student_stats(students):
    if students.empty:
        return pd.DataFrame(columns=['student_count', 'average_score',
                                     'fully_qualified_count', 'potentially_qualified_count'])
    tmp = students.assign(potential=potentially_qualified(students))
    grouped = tmp.groupby('university_name')
    return pd.DataFrame({
        'student_count': grouped.size(),
        # media delle medie: ogni studente pesa uguale
        'average_score': grouped['average'].mean(),
        'fully_qualified_count': grouped['fully_qualified'].sum(),
        'potentially_qualified_count': grouped['potential'].sum(),
    })


def _record_stats(records):
    columns = [f'students_{s}' for s in SUBJECTS] + SOURCES + ['exam_count', 'survey_exams']
    if records.empty:
        return pd.DataFrame(columns=columns)
    by_subject = pd.crosstab(records['university_name'], records['subject'])
    by_source = pd.crosstab(records['university_name'], records['source'])
    stats = pd.DataFrame(index=by_subject.index)
    for s in SUBJECTS:
        stats[f'students_{s}'] = by_subject[s] if s in by_subject.columns else 0
    for src in SOURCES:
        stats[src] = by_source[src] if src in by_source.columns else 0
    stats['exam_count'] = by_subject.sum(axis=1)
    stats['survey_exams'] = records.groupby('university_name')['is_from_survey'].sum()
    return stats


def aggregate_universities(students, records, universities, resolver=None, enrollments=None):
    """One row per reference university, universities with data first.

    Universities with data are ordered by average desc; the others by
    region then name.
    """
    if enrollments is None:
        enrollments = load_enrollments()
    if resolver is None:
        resolver = UniversityResolver(enrollments)

    df = universities[['id', 'name', 'region']].copy().set_index('name', drop=False)
    df = df[~df.index.duplicated(keep='first')]

    student_stats = _student_stats(students).reindex(df.index)
    record_stats = _record_stats(records).reindex(df.index)

    for col in ['student_count', 'fully_qualified_count', 'potentially_qualified_count']:
        df[col] = student_stats[col].fillna(0).astype(int)
    df['average_score'] = student_stats['average_score'].astype(float)

    for s in SUBJECTS:
        df[f'students_{s}'] = record_stats[f'students_{s}'].fillna(0).astype(int)
        df[f'has_{s}'] = df[f'students_{s}'] > 0
    for src in SOURCES:
        df[src] = record_stats[src].fillna(0).astype(int)
    df['exam_count'] = record_stats['exam_count'].fillna(0).astype(int)
    survey_exams = record_stats['survey_exams'].fillna(0).astype(float)
    share = np.where(df['exam_count'] > 0, survey_exams / df['exam_count'].replace(0, 1), 0.0)
    df['is_from_survey'] = (df['exam_count'] > 0) & (share >= SURVEY_SHARE_THRESHOLD)

    df['enrollment_id'] = df['name'].map(resolver.resolve)
    registrants = df['enrollment_id'].map(
        lambda uid: None if uid is None or uid not in enrollments.index
        else enrollments.at[uid, 'exam_registrants']
    )
    actual = sum(df[f'students_{s}'] for s in SUBJECTS)
    coverage = [coverage_percent(a, r) for a, r in zip(actual, registrants)]
    df['coverage_percent'] = pd.Series(coverage, index=df.index, dtype=float)

    df = df.reset_index(drop=True)
    with_data = df[df['student_count'] > 0].sort_values('average_score', ascending=False, kind='mergesort')
    without = df[df['student_count'] == 0].assign(
        _region_key=lambda d: d['region'].map(collation_key),
        _name_key=lambda d: d['name'].map(collation_key),
    ).sort_values(['_region_key', '_name_key'], kind='mergesort')
    return pd.concat([with_data, without])[UNIVERSITY_ENTITY_COLUMNS].reset_index(drop=True)


def aggregate_regions(universities, students):
    """Fold universities with students by region (average weighted by student_count)."""
    active = universities[universities['student_count'] > 0]
    if active.empty:
        return pd.DataFrame(columns=REGION_COLUMNS)

    weighted = active.assign(_w=active['average_score'] * active['student_count'])
    grouped = weighted.groupby('region', sort=False)
    regions = pd.DataFrame({
        'university_count': grouped.size(),
        'student_count': grouped['student_count'].sum(),
        '_w': grouped['_w'].sum(),
    })
    regions['average_score'] = regions['_w'] / regions['student_count']

    region_of = dict(zip(active['name'], active['region']))
    tmp = students.assign(
        region=students['university_name'].map(region_of),
        potential=potentially_qualified(students),
    ).dropna(subset=['region'])
    counts = tmp.groupby('region')[['fully_qualified', 'potential']].sum()
    regions['fully_qualified_count'] = counts['fully_qualified'].reindex(regions.index).fillna(0).astype(int)
    regions['potentially_qualified_count'] = counts['potential'].reindex(regions.index).fillna(0).astype(int)

    regions = regions.rename_axis('name').reset_index()
    regions = regions.sort_values('average_score', ascending=False, kind='mergesort')
    return regions[REGION_COLUMNS].reset_index(drop=True)


def global_summary(records, students, universities, total_seats=TOTAL_SPOTS):
    active = universities[universities['student_count'] > 0]
    official = active[~active['is_from_survey']]
    complete = official[official['has_physics'] & official['has_chemistry'] & official['has_biology']]
    fully = int(students['fully_qualified'].sum()) if len(students) else 0
    almost = int(potentially_qualified(students).sum()) if len(students) else 0
    averages = students['average'].dropna() if len(students) else pd.Series(dtype=float)
    return {
        'total_spots': total_seats,
        'total_universities': int(len(universities)),
        'fully_qualified_count': fully,
        'almost_qualified_count': almost,
        'remaining_spots': total_seats - fully,
        'universities_with_official_data': int(len(official)),
        'universities_complete': int(len(complete)),
        'universities_from_survey': int(active['is_from_survey'].sum()),
        'total_result_count': int(len(records)),
        'unique_student_count': int(len(students)),
        'average_of_averages': float(averages.mean()) if len(averages) else None,
    }
