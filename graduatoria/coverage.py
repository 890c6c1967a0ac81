from .config import MINISTERIAL, OFFICIAL_COVERAGE_THRESHOLD, SOURCES
from .numeric import is_missing, round_half_away, safe_ratio

EXAMS_PER_STUDENT = 3


def coverage_percent(exam_count, exam_registrants):
    """Collected exams over expected exams (registrants * 3), in [0, 100].

    None when the university has no enrollment reference.
    """
    if is_missing(exam_registrants):
        return None
    expected = int(exam_registrants) * EXAMS_PER_STUDENT
    actual = 0 if is_missing(exam_count) else exam_count
    return min(safe_ratio(actual, expected) * 100, 100.0)


def has_official_coverage(ministerial_exams, expected_exams):
    """Ministerial exams are at least 5% of the expected exams."""
    return safe_ratio(ministerial_exams, expected_exams) * 100 >= OFFICIAL_COVERAGE_THRESHOLD


def coverage_breakdown(entity, reference):
    """Coverage detail for one university.

    Figures are in exams when the ministerial data covers enough of the
    expected exams, in students otherwise (survey exams scaled by the
    students/exams ratio of the university). Returns None without a reference.
    """
    if reference is None or is_missing(reference.get('exam_registrants')):
        return None

    expected_exams = int(reference['exam_registrants']) * EXAMS_PER_STUDENT
    expected_students = int(reference['exam_registrants'])
    total_exams = int(entity.get('exam_count', 0))
    unique_students = int(entity.get('student_count', 0))

    official = has_official_coverage(entity.get(MINISTERIAL, 0), expected_exams)
    student_based = not official
    ratio = safe_ratio(unique_students, total_exams)

    def scale(count):
        return round_half_away(count * ratio) if student_based else int(count)

    total_collected = unique_students if student_based else total_exams
    total_expected = expected_students if student_based else expected_exams

    sources = []
    for src in SOURCES:
        value = scale(entity.get(src, 0))
        if value > 0:
            sources.append({
                'source': src,
                'value': value,
                'percentage': safe_ratio(value, total_expected) * 100,
            })
    sources.sort(key=lambda s: s['percentage'], reverse=True)

    uncovered = max(0, total_expected - total_collected)
    return {
        'unit': 'students' if student_based else 'exams',
        'has_official_coverage': official,
        'coverage_percent': coverage_percent(total_exams, reference['exam_registrants']),
        'collected': total_collected,
        'expected': total_expected,
        'sources': sources,
        'uncovered': uncovered,
        'uncovered_percentage': safe_ratio(uncovered, total_expected) * 100,
    }
