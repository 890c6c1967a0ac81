import pandas as pd
import pytest

from graduatoria.config import RECORD_COLUMNS
from graduatoria.enrollments import load_enrollments
from graduatoria.resolver import UniversityResolver
from graduatoria.sources import classify_label
from graduatoria.students import aggregate_students


def make_records(rows):
    """rows: (label, subject, score, university_name) tuples."""
    records = []
    for label, subject, score, uni in rows:
        source = classify_label(label)
        records.append({
            'label': label,
            'score': float(score),
            'subject': subject,
            'university_name': uni,
            'university_id': None,
            'is_from_survey': source != 'ministerial',
            'source': source,
        })
    return pd.DataFrame(records, columns=RECORD_COLUMNS)


def full_student(label, average, uni):
    return [(label, s, average, uni) for s in ('physics', 'chemistry', 'biology')]


@pytest.fixture
def enrollments():
    return load_enrollments()


@pytest.fixture
def resolver(enrollments):
    return UniversityResolver(enrollments)


@pytest.fixture
def small_reference():
    """Two fictional universities with known registrants."""
    return load_enrollments([
        {'id': 'A', 'name': "Università degli Studi di ALFA", 'exam_registrants': 100,
         'course_registrants': 120, 'available_seats': 40},
        {'id': 'B', 'name': "Università degli Studi di BETA", 'exam_registrants': 50,
         'course_registrants': 60, 'available_seats': 20},
    ])


@pytest.fixture
def worked_example():
    """Three eligible students (30, 25, 20) at a university with 2 scaled seats."""
    reference = load_enrollments([
        {'id': 'A', 'name': "Università degli Studi di ALFA", 'exam_registrants': 3,
         'course_registrants': 4, 'available_seats': 2},
    ])
    uni = "Università degli Studi di ALFA"
    records = make_records(full_student('S1', 30, uni) + full_student('S2', 25, uni) + full_student('S3', 20, uni))
    return aggregate_students(records), UniversityResolver(reference)


@pytest.fixture
def displacement_example():
    """B overflows by one student, C still has room, A is the target.

    scaled seats: A=3, B=1, C=2
    first pass: 30(B) in, 29(B) displaced, 28/27/26(A) in, 18(C) in
    """
    reference = load_enrollments([
        {'id': 'A', 'name': "Università degli Studi di ALFA", 'exam_registrants': 3,
         'course_registrants': 3, 'available_seats': 3},
        {'id': 'B', 'name': "Università degli Studi di BETA", 'exam_registrants': 2,
         'course_registrants': 2, 'available_seats': 1},
        {'id': 'C', 'name': "Università degli Studi di GAMMA", 'exam_registrants': 1,
         'course_registrants': 20, 'available_seats': 2},
    ])
    a = "Università degli Studi di ALFA"
    b = "Università degli Studi di BETA"
    c = "Università degli Studi di GAMMA"
    rows = (
        full_student('B1', 30, b) + full_student('B2', 29, b)
        + full_student('A1', 28, a) + full_student('A2', 27, a) + full_student('A3', 26, a)
        + full_student('C1', 18, c)
    )
    return aggregate_students(make_records(rows)), UniversityResolver(reference)


@pytest.fixture
def raw_feed():
    """Results + universities in the remote feed format."""
    milano = {'nome': "Università degli Studi di MILANO", 'id': 'u15'}
    padova = {'nome': "Università degli Studi di PADOVA", 'id': 'u19'}
    results = [
        {'etichetta': 'ABC1', 'punteggio': '20.5', 'materia': 'fisica', 'is_from_survey': False, 'universita': milano},
        {'etichetta': 'ABC1', 'punteggio': '22', 'materia': 'chimica', 'is_from_survey': False, 'universita': milano},
        {'etichetta': 'ABC1', 'punteggio': '24.25', 'materia': 'biologia', 'is_from_survey': False, 'universita': milano},
        {'etichetta': 'DEF2', 'punteggio': '-1.5', 'materia': 'fisica', 'is_from_survey': False, 'universita': milano},
        {'etichetta': 'SRV-X1', 'punteggio': '27', 'materia': 'fisica', 'is_from_survey': True, 'universita': padova},
        {'etichetta': 'SRV-X1', 'punteggio': '26', 'materia': 'chimica', 'is_from_survey': True, 'universita': padova},
        {'etichetta': 'GHI3', 'punteggio': '19', 'materia': 'biologia', 'is_from_survey': False, 'universita': padova},
        {'etichetta': 'BAD', 'punteggio': 'n/a', 'materia': 'fisica', 'is_from_survey': False, 'universita': padova},
        {'etichetta': 'BAD2', 'punteggio': '20', 'materia': 'latino', 'is_from_survey': False, 'universita': padova},
    ]
    universities = [
        {'nome': "Università degli Studi di MILANO", 'id': 'u15', 'region': 'Lomabrdia'},
        {'nome': "Università degli Studi di PADOVA", 'id': 'u19', 'region': 'Veneto'},
        {'nome': "Università degli Studi di PAVIA", 'id': 'u22', 'region': 'Lombardia'},
    ]
    return results, universities
