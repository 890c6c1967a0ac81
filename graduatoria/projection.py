"""
Projection of the observed qualification rates to the whole population of
exam registrants.

national       : rates over all collected students x national registrants
per-university : each university scaled by registrants / sampled students,
                 universities without reference data count as observed
"""

from dataclasses import dataclass

from .config import PROJECTION_METHODS
from .enrollments import total_exam_registrants
from .numeric import is_missing, round_half_away
from .students import potentially_qualified


@dataclass(frozen=True)
class ProjectionEstimate:
    estimated_qualified: int
    estimated_potential: int
    estimated_total_students: int
    covered_universities: int
    method: str = 'national'

    @property
    def estimated_eligible(self):
        return self.estimated_qualified + self.estimated_potential


def _registrants_for(resolver, name):
    uni_id = resolver.resolve(name)
    row = resolver.reference_row(uni_id)
    if row is None or is_missing(row.get('exam_registrants')):
        return None
    return int(row['exam_registrants'])


def project(students, resolver, method='national'):
    if method not in PROJECTION_METHODS:
        raise ValueError(f"Unknown projection method: {method}")

    n_students = len(students)
    if n_students == 0:
        return ProjectionEstimate(0, 0, 0, 0, method)

    tmp = students.assign(potential=potentially_qualified(students))
    by_uni = tmp.groupby('university_name', dropna=False)
    n_universities = by_uni.ngroups
    qualified = int(tmp['fully_qualified'].sum())
    potential = int(tmp['potential'].sum())

    total = total_exam_registrants(resolver.reference)
    if total <= 0:
        return ProjectionEstimate(qualified, potential, n_students, 0, method)

    if method == 'national':
        return ProjectionEstimate(
            estimated_qualified=round_half_away(total * qualified / n_students),
            estimated_potential=round_half_away(total * potential / n_students),
            estimated_total_students=total,
            covered_universities=n_universities,
            method=method,
        )

    est_qualified = est_potential = est_students = covered = 0
    for name, group in by_uni:
        sampled = len(group)
        uni_qualified = int(group['fully_qualified'].sum())
        uni_potential = int(group['potential'].sum())
        registrants = _registrants_for(resolver, name)
        if registrants:
            ratio = registrants / sampled
            est_qualified += round_half_away(uni_qualified * ratio)
            est_potential += round_half_away(uni_potential * ratio)
            est_students += registrants
            covered += 1
        else:
            est_qualified += uni_qualified
            est_potential += uni_potential
            est_students += sampled
    return ProjectionEstimate(est_qualified, est_potential, est_students, covered, method)
