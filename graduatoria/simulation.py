"""
Admission cutoff simulation on the collected sample.

A. national minimum: rank of the last admitted student once the sample is
   projected to the national population of eligible students
B. scaled seats: real seats x (sampled students / exam registrants), so that
   every university is simulated at the sampling rate of its own data
C. first-choice pass: best average first, every student takes a seat at the
   university they sat the exam at; when it is full the student is displaced
D. per-university cutoff:
   - worst case: every displaced student ranked above you wants your seat
   - realistic: displaced students cascade over the universities with free
     seats in proportion to their attractiveness (course registrants / seats);
     the competitors routed to the target give an admission rate applied to
     the ranked first-choice applicants
"""

import math
from dataclasses import asdict, dataclass, field
from typing import Dict

import numpy as np
import pandas as pd

from .config import MAX_CASCADE_ROUNDS, OFFICIAL_MIN_SCORE, TOTAL_SPOTS
from .numeric import is_missing, round_half_away, safe_ratio
from .projection import project
from .students import eligible_students


@dataclass(frozen=True)
class NationalCutoff:
    minimum_average: float
    minimum_total: float
    cutoff_position: int
    projection_ratio: float
    estimated_eligible: int
    actual_eligible: int
    below_official_floor: bool


@dataclass(frozen=True)
class UniversityCutoff:
    university_id: str
    name: str
    available_seats: int
    scaled_seats: int
    applicants: int
    cascaded_competitors: int
    admission_rate: float
    worst_case_average: float
    realistic_average: float
    below_official_floor: bool

    @property
    def worst_case_total(self):
        return self.worst_case_average * 3

    @property
    def realistic_total(self):
        return self.realistic_average * 3


@dataclass(frozen=True)
class AdmissionSimulationResult:
    university_id: str
    global_position: int
    university_position: int
    displaced_above: int
    scaled_seats: int
    real_seats: int
    status: str


@dataclass
class FirstChoicePass:
    """Outcome of the first-choice assignment (ranking best first)."""
    ranking: pd.DataFrame
    remaining: Dict[str, int]

    def displaced_above(self, score):
        """Displaced students with an average strictly above `score`."""
        scores = self.ranking['average'].to_numpy(dtype=float)
        displaced = self.ranking['displaced'].to_numpy(dtype=bool)
        return int(np.count_nonzero(displaced & (scores > score)))

    def displaced_before(self, position):
        """Displaced students among the first `position` entries of the ranking."""
        return int(self.ranking['displaced'].iloc[:position].sum())

    @property
    def displaced_count(self):
        return int(self.ranking['displaced'].sum())


@dataclass
class CascadeResult:
    routed: Dict[str, int] = field(default_factory=dict)
    placed: Dict[str, int] = field(default_factory=dict)
    remaining: Dict[str, int] = field(default_factory=dict)
    still_displaced: int = 0
    rounds: int = 0


class AdmissionSimulator:

    def __init__(self, students, resolver, total_seats=TOTAL_SPOTS):
        self.students = students
        self.resolver = resolver
        self.reference = resolver.reference
        self.total_seats = total_seats

        eligible = eligible_students(students)
        eligible = eligible.assign(enrollment_id=eligible['university_name'].map(resolver.resolve))
        self.eligible = eligible[['label', 'average', 'university_name', 'enrollment_id']]

        # Atenei con posti e iscritti noti
        pools = self.reference[
            self.reference['available_seats'].fillna(0).gt(0)
            & self.reference['exam_registrants'].fillna(0).gt(0)
        ]
        self.pools = pools
        self.attractiveness = {}
        for uni_id, seats, course in zip(pools['id'], pools['available_seats'], pools['course_registrants']):
            if not is_missing(course) and course > 0:
                self.attractiveness[uni_id] = course / seats

    # ---------- Step A ----------
    def national_cutoff(self):
        if self.eligible.empty:
            return None
        estimate = project(self.students, self.resolver, 'national')
        n = len(self.eligible)
        ratio = safe_ratio(estimate.estimated_eligible, n)
        scores = self.eligible['average'].to_numpy(dtype=float)

        if ratio > 0:
            position = math.ceil(self.total_seats / ratio)
        else:
            position = n
        minimum = scores[position - 1] if 0 < position <= n else scores[-1]
        return NationalCutoff(
            minimum_average=float(minimum),
            minimum_total=float(minimum) * 3,
            cutoff_position=int(position),
            projection_ratio=float(ratio),
            estimated_eligible=estimate.estimated_eligible,
            actual_eligible=n,
            below_official_floor=bool(minimum < OFFICIAL_MIN_SCORE),
        )

    # ---------- Step B ----------
    def sample_counts(self, extra_university_id=None):
        counts = self.eligible['enrollment_id'].dropna().value_counts().to_dict()
        if extra_university_id is not None:
            counts[extra_university_id] = counts.get(extra_university_id, 0) + 1
        return counts

    def scaled_seats(self, extra_university_id=None):
        """University id -> seats scaled to the sampling rate of that university."""
        counts = self.sample_counts(extra_university_id)
        scaled = {}
        for uni_id, seats, registrants in zip(self.pools['id'], self.pools['available_seats'],
                                              self.pools['exam_registrants']):
            coverage = counts.get(uni_id, 0) / registrants
            scaled[uni_id] = max(0, round_half_away(seats * coverage))
        return scaled

    # ---------- Step C ----------
    def first_choice_pass(self, scaled=None, candidate=None):
        """Assign every eligible student to their own university, best first.

        `candidate` is an optional (average, university_id) pair added to the
        ranking after the students with the same average.
        Students whose university has no seat pool are ranked but neither
        assigned nor displaced.
        """
        if scaled is None:
            scaled = self.scaled_seats()
        ranking = self.eligible[['average', 'enrollment_id']].assign(is_candidate=False)
        if candidate is not None:
            row = pd.DataFrame([{'average': float(candidate[0]), 'enrollment_id': candidate[1],
                                 'is_candidate': True}])
            ranking = pd.concat([ranking, row], ignore_index=True)
        ranking = ranking.sort_values('average', ascending=False, kind='mergesort').reset_index(drop=True)

        remaining = dict(scaled)
        assigned = []
        displaced = []
        for uni_id in ranking['enrollment_id']:
            seats = remaining.get(uni_id) if uni_id is not None else None
            if seats is None:
                assigned.append(False)
                displaced.append(False)
            elif seats > 0:
                remaining[uni_id] = seats - 1
                assigned.append(True)
                displaced.append(False)
            else:
                assigned.append(False)
                displaced.append(True)
        ranking['assigned'] = assigned
        ranking['displaced'] = displaced
        return FirstChoicePass(ranking=ranking, remaining=remaining)

    # ---------- cascade ----------
    def _distribute(self, count, available):
        """Split `count` students over `available` ids by attractiveness share."""
        weights = {u: self.attractiveness.get(u, 1.0) for u in available}
        total_weight = sum(weights.values())
        wanted = {u: round_half_away(count * w / total_weight) for u, w in weights.items()}

        diff = count - sum(wanted.values())
        if diff > 0:
            best = max(available, key=lambda u: self.attractiveness.get(u, 0))
            wanted[best] += diff
        while diff < 0:
            # arrotondamenti in eccesso: tolti dal meno attraente
            worst = min((u for u in available if wanted[u] > 0), key=lambda u: weights[u])
            wanted[worst] -= 1
            diff += 1
        return wanted

    def cascade(self, first_pass, max_rounds=MAX_CASCADE_ROUNDS):
        """Redistribute the displaced students over the universities with free seats."""
        result = CascadeResult(remaining=dict(first_pass.remaining))
        displaced = first_pass.displaced_count

        while displaced > 0 and result.rounds < max_rounds:
            available = [u for u, seats in result.remaining.items() if seats > 0]
            if not available:
                break
            wanted = self._distribute(displaced, available)
            overflow = 0
            for uni_id, n_wanted in wanted.items():
                placed = min(n_wanted, result.remaining[uni_id])
                result.remaining[uni_id] -= placed
                result.routed[uni_id] = result.routed.get(uni_id, 0) + n_wanted
                result.placed[uni_id] = result.placed.get(uni_id, 0) + placed
                overflow += n_wanted - placed
            result.rounds += 1
            if overflow == displaced:
                break
            displaced = overflow

        result.still_displaced = displaced
        return result

    # ---------- Step D ----------
    def _pool_row(self, university_id):
        if university_id is None or university_id not in self.pools.index:
            return None
        return self.pools.loc[university_id]

    def university_cutoff(self, university_id):
        """Worst-case and realistic minimum average for one university, or None."""
        row = self._pool_row(university_id)
        if row is None:
            return None
        applicants = self.eligible[self.eligible['enrollment_id'] == university_id]
        if applicants.empty:
            return None

        scaled = self.scaled_seats()
        seats = scaled.get(university_id, 0)
        if seats <= 0:
            return None

        scores = applicants['average'].to_numpy(dtype=float)
        first_pass = self.first_choice_pass(scaled)

        worst = scores[-1]
        for i, score in enumerate(scores):
            if i + first_pass.displaced_above(score) >= seats:
                worst = scores[i - 1] if i > 0 else score
                break

        routed = self.cascade(first_pass).routed.get(university_id, 0)
        n = len(scores)
        competitors = n + routed
        if competitors > seats:
            # ceil(seats / competitors * n)
            cutoff_index = -(-seats * n // competitors)
        else:
            cutoff_index = n
        cutoff_index = max(1, cutoff_index)
        realistic = scores[cutoff_index - 1]

        return UniversityCutoff(
            university_id=university_id,
            name=row['name'],
            available_seats=int(row['available_seats']),
            scaled_seats=int(seats),
            applicants=n,
            cascaded_competitors=int(routed),
            admission_rate=min(1.0, safe_ratio(seats, competitors)),
            worst_case_average=float(worst),
            realistic_average=float(realistic),
            below_official_floor=bool(min(worst, realistic) < OFFICIAL_MIN_SCORE),
        )

    def university_cutoffs(self):
        rows = []
        for uni_id in self.pools['id']:
            cutoff = self.university_cutoff(uni_id)
            if cutoff is not None:
                rows.append(asdict(cutoff))
        columns = list(UniversityCutoff.__dataclass_fields__)
        return pd.DataFrame(rows, columns=columns)

    # ---------- candidate ----------
    def simulate_candidate(self, average, university_name):
        """Where would a student with `average` at `university_name` land?

        unlikely   : does not fit even among first-choice applicants
        at_risk    : fits alone, not once displaced students above are added
        guaranteed : fits even with every displaced student above
        """
        uni_id = self.resolver.resolve(university_name)
        row = self._pool_row(uni_id)
        if row is None:
            return None

        scaled = self.scaled_seats(extra_university_id=uni_id)
        first_pass = self.first_choice_pass(scaled, candidate=(average, uni_id))
        ranking = first_pass.ranking

        index = int(np.flatnonzero(ranking['is_candidate'].to_numpy())[0])
        same_uni = ranking[ranking['enrollment_id'] == uni_id]
        uni_position = int(np.flatnonzero(same_uni['is_candidate'].to_numpy())[0]) + 1
        displaced_above = first_pass.displaced_before(index)
        seats = scaled.get(uni_id, 0)

        if uni_position - 1 >= seats:
            status = 'unlikely'
        elif (uni_position - 1) + displaced_above >= seats:
            status = 'at_risk'
        else:
            status = 'guaranteed'

        return AdmissionSimulationResult(
            university_id=uni_id,
            global_position=index + 1,
            university_position=uni_position,
            displaced_above=displaced_above,
            scaled_seats=int(seats),
            real_seats=int(row['available_seats']),
            status=status,
        )
