"""
Full recomputation of everything the dashboard shows, from the raw feeds.

Each call returns a new DashboardData; nothing is updated in place, the caller
swaps the whole bundle.
"""

from dataclasses import dataclass
from typing import Optional

import pandas as pd

from .config import PipelineConfig
from .enrollments import load_enrollments
from .projection import ProjectionEstimate, project
from .resolver import UniversityResolver
from .results import filter_survey, load_results, load_universities
from .simulation import AdmissionSimulator, NationalCutoff
from .students import aggregate_students
from .universities import aggregate_regions, aggregate_universities, global_summary


@dataclass(frozen=True)
class DashboardData:
    config: PipelineConfig
    records: pd.DataFrame
    students: pd.DataFrame
    universities: pd.DataFrame
    regions: pd.DataFrame
    summary: dict
    projection: ProjectionEstimate
    national_cutoff: Optional[NationalCutoff]
    simulator: AdmissionSimulator


def build_dashboard(raw_results, raw_universities, config=None, enrollments=None, verbose=False):
    if config is None:
        config = PipelineConfig()
    if enrollments is None:
        enrollments = load_enrollments()
    resolver = UniversityResolver(enrollments)

    if verbose:
        print("[STEP 1] Parsing feed...")
    records = load_results(raw_results, verbose=verbose)
    records = filter_survey(records, config.include_survey_data)
    universities_ref = load_universities(raw_universities)

    if verbose:
        print(f"[STEP 2] Aggregazione studenti ({len(records)} esami)...")
    students = aggregate_students(records, pass_threshold=config.pass_threshold)

    if verbose:
        print(f"[STEP 3] Aggregazione atenei/regioni ({len(students)} studenti)...")
    universities = aggregate_universities(students, records, universities_ref, resolver, enrollments)
    regions = aggregate_regions(universities, students)
    summary = global_summary(records, students, universities, config.total_seats)

    if verbose:
        print(f"[STEP 4] Proiezione ({config.projection_method}) e simulazione...")
    projection = project(students, resolver, config.projection_method)
    simulator = AdmissionSimulator(students, resolver, total_seats=config.total_seats)
    national_cutoff = simulator.national_cutoff()

    if verbose:
        if national_cutoff is None:
            print("⚠️ Nessuno studente idoneo: minimo nazionale non disponibile")
        else:
            print(f"✅ Minimo nazionale stimato: {national_cutoff.minimum_average:.2f}")

    return DashboardData(
        config=config,
        records=records,
        students=students,
        universities=universities,
        regions=regions,
        summary=summary,
        projection=projection,
        national_cutoff=national_cutoff,
        simulator=simulator,
    )
