import os
from dataclasses import dataclass

# ================= CONFIG =================
RESULTS_URL = os.environ.get(
    'GRADUATORIA_RESULTS_URL', 'https://graduatoriasemestrefiltro.github.io/data.json'
)
UNIVERSITIES_URL = os.environ.get(
    'GRADUATORIA_UNIVERSITIES_URL', 'https://graduatoriasemestrefiltro.github.io/universities.json'
)
FETCH_TIMEOUT = 10          # seconds
CACHE_TTL = 5 * 60          # seconds, dashboard fetch cache

# Posti disponibili a livello nazionale
TOTAL_SPOTS = 19196
# Iscritti agli esami (usato per la percentuale di dati raccolti)
TOTAL_ENROLLED_STUDENTS = 53323

# 17.5 si arrotonda al 18 ufficiale
PASS_THRESHOLD = 17.5
OFFICIAL_MIN_SCORE = 18

SUBJECTS = ['physics', 'chemistry', 'biology']
RECORD_COLUMNS = ['label', 'score', 'subject', 'university_name', 'university_id', 'is_from_survey', 'source']
SUBJECT_MAP = {
    'fisica': 'physics',
    'chimica': 'chemistry',
    'biologia': 'biology',
}

# Prefissi etichetta -> fonte
SOURCE_PREFIXES = {
    'SRV-': 'internal_survey',
    'UNIMI-': 'unimi_survey',
    'LOGI-': 'logica_survey',
}
MINISTERIAL = 'ministerial'
SOURCES = [MINISTERIAL, 'internal_survey', 'unimi_survey', 'logica_survey']

SURVEY_SHARE_THRESHOLD = 0.5
OFFICIAL_COVERAGE_THRESHOLD = 5.0   # percent of expected exams

MAX_CASCADE_ROUNDS = 10
DISTRIBUTION_RANGE = (-3, 31)
ITEMS_PER_PAGE = 50

REGION_FIXES = {'Lomabrdia': 'Lombardia'}

PROJECTION_METHODS = ('national', 'per-university')


@dataclass(frozen=True)
class PipelineConfig:
    """Explicit toggles for one recomputation of the dashboard data."""
    include_survey_data: bool = True
    projection_method: str = 'national'
    total_seats: int = TOTAL_SPOTS
    pass_threshold: float = PASS_THRESHOLD

    def __post_init__(self):
        if self.projection_method not in PROJECTION_METHODS:
            raise ValueError(f"Unknown projection method: {self.projection_method}")
