from .config import PipelineConfig
from .fetch import FetchError, fetch_results, fetch_universities
from .pipeline import DashboardData, build_dashboard
from .resolver import UniversityResolver
from .simulation import AdmissionSimulator

__all__ = [
    'PipelineConfig',
    'FetchError',
    'fetch_results',
    'fetch_universities',
    'DashboardData',
    'build_dashboard',
    'UniversityResolver',
    'AdmissionSimulator',
]
