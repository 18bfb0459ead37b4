"""Search orchestration: query generation, known sources, web search APIs,
batched execution, ranking and the engine tying them together."""

from clinic_pipeline.search.engine import ClinicSearchEngine
from clinic_pipeline.search.queries import expand_user_query, select_search_queries
from clinic_pipeline.search.ranking import haversine_km, rank_clinics, score_clinic
from clinic_pipeline.search.sources import KNOWN_SOURCES, KnownSource, prioritize_sources_by_location
from clinic_pipeline.search.tasks import SearchTask, TaskResult, run_batched

__all__ = [
    "ClinicSearchEngine",
    "KNOWN_SOURCES",
    "KnownSource",
    "SearchTask",
    "TaskResult",
    "expand_user_query",
    "haversine_km",
    "prioritize_sources_by_location",
    "rank_clinics",
    "run_batched",
    "score_clinic",
    "select_search_queries",
]
