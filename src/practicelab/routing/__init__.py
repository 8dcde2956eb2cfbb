"""Role archetype resolution and technical exercise routing."""

from .archetypes import resolve_role_archetype
from .technical_router import (
    TechnicalInterviewRouter,
    enrich_phases_with_exercises,
    fetch_exercise_for_routing,
    route_and_select_exercise,
    route_technical_interview,
)

__all__ = [
    "resolve_role_archetype",
    "TechnicalInterviewRouter",
    "enrich_phases_with_exercises",
    "fetch_exercise_for_routing",
    "route_and_select_exercise",
    "route_technical_interview",
]
