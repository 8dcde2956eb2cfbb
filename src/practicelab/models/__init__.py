"""
Data models and schemas for the practice-lab service.
"""

from .db_models import CaseTemplate, CodingExercise, RoleArchetype, RoleKit
from .job_models import JobResult, JobSearchParams, JobSearchResponse
from .routing_models import (
    ExerciseRouting,
    InterviewPhase,
    PhaseChallenge,
    RoleResolution,
    RoutedExercise,
    RoutingRequest,
    SkillScore,
    SkillTag,
    SuggestedExercise,
)

__all__ = [
    "CaseTemplate",
    "CodingExercise",
    "RoleArchetype",
    "RoleKit",
    "JobResult",
    "JobSearchParams",
    "JobSearchResponse",
    "ExerciseRouting",
    "InterviewPhase",
    "PhaseChallenge",
    "RoleResolution",
    "RoutedExercise",
    "RoutingRequest",
    "SkillScore",
    "SkillTag",
    "SuggestedExercise",
]
