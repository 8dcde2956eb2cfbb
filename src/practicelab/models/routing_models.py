"""Pydantic models for skill scoring, role resolution and exercise routing."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

ExerciseType = Literal["coding", "case_study", "hybrid", "discussion"]
Confidence = Literal["high", "medium", "low"]
Difficulty = Literal["easy", "medium", "hard"]
Seniority = Literal["entry", "mid", "senior"]
SkillCategoryTag = Literal["language", "framework", "tool", "concept", "domain", "soft_skill"]
SkillSource = Literal["jd", "resume", "role_kit", "inferred"]
RoleFamily = Literal["tech", "data", "product", "sales", "business"]


class SkillTag(BaseModel):
    """A skill pulled out of free text."""
    skill: str
    category: SkillCategoryTag
    weight: float = 1.0
    source: SkillSource = "jd"


class RoleResolution(BaseModel):
    """Result of classifying a role title into an archetype."""
    role_archetype_id: Optional[str] = None
    role_archetype_name: Optional[str] = None
    role_family: Optional[RoleFamily] = None
    confidence: Confidence = "low"
    match_type: Literal["keyword", "title_pattern", "jd_inference", "none"] = "none"
    primary_skill_dimensions: Optional[List[str]] = None


class SuggestedExercise(BaseModel):
    id: Union[str, int]
    name: str
    type: Literal["coding_exercise", "case_template"]
    difficulty: Difficulty
    skill_tags: List[str] = []


class ExerciseRouting(BaseModel):
    """Which kind of exercise a technical round should use, and why."""
    exercise_type: ExerciseType = "hybrid"
    confidence: Confidence = "low"
    rationale: str = ""
    matched_signals: List[str] = []
    suggested_exercise: Optional[SuggestedExercise] = None
    fallback_type: Optional[ExerciseType] = None


class PhaseChallenge(BaseModel):
    """A concrete exercise picked from the catalogue for an interview phase."""
    challenge_id: str
    challenge_type: Literal["coding", "case_study"]
    exercise_id: Optional[int] = None
    case_template_id: Optional[int] = None
    title: str
    description: str
    difficulty: Difficulty = "medium"
    skill_tags: List[str] = []
    estimated_duration: int


class RoutingRequest(BaseModel):
    """Signals available when routing a technical round."""
    role_archetype_id: Optional[str] = None
    role_category: Optional[str] = None
    role_kit_id: Optional[int] = None
    job_target_id: Optional[str] = None
    interview_mode: Optional[str] = None
    skills: List[str] = []
    jd_text: Optional[str] = None
    seniority: Seniority = "mid"


class InterviewPhase(BaseModel):
    name: str
    phase_type: Optional[str] = None
    category: Optional[str] = None
    objectives: List[str] = []
    challenge: Optional[PhaseChallenge] = None
    routing: Optional[ExerciseRouting] = None


class RoutedExercise(BaseModel):
    routing: ExerciseRouting
    challenge: Optional[PhaseChallenge] = None


class SkillScore(BaseModel):
    skill: str
    categories: List[str] = Field(default_factory=list)
    score: int = 0
