"""
Technical interview router.

Decides whether a technical interview round should use a coding exercise or a
case study, based on interview mode, role archetype, role category, skills and
role kit, then picks a matching exercise from the catalogue.
"""

import asyncio
import logging
import random
from typing import Dict, List, Optional, Tuple

from ..db.repository import DatabaseError, ExerciseDatabase
from ..models.routing_models import (
    ExerciseRouting,
    InterviewPhase,
    PhaseChallenge,
    RoutedExercise,
    RoutingRequest,
    SuggestedExercise,
)
from ..skills.extraction import extract_skills_from_text
from ..utils.text import matching_terms

logger = logging.getLogger(__name__)

# Role categories that typically require coding exercises
CODING_FOCUSED_CATEGORIES = ("tech", "data")

# Role categories that typically require case studies
CASE_STUDY_FOCUSED_CATEGORIES = ("product", "business", "sales", "consulting")

# Role archetypes that strongly indicate coding exercises
CODING_FOCUSED_ARCHETYPES = (
    "core_software_engineer",
    "data_engineer",
    "ml_engineer",
    "infra_platform",
    "security_engineer",
    "qa_test_engineer",
)

# Role archetypes that strongly indicate case studies
CASE_STUDY_FOCUSED_ARCHETYPES = (
    "product_manager",
    "technical_program_manager",
    "bizops_strategy",
    "operations_general",
    "finance_strategy",
    "consulting_general",
    "marketing_growth",
)

# Role archetypes that may go either way
HYBRID_ARCHETYPES = (
    "data_analyst",
    "data_scientist",
    "product_designer",
    "customer_success",
    "sales_account",
)

CODING_SKILL_SIGNALS = (
    "programming", "coding", "algorithm", "data structure", "dsa", "leetcode",
    "python", "javascript", "java", "c++", "golang", "rust", "typescript", "react", "node.js",
    "backend", "frontend", "fullstack", "api", "microservices", "database", "sql", "nosql",
    "cloud", "aws", "gcp", "azure", "kubernetes", "docker", "ci/cd", "devops",
    "debugging", "testing", "unit test", "integration test",
    "machine learning", "deep learning", "tensorflow", "pytorch",
    "data pipeline", "etl", "spark", "kafka",
)

CASE_STUDY_SKILL_SIGNALS = (
    "product management", "product strategy", "roadmap", "prioritization", "stakeholder",
    "business case", "market analysis", "competitive analysis", "go-to-market", "user research",
    "metrics", "kpi", "okr", "growth", "monetization", "pricing", "customer journey", "funnel",
    "conversion", "retention", "acquisition", "a/b testing", "experiment", "hypothesis",
    "strategy", "consulting", "problem solving", "structured thinking", "presentation",
    "communication", "estimation", "market sizing", "case interview", "business development",
    "partnership", "negotiation", "project management", "program management",
    "cross-functional", "leadership",
)

INTERVIEW_MODE_TO_EXERCISE: Dict[str, str] = {
    "coding_technical": "coding",
    "case_problem_solving": "case_study",
    "system_deep_dive": "hybrid",
    "behavioral": "discussion",
    "hiring_manager": "discussion",
    "role_based": "hybrid",
    "custom": "hybrid",
    "skill_only": "hybrid",
}

SENIORITY_TO_DIFFICULTY = {"entry": "easy", "mid": "medium", "senior": "hard"}
DIFFICULTIES = ("easy", "medium", "hard")

TECHNICAL_PHASE_KEYWORDS = ("technical", "coding", "problem solving", "assessment", "dsa", "algorithm")
CASE_PHASE_KEYWORDS = (
    "case study", "case-study", "product sense", "estimation", "business case", "analytics case",
)

# A side wins the skill vote only when it beats the other by this factor.
SIGNAL_DOMINANCE_RATIO = 1.5
HIGH_CONFIDENCE_SIGNAL_COUNT = 5
MAX_REPORTED_SKILL_SIGNALS = 5

CODING_DURATION_MINUTES = 15
CASE_DURATION_MINUTES = 20


def _difficulty(value: Optional[str]) -> str:
    """Catalogue difficulty as one of easy / medium / hard; anything else is medium."""
    cleaned = (value or "").strip().lower()
    return cleaned if cleaned in DIFFICULTIES else "medium"


def analyze_skill_signals(skills: List[str]) -> Dict[str, object]:
    """
    Count coding and case-study keywords in a list of skills.

    Matching is a plain substring scan of the space-joined, lowercased skills.
    """
    skills_text = " ".join(skill.lower() for skill in skills)

    matched_coding = matching_terms(skills_text, CODING_SKILL_SIGNALS)
    matched_case_study = matching_terms(skills_text, CASE_STUDY_SKILL_SIGNALS)

    return {
        "coding_score": len(matched_coding),
        "case_study_score": len(matched_case_study),
        "matched_coding": matched_coding,
        "matched_case_study": matched_case_study,
    }


def get_exercise_type_from_archetype(role_archetype_id: Optional[str]) -> Tuple[str, str]:
    """Returns (exercise_type, confidence) implied by a role archetype."""
    if not role_archetype_id:
        return "hybrid", "low"
    if role_archetype_id in CODING_FOCUSED_ARCHETYPES:
        return "coding", "high"
    if role_archetype_id in CASE_STUDY_FOCUSED_ARCHETYPES:
        return "case_study", "high"
    if role_archetype_id in HYBRID_ARCHETYPES:
        return "hybrid", "medium"
    return "hybrid", "low"


def get_exercise_type_from_category(role_category: Optional[str]) -> Tuple[str, str]:
    """Returns (exercise_type, confidence) implied by a role category."""
    if not role_category:
        return "hybrid", "low"
    if role_category in CODING_FOCUSED_CATEGORIES:
        return "coding", "medium"
    if role_category in CASE_STUDY_FOCUSED_CATEGORIES:
        return "case_study", "medium"
    return "hybrid", "low"


def classify_phase(name: str, objectives: Optional[List[str]] = None) -> Tuple[bool, bool]:
    """Returns (is_technical, is_case) for an interview phase."""
    combined = f"{name.lower()} {' '.join(objectives or []).lower()}"
    is_technical = any(keyword in combined for keyword in TECHNICAL_PHASE_KEYWORDS)
    is_case = any(keyword in combined for keyword in CASE_PHASE_KEYWORDS)
    return is_technical, is_case


class TechnicalInterviewRouter:
    """Routes technical rounds to an exercise type and picks an exercise."""

    def __init__(
        self,
        catalogue: Optional[ExerciseDatabase] = None,
        rng: Optional[random.Random] = None,
        fetch_limit: int = 10,
    ):
        """Initialize the router.

        Args:
            catalogue: Exercise catalogue; without one no role kit fallback or
                exercise selection happens
            rng: Random source used to pick among equally suitable exercises
            fetch_limit: Maximum rows considered per exercise lookup
        """
        self.catalogue = catalogue
        self.rng = rng or random.Random()
        self.fetch_limit = fetch_limit

    async def route(self, request: RoutingRequest) -> ExerciseRouting:
        """
        Determine the exercise type for a technical round.

        Signals are applied in priority order: explicit interview mode, role
        archetype, role category, skill keywords (from the skills or the JD
        text), then the role kit's category.
        """
        matched_signals: List[str] = []
        exercise_type = "hybrid"
        confidence = "low"
        rationale = ""

        # 1. Interview mode wins when it names a concrete exercise type
        mode = request.interview_mode
        mode_type = INTERVIEW_MODE_TO_EXERCISE.get(mode) if mode else None
        if mode_type in ("coding", "case_study"):
            exercise_type = mode_type
            confidence = "high"
            rationale = f'Interview mode "{mode}" explicitly requires {mode_type}'
            matched_signals.append(f"interview_mode:{mode}")

        # 2. Role archetype
        archetype_id = request.role_archetype_id
        if confidence != "high" and archetype_id:
            archetype_type, archetype_confidence = get_exercise_type_from_archetype(archetype_id)
            if archetype_confidence == "high":
                exercise_type = archetype_type
                confidence = archetype_confidence
                rationale = f'Role archetype "{archetype_id}" strongly indicates {exercise_type}'
                matched_signals.append(f"archetype:{archetype_id}")
            elif archetype_type != "hybrid":
                exercise_type = archetype_type
                confidence = archetype_confidence
                matched_signals.append(f"archetype:{archetype_id}")

        # 3. Role category
        category = request.role_category
        if confidence == "low" and category:
            category_type, category_confidence = get_exercise_type_from_category(category)
            if category_type != "hybrid":
                exercise_type = category_type
                confidence = category_confidence
                rationale = f'Role category "{category}" suggests {exercise_type}'
                matched_signals.append(f"category:{category}")

        # 4. Skill keywords, extracted from the JD when no skills were given
        skills = list(request.skills)
        if request.jd_text and not skills:
            skills = [tag.skill for tag in extract_skills_from_text(request.jd_text, "jd")]

        if skills and confidence != "high":
            analysis = analyze_skill_signals(skills)
            coding_score = analysis["coding_score"]
            case_score = analysis["case_study_score"]

            if coding_score > case_score * SIGNAL_DOMINANCE_RATIO:
                exercise_type = "coding"
                confidence = "high" if coding_score >= HIGH_CONFIDENCE_SIGNAL_COUNT else "medium"
                rationale = (
                    f"Skill analysis shows {coding_score} coding signals "
                    f"vs {case_score} case study signals"
                )
                matched_signals.extend(
                    f"skill:{signal}"
                    for signal in analysis["matched_coding"][:MAX_REPORTED_SKILL_SIGNALS]
                )
            elif case_score > coding_score * SIGNAL_DOMINANCE_RATIO:
                exercise_type = "case_study"
                confidence = "high" if case_score >= HIGH_CONFIDENCE_SIGNAL_COUNT else "medium"
                rationale = (
                    f"Skill analysis shows {case_score} case study signals "
                    f"vs {coding_score} coding signals"
                )
                matched_signals.extend(
                    f"skill:{signal}"
                    for signal in analysis["matched_case_study"][:MAX_REPORTED_SKILL_SIGNALS]
                )

        # 5. Role kit category
        if confidence == "low" and request.role_kit_id and self.catalogue is not None:
            try:
                role_kit = await self.catalogue.get_role_kit(request.role_kit_id)
            except DatabaseError as e:
                logger.error("Error loading role kit %s: %s", request.role_kit_id, e)
                role_kit = None

            if role_kit is not None and role_kit.role_category:
                kit_type, _ = get_exercise_type_from_category(role_kit.role_category)
                if kit_type != "hybrid":
                    exercise_type = kit_type
                    confidence = "medium"
                    rationale = (
                        f'Role kit "{role_kit.name}" is in category "{role_kit.role_category}"'
                    )
                    matched_signals.append(f"roleKit:{role_kit.name}")

        if not rationale:
            rationale = (
                "No strong signals detected; defaulting to hybrid approach "
                "allowing both exercise types"
            )

        routing = ExerciseRouting(
            exercise_type=exercise_type,
            confidence=confidence,
            rationale=rationale,
            matched_signals=matched_signals,
            fallback_type="coding" if exercise_type == "hybrid" else None,
        )
        logger.info(
            "Routed technical round",
            extra={
                "exercise_type": routing.exercise_type,
                "confidence": routing.confidence,
                "signals": routing.matched_signals,
            },
        )
        return routing

    def _pick(self, rows: list, target_difficulty: str):
        matching = [row for row in rows if _difficulty(row.difficulty) == target_difficulty]
        if not matching:
            matching = rows
        return self.rng.choice(matching) if matching else None

    async def fetch_exercise(
        self, routing: ExerciseRouting, request: RoutingRequest
    ) -> Optional[PhaseChallenge]:
        """
        Pick a catalogue exercise that fits a routing decision.

        Rows matching the seniority's difficulty are preferred; when none do,
        any row is eligible. Catalogue errors are logged and treated as
        "nothing found".
        """
        if self.catalogue is None:
            return None

        target_difficulty = SENIORITY_TO_DIFFICULTY.get(request.seniority, "medium")
        role_kit_id = request.role_kit_id

        if routing.exercise_type in ("coding", "hybrid"):
            try:
                exercises = await self.catalogue.list_coding_exercises(
                    role_kit_id=role_kit_id, limit=self.fetch_limit
                )
            except DatabaseError as e:
                logger.error("Error fetching coding exercise: %s", e)
                exercises = []

            exercise = self._pick(exercises, target_difficulty)
            if exercise is not None:
                snippet = (exercise.code_snippet or "")[:200]
                return PhaseChallenge(
                    challenge_id=f"coding-{exercise.id}",
                    challenge_type="coding",
                    exercise_id=exercise.id,
                    title=exercise.name,
                    description=snippet or "Complete the coding challenge",
                    difficulty=_difficulty(exercise.difficulty),
                    skill_tags=list(exercise.tags),
                    estimated_duration=CODING_DURATION_MINUTES,
                )

        if routing.exercise_type == "case_study" or (
            routing.exercise_type == "hybrid" and routing.fallback_type == "case_study"
        ):
            try:
                templates = await self.catalogue.list_case_templates(
                    role_kit_id=role_kit_id, limit=self.fetch_limit
                )
            except DatabaseError as e:
                logger.error("Error fetching case template: %s", e)
                templates = []

            template = self._pick(templates, target_difficulty)
            if template is not None:
                return PhaseChallenge(
                    challenge_id=f"case-{template.id}",
                    challenge_type="case_study",
                    case_template_id=template.id,
                    title=template.name,
                    description=template.description or "Analyze and solve this business case",
                    difficulty=_difficulty(template.difficulty),
                    skill_tags=[],
                    estimated_duration=CASE_DURATION_MINUTES,
                )

        return None

    async def route_and_select(self, request: RoutingRequest) -> RoutedExercise:
        """Full routing plus exercise selection in one call."""
        routing = await self.route(request)
        challenge = await self.fetch_exercise(routing, request)

        if challenge is not None:
            routing.suggested_exercise = SuggestedExercise(
                id=challenge.challenge_id,
                name=challenge.title,
                type="coding_exercise" if challenge.challenge_type == "coding" else "case_template",
                difficulty=challenge.difficulty,
                skill_tags=challenge.skill_tags,
            )

        return RoutedExercise(routing=routing, challenge=challenge)

    async def _enrich_phase(self, phase: InterviewPhase, request: RoutingRequest) -> InterviewPhase:
        is_technical, is_case = classify_phase(phase.name, phase.objectives)
        if not is_technical and not is_case:
            return phase

        phase_mode = request.interview_mode
        if is_case and not is_technical:
            phase_mode = "case_problem_solving"
        elif is_technical and not is_case:
            phase_mode = "coding_technical"

        routed = await self.route_and_select(request.model_copy(update={"interview_mode": phase_mode}))

        return phase.model_copy(
            update={
                "phase_type": routed.challenge.challenge_type if routed.challenge else phase.phase_type,
                "challenge": routed.challenge,
                "routing": routed.routing,
            }
        )

    async def enrich_phases(
        self, phases: List[InterviewPhase], request: RoutingRequest
    ) -> List[InterviewPhase]:
        """
        Attach routed exercises to the technical and case phases of a plan.

        Phases that are neither technical nor case phases are returned as-is.
        """
        return list(
            await asyncio.gather(*(self._enrich_phase(phase, request) for phase in phases))
        )


async def route_technical_interview(
    request: RoutingRequest, catalogue: Optional[ExerciseDatabase] = None
) -> ExerciseRouting:
    return await TechnicalInterviewRouter(catalogue).route(request)


async def route_and_select_exercise(
    request: RoutingRequest, catalogue: Optional[ExerciseDatabase] = None
) -> RoutedExercise:
    return await TechnicalInterviewRouter(catalogue).route_and_select(request)


async def fetch_exercise_for_routing(
    routing: ExerciseRouting,
    request: RoutingRequest,
    catalogue: Optional[ExerciseDatabase] = None,
) -> Optional[PhaseChallenge]:
    return await TechnicalInterviewRouter(catalogue).fetch_exercise(routing, request)


async def enrich_phases_with_exercises(
    phases: List[InterviewPhase],
    request: RoutingRequest,
    catalogue: Optional[ExerciseDatabase] = None,
) -> List[InterviewPhase]:
    return await TechnicalInterviewRouter(catalogue).enrich_phases(phases, request)
