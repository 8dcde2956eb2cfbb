#!/usr/bin/env python3
"""
Practice Lab API

This FastAPI service exposes skill relevance scoring, role archetype
resolution, technical exercise routing and the exercise catalogue.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ...config import settings
from ...db.repository import DatabaseError, ExerciseDatabase, row_to_dict
from ...db.seed import seed_defaults
from ...logging_config import setup_logging
from ...models.db_models import CaseTemplate, CodingExercise, RoleKit
from ...models.job_models import JobSearchParams, JobSearchResponse
from ...models.routing_models import (
    Difficulty,
    ExerciseRouting,
    InterviewPhase,
    RoleResolution,
    RoutedExercise,
    RoutingRequest,
    SkillScore,
    SkillSource,
    SkillTag,
)
from ...routing.archetypes import resolve_role_archetype
from ...routing.technical_router import TechnicalInterviewRouter
from ...services.jobs.job_search import infer_seniority, search_jobs
from ...skills.extraction import extract_skills_from_text
from ...skills.taxonomy import (
    get_default_skills_for_round,
    get_round_categories,
    get_skill_categories,
    get_skill_relevance_score,
    get_skills_for_round,
    list_round_types,
)

# Load environment variables
load_dotenv()

# Create module-specific logger
logger = setup_logging(__name__)


# --- Request / response models ---

class RoundSkillsRequest(BaseModel):
    skills: List[str] = []
    round_type: str
    count: Optional[int] = Field(default=None, ge=1)


class RoundSkillsResponse(BaseModel):
    round_type: str
    skills: List[str]
    scores: List[SkillScore]
    used_defaults: bool


class SkillCategoriesRequest(BaseModel):
    skills: List[str]
    round_type: Optional[str] = None


class ExtractSkillsRequest(BaseModel):
    text: str
    source: SkillSource = "jd"


class ResolveRoleRequest(BaseModel):
    role_title: str
    jd_text: Optional[str] = None


class RouteRequest(RoutingRequest):
    # Free-text requirement such as "3-5 years"; overrides seniority when given
    experience: Optional[str] = None


class EnrichPhasesRequest(BaseModel):
    phases: List[InterviewPhase]
    routing: RouteRequest = RouteRequest()


class RoleKitCreate(BaseModel):
    name: str
    role_category: Optional[str] = None
    level: Optional[str] = None
    domain: Optional[str] = None
    skills: List[str] = []
    role_archetype_id: Optional[str] = None


class CodingExerciseCreate(BaseModel):
    name: str
    difficulty: Difficulty = "medium"
    language: Optional[str] = None
    code_snippet: Optional[str] = None
    tags: List[str] = []


class CaseTemplateCreate(BaseModel):
    name: str
    difficulty: Difficulty = "medium"
    description: Optional[str] = None


def _to_routing_request(request: RouteRequest) -> RoutingRequest:
    data = request.model_dump(exclude={"experience"})
    if request.experience:
        data["seniority"] = infer_seniority(request.experience)
    return RoutingRequest(**data)


def create_app(db_path: Optional[str] = None, seed: Optional[bool] = None) -> FastAPI:
    """Build the API application around one exercise catalogue."""
    seed_catalogue = settings.seed_on_startup if seed is None else seed

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the catalogue, create tables, optionally seed defaults."""
        catalogue = ExerciseDatabase(db_path)
        await catalogue.init_db()
        if seed_catalogue:
            await seed_defaults(catalogue)
        app.state.catalogue = catalogue
        app.state.router = TechnicalInterviewRouter(
            catalogue, fetch_limit=settings.exercise_fetch_limit
        )
        logger.info("Practice lab API started", extra={"db_path": catalogue.db_path})
        try:
            yield
        finally:
            await catalogue.close()

    app = FastAPI(
        title="Practice Lab Service",
        description="Skill relevance scoring and technical exercise routing for interview practice",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_catalogue(request: Request) -> ExerciseDatabase:
        return request.app.state.catalogue

    def get_router(request: Request) -> TechnicalInterviewRouter:
        return request.app.state.router

    @app.get("/health")
    async def health_check(catalogue: ExerciseDatabase = Depends(get_catalogue)):
        """Health check endpoint for Docker healthcheck."""
        if await catalogue.check_connection():
            return {"status": "healthy", "database": "connected"}
        return {"status": "unhealthy", "database": "disconnected"}

    # --- Skills ---

    @app.get("/api/skills/rounds")
    async def get_round_types():
        """List round types and their prioritised skill categories."""
        return {round_type: get_round_categories(round_type) for round_type in list_round_types()}

    @app.get("/api/skills/rounds/{round_type}")
    async def get_round(round_type: str):
        categories = get_round_categories(round_type)
        if not categories:
            raise HTTPException(status_code=404, detail=f"Unknown round type: {round_type}")
        return {
            "round_type": round_type,
            "categories": categories,
            "default_skills": get_default_skills_for_round(round_type),
        }

    @app.post("/api/skills/categories", response_model=List[SkillScore])
    async def categorize_skills(request: SkillCategoriesRequest):
        """Categorize skills, scoring them against a round type when one is given."""
        return [
            SkillScore(
                skill=skill,
                categories=get_skill_categories(skill),
                score=get_skill_relevance_score(skill, request.round_type) if request.round_type else 0,
            )
            for skill in request.skills
        ]

    @app.post("/api/skills/round", response_model=RoundSkillsResponse)
    async def skills_for_round(request: RoundSkillsRequest):
        """Pick the most relevant skills for an interview round."""
        count = request.count or settings.default_skills_per_round
        used_defaults = not request.skills
        if used_defaults:
            skills = get_default_skills_for_round(request.round_type)[:count]
        else:
            skills = get_skills_for_round(request.skills, request.round_type, count)

        return RoundSkillsResponse(
            round_type=request.round_type,
            skills=skills,
            scores=[
                SkillScore(
                    skill=skill,
                    categories=get_skill_categories(skill),
                    score=get_skill_relevance_score(skill, request.round_type),
                )
                for skill in request.skills
            ],
            used_defaults=used_defaults,
        )

    @app.post("/api/skills/extract", response_model=List[SkillTag])
    async def extract_skills(request: ExtractSkillsRequest):
        return extract_skills_from_text(request.text, request.source)

    # --- Roles and routing ---

    @app.post("/api/roles/resolve", response_model=RoleResolution)
    async def resolve_role(
        request: ResolveRoleRequest, catalogue: ExerciseDatabase = Depends(get_catalogue)
    ):
        try:
            return await resolve_role_archetype(request.role_title, request.jd_text, catalogue)
        except DatabaseError as e:
            logger.error("Error resolving role archetype: %s", e)
            raise HTTPException(status_code=500, detail=str(e))

    @app.post("/api/routing/technical", response_model=ExerciseRouting)
    async def route_technical(
        request: RouteRequest, router: TechnicalInterviewRouter = Depends(get_router)
    ):
        """Decide between coding and case-study exercises for a technical round."""
        return await router.route(_to_routing_request(request))

    @app.post("/api/routing/exercise", response_model=RoutedExercise)
    async def route_exercise(
        request: RouteRequest, router: TechnicalInterviewRouter = Depends(get_router)
    ):
        """Route a technical round and pick a concrete exercise."""
        return await router.route_and_select(_to_routing_request(request))

    @app.post("/api/routing/phases", response_model=List[InterviewPhase])
    async def route_phases(
        request: EnrichPhasesRequest, router: TechnicalInterviewRouter = Depends(get_router)
    ):
        """Attach exercises to the technical and case phases of an interview plan."""
        return await router.enrich_phases(request.phases, _to_routing_request(request.routing))

    # --- Catalogue ---

    @app.get("/api/role-kits")
    async def list_role_kits(
        role_category: Optional[str] = None,
        catalogue: ExerciseDatabase = Depends(get_catalogue),
    ) -> List[Dict[str, Any]]:
        try:
            kits = await catalogue.list_role_kits(role_category)
        except DatabaseError as e:
            logger.error("Error listing role kits: %s", e)
            raise HTTPException(status_code=500, detail=str(e))
        return [row_to_dict(kit) for kit in kits]

    @app.post("/api/role-kits", status_code=201)
    async def create_role_kit(
        request: RoleKitCreate, catalogue: ExerciseDatabase = Depends(get_catalogue)
    ) -> Dict[str, Any]:
        kit = RoleKit(**request.model_dump())
        try:
            kit.id = await catalogue.insert_role_kit(kit)
        except DatabaseError as e:
            logger.error("Error creating role kit: %s", e)
            raise HTTPException(status_code=500, detail=str(e))
        return row_to_dict(kit)

    async def _require_role_kit(catalogue: ExerciseDatabase, role_kit_id: int) -> RoleKit:
        try:
            kit = await catalogue.get_role_kit(role_kit_id)
        except DatabaseError as e:
            logger.error("Error loading role kit %s: %s", role_kit_id, e)
            raise HTTPException(status_code=500, detail=str(e))
        if kit is None:
            raise HTTPException(status_code=404, detail="Role kit not found")
        return kit

    @app.get("/api/role-kits/{role_kit_id}")
    async def get_role_kit(
        role_kit_id: int, catalogue: ExerciseDatabase = Depends(get_catalogue)
    ) -> Dict[str, Any]:
        kit = await _require_role_kit(catalogue, role_kit_id)
        try:
            coding = await catalogue.list_coding_exercises(role_kit_id, limit=100)
            cases = await catalogue.list_case_templates(role_kit_id, limit=100)
        except DatabaseError as e:
            logger.error("Error loading exercises for role kit %s: %s", role_kit_id, e)
            raise HTTPException(status_code=500, detail=str(e))
        return {
            **row_to_dict(kit),
            "coding_exercises": [row_to_dict(exercise) for exercise in coding],
            "case_templates": [row_to_dict(template) for template in cases],
        }

    @app.post("/api/role-kits/{role_kit_id}/coding-exercises", status_code=201)
    async def add_coding_exercise(
        role_kit_id: int,
        request: CodingExerciseCreate,
        catalogue: ExerciseDatabase = Depends(get_catalogue),
    ) -> Dict[str, Any]:
        await _require_role_kit(catalogue, role_kit_id)
        exercise = CodingExercise(role_kit_id=role_kit_id, **request.model_dump())
        try:
            exercise.id = await catalogue.insert_coding_exercise(exercise)
        except DatabaseError as e:
            logger.error("Error creating coding exercise: %s", e)
            raise HTTPException(status_code=500, detail=str(e))
        return row_to_dict(exercise)

    @app.post("/api/role-kits/{role_kit_id}/case-templates", status_code=201)
    async def add_case_template(
        role_kit_id: int,
        request: CaseTemplateCreate,
        catalogue: ExerciseDatabase = Depends(get_catalogue),
    ) -> Dict[str, Any]:
        await _require_role_kit(catalogue, role_kit_id)
        template = CaseTemplate(role_kit_id=role_kit_id, **request.model_dump())
        try:
            template.id = await catalogue.insert_case_template(template)
        except DatabaseError as e:
            logger.error("Error creating case template: %s", e)
            raise HTTPException(status_code=500, detail=str(e))
        return row_to_dict(template)

    @app.get("/api/catalogue/stats")
    async def catalogue_stats(catalogue: ExerciseDatabase = Depends(get_catalogue)):
        """Get catalogue row counts."""
        try:
            return await catalogue.get_stats()
        except DatabaseError as e:
            logger.error("Error getting stats: %s", e)
            raise HTTPException(status_code=500, detail=str(e))

    # --- Jobs ---

    @app.get("/api/jobs/search", response_model=JobSearchResponse)
    def job_search(
        query: Optional[str] = None,
        location: Optional[str] = None,
        remote: bool = False,
        limit: int = Query(default=settings.job_search_default_limit, ge=1, le=100),
    ):
        """Search job listings. Runs in the threadpool since the feed client is blocking."""
        return search_jobs(JobSearchParams(query=query, location=location, remote=remote, limit=limit))

    return app


app = create_app()


def main() -> None:
    uvicorn.run(
        "practicelab.services.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
