"""
Role archetype resolution.

Classifies a free-text role title (and, failing that, job description text)
into one of the coarse role archetypes the exercise router understands.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, NamedTuple, Optional, Tuple

from ..models.routing_models import RoleResolution
from ..utils.text import count_terms, normalize_whitespace

if TYPE_CHECKING:
    from ..db.repository import ExerciseDatabase

logger = logging.getLogger(__name__)

# A JD alone must hit at least this many patterns of one archetype.
MIN_JD_PATTERN_HITS = 2


class ArchetypeDefinition(NamedTuple):
    name: str
    role_family: str
    patterns: Tuple[str, ...]


ROLE_ARCHETYPES: Dict[str, ArchetypeDefinition] = {
    "core_software_engineer": ArchetypeDefinition(
        "Core Software Engineer", "tech",
        ("software engineer", "software developer", "sde", "backend", "frontend", "fullstack",
         "full stack", "full-stack", "mobile developer", "ios developer", "android developer",
         "web developer"),
    ),
    "data_analyst": ArchetypeDefinition(
        "Data Analyst", "data",
        ("data analyst", "business analyst", "analytics", "bi analyst", "business intelligence"),
    ),
    "data_engineer": ArchetypeDefinition(
        "Data Engineer", "data",
        ("data engineer", "etl developer", "data platform", "data infrastructure",
         "big data engineer"),
    ),
    "data_scientist": ArchetypeDefinition(
        "Data Scientist", "data",
        ("data scientist", "data science", "applied scientist", "research scientist"),
    ),
    "ml_engineer": ArchetypeDefinition(
        "ML Engineer", "data",
        ("ml engineer", "machine learning engineer", "mlops", "ai engineer", "deep learning"),
    ),
    "infra_platform": ArchetypeDefinition(
        "Infrastructure / Platform Engineer", "tech",
        ("devops", "sre", "site reliability", "platform engineer", "infrastructure",
         "cloud engineer", "kubernetes", "devsecops"),
    ),
    "security_engineer": ArchetypeDefinition(
        "Security Engineer", "tech",
        ("security engineer", "security analyst", "cybersecurity", "infosec",
         "penetration tester", "appsec"),
    ),
    "qa_test_engineer": ArchetypeDefinition(
        "QA / Test Engineer", "tech",
        ("qa engineer", "quality assurance", "test engineer", "sdet", "automation engineer",
         "quality engineer"),
    ),
    "product_manager": ArchetypeDefinition(
        "Product Manager", "product",
        ("product manager", "pm", "product owner", "apm", "associate product manager",
         "group product manager"),
    ),
    "technical_program_manager": ArchetypeDefinition(
        "Technical Program Manager", "product",
        ("technical program manager", "tpm", "program manager", "engineering program manager"),
    ),
    "product_designer": ArchetypeDefinition(
        "Product Designer", "product",
        ("product designer", "ux designer", "ui designer", "ux/ui", "interaction designer",
         "visual designer"),
    ),
    "marketing_growth": ArchetypeDefinition(
        "Marketing & Growth", "business",
        ("marketing", "growth", "digital marketing", "performance marketing", "brand marketing",
         "content marketing"),
    ),
    "sales_account": ArchetypeDefinition(
        "Sales & Account Management", "sales",
        ("sales", "account executive", "account manager", "business development",
         "sales executive", "enterprise sales"),
    ),
    "customer_success": ArchetypeDefinition(
        "Customer Success", "sales",
        ("customer success", "csm", "customer success manager", "client success",
         "customer experience"),
    ),
    "bizops_strategy": ArchetypeDefinition(
        "BizOps & Strategy", "business",
        ("bizops", "business operations", "strategy", "chief of staff", "strategy analyst",
         "corporate strategy"),
    ),
    "operations_general": ArchetypeDefinition(
        "Operations", "business",
        ("operations", "ops manager", "operations manager", "supply chain", "logistics",
         "process improvement"),
    ),
    "finance_strategy": ArchetypeDefinition(
        "Finance & Strategy", "business",
        ("finance", "fp&a", "financial analyst", "investment banking", "corporate finance",
         "treasury"),
    ),
    "consulting_general": ArchetypeDefinition(
        "Consulting", "business",
        ("consultant", "management consultant", "strategy consultant", "associate consultant",
         "senior consultant"),
    ),
}


def get_role_family(archetype_id: Optional[str]) -> Optional[str]:
    definition = ROLE_ARCHETYPES.get(archetype_id or "")
    return definition.role_family if definition else None


def _best_match(text: str, min_hits: int) -> Optional[Tuple[str, int]]:
    best: Optional[Tuple[str, int]] = None
    for archetype_id, definition in ROLE_ARCHETYPES.items():
        hits = count_terms(text, definition.patterns)
        if hits >= min_hits and (best is None or hits > best[1]):
            best = (archetype_id, hits)
    return best


def match_role_archetype(role_title: str, jd_text: Optional[str] = None) -> Optional[Tuple[str, str]]:
    """
    Pick the archetype whose patterns best match the title, or the JD.

    Returns:
        (archetype_id, match_type) or None when nothing matched
    """
    title_match = _best_match(normalize_whitespace(role_title), 1)
    if title_match:
        return title_match[0], "keyword"

    if jd_text:
        jd_match = _best_match(normalize_whitespace(jd_text), MIN_JD_PATTERN_HITS)
        if jd_match:
            return jd_match[0], "jd_inference"

    return None


async def resolve_role_archetype(
    role_title: str,
    jd_text: Optional[str] = None,
    catalogue: Optional["ExerciseDatabase"] = None,
) -> RoleResolution:
    """
    Resolve a role title to a role archetype.

    When a catalogue is given its archetype row supplies the display name and
    primary skill dimensions; an archetype missing from the catalogue or marked
    inactive there counts as no match.

    Args:
        role_title: Job title as entered by the user or the job feed
        jd_text: Optional job description text
        catalogue: Optional exercise catalogue holding role_archetypes rows

    Returns:
        RoleResolution: The resolved archetype, or an empty low-confidence one
    """
    match = match_role_archetype(role_title or "", jd_text)
    if not match:
        return RoleResolution()

    archetype_id, match_type = match
    definition = ROLE_ARCHETYPES[archetype_id]
    name = definition.name
    dimensions: Optional[List[str]] = None

    if catalogue is not None:
        row = await catalogue.get_role_archetype(archetype_id)
        if row is None or not row.is_active:
            logger.info("Archetype %s matched but not active in catalogue", archetype_id)
            return RoleResolution()
        name = row.name
        dimensions = row.primary_skill_dimensions or None

    return RoleResolution(
        role_archetype_id=archetype_id,
        role_archetype_name=name,
        role_family=definition.role_family,
        confidence="high" if match_type == "keyword" else "medium",
        match_type=match_type,
        primary_skill_dimensions=dimensions,
    )
