"""
Job search service.

Searches the RemoteOK public job feed and falls back to a small set of mock
listings when the feed is unavailable or returns nothing.
"""

import hashlib
import re
import uuid
from typing import Any, Dict, List, Optional, Tuple

import requests

from ...config import settings
from ...logging_config import log_structured, setup_logging
from ...models.job_models import JobResult, JobSearchParams, JobSearchResponse
from ...skills.extraction import extract_skills_from_description
from ...utils.text import normalize_whitespace

logger = setup_logging(__name__)

USER_AGENT = "PracticeLab Job Search Bot"


class JobSearchError(Exception):
    """Exception raised when a job feed cannot be read."""

    pass


def generate_job_fingerprint(
    role_title: str, company_name: Optional[str] = None, location: Optional[str] = None
) -> str:
    """Generate a fingerprint for job deduplication."""
    data = "|".join(normalize_whitespace(part) for part in (role_title, company_name, location))
    return hashlib.md5(data.encode("utf-8")).hexdigest()


def parse_experience_years(experience_text: Optional[str]) -> Tuple[int, int]:
    """
    Parse an experience requirement into a (min, max) range of years.

    Understands ranges ("3-5 years", "2 to 4"), open ranges ("5+"), single
    values ("3 years") and level words (entry, mid, senior, principal).
    Anything else is (0, 99).
    """
    if not experience_text:
        return 0, 99

    text = experience_text.lower()

    range_match = re.search(r"(\d+)\s*(?:-|to)\s*(\d+)", text)
    if range_match:
        return int(range_match.group(1)), int(range_match.group(2))

    plus_match = re.search(r"(\d+)\+", text)
    if plus_match:
        return int(plus_match.group(1)), 99

    single_match = re.search(r"(\d+)\s*year", text)
    if single_match:
        years = int(single_match.group(1))
        return years, years + 2

    if any(word in text for word in ("entry", "junior", "fresher")):
        return 0, 2
    if any(word in text for word in ("mid", "intermediate")):
        return 2, 5
    if any(word in text for word in ("senior", "lead")):
        return 5, 10
    if any(word in text for word in ("principal", "staff", "director")):
        return 8, 99

    return 0, 99


def infer_seniority(experience_text: Optional[str]) -> str:
    """Map an experience requirement onto entry / mid / senior."""
    min_years, _ = parse_experience_years(experience_text)
    if min_years < 2:
        return "entry"
    if min_years < 5:
        return "mid"
    return "senior"


def _matches_query(job: Dict[str, Any], query: str) -> bool:
    if not query:
        return True
    tags = job.get("tags") or []
    return (
        query in (job.get("position") or "").lower()
        or query in (job.get("company") or "").lower()
        or any(query in str(tag).lower() for tag in tags)
    )


def _matches_location(job_location: Optional[str], location: Optional[str]) -> bool:
    if not location:
        return True
    return location.strip().lower() in (job_location or "Remote").lower()


def _to_job_result(job: Dict[str, Any]) -> JobResult:
    title = job.get("position") or "Untitled role"
    company = job.get("company")
    location = job.get("location") or "Remote"
    tags = [str(tag) for tag in (job.get("tags") or [])]
    return JobResult(
        id=str(job.get("id") or uuid.uuid4()),
        title=title,
        company_name=company,
        company_logo_url=job.get("company_logo"),
        location=location,
        description=job.get("description"),
        url=job.get("url"),
        employment_type="Full-time",
        salary_min=job.get("salary_min") or None,
        salary_max=job.get("salary_max") or None,
        salary_currency="USD",
        skills=tags or extract_skills_from_description(job.get("description")),
        posted_at=job.get("date"),
        is_remote=True,
        source="remoteok",
        fingerprint=generate_job_fingerprint(title, company, location),
    )


def fetch_remoteok_feed(timeout: Optional[int] = None) -> List[Dict[str, Any]]:
    """Fetch the raw RemoteOK feed; the first element is metadata and is dropped."""
    try:
        response = requests.get(
            settings.remoteok_api_url,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout or settings.job_search_timeout,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        raise JobSearchError(f"RemoteOK API error: {e}") from e

    if not isinstance(data, list):
        raise JobSearchError("RemoteOK API returned an unexpected payload")
    return [job for job in data[1:] if isinstance(job, dict)]


def search_remote_jobs(
    query: Optional[str] = None, limit: Optional[int] = None, location: Optional[str] = None
) -> JobSearchResponse:
    """
    Search remote jobs on RemoteOK. Errors come back as an unsuccessful response.

    A location keeps listings whose location contains it; listings without
    one count as "Remote".
    """
    limit = limit or settings.job_search_default_limit
    try:
        feed = fetch_remoteok_feed()
    except JobSearchError as e:
        logger.error("[RemoteOK] %s", e)
        return JobSearchResponse(success=False, source="remoteok", error=str(e))

    needle = (query or "").lower()
    filtered = [
        job for job in feed if _matches_query(job, needle) and _matches_location(job.get("location"), location)
    ]
    jobs = [_to_job_result(job) for job in filtered[:limit]]

    return JobSearchResponse(success=True, jobs=jobs, total=len(filtered), source="remoteok")


MOCK_JOBS = [
    {
        "title": "Software Engineer",
        "company_name": "Acme Cloud",
        "location": "Bengaluru, India",
        "description": "Build Python and Go microservices on AWS with Docker and Kubernetes.",
    },
    {
        "title": "Product Manager",
        "company_name": "ShopFast",
        "location": "Remote",
        "description": "Own the checkout roadmap, define metrics and run A/B experiments.",
    },
    {
        "title": "Data Analyst",
        "company_name": "Insightly",
        "location": "Mumbai, India",
        "description": "Analyse product data with SQL and build dashboards in Tableau.",
    },
]


def get_mock_jobs(params: JobSearchParams) -> JobSearchResponse:
    needle = (params.query or "").lower()
    jobs = []
    for item in MOCK_JOBS:
        haystack = f"{item['title']} {item['company_name']} {item['description']}".lower()
        if needle and needle not in haystack:
            continue
        if params.remote and item["location"] != "Remote":
            continue
        if not _matches_location(item["location"], params.location):
            continue
        jobs.append(
            JobResult(
                id=f"mock-{generate_job_fingerprint(item['title'], item['company_name'], item['location'])[:12]}",
                title=item["title"],
                company_name=item["company_name"],
                location=item["location"],
                description=item["description"],
                employment_type="Full-time",
                skills=extract_skills_from_description(item["description"]),
                is_remote=item["location"] == "Remote",
                source="mock",
                fingerprint=generate_job_fingerprint(
                    item["title"], item["company_name"], item["location"]
                ),
            )
        )
    jobs = jobs[: params.limit]
    return JobSearchResponse(success=True, jobs=jobs, total=len(jobs), source="mock")


def search_jobs(params: JobSearchParams) -> JobSearchResponse:
    """Search the live feed first and fall back to mock listings."""
    logger.info(
        "Searching jobs",
        extra={"query": params.query, "location": params.location, "remote": params.remote},
    )

    result = search_remote_jobs(params.query, params.limit, params.location)
    if result.success and result.jobs:
        log_structured(
            logger, "info", "Found jobs from RemoteOK", {"count": len(result.jobs), "total": result.total}
        )
        return result

    logger.info("Using mock data as fallback")
    return get_mock_jobs(params)
