from typing import List, Optional

from pydantic import BaseModel


class JobSearchParams(BaseModel):
    """Model for a job search request."""
    query: Optional[str] = None
    location: Optional[str] = None
    remote: bool = False
    limit: int = 20


class JobResult(BaseModel):
    """Model representing a job listing from a job feed."""
    id: str
    title: str
    company_name: Optional[str] = None
    company_logo_url: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    employment_type: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: Optional[str] = None
    skills: List[str] = []
    posted_at: Optional[str] = None
    is_remote: bool = False
    source: str
    fingerprint: Optional[str] = None


class JobSearchResponse(BaseModel):
    success: bool
    jobs: List[JobResult] = []
    total: int = 0
    source: str
    error: Optional[str] = None
