"""Database models for the exercise catalogue."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class RoleArchetype:
    """Model representing a coarse job-role classification."""

    id: str
    name: str
    role_family: Optional[str] = None
    primary_skill_dimensions: List[str] = field(default_factory=list)
    is_active: bool = True


@dataclass
class RoleKit:
    """Model representing a stored role-specific interview template."""

    name: str
    role_category: Optional[str] = None
    level: Optional[str] = None
    domain: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    role_archetype_id: Optional[str] = None
    is_active: bool = True
    id: Optional[int] = None


@dataclass
class CodingExercise:
    """Model representing a coding exercise."""

    name: str
    difficulty: str = "medium"
    language: Optional[str] = None
    code_snippet: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    role_kit_id: Optional[int] = None
    id: Optional[int] = None


@dataclass
class CaseTemplate:
    """Model representing a business case template."""

    name: str
    difficulty: str = "medium"
    description: Optional[str] = None
    role_kit_id: Optional[int] = None
    id: Optional[int] = None
