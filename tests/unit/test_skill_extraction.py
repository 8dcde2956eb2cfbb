"""Tests for skill extraction from free text."""

from practicelab.skills.extraction import (
    categorize_skill,
    extract_skills_from_description,
    extract_skills_from_text,
    normalize_skill_name,
)


def test_normalize_skill_name_folds_synonyms():
    assert normalize_skill_name("Node.js") == "nodejs"
    assert normalize_skill_name("Docker") == "devops"
    assert normalize_skill_name("  Rust ") == "rust"


def test_categorize_skill():
    assert categorize_skill("python") == "language"
    assert categorize_skill("react") == "framework"
    assert categorize_skill("figma") == "tool"
    assert categorize_skill("microservices") == "concept"
    assert categorize_skill("something unheard of") == "soft_skill"


def test_extract_skills_repeats_raise_weight():
    tags = extract_skills_from_text("Python services. More Python. python everywhere.")
    python = next(tag for tag in tags if tag.skill == "python")
    assert python.weight == 2.0
    assert python.category == "language"
    assert python.source == "jd"


def test_extract_skills_orders_by_pattern_group():
    tags = extract_skills_from_text("We use React on top of Python", source="resume")
    names = [tag.skill for tag in tags]
    assert names.index("python") < names.index("react")
    assert all(tag.source == "resume" for tag in tags)


def test_extract_skills_handles_empty_text():
    assert extract_skills_from_text("") == []
    assert extract_skills_from_text(None) == []


def test_extract_skills_respects_word_boundaries():
    tags = extract_skills_from_text("Gopher enthusiasts welcome")
    assert "go" not in [tag.skill for tag in tags]


def test_extract_skills_from_description_keyword_order():
    skills = extract_skills_from_description("Kubernetes, Python and SQL on AWS")
    assert skills == ["python", "sql", "aws", "kubernetes"]
    assert extract_skills_from_description(None) == []
