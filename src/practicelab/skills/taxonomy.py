"""
Skill taxonomy.

Maps free-text skills to skill categories and scores how relevant each skill
is for a given interview round type. Everything here is a pure function over
static tables.
"""

from typing import Dict, List

from ..utils.text import contains_term, fold_plural

# Skill categories that group related skills
SKILL_CATEGORIES = (
    "programming",    # Languages, frameworks, coding
    "data_sql",       # SQL, databases, data manipulation
    "architecture",   # System design, infrastructure
    "algorithms",     # Data structures, problem solving, complexity
    "ml_ai",          # Machine learning, AI, models
    "analytics",      # Data analysis, BI, visualization
    "product",        # Product management, strategy, roadmaps
    "business",       # Business acumen, cases, strategy
    "leadership",     # Management, team leading, mentoring
    "communication",  # Soft skills, presentation, collaboration
    "process",        # Methodologies, workflows, debugging
    "domain",         # Industry/domain specific knowledge
    "tools",          # Specific tools and platforms
    "design",         # UX/UI, visual design, research
    "sales",          # Sales, negotiation, persuasion
)

# Lowercase skill name -> categories. A skill can belong to several.
SKILL_TO_CATEGORIES: Dict[str, List[str]] = {
    # Programming languages
    "python": ["programming"],
    "java": ["programming"],
    "javascript": ["programming"],
    "typescript": ["programming"],
    "c++": ["programming"],
    "c#": ["programming"],
    "go": ["programming"],
    "golang": ["programming"],
    "rust": ["programming"],
    "ruby": ["programming"],
    "php": ["programming"],
    "swift": ["programming"],
    "kotlin": ["programming"],
    "scala": ["programming"],
    "r": ["programming", "analytics"],

    # Web frameworks
    "react": ["programming"],
    "angular": ["programming"],
    "vue": ["programming"],
    "vue.js": ["programming"],
    "node.js": ["programming"],
    "nodejs": ["programming"],
    "express": ["programming"],
    "django": ["programming"],
    "flask": ["programming"],
    "spring": ["programming"],
    "spring boot": ["programming"],
    ".net": ["programming"],
    "asp.net": ["programming"],

    # SQL & Databases
    "sql": ["data_sql"],
    "mysql": ["data_sql"],
    "postgresql": ["data_sql"],
    "postgres": ["data_sql"],
    "oracle": ["data_sql"],
    "sql server": ["data_sql"],
    "mongodb": ["data_sql"],
    "redis": ["data_sql"],
    "cassandra": ["data_sql"],
    "dynamodb": ["data_sql"],
    "database design": ["data_sql", "architecture"],
    "data modeling": ["data_sql", "architecture"],
    "query optimization": ["data_sql"],
    "database administration": ["data_sql"],
    "nosql": ["data_sql"],

    # Data Engineering
    "etl": ["data_sql", "process"],
    "etl/elt": ["data_sql", "process"],
    "elt": ["data_sql", "process"],
    "data pipelines": ["data_sql", "architecture"],
    "data warehousing": ["data_sql", "architecture"],
    "spark": ["data_sql", "analytics"],
    "apache spark": ["data_sql", "analytics"],
    "airflow": ["data_sql", "tools"],
    "kafka": ["data_sql", "architecture"],
    "hadoop": ["data_sql", "tools"],
    "snowflake": ["data_sql", "tools"],
    "databricks": ["data_sql", "tools"],
    "dbt": ["data_sql", "tools"],

    # System Design & Architecture
    "system design": ["architecture"],
    "microservices": ["architecture"],
    "api design": ["architecture", "programming"],
    "rest api": ["architecture", "programming"],
    "graphql": ["architecture", "programming"],
    "distributed systems": ["architecture"],
    "scalability": ["architecture"],
    "high availability": ["architecture"],
    "load balancing": ["architecture"],
    "caching": ["architecture"],
    "message queues": ["architecture"],
    "event-driven": ["architecture"],
    "serverless": ["architecture"],

    # Cloud & Infrastructure
    "aws": ["tools", "architecture"],
    "azure": ["tools", "architecture"],
    "gcp": ["tools", "architecture"],
    "google cloud": ["tools", "architecture"],
    "docker": ["tools", "architecture"],
    "kubernetes": ["tools", "architecture"],
    "k8s": ["tools", "architecture"],
    "terraform": ["tools", "architecture"],
    "ci/cd": ["tools", "process"],
    "jenkins": ["tools"],
    "github actions": ["tools"],
    "devops": ["process", "tools"],

    # Algorithms & Problem Solving
    "algorithms": ["algorithms"],
    "data structures": ["algorithms"],
    "problem solving": ["algorithms"],
    "complexity analysis": ["algorithms"],
    "dynamic programming": ["algorithms"],
    "graph algorithms": ["algorithms"],
    "sorting": ["algorithms"],
    "searching": ["algorithms"],
    "recursion": ["algorithms"],
    "optimization": ["algorithms"],

    # ML & AI
    "machine learning": ["ml_ai"],
    "deep learning": ["ml_ai"],
    "neural networks": ["ml_ai"],
    "nlp": ["ml_ai"],
    "natural language processing": ["ml_ai"],
    "computer vision": ["ml_ai"],
    "tensorflow": ["ml_ai", "tools"],
    "pytorch": ["ml_ai", "tools"],
    "scikit-learn": ["ml_ai", "tools"],
    "model training": ["ml_ai"],
    "model deployment": ["ml_ai"],
    "feature engineering": ["ml_ai", "analytics"],
    "hyperparameter tuning": ["ml_ai"],
    "a/b testing": ["ml_ai", "analytics"],
    "llm": ["ml_ai"],
    "generative ai": ["ml_ai"],
    "prompt engineering": ["ml_ai"],

    # Analytics & BI
    "data analysis": ["analytics"],
    "statistical analysis": ["analytics"],
    "statistics": ["analytics"],
    "data visualization": ["analytics"],
    "tableau": ["analytics", "tools"],
    "power bi": ["analytics", "tools"],
    "looker": ["analytics", "tools"],
    "excel": ["analytics", "tools"],
    "reporting": ["analytics"],
    "dashboards": ["analytics"],
    "metrics": ["analytics", "product"],
    "kpis": ["analytics", "product"],
    "insight generation": ["analytics"],
    "business intelligence": ["analytics"],
    "pandas": ["analytics", "programming"],
    "numpy": ["analytics", "programming"],

    # Product Management
    "product strategy": ["product"],
    "product roadmap": ["product"],
    "product development": ["product"],
    "user research": ["product", "design"],
    "customer discovery": ["product"],
    "market research": ["product", "business"],
    "competitive analysis": ["product", "business"],
    "prioritization": ["product"],
    "backlog management": ["product"],
    "product thinking": ["product"],
    "user stories": ["product"],
    "requirements gathering": ["product"],
    "product launch": ["product"],
    "go-to-market": ["product", "business"],
    "feature specification": ["product"],

    # Business & Strategy
    "business acumen": ["business"],
    "business strategy": ["business"],
    "financial analysis": ["business", "analytics"],
    "roi analysis": ["business", "analytics"],
    "cost-benefit analysis": ["business"],
    "market sizing": ["business"],
    "business cases": ["business"],
    "consulting": ["business"],
    "case studies": ["business"],
    "strategic planning": ["business"],
    "stakeholder management": ["business", "communication"],
    "vendor management": ["business"],
    "contract negotiation": ["business", "sales"],
    "budgeting": ["business"],
    "p&l management": ["business", "leadership"],

    # Leadership & Management
    "leadership": ["leadership"],
    "team management": ["leadership"],
    "people management": ["leadership"],
    "mentoring": ["leadership"],
    "coaching": ["leadership"],
    "performance management": ["leadership"],
    "hiring": ["leadership"],
    "talent development": ["leadership"],
    "delegation": ["leadership"],
    "decision making": ["leadership"],
    "conflict resolution": ["leadership", "communication"],
    "cross-functional leadership": ["leadership"],
    "change management": ["leadership", "process"],
    "organizational design": ["leadership"],

    # Communication & Soft Skills
    "communication": ["communication"],
    "presentation": ["communication"],
    "public speaking": ["communication"],
    "written communication": ["communication"],
    "storytelling": ["communication"],
    "collaboration": ["communication"],
    "teamwork": ["communication"],
    "interpersonal skills": ["communication"],
    "active listening": ["communication"],
    "negotiation": ["communication", "sales"],
    "influence": ["communication", "leadership"],
    "empathy": ["communication"],
    "emotional intelligence": ["communication"],
    "feedback": ["communication"],
    "star method": ["communication"],
    "adaptability": ["communication"],
    "time management": ["communication", "process"],
    "critical thinking": ["communication", "algorithms"],

    # Process & Methodology
    "agile": ["process"],
    "scrum": ["process"],
    "kanban": ["process"],
    "lean": ["process"],
    "waterfall": ["process"],
    "project management": ["process"],
    "program management": ["process"],
    "risk management": ["process"],
    "quality assurance": ["process"],
    "testing": ["process", "programming"],
    "debugging": ["process", "programming"],
    "code review": ["process", "programming"],
    "documentation": ["process"],
    "root cause analysis": ["process"],
    "troubleshooting": ["process"],
    "incident management": ["process"],
    "sla management": ["process"],

    # Design & UX
    "ux design": ["design"],
    "ui design": ["design"],
    "user experience": ["design"],
    "user interface": ["design"],
    "wireframing": ["design"],
    "prototyping": ["design"],
    "figma": ["design", "tools"],
    "sketch": ["design", "tools"],
    "adobe xd": ["design", "tools"],
    "design systems": ["design"],
    "accessibility": ["design"],
    "usability testing": ["design"],
    "information architecture": ["design"],
    "interaction design": ["design"],
    "visual design": ["design"],
    "responsive design": ["design"],
    "design thinking": ["design", "process"],

    # Sales & Business Development
    "sales": ["sales"],
    "account management": ["sales"],
    "business development": ["sales", "business"],
    "lead generation": ["sales"],
    "pipeline management": ["sales"],
    "crm": ["sales", "tools"],
    "salesforce": ["sales", "tools"],
    "objection handling": ["sales", "communication"],
    "closing": ["sales"],
    "value proposition": ["sales", "product"],
    "customer success": ["sales", "communication"],
    "relationship building": ["sales", "communication"],
    "cold calling": ["sales"],
    "prospecting": ["sales"],

    # Domain/Industry
    "healthcare": ["domain"],
    "fintech": ["domain"],
    "e-commerce": ["domain"],
    "saas": ["domain"],
    "enterprise": ["domain"],
    "security": ["domain", "architecture"],
    "compliance": ["domain", "process"],
    "gdpr": ["domain"],
    "hipaa": ["domain"],
    "sox": ["domain"],
}

# Round type -> relevant categories, highest priority first
ROUND_TO_CATEGORIES: Dict[str, List[str]] = {
    "technical": ["architecture", "programming", "algorithms", "tools"],
    "coding": ["programming", "algorithms", "data_sql"],
    "sql": ["data_sql", "analytics", "architecture"],
    "behavioral": ["communication", "leadership", "process"],
    "hiring_manager": ["leadership", "communication", "business", "domain"],
    "hr": ["communication", "leadership", "process"],
    "case": ["business", "analytics", "product", "communication"],
    "product": ["product", "analytics", "business", "design"],
    "analytics": ["analytics", "data_sql", "business"],
    "ml": ["ml_ai", "algorithms", "programming", "analytics"],
    "portfolio": ["design", "communication", "product"],
    "sales_roleplay": ["sales", "communication", "business"],
    "aptitude": ["algorithms", "analytics", "communication"],
    "group": ["communication", "leadership", "collaboration"],
}

DEFAULT_SKILLS_BY_ROUND: Dict[str, List[str]] = {
    "technical": ["Problem Solving", "System Design", "Technical Depth"],
    "coding": ["Data Structures", "Algorithms", "Code Quality"],
    "sql": ["SQL Queries", "Query Optimization", "Database Design"],
    "behavioral": ["STAR Method", "Collaboration", "Conflict Resolution"],
    "hiring_manager": ["Leadership", "Communication", "Team Fit"],
    "hr": ["Communication", "Cultural Fit", "Career Goals"],
    "case": ["Structured Thinking", "Business Acumen", "Analysis"],
    "product": ["Product Thinking", "Prioritization", "User Empathy"],
    "analytics": ["Data Analysis", "Metric Definition", "Insight Generation"],
    "ml": ["ML Algorithms", "Model Design", "Feature Engineering"],
    "portfolio": ["Design Process", "Storytelling", "Visual Communication"],
    "sales_roleplay": ["Persuasion", "Objection Handling", "Value Proposition"],
    "aptitude": ["Logical Reasoning", "Quantitative Skills", "Verbal Ability"],
    "group": ["Communication", "Teamwork", "Active Listening"],
}

FALLBACK_DEFAULT_SKILLS = ["Communication", "Problem Solving", "Adaptability"]

# Table keys with plurals folded, in table order
_FOLDED_SKILLS = [(fold_plural(skill), categories) for skill, categories in SKILL_TO_CATEGORIES.items()]


def normalize_skill(skill: str) -> str:
    """Normalize a skill name for lookup (lowercase, trim)."""
    return (skill or "").lower().strip()


def get_skill_categories(skill: str) -> List[str]:
    """
    Get categories for a skill.

    Exact lookup first, then the first table entry that appears as a whole
    term inside the skill (or that the skill appears inside), so that
    "Senior Python Developer" resolves through "python". Plurals are folded
    before comparing, so "Algorithm" resolves through "algorithms".

    Args:
        skill: Free-text skill name

    Returns:
        List[str]: The skill's categories, or an empty list when unknown
    """
    normalized = normalize_skill(skill)
    if not normalized:
        return []

    if normalized in SKILL_TO_CATEGORIES:
        return list(SKILL_TO_CATEGORIES[normalized])

    folded = fold_plural(normalized)
    for known_skill, categories in _FOLDED_SKILLS:
        if known_skill == folded:
            return list(categories)

    for known_skill, categories in _FOLDED_SKILLS:
        if contains_term(folded, known_skill) or contains_term(known_skill, folded):
            return list(categories)

    return []


def get_round_categories(round_type: str) -> List[str]:
    return list(ROUND_TO_CATEGORIES.get(round_type, []))


def list_round_types() -> List[str]:
    return list(ROUND_TO_CATEGORIES.keys())


def get_skill_relevance_score(skill: str, round_type: str) -> int:
    """
    Calculate relevance score for a skill to a round type.

    Each of the skill's categories that the round cares about adds
    ``len(round_categories) - priority_index``, so the round's first category
    is worth the most. Higher score = more relevant.
    """
    skill_categories = get_skill_categories(skill)
    round_categories = ROUND_TO_CATEGORIES.get(round_type, [])

    if not skill_categories or not round_categories:
        return 0

    score = 0
    for category in skill_categories:
        if category in round_categories:
            score += len(round_categories) - round_categories.index(category)

    return score


def get_skills_for_round(role_skills: List[str], round_type: str, count: int = 3) -> List[str]:
    """
    Get the most relevant skills from a list for a specific interview round type.

    Skills are sorted by score, highest first. Ties keep the position of the
    skill's first occurrence in ``role_skills``. When no skill is relevant the
    first ``count`` skills are returned in their input order.

    Args:
        role_skills: Skills attached to the role, in priority order
        round_type: Interview round type (see ROUND_TO_CATEGORIES)
        count: Maximum number of skills to return

    Returns:
        List[str]: Up to ``count`` skills taken from ``role_skills``
    """
    if not role_skills:
        return []

    scored = [
        (get_skill_relevance_score(skill, round_type), role_skills.index(skill), skill)
        for skill in role_skills
    ]
    scored.sort(key=lambda item: (-item[0], item[1]))

    if not any(score > 0 for score, _, _ in scored):
        return role_skills[:count]

    return [skill for _, _, skill in scored[:count]]


def get_default_skills_for_round(round_type: str) -> List[str]:
    """Get default skills for a round type when no role skills are available."""
    return list(DEFAULT_SKILLS_BY_ROUND.get(round_type, FALLBACK_DEFAULT_SKILLS))
