"""
Skill extraction from job descriptions and resumes.

Pulls skill tags out of free text with a fixed list of word-bounded patterns,
folds synonyms onto canonical names and assigns each skill a coarse category.
"""

import re
from typing import Dict, List, Optional

from ..models.routing_models import SkillTag

SKILL_SYNONYMS: Dict[str, List[str]] = {
    "javascript": ["js", "ecmascript", "es6", "es2015", "vanilla js"],
    "typescript": ["ts"],
    "nodejs": ["node", "node.js", "express", "express.js", "nestjs"],
    "react": ["reactjs", "react.js", "react native", "jsx"],
    "python": ["py", "python3", "django", "flask", "fastapi"],
    "api": ["rest", "restful", "graphql", "api design", "api integration", "web services"],
    "database": ["sql", "postgresql", "postgres", "mysql", "mongodb", "nosql", "orm", "drizzle", "prisma"],
    "testing": ["unit testing", "jest", "pytest", "testing frameworks", "tdd", "bdd", "cypress"],
    "devops": ["ci/cd", "docker", "kubernetes", "k8s", "aws", "gcp", "azure", "cloud"],
    "git": ["version control", "github", "gitlab", "bitbucket"],
    "agile": ["scrum", "kanban", "sprint", "jira"],
}

# Checked in order; the first bucket with a hit wins.
_CATEGORY_KEYWORDS = (
    ("language", ["javascript", "typescript", "python", "java", "go", "rust", "c++", "c#",
                  "ruby", "php", "swift", "kotlin"]),
    ("framework", ["react", "angular", "vue", "nodejs", "express", "django", "flask", "spring",
                   "rails", "nextjs", "nestjs"]),
    ("tool", ["git", "docker", "kubernetes", "jenkins", "terraform", "webpack", "vite", "npm",
              "yarn", "salesforce", "hubspot", "tableau", "power bi", "figma", "jira"]),
    ("concept", ["api", "testing", "devops", "microservices", "architecture", "algorithms",
                 "data structures", "design patterns", "agile", "scrum", "kanban"]),
    ("domain", ["frontend", "backend", "fullstack", "mobile", "cloud", "ml", "ai", "data science",
                "security", "sales", "marketing", "finance", "operations", "hr", "consulting",
                "product", "design", "data analysis", "business intelligence", "machine learning",
                "deep learning"]),
    ("soft_skill", ["leadership", "communication", "negotiation", "presentation", "collaboration",
                    "stakeholder management", "relationship", "strategic thinking",
                    "problem solving", "coaching", "mentoring", "influence", "decision making",
                    "storytelling"]),
)

_SKILL_PATTERN_SOURCES = [
    # Technical - Programming Languages
    r"\b(JavaScript|TypeScript|Python|Java|Go|Rust|C\+\+|C#|Ruby|PHP|Swift|Kotlin)\b",
    # Technical - Frameworks
    r"\b(React|Angular|Vue|Node\.?js|Express|Django|Flask|Spring|Rails|Next\.?js|Nest\.?js)\b",
    # Technical - Infrastructure & Tools
    r"\b(REST|GraphQL|API|SQL|PostgreSQL|MongoDB|Redis|Docker|Kubernetes|AWS|GCP|Azure)\b",
    r"\b(Git|CI/CD|Jenkins|Terraform|Webpack|Vite|Jest|Pytest|Cypress)\b",
    r"\b(microservices?|serverless|cloud native|distributed systems?)\b",
    r"\b(unit testing|integration testing|e2e testing|TDD|BDD)\b",
    r"\b(Agile|Scrum|Kanban|DevOps|SRE)\b",
    # Data & Analytics
    r"\b(data analysis|data analytics|business intelligence|BI|Tableau|Power BI|Looker)\b",
    r"\b(machine learning|ML|deep learning|AI|artificial intelligence|NLP|computer vision)\b",
    r"\b(ETL|data pipeline|data warehouse|Snowflake|Databricks|Spark|Hadoop)\b",
    r"\b(statistical analysis|A/B testing|experimentation|predictive modeling)\b",
    # Sales & Business Development
    r"\b(sales|business development|revenue growth|pipeline management|quota)\b",
    r"\b(account management|key accounts|strategic accounts|enterprise sales|B2B sales)\b",
    r"\b(client relationship|customer relationship|relationship building|client success)\b",
    r"\b(negotiation|deal closing|contract negotiation|pricing strategy)\b",
    r"\b(CRM|Salesforce|HubSpot|sales enablement|sales operations)\b",
    r"\b(prospecting|lead generation|cold calling|outbound sales)\b",
    # Strategy & Consulting
    r"\b(strategic planning|business strategy|corporate strategy|go-to-market|GTM)\b",
    r"\b(market analysis|competitive analysis|market research|industry analysis)\b",
    r"\b(consulting|advisory|problem solving|analytical thinking)\b",
    r"\b(business case|ROI analysis|financial modeling|P&L|profit and loss)\b",
    # Leadership & Management
    r"\b(leadership|team leadership|people management|team management)\b",
    r"\b(stakeholder management|executive engagement|C-suite|senior leadership)\b",
    r"\b(cross-functional|collaboration|influence|change management)\b",
    r"\b(coaching|mentoring|talent development|performance management)\b",
    r"\b(decision making|strategic thinking|critical thinking)\b",
    # Communication & Presentation
    r"\b(communication skills?|presentation skills?|public speaking)\b",
    r"\b(written communication|verbal communication|storytelling)\b",
    r"\b(executive presentation|board presentation|client presentation)\b",
    # Product & Design
    r"\b(product management|product strategy|product roadmap|product lifecycle)\b",
    r"\b(user research|user experience|UX|UI|design thinking)\b",
    r"\b(requirements gathering|PRD|product requirements|specifications)\b",
    r"\b(prototyping|wireframing|Figma|Sketch|user testing)\b",
    # Operations & Process
    r"\b(operations management|process improvement|operational excellence)\b",
    r"\b(supply chain|logistics|inventory management|procurement)\b",
    r"\b(project management|program management|PMP|portfolio management)\b",
    r"\b(Six Sigma|Lean|Kaizen|process optimization|efficiency)\b",
    # Finance & Analysis
    r"\b(financial analysis|budgeting|forecasting|variance analysis)\b",
    r"\b(FP&A|financial planning|cost analysis|margin analysis)\b",
    r"\b(valuation|due diligence|M&A|mergers and acquisitions)\b",
    # Marketing
    r"\b(marketing strategy|digital marketing|content marketing|brand management)\b",
    r"\b(SEO|SEM|paid media|social media marketing|growth marketing)\b",
    r"\b(demand generation|lead nurturing|marketing automation|campaign management)\b",
    # HR & Recruiting
    r"\b(talent acquisition|recruiting|hiring|interviewing)\b",
    r"\b(compensation|benefits|total rewards|HRIS)\b",
    r"\b(employee engagement|culture|organizational development|learning & development)\b",
]

SKILL_PATTERNS = [re.compile(source, re.IGNORECASE) for source in _SKILL_PATTERN_SOURCES]

# Plain keyword scan used on job feed descriptions
DESCRIPTION_SKILL_KEYWORDS = [
    "javascript", "typescript", "python", "java", "c++", "c#", "go", "rust", "ruby", "php", "swift",
    "kotlin", "scala",
    "react", "angular", "vue", "node.js", "express", "django", "flask", "spring", "rails", "laravel",
    ".net", "nextjs",
    "sql", "postgresql", "mysql", "mongodb", "redis", "elasticsearch", "dynamodb", "cassandra",
    "aws", "azure", "gcp", "docker", "kubernetes", "terraform", "jenkins", "ci/cd", "devops",
    "machine learning", "data science", "tensorflow", "pytorch", "pandas", "numpy", "spark", "hadoop",
    "api", "rest", "graphql", "microservices", "agile", "scrum", "git", "linux",
    "leadership", "communication", "problem-solving", "teamwork", "analytical",
]


def normalize_skill_name(skill: str) -> str:
    """Lowercase a skill and fold known synonyms onto their canonical name."""
    lower = (skill or "").lower().strip()
    for canonical, synonyms in SKILL_SYNONYMS.items():
        if lower == canonical or lower in synonyms:
            return canonical
    return lower


def categorize_skill(skill: str) -> str:
    lower = skill.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return category
    return "soft_skill"


def extract_skills_from_text(text: Optional[str], source: str = "jd") -> List[SkillTag]:
    """
    Extract skill tags from free text.

    Every distinct normalised match becomes one tag with weight 1.0; each
    further occurrence adds 0.5. Tags are returned in first-seen order.

    Args:
        text: Job description, resume or other free text
        source: Where the text came from ("jd", "resume", "role_kit", "inferred")

    Returns:
        List[SkillTag]: Extracted tags
    """
    skills: Dict[str, SkillTag] = {}
    if not text:
        return []

    for pattern in SKILL_PATTERNS:
        for match in pattern.findall(text):
            normalized = normalize_skill_name(match)
            existing = skills.get(normalized)
            if existing is None:
                skills[normalized] = SkillTag(
                    skill=normalized,
                    category=categorize_skill(normalized),
                    weight=1.0,
                    source=source,
                )
            else:
                existing.weight += 0.5

    return list(skills.values())


def extract_skills_from_description(description: Optional[str]) -> List[str]:
    """Keyword scan of a job description; unique hits in keyword order."""
    if not description:
        return []
    lowered = description.lower()
    return [keyword for keyword in DESCRIPTION_SKILL_KEYWORDS if keyword in lowered]
