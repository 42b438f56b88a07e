# skill_normalization.py
# Single source of truth for the skill vocabulary and skill "sameness" checks.
# Skills are never compared with plain equality elsewhere in the pipeline: use is_related_skill.

import re
from typing import Dict, List, Tuple

# Keywords scanned for in job posting titles and descriptions (lowercase, whole-word match)
TECHNICAL_SKILLS: List[str] = [
    # Languages
    "python", "java", "javascript", "typescript", "golang", "rust", "c++", "c#",
    "ruby", "kotlin", "swift", "scala", "sql", "nosql",
    # Frameworks / platforms
    "react", "angular", "vue", "node.js", "nodejs", "django", "flask", "spring",
    "graphql", "grpc", "rest api", "restful", "microservices",
    # Data
    "mongodb", "postgresql", "mysql", "redis", "kafka", "rabbitmq", "elasticsearch",
    "data analysis", "machine learning", "deep learning", "data engineering",
    # Cloud / DevOps
    "docker", "kubernetes", "k8s", "aws", "gcp", "azure", "cloud", "terraform",
    "linux", "unix", "git", "ci/cd", "jenkins", "github actions", "gitlab ci",
    "containerization", "orchestration", "monitoring", "logging", "observability",
    # Engineering practice
    "testing", "unit testing", "integration testing", "tdd", "debugging",
    "performance tuning", "security", "authentication", "authorization",
    "distributed systems", "system design", "architecture", "scalability", "backend",
    "frontend", "api",
    # Process / leadership
    "agile", "scrum", "leadership", "mentoring", "project management",
    "product strategy", "stakeholder management", "user research",
    "technical communication", "communication",
]

# base term → listed variants. Two skills are related when both belong to the same group.
SKILL_SYNONYM_GROUPS: Dict[str, Tuple[str, ...]] = {
    "javascript": ("js", "node", "nodejs", "typescript", "ts"),
    "database": ("sql", "nosql", "mongodb", "postgres"),
    "frontend": ("react", "vue", "angular", "web"),
    "backend": ("api", "server", "rest", "graphql"),
    "devops": ("ci/cd", "docker", "kubernetes", "aws", "cloud"),
    "testing": ("test", "qa", "quality", "jest", "cypress"),
}

# Display forms that plain capitalization would get wrong
DISPLAY_NAMES: Dict[str, str] = {
    "ai": "AI",
    "api": "API",
    "aws": "AWS",
    "gcp": "GCP",
    "sql": "SQL",
    "nosql": "NoSQL",
    "ci/cd": "CI/CD",
    "tdd": "TDD",
    "k8s": "K8s",
    "grpc": "gRPC",
    "graphql": "GraphQL",
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "node.js": "Node.js",
    "nodejs": "Node.js",
    "mongodb": "MongoDB",
    "postgresql": "PostgreSQL",
    "mysql": "MySQL",
    "rabbitmq": "RabbitMQ",
    "c++": "C++",
    "c#": "C#",
    "rest api": "REST API",
    "github actions": "GitHub Actions",
    "gitlab ci": "GitLab CI",
}


def keyword_pattern(term: str) -> "re.Pattern[str]":
    # \b does not work around terms like "c++" or "ci/cd", so use explicit lookarounds
    return re.compile(r"(?<![a-z0-9])" + re.escape(term) + r"(?![a-z0-9])")


_GROUP_PATTERNS: Dict[str, List["re.Pattern[str]"]] = {
    base: [keyword_pattern(v) for v in variants]
    for base, variants in SKILL_SYNONYM_GROUPS.items()
}


def _key(skill: str) -> str:
    return (skill or "").strip().lower()


def display_skill_name(skill: str) -> str:
    """
    Title-case a skill for display without mangling acronyms.

    "python" → "Python", "data analysis" → "Data Analysis", "SQL" → "SQL", "ci/cd" → "CI/CD"
    """
    normalized = " ".join((skill or "").split())
    if not normalized:
        return ""
    key = normalized.lower()
    if key in DISPLAY_NAMES:
        return DISPLAY_NAMES[key]
    words = []
    for word in normalized.split(" "):
        # Leave mixed/upper case words alone ("SQL", "iOS"); capitalize plain lowercase ones
        words.append(word[:1].upper() + word[1:] if word.islower() else word)
    return " ".join(words)


def skill_groups(skill: str) -> List[str]:
    """Return the synonym-group base terms a skill belongs to."""
    key = _key(skill)
    if not key:
        return []
    groups = []
    for base, patterns in _GROUP_PATTERNS.items():
        if base in key or any(p.search(key) for p in patterns):
            groups.append(base)
    return groups


def is_exact_skill(a: str, b: str) -> bool:
    return _key(a) == _key(b)


def is_related_skill(a: str, b: str) -> bool:
    """
    Decide whether two skill strings denote the same skill.

    Checked in order:
    1. case-insensitive exact match
    2. substring containment in either direction (never for an empty string)
    3. membership in the same synonym group
    """
    ka, kb = _key(a), _key(b)
    if ka == kb:
        return True
    if not ka or not kb:
        return False
    if ka in kb or kb in ka:
        return True
    groups_a = skill_groups(ka)
    if not groups_a:
        return False
    return any(g in groups_a for g in skill_groups(kb))
