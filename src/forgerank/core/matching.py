"\"\"\"Skill-name matching against repository metadata and free text.\"\"\""

from __future__ import annotations

import re
from functools import lru_cache

from rapidfuzz import fuzz

from ..schemas import RepositorySummary

SKILL_ALIASES: dict[str, tuple[str, ...]] = {
    "react": ("reactjs", "react.js", "jsx", "react native"),
    "vue": ("vuejs", "vue.js", "nuxt"),
    "angular": ("angularjs", "rxjs"),
    "next.js": ("nextjs",),
    "node.js": ("node", "nodejs", "express", "nestjs", "fastify"),
    "javascript": ("ecmascript", "es6"),
    "typescript": ("tsx",),
    "python": ("django", "flask", "fastapi"),
    "go": ("golang",),
    "postgresql": ("postgres", "psql"),
    "mongodb": ("mongo", "mongoose"),
    "kubernetes": ("k8s", "helm"),
    "docker": ("dockerfile", "container", "containers"),
    "aws": ("amazon web services", "lambda", "cloudformation", "cdk"),
    "graphql": ("apollo", "hasura"),
    "rest api": ("rest", "restful", "openapi"),
    "ci/cd": ("github actions", "continuous integration", "jenkins"),
    "testing": ("pytest", "jest", "cypress", "playwright", "vitest", "unit tests"),
    "machine learning": ("ml", "pytorch", "tensorflow", "scikit-learn", "deep learning"),
    "css": ("tailwind", "sass", "scss"),
}

_SPLIT_PATTERN = re.compile(r"[\s/]+")
_MIN_TERM_LENGTH = 3
_MIN_FUZZY_LENGTH = 6


def skill_terms(skill_name: str) -> tuple[str, ...]:
    """Lower-cased terms that identify a skill, full name first."""
    lowered = skill_name.strip().lower()
    # Names like "Go" or "R" are too ambiguous to search for in prose.
    terms: list[str] = [lowered] if len(lowered) >= _MIN_TERM_LENGTH else []
    aliases = SKILL_ALIASES.get(lowered)
    if aliases:
        terms.extend(aliases)
    else:
        terms.extend(
            part for part in _SPLIT_PATTERN.split(lowered) if len(part) >= _MIN_TERM_LENGTH
        )
    seen: set[str] = set()
    unique: list[str] = []
    for term in terms:
        if term and term not in seen:
            seen.add(term)
            unique.append(term)
    return tuple(unique)


@lru_cache(maxsize=512)
def _term_pattern(term: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![a-z0-9]){re.escape(term)}(?![a-z0-9])")


def mentions_skill(
    skill_name: str,
    text: str,
    *,
    fuzzy_threshold: float | None = None,
) -> bool:
    """Return True when ``text`` names the skill or one of its aliases."""
    if not text:
        return False
    lowered = text.lower()
    for term in skill_terms(skill_name):
        if _term_pattern(term).search(lowered):
            return True
    name = skill_name.strip().lower()
    if fuzzy_threshold is not None and len(name) >= _MIN_FUZZY_LENGTH:
        return fuzz.partial_ratio(name, lowered) >= fuzzy_threshold
    return False


def repository_matches(skill_name: str, repository: RepositorySummary) -> bool:
    """Return True when the repository touches the skill."""
    name = skill_name.strip().lower()
    language = (repository.language or "").lower()
    if language and language == name:
        return True
    text = " ".join(
        part
        for part in (repository.name, repository.description or "", language, " ".join(repository.topics))
        if part
    )
    return mentions_skill(skill_name, text)
