from __future__ import annotations

import re
from typing import Iterable

from pydantic import BaseModel, Field

from app.core.scoring import get_scoring_float, get_scoring_int
from app.guardrail.sanitizer import sanitize_keywords
from app.schemas.guardrail import GuardrailTerms
from app.schemas.resume import Bullet, KeywordSuggestion, WeakBullet

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


class SuggestionResult(BaseModel):
    bullet_suggestions: list[KeywordSuggestion] = Field(default_factory=list)
    weak_bullets: list[WeakBullet] = Field(default_factory=list)


def token_set(text: str | None) -> set[str]:
    normalized = _WHITESPACE_RE.sub(" ", _NON_ALNUM_RE.sub(" ", (text or "").lower())).strip()
    if not normalized:
        return set()
    return {token for token in normalized.split(" ") if len(token) >= 3}


def overlap_score(a: set[str], b: set[str]) -> float:
    if not a or not b:
        return 0.0
    return len(a & b) / max(len(a), len(b))


def _rank_keywords(bullet_tokens: set[str], keywords: Iterable[str], limit: int) -> list[str]:
    scored = [(keyword, overlap_score(token_set(keyword), bullet_tokens)) for keyword in keywords]
    # sorted() is stable, so ties keep the analyzer's ranking.
    ranked = sorted((item for item in scored if item[1] > 0), key=lambda item: item[1], reverse=True)
    return [keyword for keyword, _ in ranked[:limit]]


def suggest_keywords_for_bullets(
    bullets: list[Bullet],
    job_text: str,
    missing_keywords: list[str],
    guardrail_terms: GuardrailTerms | None = None,
) -> SuggestionResult:
    """Pair each bullet with the missing job keywords that overlap it most.

    Bullets that share little vocabulary with the posting are also returned
    as weak bullets, weakest first.
    """
    max_keywords = get_scoring_int("suggestions.max_keywords_per_bullet", 5)
    weak_threshold = get_scoring_float("suggestions.weak_overlap_threshold", 0.12)
    max_weak = get_scoring_int("suggestions.max_weak_bullets", 8)

    job_tokens = token_set(job_text)
    keywords = [str(keyword) for keyword in missing_keywords or [] if str(keyword or "").strip()]
    check_guardrail = guardrail_terms is not None and not guardrail_terms.is_empty()

    suggestions: list[KeywordSuggestion] = []
    for bullet in bullets:
        bullet_tokens = token_set(bullet.text)
        suggested = _rank_keywords(bullet_tokens, keywords, max_keywords)
        blocked: list[str] = []
        if check_guardrail:
            sanitized = sanitize_keywords(suggested, guardrail_terms)
            suggested, blocked = sanitized.usable_keywords, sanitized.blocked_keywords
        suggestions.append(
            KeywordSuggestion(
                bullet_id=bullet.id,
                bullet_text=bullet.text,
                suggested_keywords=suggested,
                blocked_keywords=blocked,
                bullet_job_overlap=overlap_score(bullet_tokens, job_tokens),
            )
        )

    weak = sorted(
        (item for item in suggestions if item.bullet_job_overlap < weak_threshold),
        key=lambda item: item.bullet_job_overlap,
    )
    weak_bullets = [
        WeakBullet(bullet_id=item.bullet_id, bullet_text=item.bullet_text, overlap=item.bullet_job_overlap)
        for item in weak[:max_weak]
    ]
    return SuggestionResult(bullet_suggestions=suggestions, weak_bullets=weak_bullets)
