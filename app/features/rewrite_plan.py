from __future__ import annotations

from typing import Mapping

from app.core.scoring import get_scoring_float, get_scoring_int
from app.schemas.resume import DEFAULT_JOB_ID, Bullet, KeywordSuggestion, RewritePlanItem

_REWRITE_FORMAT_HINT = 'Rewrite in "Action + Tool/Scope + Result" format (metrics if possible).'
_REWRITE_EXAMPLE = 'Example: "Validated <scope> using <tool> to ensure <quality outcome>, reducing <risk>."'


def build_suggestion_text(target_keywords: list[str]) -> str:
    prefix = f"Add: {', '.join(target_keywords)}. " if target_keywords else ""
    return f"{prefix}{_REWRITE_FORMAT_HINT} {_REWRITE_EXAMPLE}"


def _plan_score(suggestion: KeywordSuggestion, keyword_weight: float) -> float:
    return keyword_weight * len(suggestion.suggested_keywords) + suggestion.bullet_job_overlap


def build_rewrite_plan(
    suggestions: list[KeywordSuggestion],
    max_items: int = 8,
    *,
    bullet_job_ids: Mapping[str, str] | None = None,
) -> list[RewritePlanItem]:
    """Rank bullets with suggested keywords and keep the top ``max_items``."""
    keyword_weight = get_scoring_float("rewrite_plan.keyword_weight", 2.0)
    max_targets = get_scoring_int("rewrite_plan.max_target_keywords", 3)
    job_ids = bullet_job_ids or {}

    candidates = [item for item in suggestions if item.suggested_keywords]
    ranked = sorted(candidates, key=lambda item: _plan_score(item, keyword_weight), reverse=True)

    plan: list[RewritePlanItem] = []
    for item in ranked[: max(0, max_items)]:
        targets = item.suggested_keywords[:max_targets]
        plan.append(
            RewritePlanItem(
                bullet_id=item.bullet_id,
                original=item.bullet_text,
                target_keywords=targets,
                suggested_keywords=list(item.suggested_keywords),
                suggestion_text=build_suggestion_text(targets),
                job_id=job_ids.get(item.bullet_id, DEFAULT_JOB_ID),
            )
        )
    return plan


def build_fallback_plan(
    bullets: list[Bullet],
    missing_keywords: list[str],
    max_bullets: int = 25,
    max_keywords: int = 5,
) -> list[RewritePlanItem]:
    """Degraded plan pairing every bullet with the top globally missing keywords."""
    max_targets = get_scoring_int("rewrite_plan.max_target_keywords", 3)
    seed_keywords = [keyword for keyword in missing_keywords if keyword][: max(0, max_keywords)]
    targets = seed_keywords[:max_targets]

    return [
        RewritePlanItem(
            bullet_id=bullet.id,
            original=bullet.text,
            target_keywords=targets,
            suggested_keywords=list(seed_keywords),
            suggestion_text=build_suggestion_text(targets),
            job_id=bullet.owner_job_id,
            fallback=True,
        )
        for bullet in bullets[: max(0, max_bullets)]
    ]
