from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable

from app.features.verb_strength import compute_verb_strength
from app.guardrail.output_guard import find_terms_in_text, guard_rewrite
from app.guardrail.sanitizer import sanitize_keywords
from app.schemas.resume_tools import RewriteBulletRequest, RewriteBulletResponse
from app.services.rewrite_llm import RewriteGeneratorError, generate_rewrite

logger = logging.getLogger(__name__)

RewriteGenerator = Callable[[dict[str, Any]], dict[str, Any] | None]

MAX_JOB_TEXT = 6000
MAX_ORIGINAL_BULLET = 800
MAX_SHORT_FIELD = 120
MAX_KEYWORDS = 40
MAX_PRODUCTS = 25
MAX_BLOCKED_TERMS = 50
MAX_CONSTRAINTS = 25
MAX_AVOID_PHRASES = 50
MAX_USED_ITEMS = 80
LARGE_PAYLOAD_BYTES = 150_000


def _compact(value: Any, limit: int) -> str:
    return " ".join(str(value or "").split())[:limit]


def _compact_list(values: Iterable[Any] | None, limit: int) -> list[str]:
    out = [_compact(value, MAX_ORIGINAL_BULLET) for value in values or []]
    return [value for value in out if value][:limit]


def build_rewrite_payload(request: RewriteBulletRequest, usable_keywords: list[str] | None = None) -> dict[str, Any]:
    """Bound every field of the generator payload; oversized payloads are logged, not rejected."""
    terms = request.guardrail_terms
    keywords = request.suggested_keywords if usable_keywords is None else usable_keywords
    payload: dict[str, Any] = {
        "original_bullet": _compact(request.original_bullet, MAX_ORIGINAL_BULLET),
        "job_text": _compact(request.job_text, MAX_JOB_TEXT),
        "suggested_keywords": _compact_list(keywords, MAX_KEYWORDS),
        "role": _compact(request.role, MAX_SHORT_FIELD) or None,
        "tone": _compact(request.tone, MAX_SHORT_FIELD) or None,
        "source_company": _compact(request.source_company, MAX_SHORT_FIELD) or None,
        "target_company": _compact(terms.target_company, MAX_SHORT_FIELD) or None,
        "target_products": _compact_list(terms.target_products, MAX_PRODUCTS),
        "blocked_terms": _compact_list(terms.blocked_terms, MAX_BLOCKED_TERMS),
        "constraints": _compact_list(request.constraints, MAX_CONSTRAINTS),
        "must_preserve_meaning": bool(request.must_preserve_meaning),
        "avoid_phrases": _compact_list(request.avoid_phrases, MAX_AVOID_PHRASES),
        "prefer_verb_variety": bool(request.prefer_verb_variety),
        "used_openers": _compact_list(request.used_openers, MAX_USED_ITEMS),
        "used_phrases": _compact_list(request.used_phrases, MAX_USED_ITEMS),
    }

    size = len(json.dumps(payload, ensure_ascii=False).encode("utf-8"))
    if size > LARGE_PAYLOAD_BYTES:
        logger.warning("rewrite_payload_large bytes=%s", size)
    return payload


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def rewrite_bullet(request: RewriteBulletRequest, *, generator: RewriteGenerator | None = None) -> RewriteBulletResponse:
    terms = request.guardrail_terms
    before = compute_verb_strength(request.original_bullet)

    sanitized = sanitize_keywords(request.suggested_keywords, terms)
    payload = build_rewrite_payload(request, sanitized.usable_keywords)

    result = (generator or generate_rewrite)(payload)
    if not isinstance(result, dict):
        raise RewriteGeneratorError("The rewrite generator returned no result.", code="llm_invalid")

    rewritten_raw = result.get("rewrittenBullet")
    needs_more_info = bool(result.get("needsMoreInfo"))
    if rewritten_raw is not None and not isinstance(rewritten_raw, str):
        raise RewriteGeneratorError("The rewrite generator returned an invalid bullet.", code="llm_invalid")
    rewritten = " ".join((rewritten_raw or "").split())
    if not rewritten and not needs_more_info:
        raise RewriteGeneratorError("The rewrite generator returned an empty bullet.", code="llm_invalid")

    guard = guard_rewrite(
        request.original_bullet,
        rewritten,
        terms,
        generator_blocked=[*sanitized.blocked_keywords, *_string_list(result.get("blockedKeywords"))],
    )
    notes = _string_list(result.get("notes"))

    if not guard.accepted:
        return RewriteBulletResponse(
            accepted=False,
            rewritten_bullet="",
            rejected_rewrite=rewritten,
            needs_more_info=needs_more_info,
            notes=notes,
            usable_keywords=sanitized.usable_keywords,
            keyword_hits=[],
            blocked_keywords=guard.blocked_keywords,
            injected_terms=guard.injected_terms,
            verb_strength_before=before,
        )

    return RewriteBulletResponse(
        accepted=True,
        rewritten_bullet=rewritten,
        needs_more_info=needs_more_info,
        notes=notes,
        usable_keywords=sanitized.usable_keywords,
        keyword_hits=find_terms_in_text(rewritten, sanitized.usable_keywords) if rewritten else [],
        blocked_keywords=guard.blocked_keywords,
        verb_strength_before=before,
        verb_strength_after=compute_verb_strength(rewritten) if rewritten else None,
    )
