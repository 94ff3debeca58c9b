from __future__ import annotations

import re
from typing import Iterable

from app.schemas.guardrail import GuardrailTerms, SanitizedKeywords

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_term(value: str | None) -> str:
    return _WHITESPACE_RE.sub(" ", (value or "").lower()).strip()


def _normalized_terms(terms: GuardrailTerms | Iterable[str]) -> list[str]:
    raw = terms.all_terms() if isinstance(terms, GuardrailTerms) else list(terms)
    normalized = [normalize_term(str(term)) for term in raw if term is not None]
    return [term for term in normalized if term]


def _overlaps(keyword_norm: str, term_norm: str) -> bool:
    # "monopoly" vs "monopoly go" must block in both directions.
    return keyword_norm in term_norm or term_norm in keyword_norm


def is_blocked_keyword(keyword: str, terms: GuardrailTerms | Iterable[str]) -> bool:
    keyword_norm = normalize_term(keyword)
    if not keyword_norm:
        return False
    return any(_overlaps(keyword_norm, term) for term in _normalized_terms(terms))


def sanitize_keywords(keywords: Iterable[str] | None, terms: GuardrailTerms | Iterable[str]) -> SanitizedKeywords:
    """Split keywords into usable and blocked lists against the guardrail terms.

    Both lists are deduplicated on their normalized form while keeping the
    first casing and the original order.
    """
    normalized_terms = _normalized_terms(terms)
    usable: list[str] = []
    blocked: list[str] = []
    seen_usable: set[str] = set()
    seen_blocked: set[str] = set()

    for raw in keywords or []:
        keyword = str(raw if raw is not None else "").strip()
        keyword_norm = normalize_term(keyword)
        if not keyword_norm:
            continue
        if any(_overlaps(keyword_norm, term) for term in normalized_terms):
            if keyword_norm not in seen_blocked:
                seen_blocked.add(keyword_norm)
                blocked.append(keyword)
        elif keyword_norm not in seen_usable:
            seen_usable.add(keyword_norm)
            usable.append(keyword)

    return SanitizedKeywords(usable_keywords=usable, blocked_keywords=blocked)
