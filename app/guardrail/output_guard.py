from __future__ import annotations

import logging
import re
from typing import Iterable

from app.schemas.guardrail import GuardrailTerms, RewriteGuardResult

from .sanitizer import normalize_term

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def _fold(value: str) -> str:
    return _NON_ALNUM_RE.sub(" ", value).strip()


def _term_list(terms: GuardrailTerms | Iterable[str]) -> list[str]:
    raw = terms.all_terms() if isinstance(terms, GuardrailTerms) else [str(t) for t in terms if t]
    return [term.strip() for term in raw if term and term.strip()]


def _text_contains(text_norm: str, text_folded: str, term: str) -> bool:
    term_norm = normalize_term(term)
    if not term_norm:
        return False
    if term_norm in text_norm:
        return True
    # "Monopoly-GO" in the text still counts as "monopoly go".
    term_folded = _fold(term_norm)
    return len(term_folded) >= 2 and f" {term_folded} " in f" {text_folded} "


def find_terms_in_text(text: str, terms: GuardrailTerms | Iterable[str]) -> list[str]:
    text_norm = normalize_term(text)
    text_folded = _fold(text_norm)
    hits: list[str] = []
    seen: set[str] = set()
    for term in _term_list(terms):
        key = normalize_term(term)
        if key in seen:
            continue
        if _text_contains(text_norm, text_folded, term):
            seen.add(key)
            hits.append(term)
    return hits


def detect_injected_terms(original: str, rewritten: str, terms: GuardrailTerms | Iterable[str]) -> list[str]:
    """Guardrail terms present in the rewrite that the original bullet did not contain."""
    already_present = {normalize_term(term) for term in find_terms_in_text(original, terms)}
    return [
        term for term in find_terms_in_text(rewritten, terms) if normalize_term(term) not in already_present
    ]


def guard_rewrite(
    original: str,
    rewritten: str,
    terms: GuardrailTerms | Iterable[str],
    generator_blocked: Iterable[str] | None = None,
) -> RewriteGuardResult:
    injected = detect_injected_terms(original, rewritten, terms)

    blocked: list[str] = []
    seen: set[str] = set()
    for keyword in [*injected, *(generator_blocked or [])]:
        key = normalize_term(str(keyword))
        if key and key not in seen:
            seen.add(key)
            blocked.append(str(keyword).strip())

    if injected:
        logger.warning("rewrite_guardrail_injection terms=%s", injected)

    return RewriteGuardResult(accepted=not injected, injected_terms=injected, blocked_keywords=blocked)
