from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass

from app.core.scoring import get_scoring_float, get_scoring_int
from app.schemas.resume import KeywordFitResult

STOPWORDS = frozenset(
    {
        "a", "an", "the", "and", "or", "but", "if", "then", "else", "when", "while", "of", "at", "by",
        "for", "with", "about", "against", "between", "into", "through", "during", "before", "after",
        "to", "from", "in", "out", "on", "off", "over", "under", "again", "further", "once", "here",
        "there", "all", "any", "both", "each", "few", "more", "most", "other", "some", "such", "no",
        "nor", "not", "only", "own", "same", "so", "than", "too", "very", "can", "will", "just", "don",
        "should", "now", "is", "am", "are", "was", "were", "be", "been", "being", "have", "has", "had",
        "do", "does", "did", "doing", "this", "that", "these", "those", "as", "it", "its", "they",
        "them", "their", "we", "our", "you", "your", "i", "me", "my",
        # resume filler
        "responsible", "responsibilities", "worked", "work", "years", "year", "experience",
        "including", "strong", "skills",
    }
)

ALIASES = {
    "ci/cd": "cicd",
    "ci-cd": "cicd",
    "unit-tests": "unit testing",
    "unit-test": "unit testing",
    "integration-tests": "integration testing",
    "e2e": "end to end",
    "end-to-end": "end to end",
    "apis": "api",
}

_STRIP_RE = re.compile(r"[^a-z0-9+/#\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_DIGITS_RE = re.compile(r"^\d+$")
_TOOL_RE = re.compile(r"jira|confluence|postman|playwright|selenium|cypress|jenkins|github|aws|gcp|azure")


@dataclass(frozen=True)
class ScoredTerm:
    term: str
    score: float


def normalize_keyword_text(value: str | None) -> str:
    text = (value or "").lower().replace("’", "'")
    text = _STRIP_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def _tokenize(value: str) -> list[str]:
    tokens: list[str] = []
    for token in normalize_keyword_text(value).split(" "):
        if not token:
            continue
        # Aliases may expand to several words ("e2e" -> "end to end").
        tokens.extend(ALIASES.get(token, token).split(" "))
    return tokens


def _is_useful_token(token: str) -> bool:
    return len(token) >= 3 and token not in STOPWORDS and not _DIGITS_RE.match(token)


def _ngrams(tokens: list[str], size: int) -> list[str]:
    return [" ".join(tokens[i : i + size]) for i in range(len(tokens) - size + 1)]


def score_job_terms(job_text: str) -> list[ScoredTerm]:
    """Rank job posting terms; multi-word terms outrank the words they contain."""
    weights = (
        get_scoring_float("keyword_fit.ngram_weights.unigram", 1.0),
        get_scoring_float("keyword_fit.ngram_weights.bigram", 2.2),
        get_scoring_float("keyword_fit.ngram_weights.trigram", 3.2),
    )
    tool_boost = get_scoring_float("keyword_fit.tool_boost", 1.4)
    requirements_boost = get_scoring_float("keyword_fit.requirements_boost", 1.2)
    max_terms = get_scoring_int("keyword_fit.max_terms", 40)

    tokens = [token for token in _tokenize(job_text) if _is_useful_token(token)]
    counts: Counter[str] = Counter()
    term_weight: dict[str, float] = {}
    for size, weight in enumerate(weights, start=1):
        for term in _ngrams(tokens, size):
            counts[term] += 1
            term_weight[term] = max(term_weight.get(term, 0.0), weight)

    lowered = (job_text or "").lower()
    requirements_at = lowered.find("require")
    requirements_tail = lowered[requirements_at:] if requirements_at != -1 else ""

    scored: list[ScoredTerm] = []
    for term, freq in counts.items():
        score = freq * term_weight[term]
        if _TOOL_RE.search(term):
            score *= tool_boost
        if requirements_tail and term in requirements_tail:
            score *= requirements_boost
        scored.append(ScoredTerm(term=term, score=score))
    scored.sort(key=lambda item: item.score, reverse=True)

    selected: list[ScoredTerm] = []
    covered: set[str] = set()
    for item in scored:
        if len(selected) >= max_terms:
            break
        parts = item.term.split(" ")
        if len(parts) == 1 and item.term in covered:
            continue
        selected.append(item)
        if len(parts) >= 2:
            covered.update(parts)
            covered.update(" ".join(parts[i : i + 2]) for i in range(len(parts) - 1))
    return selected


def term_present(resume_norm: str, term: str) -> bool:
    if " " in term:
        return term in resume_norm
    return re.search(rf"\b{re.escape(term)}\b", resume_norm) is not None


def analyze_keyword_fit(resume_text: str, job_text: str) -> KeywordFitResult:
    job_terms = score_job_terms(job_text)
    resume_norm = normalize_keyword_text(resume_text)
    high_impact = get_scoring_int("keyword_fit.high_impact_missing", 10)

    found: list[ScoredTerm] = []
    missing: list[ScoredTerm] = []
    for item in job_terms:
        (found if term_present(resume_norm, item.term) else missing).append(item)

    total = sum(item.score for item in job_terms)
    match_score = round(sum(item.score for item in found) / total * 100) if total else 0

    return KeywordFitResult(
        match_score=max(0, min(100, match_score)),
        keywords_from_job=[item.term for item in job_terms],
        keywords_found_in_resume=[item.term for item in found],
        missing_keywords=[item.term for item in missing],
        high_impact_missing=[item.term for item in missing[:high_impact]],
    )
