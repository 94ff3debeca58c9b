from __future__ import annotations

import logging
from typing import Callable

from app.core.config import settings
from app.core.scoring import get_scoring_int
from app.features.keyword_fit import analyze_keyword_fit
from app.features.meta_blocks import extract_meta_blocks
from app.features.rewrite_plan import build_fallback_plan, build_rewrite_plan
from app.features.suggestions import suggest_keywords_for_bullets
from app.features.verb_strength import compute_verb_strength
from app.guardrail.sanitizer import normalize_term, sanitize_keywords
from app.normalize.text import normalize_job_text, normalize_resume_text
from app.parsing.bullets import extract_bullets
from app.schemas.resume import KeywordFitResult, RewritePlanItem
from app.schemas.resume_tools import AnalysisDebug, AnalyzeRequest, AnalyzeResponse

logger = logging.getLogger(__name__)

KeywordAnalyzer = Callable[[str, str], KeywordFitResult]


class AnalysisInputError(ValueError):
    def __init__(self, message: str, *, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def _validate_inputs(resume_text: str, job_text: str) -> None:
    if not resume_text or not job_text:
        raise AnalysisInputError("Missing resume_text or job_text.")
    if len(resume_text) < settings.analysis_min_resume_chars:
        raise AnalysisInputError(
            "Resume text too short. If you uploaded a PDF, it may be scanned. Try DOCX or paste text."
        )
    if len(resume_text) > settings.analysis_max_text_chars or len(job_text) > settings.analysis_max_text_chars:
        raise AnalysisInputError(
            f"Text too long. Resume and job text are limited to {settings.analysis_max_text_chars} characters each."
        )


def _keyword_fit(
    request: AnalyzeRequest,
    resume_text: str,
    job_text: str,
    keyword_analyzer: KeywordAnalyzer | None,
) -> tuple[KeywordFitResult, str]:
    if request.missing_keywords is not None:
        missing = [str(keyword).strip() for keyword in request.missing_keywords if str(keyword).strip()]
        supplied = KeywordFitResult(
            match_score=request.match_score or 0,
            missing_keywords=missing,
            high_impact_missing=missing[: get_scoring_int("keyword_fit.high_impact_missing", 10)],
        )
        return supplied, "request"
    analyzer = keyword_analyzer or analyze_keyword_fit
    return analyzer(resume_text, job_text), "analyzer"


def _with_verb_strength(plan: list[RewritePlanItem]) -> list[RewritePlanItem]:
    return [item.model_copy(update={"verb_strength": compute_verb_strength(item.original)}) for item in plan]


def run_resume_analysis(
    request: AnalyzeRequest,
    *,
    keyword_analyzer: KeywordAnalyzer | None = None,
) -> AnalyzeResponse:
    """Extract bullets from a resume and plan keyword-aware rewrites against a job posting."""
    resume_text = normalize_resume_text(request.resume_text)
    job_text = normalize_job_text(request.job_text)
    _validate_inputs(resume_text, job_text)

    terms = request.guardrail_terms
    fit, keyword_source = _keyword_fit(request, resume_text, job_text, keyword_analyzer)

    # Blocked terms never reach suggestions, the plan or the response keyword lists.
    sanitized = sanitize_keywords(fit.missing_keywords, terms)
    usable_missing = sanitized.usable_keywords
    usable_keys = {normalize_term(keyword) for keyword in usable_missing}
    high_impact = [keyword for keyword in fit.high_impact_missing if normalize_term(keyword) in usable_keys]

    extraction = extract_bullets(resume_text, only_experience=request.only_experience_bullets)
    suggestions = suggest_keywords_for_bullets(extraction.bullets, job_text, usable_missing, terms)

    plan = build_rewrite_plan(
        suggestions.bullet_suggestions,
        max_items=settings.rewrite_plan_max_items,
        bullet_job_ids={bullet.id: bullet.owner_job_id for bullet in extraction.bullets},
    )
    fallback = False
    if not plan and extraction.bullets:
        fallback = True
        plan = build_fallback_plan(
            extraction.bullets,
            high_impact or usable_missing,
            max_bullets=get_scoring_int("rewrite_plan.fallback.max_bullets", 25),
            max_keywords=get_scoring_int("rewrite_plan.fallback.max_keywords", 5),
        )
    plan = _with_verb_strength(plan)

    meta_blocks = extract_meta_blocks(resume_text)
    blocked: list[str] = list(sanitized.blocked_keywords)
    blocked_keys = {normalize_term(keyword) for keyword in blocked}
    for suggestion in suggestions.bullet_suggestions:
        for keyword in suggestion.blocked_keywords:
            if normalize_term(keyword) not in blocked_keys:
                blocked_keys.add(normalize_term(keyword))
                blocked.append(keyword)

    found = sanitize_keywords(fit.keywords_found_in_resume, terms).usable_keywords
    from_job = sanitize_keywords(fit.keywords_from_job, terms).usable_keywords

    debug = AnalysisDebug(
        resume_chars=len(resume_text),
        job_chars=len(job_text),
        only_experience_bullets=request.only_experience_bullets,
        found_section=extraction.section.found_section,
        experience_mode=extraction.section.mode,
        experience_chars=len(extraction.section.experience_text),
        extraction_tier=extraction.tier,
        jobs_detected=len(extraction.jobs),
        bullet_count=len(extraction.bullets),
        rewrite_plan_count=len(plan),
        fallback_plan=fallback,
        keyword_source=keyword_source,
        meta_games_count=len(meta_blocks.games_shipped),
        meta_metrics_count=len(meta_blocks.metrics),
    )

    logger.info(
        "resume_analysis_completed tier=%s mode=%s jobs=%s bullets=%s plan=%s blocked=%s",
        extraction.tier,
        extraction.section.mode,
        len(extraction.jobs),
        len(extraction.bullets),
        len(plan),
        len(blocked),
    )

    return AnalyzeResponse(
        match_score=fit.match_score,
        keywords_from_job=from_job,
        keywords_found_in_resume=found,
        missing_keywords=usable_missing,
        high_impact_missing=high_impact,
        blocked_keywords=blocked,
        experience_jobs=extraction.jobs,
        bullets=extraction.bullet_texts,
        bullet_job_ids=extraction.bullet_job_ids,
        bullet_suggestions=suggestions.bullet_suggestions,
        weak_bullets=suggestions.weak_bullets,
        rewrite_plan=plan,
        meta_blocks=meta_blocks,
        debug=debug,
    )
