from __future__ import annotations

from pydantic import BaseModel, Field

from app.parsing.models import ExtractionTier, SectionMode
from app.schemas.guardrail import GuardrailTerms
from app.schemas.resume import JobBlock, KeywordSuggestion, MetaBlocks, RewritePlanItem, VerbStrengthResult, WeakBullet


class AnalyzeRequest(BaseModel):
    resume_text: str = Field(default="", max_length=200000)
    job_text: str = Field(default="", max_length=200000)
    guardrail_terms: GuardrailTerms = Field(default_factory=GuardrailTerms)
    only_experience_bullets: bool = True
    # Output of an external keyword analyzer; the built-in analyzer runs when omitted.
    missing_keywords: list[str] | None = Field(default=None, max_length=200)
    match_score: int | None = Field(default=None, ge=0, le=100)


class AnalysisDebug(BaseModel):
    resume_chars: int = 0
    job_chars: int = 0
    only_experience_bullets: bool = True
    found_section: bool = False
    experience_mode: SectionMode = "none"
    experience_chars: int = 0
    extraction_tier: ExtractionTier = "empty"
    jobs_detected: int = 0
    bullet_count: int = 0
    rewrite_plan_count: int = 0
    fallback_plan: bool = False
    keyword_source: str = "analyzer"
    meta_games_count: int = 0
    meta_metrics_count: int = 0


class AnalyzeResponse(BaseModel):
    match_score: int = Field(default=0, ge=0, le=100)
    keywords_from_job: list[str] = Field(default_factory=list)
    keywords_found_in_resume: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    high_impact_missing: list[str] = Field(default_factory=list)
    blocked_keywords: list[str] = Field(default_factory=list)
    experience_jobs: list[JobBlock] = Field(default_factory=list)
    bullets: list[str] = Field(default_factory=list)
    bullet_job_ids: list[str] = Field(default_factory=list)
    bullet_suggestions: list[KeywordSuggestion] = Field(default_factory=list)
    weak_bullets: list[WeakBullet] = Field(default_factory=list)
    rewrite_plan: list[RewritePlanItem] = Field(default_factory=list)
    meta_blocks: MetaBlocks = Field(default_factory=MetaBlocks)
    debug: AnalysisDebug = Field(default_factory=AnalysisDebug)


class RewriteBulletRequest(BaseModel):
    original_bullet: str = Field(min_length=1, max_length=4000)
    job_text: str = Field(default="", max_length=200000)
    suggested_keywords: list[str] = Field(default_factory=list, max_length=200)
    guardrail_terms: GuardrailTerms = Field(default_factory=GuardrailTerms)
    role: str | None = Field(default=None, max_length=500)
    tone: str | None = Field(default=None, max_length=500)
    source_company: str | None = Field(default=None, max_length=500)
    constraints: list[str] = Field(default_factory=list, max_length=200)
    must_preserve_meaning: bool = True
    avoid_phrases: list[str] = Field(default_factory=list, max_length=500)
    prefer_verb_variety: bool = False
    used_openers: list[str] = Field(default_factory=list, max_length=500)
    used_phrases: list[str] = Field(default_factory=list, max_length=500)


class RewriteBulletResponse(BaseModel):
    accepted: bool
    rewritten_bullet: str = ""
    rejected_rewrite: str | None = None
    needs_more_info: bool = False
    notes: list[str] = Field(default_factory=list)
    usable_keywords: list[str] = Field(default_factory=list)
    keyword_hits: list[str] = Field(default_factory=list)
    blocked_keywords: list[str] = Field(default_factory=list)
    injected_terms: list[str] = Field(default_factory=list)
    verb_strength_before: VerbStrengthResult
    verb_strength_after: VerbStrengthResult | None = None


class VerbStrengthRequest(BaseModel):
    text: str = Field(default="", max_length=4000)


class SanitizeKeywordsRequest(BaseModel):
    keywords: list[str] = Field(default_factory=list, max_length=500)
    guardrail_terms: GuardrailTerms = Field(default_factory=GuardrailTerms)
