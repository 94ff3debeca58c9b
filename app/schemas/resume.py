from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

VerbStrengthLabel = Literal["Weak", "OK", "Strong"]

DEFAULT_JOB_ID = "job_default"


class Bullet(BaseModel):
    id: str
    text: str
    owner_job_id: str = DEFAULT_JOB_ID


class JobBlock(BaseModel):
    id: str
    company: str = "Company"
    title: str = "Role"
    dates: str = ""
    location: str | None = None
    bullets: list[str] = Field(default_factory=list)


class KeywordSuggestion(BaseModel):
    bullet_id: str
    bullet_text: str
    suggested_keywords: list[str] = Field(default_factory=list)
    blocked_keywords: list[str] = Field(default_factory=list)
    bullet_job_overlap: float = Field(default=0.0, ge=0.0, le=1.0)


class WeakBullet(BaseModel):
    bullet_id: str
    bullet_text: str
    overlap: float = Field(ge=0.0, le=1.0)


class VerbStrengthResult(BaseModel):
    score: int = Field(ge=0, le=100)
    label: VerbStrengthLabel
    detected_verb: str | None = None
    reasons: list[str] = Field(default_factory=list)
    suggestion: str | None = None


class RewritePlanItem(BaseModel):
    bullet_id: str
    original: str
    target_keywords: list[str] = Field(default_factory=list, max_length=3)
    suggested_keywords: list[str] = Field(default_factory=list)
    suggestion_text: str
    job_id: str = DEFAULT_JOB_ID
    fallback: bool = False
    verb_strength: VerbStrengthResult | None = None


class KeywordFitResult(BaseModel):
    match_score: int = Field(default=0, ge=0, le=100)
    keywords_from_job: list[str] = Field(default_factory=list)
    keywords_found_in_resume: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    high_impact_missing: list[str] = Field(default_factory=list)


class MetaBlocks(BaseModel):
    games_shipped: list[str] = Field(default_factory=list)
    metrics: list[str] = Field(default_factory=list)
