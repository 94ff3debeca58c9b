from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.core.security import check_api_key
from app.features.verb_strength import compute_verb_strength
from app.guardrail.sanitizer import sanitize_keywords
from app.schemas.guardrail import SanitizedKeywords
from app.schemas.resume import VerbStrengthResult
from app.schemas.resume_tools import (
    AnalyzeRequest,
    AnalyzeResponse,
    RewriteBulletRequest,
    RewriteBulletResponse,
    SanitizeKeywordsRequest,
    VerbStrengthRequest,
)
from app.services.analysis_service import AnalysisInputError, run_resume_analysis
from app.services.rewrite_llm import RewriteGeneratorError
from app.services.rewrite_service import rewrite_bullet

router = APIRouter()


def _auth(x_api_key: str | None = Header(default=None, alias="X-API-Key")):
    check_api_key(x_api_key)


@router.post("/resume/analyze", response_model=AnalyzeResponse)
@rate_limit(settings.analyze_rate_limit)
def resume_analyze(request: Request, payload: AnalyzeRequest, _: None = Depends(_auth)):
    _ = request
    try:
        return run_resume_analysis(payload)
    except AnalysisInputError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


@router.post("/resume/rewrite-bullet", response_model=RewriteBulletResponse)
@rate_limit()
def resume_rewrite_bullet(request: Request, payload: RewriteBulletRequest, _: None = Depends(_auth)):
    _ = request
    try:
        return rewrite_bullet(payload)
    except RewriteGeneratorError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


@router.post("/resume/verb-strength", response_model=VerbStrengthResult)
@rate_limit()
def resume_verb_strength(request: Request, payload: VerbStrengthRequest, _: None = Depends(_auth)):
    _ = request
    return compute_verb_strength(payload.text)


@router.post("/resume/sanitize-keywords", response_model=SanitizedKeywords)
@rate_limit()
def resume_sanitize_keywords(request: Request, payload: SanitizeKeywordsRequest, _: None = Depends(_auth)):
    _ = request
    return sanitize_keywords(payload.keywords, payload.guardrail_terms)
