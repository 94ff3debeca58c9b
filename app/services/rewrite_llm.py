from __future__ import annotations

import json
import logging
import os
import time
from functools import lru_cache
from typing import Any

from openai import OpenAI

logger = logging.getLogger(__name__)

REWRITE_SYSTEM_PROMPT = (
    "You rewrite a single resume bullet for a specific job posting. "
    "Keep the candidate's facts; never invent employers, products, numbers or tools. "
    "Use the suggested keywords only where they are truthful for the original bullet. "
    "Never mention the target company, its products or any blocked term. "
    "Lead with a strong action verb and follow Action + Tool/Scope + Result. "
    "Return JSON with keys: rewrittenBullet (string), needsMoreInfo (boolean), "
    "notes (array of strings), keywordHits (array of strings), blockedKeywords (array of strings). "
    "If the bullet lacks enough detail to improve honestly, set needsMoreInfo to true "
    "and explain what is missing in notes."
)


class RewriteGeneratorError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable", status_code: int = 503):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def rewrite_llm_enabled() -> bool:
    if not _env_bool("TOOLS_LLM_ENABLED", True):
        return False
    provider = (os.getenv("AI_PROVIDER") or "openai").strip().lower()
    if provider != "openai":
        return False
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    return bool(api_key) and not _looks_like_placeholder(api_key)


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    return OpenAI(
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        base_url=(os.getenv("OPENAI_BASE_URL") or None),
        timeout=float(os.getenv("TOOLS_LLM_TIMEOUT_S", "20")),
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "2")),
    )


def _model() -> str:
    return (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()


def json_completion(
    *,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.2,
    max_output_tokens: int = 600,
) -> dict[str, Any] | None:
    if not rewrite_llm_enabled():
        logger.info("rewrite_llm_skipped reason=llm_disabled")
        return None

    started = time.perf_counter()
    try:
        response = _client().chat.completions.create(
            model=_model(),
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            response_format={"type": "json_object"},
            max_tokens=max_output_tokens,
        )
        content = response.choices[0].message.content if response.choices else ""
        if not content:
            logger.warning("rewrite_llm_empty_response model=%s", _model())
            return None
        parsed = json.loads(content)
        logger.info(
            "rewrite_llm_completed model=%s latency_ms=%s",
            _model(),
            int((time.perf_counter() - started) * 1000),
        )
        return parsed if isinstance(parsed, dict) else None
    except Exception as exc:  # noqa: BLE001 - callers decide how to surface a missing completion
        logger.warning("rewrite_llm_json_failed model=%s prompt_len=%s: %s", _model(), len(user_prompt), exc)
        return None


def generate_rewrite(payload: dict[str, Any]) -> dict[str, Any]:
    """Default rewrite generator backed by an OpenAI JSON completion."""
    if not rewrite_llm_enabled():
        raise RewriteGeneratorError(
            "Bullet rewriting is unavailable: set OPENAI_API_KEY and keep TOOLS_LLM_ENABLED=true.",
            code="llm_disabled",
        )
    result = json_completion(
        system_prompt=REWRITE_SYSTEM_PROMPT,
        user_prompt=json.dumps(payload, ensure_ascii=False),
    )
    if result is None:
        raise RewriteGeneratorError("The rewrite model did not return a valid response. Try again.", code="llm_invalid")
    return result
