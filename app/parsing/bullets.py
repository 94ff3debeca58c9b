from __future__ import annotations

import logging
import re

from app.core.scoring import get_scoring_int
from app.normalize.classifier import (
    accept_bullet,
    is_date_range_line,
    is_marked_bullet,
    looks_like_heading,
    strip_bullet_marker,
)
from app.normalize.text import dedupe_key, normalize_line, normalize_resume_text, normalized_lines
from app.schemas.resume import DEFAULT_JOB_ID, Bullet, JobBlock

from .experience import locate_experience_section
from .models import BulletExtraction, ExperienceSlice, SegmentationResult
from .segmenter import SegmenterLimits, segment_jobs

logger = logging.getLogger(__name__)

_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?;])\s+")


def _dedupe(texts: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for text in texts:
        cleaned = normalize_line(text)
        key = cleaned.lower()
        if not cleaned or key in seen:
            continue
        seen.add(key)
        out.append(cleaned)
    return out


def extract_marked_lines(text: str, *, min_length: int, limit: int) -> list[str]:
    """Collect glyph or number marked lines, joining indented continuation lines."""
    bullets: list[str] = []
    current: str | None = None

    def flush() -> None:
        nonlocal current
        if current is not None and accept_bullet(current, min_length) and not is_date_range_line(current):
            bullets.append(normalize_line(current))
        current = None

    for raw_line in normalize_resume_text(text).split("\n"):
        stripped = raw_line.strip()
        if not stripped:
            flush()
            continue
        if is_marked_bullet(stripped):
            flush()
            current = strip_bullet_marker(stripped)
            continue
        if current is not None and raw_line[:1].isspace():
            current = f"{current} {stripped}"
            continue
        flush()
    flush()

    return _dedupe(bullets)[:limit]


def extract_sentences(text: str, *, min_length: int, min_words: int, limit: int) -> list[str]:
    sentences: list[str] = []
    for line in normalized_lines(normalize_resume_text(text)):
        candidate = strip_bullet_marker(line.text) if is_marked_bullet(line.text) else line.text
        if looks_like_heading(candidate) or is_date_range_line(candidate):
            continue
        for sentence in _SENTENCE_SPLIT_RE.split(candidate):
            sentence = normalize_line(sentence)
            if len(sentence.split(" ")) < min_words:
                continue
            if accept_bullet(sentence, min_length):
                sentences.append(sentence)
    return _dedupe(sentences)[:limit]


def _default_job_result(texts: list[str]) -> SegmentationResult:
    if not texts:
        return SegmentationResult()
    job = JobBlock(id=DEFAULT_JOB_ID, company="Experience", title="", dates="", bullets=list(texts))
    bullets = [Bullet(id=f"b{i + 1}", text=text, owner_job_id=DEFAULT_JOB_ID) for i, text in enumerate(texts)]
    return SegmentationResult(jobs=[job], bullets=bullets)


def _result(section: ExperienceSlice, segmented: SegmentationResult, tier: str) -> BulletExtraction:
    return BulletExtraction(jobs=segmented.jobs, bullets=segmented.bullets, section=section, tier=tier)


def extract_bullets(resume_text: str, *, only_experience: bool = True) -> BulletExtraction:
    """Run the extraction tiers in order and return the first one that yields bullets."""
    normalized = normalize_resume_text(resume_text)
    section = locate_experience_section(normalized)
    limits = SegmenterLimits.from_config()

    if only_experience:
        segmented = segment_jobs(section.experience_text, limits)
        if segmented.bullets:
            return _result(section, segmented, "experience")

    if not only_experience or section.experience_text != normalized:
        segmented = segment_jobs(normalized, limits)
        if segmented.bullets:
            return _result(section, segmented, "full_text")

    marked = extract_marked_lines(
        normalized,
        min_length=limits.min_explicit_length,
        limit=limits.bullets_total,
    )
    if marked:
        return _result(section, _default_job_result(marked), "marked_lines")

    sentences = extract_sentences(
        normalized,
        min_length=get_scoring_int("extraction.min_length.sentence_fallback", 25),
        min_words=get_scoring_int("extraction.sentence_fallback_min_words", 4),
        limit=get_scoring_int("extraction.caps.sentence_fallback", 30),
    )
    if sentences:
        return _result(section, _default_job_result(sentences), "sentences")

    logger.info("bullet_extraction_empty chars=%s mode=%s", len(normalized), section.mode)
    return _result(section, SegmentationResult(), "empty")
