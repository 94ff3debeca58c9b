from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, replace
from functools import reduce
from typing import Literal

from app.core.scoring import get_scoring_int
from app.normalize.classifier import (
    accept_bullet,
    extract_date_range,
    field_label,
    is_date_range_line,
    is_experience_heading,
    is_marked_bullet,
    is_terminal_heading,
    looks_like_heading,
    rejection_reason,
    strip_bullet_marker,
    strip_field_label,
)
from app.normalize.text import dedupe_key, normalize_line, normalized_lines
from app.schemas.resume import DEFAULT_JOB_ID, Bullet, JobBlock

from .models import SegmentationResult

SegmenterMode = Literal["no_job", "in_job", "closed"]

_HEADER_SPLIT_RE = re.compile(r"\s+-\s+|\s*[—–|·•]\s*")
_EMPTY_BRACKETS_RE = re.compile(r"[(\[{]\s*[)\]}]")
_HEADER_EDGE_CHARS = " -–—|·•,;:"


@dataclass(frozen=True)
class SegmenterLimits:
    min_explicit_length: int = 15
    min_bulletish_length: int = 25
    bullets_per_job: int = 60
    bullets_total: int = 220

    @classmethod
    def from_config(cls) -> "SegmenterLimits":
        return cls(
            min_explicit_length=get_scoring_int("extraction.min_length.explicit_bullet", 15),
            min_bulletish_length=get_scoring_int("extraction.min_length.bulletish_sentence", 25),
            bullets_per_job=get_scoring_int("extraction.caps.bullets_per_job", 60),
            bullets_total=get_scoring_int("extraction.caps.bullets_total", 220),
        )


@dataclass(frozen=True)
class OpenBlock:
    ordinal: int
    company: str
    title: str
    dates: str
    location: str | None = None
    bullets: tuple[str, ...] = ()
    synthetic: bool = False


@dataclass(frozen=True)
class SegmenterState:
    mode: SegmenterMode = "no_job"
    current: OpenBlock | None = None
    prev1: str = ""
    prev2: str = ""
    finished: tuple[OpenBlock, ...] = ()
    seen: frozenset[str] = frozenset()
    bullet_count: int = 0
    anchors: int = 0
    in_section: bool = False


def _clean_header_part(part: str) -> str:
    return normalize_line(part).strip(_HEADER_EDGE_CHARS)


def inline_header_text(line: str, dates: str) -> str:
    rest = line.replace(dates, " ", 1) if dates else line
    rest = _EMPTY_BRACKETS_RE.sub(" ", rest)
    return _clean_header_part(rest)


def parse_header(company_maybe: str, title_maybe: str, inline_header: str) -> tuple[str, str, str | None]:
    """Pick company, title and location for a job anchor.

    Inline text on the anchor line wins when it splits into at least two
    parts; otherwise the two header candidates seen before the anchor are used.
    """
    header = normalize_line(inline_header)
    if header:
        parts = [p for p in (_clean_header_part(x) for x in _HEADER_SPLIT_RE.split(header)) if p]
        if len(parts) < 2:
            parts = [p for p in (_clean_header_part(x) for x in header.split(",")) if p]
        if len(parts) >= 2:
            location = parts[2] if len(parts) > 2 else None
            return parts[0], parts[1], location

    return (
        normalize_line(company_maybe) or "Company",
        normalize_line(title_maybe) or "Role",
        None,
    )


def _finalize(state: SegmenterState) -> SegmenterState:
    if state.current is None:
        return state
    finished = state.finished + (state.current,) if state.current.bullets else state.finished
    return replace(state, current=None, finished=finished)


def _open_default(state: SegmenterState) -> SegmenterState:
    for index, block in enumerate(state.finished):
        if block.synthetic:
            reopened = state.finished[:index] + state.finished[index + 1 :]
            return replace(state, mode="in_job", current=block, finished=reopened)
    block = OpenBlock(ordinal=-1, company="Experience", title="", dates="", synthetic=True)
    return replace(state, mode="in_job", current=block)


def _push_bullet(state: SegmenterState, text: str, limits: SegmenterLimits) -> SegmenterState:
    key = dedupe_key(text)
    if key in state.seen or state.bullet_count >= limits.bullets_total:
        return state
    if state.current is None:
        state = _open_default(state)
    current = state.current
    assert current is not None
    if len(current.bullets) >= limits.bullets_per_job:
        return state
    return replace(
        state,
        current=replace(current, bullets=current.bullets + (normalize_line(text),)),
        seen=state.seen | {key},
        bullet_count=state.bullet_count + 1,
    )


def _is_bulletish(text: str, limits: SegmenterLimits) -> bool:
    if is_date_range_line(text) or field_label(text):
        return False
    return accept_bullet(text, limits.min_bulletish_length)


def advance(state: SegmenterState, line: str, limits: SegmenterLimits) -> SegmenterState:
    """Transition function of the line-by-line job segmenter."""
    text = normalize_line(line)
    if not text:
        return state

    if is_experience_heading(text):
        mode: SegmenterMode = "no_job" if state.mode == "closed" else state.mode
        return replace(state, mode=mode, prev1="", prev2="", in_section=True)

    if is_terminal_heading(text):
        return replace(_finalize(state), mode="closed", prev1="", prev2="")

    if is_date_range_line(text):
        # After an end heading only a leading section (Skills before any job) may reopen capture.
        if state.mode == "closed" and state.anchors > 0:
            return state
        state = _finalize(state)
        dates = extract_date_range(text) or text
        company, title, location = parse_header(state.prev2, state.prev1, inline_header_text(text, dates))
        block = OpenBlock(
            ordinal=state.anchors,
            company=company,
            title=title,
            dates=dates,
            location=location,
        )
        return replace(state, mode="in_job", current=block, prev1="", prev2="", anchors=state.anchors + 1)

    if is_marked_bullet(text):
        if state.mode == "closed":
            return state
        bullet = strip_bullet_marker(text)
        if not accept_bullet(bullet, limits.min_explicit_length):
            return state
        return _push_bullet(state, bullet, limits)

    if state.current is not None and _is_bulletish(text, limits):
        return _push_bullet(state, text, limits)

    if looks_like_heading(text):
        return state
    reason = rejection_reason(text)
    # Inside a section a name-shaped line ("Electronic Arts") is a company candidate.
    if reason and not (reason == "person_name" and (state.in_section or state.anchors)):
        return state
    if field_label(text) in {"location", "date", "dates"}:
        return state
    return replace(state, prev2=state.prev1, prev1=strip_field_label(text))


def job_block_id(block: OpenBlock) -> str:
    if block.synthetic:
        return DEFAULT_JOB_ID
    seed = f"{block.company}|{block.title}|{block.dates}|{block.ordinal}".lower()
    return "job_" + hashlib.sha256(seed.encode("utf-8")).hexdigest()[:12]


def finish(state: SegmenterState) -> SegmentationResult:
    state = _finalize(state)
    jobs: list[JobBlock] = []
    bullets: list[Bullet] = []
    for block in state.finished:
        job_id = job_block_id(block)
        jobs.append(
            JobBlock(
                id=job_id,
                company=block.company,
                title=block.title,
                dates=block.dates,
                location=block.location,
                bullets=list(block.bullets),
            )
        )
        for text in block.bullets:
            bullets.append(Bullet(id=f"b{len(bullets) + 1}", text=text, owner_job_id=job_id))
    return SegmentationResult(jobs=jobs, bullets=bullets)


def segment_jobs(text: str, limits: SegmenterLimits | None = None) -> SegmentationResult:
    limits = limits or SegmenterLimits.from_config()
    lines = [line.text for line in normalized_lines(text)]
    state = reduce(lambda acc, line: advance(acc, line, limits), lines, SegmenterState())
    return finish(state)
