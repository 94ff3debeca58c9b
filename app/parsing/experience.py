from __future__ import annotations

import logging

from app.core.scoring import get_scoring_int
from app.normalize.classifier import is_date_range_line, is_experience_heading, is_terminal_heading
from app.normalize.text import normalize_line, normalize_resume_text

from .models import ExperienceSlice

logger = logging.getLogger(__name__)

_PRIMARY_HEADING = "professional experience"


def _line_offsets(text: str) -> list[tuple[int, str]]:
    offsets: list[tuple[int, str]] = []
    cursor = 0
    for line in text.split("\n"):
        offsets.append((cursor, line))
        cursor += len(line) + 1
    return offsets


def _find_terminal_offset(text: str, start: int) -> int | None:
    for offset, line in _line_offsets(text):
        if offset <= start:
            continue
        if is_terminal_heading(line):
            return offset
    return None


def _slice_until_terminal(text: str, start: int) -> str:
    end = _find_terminal_offset(text, start)
    return text[start:end] if end is not None else text[start:]


def locate_experience_section(text: str) -> ExperienceSlice:
    """Find the employment history inside normalized resume text.

    Priority: the literal "professional experience" heading, then any other
    experience heading line, then the first long date-range line. When none
    of these exist the whole text is returned with mode "none".
    """
    normalized = normalize_resume_text(text)
    if not normalized:
        return ExperienceSlice(experience_text="", found_section=False, mode="none")

    start = normalized.lower().find(_PRIMARY_HEADING)
    heading: str | None = _PRIMARY_HEADING if start != -1 else None

    if start == -1:
        for offset, line in _line_offsets(normalized):
            if is_experience_heading(line):
                start = offset
                heading = normalize_line(line).lower().rstrip(":")
                break

    if start != -1:
        return ExperienceSlice(
            experience_text=normalize_resume_text(_slice_until_terminal(normalized, start)),
            found_section=True,
            mode="heading",
            heading=heading,
        )

    min_anchor_length = get_scoring_int("extraction.heuristic_anchor_min_length", 25)
    for offset, line in _line_offsets(normalized):
        stripped = normalize_line(line)
        if len(stripped) >= min_anchor_length and is_date_range_line(stripped):
            return ExperienceSlice(
                experience_text=normalize_resume_text(_slice_until_terminal(normalized, offset)),
                found_section=True,
                mode="heuristic",
            )

    logger.debug("experience_section_not_found chars=%s", len(normalized))
    return ExperienceSlice(experience_text=normalized, found_section=False, mode="none")
