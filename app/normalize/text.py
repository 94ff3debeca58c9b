from __future__ import annotations

import re
from typing import Any

from app.parsing.models import NormalizedLine

_HSPACE_RE = re.compile(r"[^\S\n]+")
_EXCESS_BLANK_LINES_RE = re.compile(r"\n{3,}")
_ANY_SPACE_RE = re.compile(r"\s+")


def _coerce_text(raw: Any) -> str:
    if raw is None:
        return ""
    return raw if isinstance(raw, str) else str(raw)


def normalize_resume_text(raw: Any) -> str:
    """Canonicalize resume text while keeping its line structure.

    Line endings become LF, horizontal whitespace collapses to a single space
    inside each line and runs of blank lines shrink to one. A single leading
    space is kept so indented continuation lines stay recognizable.
    """
    text = _coerce_text(raw).replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\u00a0", " ").replace("\ufeff", "")
    lines = [_HSPACE_RE.sub(" ", line).rstrip() for line in text.split("\n")]
    text = "\n".join(lines)
    text = _EXCESS_BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def normalize_job_text(raw: Any) -> str:
    return _ANY_SPACE_RE.sub(" ", _coerce_text(raw)).strip()


def normalize_line(line: str) -> str:
    return _ANY_SPACE_RE.sub(" ", line or "").strip()


def normalized_lines(text: str) -> list[NormalizedLine]:
    out: list[NormalizedLine] = []
    for index, raw_line in enumerate((text or "").split("\n")):
        cleaned = normalize_line(raw_line)
        if not cleaned:
            continue
        out.append(NormalizedLine(index=index, text=cleaned, indented=raw_line[:1].isspace()))
    return out


def dedupe_key(text: str) -> str:
    return normalize_line(text).lower()
