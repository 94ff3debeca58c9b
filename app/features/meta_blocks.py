from __future__ import annotations

import re

from app.normalize.text import normalize_resume_text, normalized_lines
from app.schemas.resume import MetaBlocks

_GAMES_SHIPPED_RE = re.compile(r"^(?:\U0001F3AE\s*)?games shipped:", re.IGNORECASE)
_METRIC_LIKE_RE = re.compile(
    r"%|\$\s?\d|\b\d+(?:\.\d+)?\s?(?:ms|s|sec|secs|minutes|min|hrs|hours|days|weeks)\b|\b\d+(?:\.\d+)?x\b",
    re.IGNORECASE,
)
_MONTH_YEAR_RE = re.compile(r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)\s+(?:19|20)\d{2}\b", re.IGNORECASE)
_PHONE_RE = re.compile(r"\b\d{3}[-.)\s]*\d{3}[-.\s]*\d{4}\b")

MAX_GAMES_SHIPPED = 30
MAX_METRICS = 50
MAX_METRIC_LINE_CHARS = 110


def extract_meta_blocks(resume_text: str) -> MetaBlocks:
    """Collect "Games shipped:" lines and short metric lines that are not bullets."""
    games: list[str] = []
    metrics: list[str] = []

    for line in normalized_lines(normalize_resume_text(resume_text)):
        text = line.text
        if _GAMES_SHIPPED_RE.match(text):
            if text not in games:
                games.append(text)
            continue
        if len(text) > MAX_METRIC_LINE_CHARS or not _METRIC_LIKE_RE.search(text):
            continue
        if _MONTH_YEAR_RE.search(text) or _PHONE_RE.search(text):
            continue
        if text not in metrics:
            metrics.append(text)

    return MetaBlocks(games_shipped=games[:MAX_GAMES_SHIPPED], metrics=metrics[:MAX_METRICS])
