from __future__ import annotations

import re
from dataclasses import dataclass

from app.core.scoring import get_scoring_int
from app.normalize.classifier import strip_bullet_marker
from app.schemas.resume import VerbStrengthLabel, VerbStrengthResult

WEAK_OPENERS = (
    "was responsible for",
    "worked with",
    "worked on",
    "helped",
    "assisted",
    "supported",
    "participated in",
    "involved in",
    "exposed to",
    "responsible for",
    "collaborated with",
    "was involved in",
    "was tasked with",
    "was part of",
)

STRONG_VERBS = frozenset(
    {
        "led",
        "owned",
        "drove",
        "delivered",
        "shipped",
        "launched",
        "spearheaded",
        "directed",
        "managed",
        "mentored",
        "architected",
        "designed",
        "implemented",
        "automated",
        "optimized",
        "improved",
        "increased",
        "reduced",
        "cut",
        "saved",
        "prevented",
        "unblocked",
        "eliminated",
        "de-risked",
        "hardened",
    }
)

SOLID_VERBS = frozenset(
    {
        "tested",
        "validated",
        "executed",
        "created",
        "built",
        "documented",
        "triaged",
        "investigated",
        "debugged",
        "monitored",
        "coordinated",
        "refactored",
        "integrated",
        "migrated",
        "standardized",
        "streamlined",
        "analyzed",
        "measured",
        "instrumented",
    }
)

FILLER = frozenset(
    {
        "successfully",
        "effectively",
        "proactively",
        "actively",
        "efficiently",
        "responsible",
        "for",
        "the",
        "a",
        "an",
        "to",
        "and",
        "with",
        "in",
        "on",
        "of",
        "by",
        "as",
        "at",
    }
)

_WORD_CLEAN_RE = re.compile(r"[^\w-]")
_PASSIVE_RE = re.compile(
    r"\b(?:was responsible for|was involved in|was tasked with|was assigned to|was part of)\b",
    re.IGNORECASE,
)
_VAGUE_RE = re.compile(r"\b(?:various|several|some|things|stuff|etc|multiple tasks|as needed)\b", re.IGNORECASE)
_SCOPE_RE = re.compile(
    r"\b(?:api|apis|pipeline|ci/cd|release|deployment|automation|framework|test plan|test strategy|coverage"
    r"|regression|observability|monitoring|dashboards|kpi|experiment|a/b|tracking|instrumentation|backend"
    r"|frontend|mobile|vr|ue4|ue5|unreal|testrail|jira|confluence|postman)\b",
    re.IGNORECASE,
)
_OUTCOME_RE = re.compile(
    r"\b(?:increased|reduced|improved|cut|saved|prevented|boosted|grew|decreased|accelerated|shortened"
    r"|eliminated|de-risked)\b",
    re.IGNORECASE,
)
_QUANTIFIED_RE = re.compile(
    r"%|\$\s?\d|\b\d+(?:\.\d+)?\s?(?:ms|s|sec|secs|minutes|min|hrs|hours|days|weeks)\b|\b\d+(?:\.\d+)?x\b|\b\d{2,}\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class VerbStrengthWeights:
    base_score: int = 62
    weak_opener: int = 10
    passive_voice: int = 8
    vague_wording: int = 6
    no_verb: int = 4
    strong_verb: int = 22
    solid_verb: int = 10
    generic_ed: int = 6
    scope: int = 10
    outcome: int = 12
    quantified: int = 12
    ok_threshold: int = 50
    strong_threshold: int = 80
    opener_words: int = 10
    verb_scan_words: int = 8
    max_reasons: int = 3

    @classmethod
    def from_config(cls) -> "VerbStrengthWeights":
        defaults = cls()
        return cls(
            base_score=get_scoring_int("verb_strength.base_score", defaults.base_score),
            weak_opener=get_scoring_int("verb_strength.penalties.weak_opener", defaults.weak_opener),
            passive_voice=get_scoring_int("verb_strength.penalties.passive_voice", defaults.passive_voice),
            vague_wording=get_scoring_int("verb_strength.penalties.vague_wording", defaults.vague_wording),
            no_verb=get_scoring_int("verb_strength.penalties.no_verb", defaults.no_verb),
            strong_verb=get_scoring_int("verb_strength.verb_bonus.strong", defaults.strong_verb),
            solid_verb=get_scoring_int("verb_strength.verb_bonus.solid", defaults.solid_verb),
            generic_ed=get_scoring_int("verb_strength.verb_bonus.generic_ed", defaults.generic_ed),
            scope=get_scoring_int("verb_strength.signal_bonus.scope", defaults.scope),
            outcome=get_scoring_int("verb_strength.signal_bonus.outcome", defaults.outcome),
            quantified=get_scoring_int("verb_strength.signal_bonus.quantified", defaults.quantified),
            ok_threshold=get_scoring_int("verb_strength.thresholds.ok", defaults.ok_threshold),
            strong_threshold=get_scoring_int("verb_strength.thresholds.strong", defaults.strong_threshold),
            opener_words=get_scoring_int("verb_strength.opener_words", defaults.opener_words),
            verb_scan_words=get_scoring_int("verb_strength.verb_scan_words", defaults.verb_scan_words),
            max_reasons=get_scoring_int("verb_strength.max_reasons", defaults.max_reasons),
        )


def _clean_words(text: str) -> list[str]:
    cleaned = strip_bullet_marker(text).lower()
    return [word for word in cleaned.split() if word]


def detect_verb(words: list[str], scan_limit: int = 8) -> tuple[str | None, str | None]:
    """Return ``(verb, kind)`` for the first action verb among the leading non-filler words.

    ``kind`` is "strong", "solid" or "generic". Known verbs win over a generic
    "-ed" word even when the generic word comes first.
    """
    scanned: list[str] = []
    for raw in words:
        word = _WORD_CLEAN_RE.sub("", raw)
        if not word or word in FILLER:
            continue
        scanned.append(word)
        if len(scanned) >= scan_limit:
            break

    for word in scanned:
        if word in STRONG_VERBS:
            return word, "strong"
        if word in SOLID_VERBS:
            return word, "solid"
    for word in scanned:
        if len(word) >= 5 and word.endswith("ed"):
            return word, "generic"
    return None, None


def _label_for(score: int, weights: VerbStrengthWeights) -> VerbStrengthLabel:
    if score < weights.ok_threshold:
        return "Weak"
    if score < weights.strong_threshold:
        return "OK"
    return "Strong"


def compute_verb_strength(text: str | None, weights: VerbStrengthWeights | None = None) -> VerbStrengthResult:
    """Score how strongly a bullet leads with ownership, scope and measurable outcome."""
    weights = weights or VerbStrengthWeights.from_config()
    raw = str(text or "").strip()
    words = _clean_words(raw)
    opener = " ".join(words[: weights.opener_words])

    score = weights.base_score
    reasons: list[str] = []

    weak = next((phrase for phrase in WEAK_OPENERS if opener.startswith(phrase)), None)
    if weak:
        score -= weights.weak_opener
        reasons.append(f'Weak opener ("{weak}")')

    if _PASSIVE_RE.search(opener):
        score -= weights.passive_voice
        reasons.append("Passive/indirect ownership")

    if _VAGUE_RE.search(raw):
        score -= weights.vague_wording
        reasons.append("Vague wording")

    verb, kind = detect_verb(words, weights.verb_scan_words)
    if kind == "strong":
        score += weights.strong_verb
        reasons.append(f'Strong verb ("{verb}")')
    elif kind == "solid":
        score += weights.solid_verb
        reasons.append(f'Solid verb ("{verb}")')
    elif kind == "generic":
        score += weights.generic_ed
        reasons.append(f'Action verb ("{verb}")')
    else:
        score -= weights.no_verb
        reasons.append("No clear action verb early")

    if _SCOPE_RE.search(raw):
        score += weights.scope
        reasons.append("Clear scope/system")
    if _OUTCOME_RE.search(raw):
        score += weights.outcome
        reasons.append("Outcome language")
    if _QUANTIFIED_RE.search(raw):
        score += weights.quantified
        reasons.append("Quantified impact")

    score = max(0, min(100, score))
    label = _label_for(score, weights)
    reasons = reasons[: weights.max_reasons]

    suggestion = None
    if label != "Strong":
        suggestion = f"Why: {', '.join(reasons)}" if reasons else "Try a stronger opener and add outcome/metrics if truthful."

    return VerbStrengthResult(score=score, label=label, detected_verb=verb, reasons=reasons, suggestion=suggestion)
