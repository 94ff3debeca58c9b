from __future__ import annotations

import re

from .text import normalize_line

_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sept?(?:ember)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
_YEAR = r"(?:19|20)\d{2}"
_DATE_RANGE_RE = re.compile(
    rf"\b{_MONTH}\s+{_YEAR}\s*[–—-]\s*(?:{_MONTH}\s+{_YEAR}|present|current|now)\b",
    re.IGNORECASE,
)

_MARKER_RE = re.compile(
    r"^\s*(?:[•▪◦‣∙·●■⁃➢]\s*"
    r"|[-*–—o]\s+"
    r"|\d{1,2}[.)]\s+)"
)

_EMAIL_RE = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)
_URL_RE = re.compile(
    r"\bhttps?://\S+|\bwww\.\S+|\blinkedin\.com/in/\S*|\bgithub\.com/\S+",
    re.IGNORECASE,
)
_CONTACT_LABEL_RE = re.compile(
    r"^(?:p|e|l|t|m|ph|phone|tel|mobile|cell|email|e-mail|linkedin|github|website|portfolio)\s*:",
    re.IGNORECASE,
)
_NA_PHONE_RE = re.compile(r"(?:\+?1[\s.-]?)?\(?\b\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}\b")
_DIGIT_RUN_RE = re.compile(r"\+?\(?\d[\d\s().–/-]*\d")
_REFERENCES_RE = re.compile(r"^references?\s*:?$", re.IGNORECASE)
_UPON_REQUEST_RE = re.compile(r"\bavailable\s+(?:up)?on\s+request\b", re.IGNORECASE)
_PERSON_NAME_RE = re.compile(r"^[A-Z][a-z]+(?: [A-Z][a-z]+){1,2}$")
_STREET_ADDRESS_RE = re.compile(
    r"^\d+\s+\w+(?:\s+\w+){0,4}\s+"
    r"(?:St|Street|Ave|Avenue|Rd|Road|Blvd|Boulevard|Dr|Drive|Ln|Lane|Way|Ct|Court|Pl|Place"
    r"|Hwy|Highway|Cres|Crescent|Pkwy|Parkway|Terrace)\b\.?"
)
_CA_POSTAL_RE = re.compile(r"\b[ABCEGHJ-NPRSTVXY]\d[ABCEGHJ-NPRSTV-Z][ -]?\d[ABCEGHJ-NPRSTV-Z]\d\b")
_FIELD_LABEL_RE = re.compile(r"^(?:company|employer|role|title|position|location|dates?)\s*:\s*", re.IGNORECASE)

_ROLE_WORDS = {
    "qa",
    "engineer",
    "manager",
    "lead",
    "analyst",
    "director",
    "producer",
    "designer",
    "tester",
    "developer",
    "specialist",
    "coordinator",
    "consultant",
    "intern",
    "architect",
    "administrator",
    "officer",
    "supervisor",
    "technician",
    "associate",
    "assistant",
    "programmer",
    "artist",
    "scientist",
    "senior",
    "junior",
    "principal",
}
_ORGANIZATION_WORDS = {
    "studios",
    "studio",
    "games",
    "inc",
    "llc",
    "ltd",
    "corp",
    "corporation",
    "labs",
    "technologies",
    "technology",
    "entertainment",
    "group",
    "company",
    "solutions",
    "systems",
    "software",
    "interactive",
    "media",
    "university",
    "college",
    "agency",
}

_EXPERIENCE_HEADINGS = {
    "professional experience",
    "work experience",
    "employment history",
    "experience",
    "work history",
    "relevant experience",
    "career history",
}
_TERMINAL_HEADINGS = (
    "technical skills",
    "personal skills",
    "core skills",
    "key skills",
    "skills",
    "certificates",
    "certifications",
    "certification",
    "education",
    "projects",
    "references",
    "areas of expertise",
    "professional summary",
    "summary",
    "achievements",
    "training",
    "volunteer",
    "volunteering",
    "interests",
    "awards",
    "languages",
)
_OTHER_HEADINGS = {"objective", "profile", "contact", "contact information", "personal information"}
_HEADING_CONNECTORS = {"and", "&", "of", "/", "-", "–"}

MAX_CONTACT_LINE_CHARS = 220


def is_date_range_line(line: str) -> bool:
    return bool(_DATE_RANGE_RE.search(line or ""))


def extract_date_range(line: str) -> str:
    match = _DATE_RANGE_RE.search(normalize_line(line))
    return match.group(0) if match else ""


def is_marked_bullet(line: str) -> bool:
    match = _MARKER_RE.match(line or "")
    return bool(match and line[match.end():].strip())


def strip_bullet_marker(line: str) -> str:
    return _MARKER_RE.sub("", line or "", count=1).strip()


def strip_field_label(line: str) -> str:
    return _FIELD_LABEL_RE.sub("", line or "", count=1).strip()


def field_label(line: str) -> str | None:
    match = _FIELD_LABEL_RE.match(line or "")
    if not match:
        return None
    return match.group(0).split(":", 1)[0].strip().lower()


def _heading_key(line: str) -> str:
    return normalize_line(line).lower().rstrip(":").strip()


def _looks_title_case(line: str) -> bool:
    words = normalize_line(line).split(" ")
    for word in words:
        if word.lower() in _HEADING_CONNECTORS:
            continue
        first = next((ch for ch in word if ch.isalpha()), "")
        if first and not first.isupper():
            return False
    return True


def is_experience_heading(line: str) -> bool:
    key = _heading_key(line)
    if not key or len(key) > 40:
        return False
    if key in _EXPERIENCE_HEADINGS:
        return True
    return any(marker in key for marker in ("professional experience", "work experience", "employment history"))


def is_terminal_heading(line: str) -> bool:
    key = _heading_key(line)
    if not key or len(key) > 40 or key.endswith("."):
        return False
    for heading in _TERMINAL_HEADINGS:
        if key == heading:
            return True
        if key.startswith(heading) and not key[len(heading)].isalnum():
            if len(key.split()) <= 4 and _looks_title_case(line):
                return True
    return False


def looks_like_heading(line: str) -> bool:
    if not normalize_line(line):
        return False
    if is_experience_heading(line) or is_terminal_heading(line):
        return True
    return _heading_key(line) in _OTHER_HEADINGS


def _is_date_digits(groups: list[str]) -> bool:
    # "2019-2022", "01/2020 - 03/2022": years, optionally with 1-2 digit months.
    years = [group for group in groups if len(group) == 4 and group[:2] in {"19", "20"}]
    if not years:
        return False
    return all(group in years or len(group) <= 2 for group in groups)


def _has_phone_digit_run(line: str) -> bool:
    if _NA_PHONE_RE.search(line):
        return True
    for match in _DIGIT_RUN_RE.finditer(line):
        groups = re.findall(r"\d+", match.group(0))
        if _is_date_digits(groups):
            continue
        digits = sum(len(group) for group in groups)
        if 7 <= digits <= 15:
            return True
    return False


def _looks_like_person_name(line: str) -> bool:
    if not _PERSON_NAME_RE.match(line):
        return False
    words = {word.lower() for word in line.split(" ")}
    return not (words & _ROLE_WORDS or words & _ORGANIZATION_WORDS)


def rejection_reason(line: str) -> str | None:
    """Return why a line can never be an experience bullet, or None if it can.

    Contact rules only look at lines shorter than ``MAX_CONTACT_LINE_CHARS``;
    longer lines are prose and the contact regexes are not run over them.
    """
    text = normalize_line(line)
    if not text:
        return "empty"
    short = len(text) < MAX_CONTACT_LINE_CHARS
    if short and "@" in text and _EMAIL_RE.search(text):
        return "email"
    if short and _URL_RE.search(text):
        return "url"
    if _CONTACT_LABEL_RE.match(text):
        return "contact_label"
    if short and _has_phone_digit_run(text):
        return "phone"
    if _REFERENCES_RE.match(text) or _UPON_REQUEST_RE.search(text):
        return "references"
    if _looks_like_person_name(text):
        return "person_name"
    if _STREET_ADDRESS_RE.match(text) or _CA_POSTAL_RE.search(text):
        return "address"
    return None


def is_rejected_line(line: str) -> bool:
    return rejection_reason(line) is not None


def accept_bullet(text: str, min_length: int) -> bool:
    """Single gatekeeper shared by every bullet acceptance path."""
    cleaned = normalize_line(text)
    if len(cleaned) < min_length:
        return False
    if looks_like_heading(cleaned):
        return False
    return not is_rejected_line(cleaned)
