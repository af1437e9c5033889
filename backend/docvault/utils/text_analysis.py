"""
Local text heuristics used when the ML service is unavailable.

Everything here is pure and deterministic: language detection, extractive
summaries, frequency keywords and regex entity extraction.
"""
import re
from collections import Counter
from pathlib import PurePath
from typing import Dict, List, Optional

from ..domain.value_objects import Department, Language

MALAYALAM_PATTERN = re.compile(r"[\u0D00-\u0D7F]")
LATIN_PATTERN = re.compile(r"[A-Za-z]")

SENTENCE_SPLIT = re.compile(r"[.!?]+")
NON_WORD = re.compile(r"[^\w\s]")

SUMMARY_SENTENCES = 3
SUMMARY_CHAR_LIMIT = 500
KEYWORD_LIMIT = 8

STOPWORDS = frozenset([
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had",
    "her", "was", "one", "our", "out", "day", "get", "has", "him", "his",
    "how", "its", "may", "new", "now", "old", "see", "two", "way", "who",
    "did", "she", "use", "any", "say", "this", "that", "with", "from",
    "have", "were", "been", "will", "shall", "which", "their", "there",
    "they", "them", "than", "then", "into", "also", "such", "each", "some",
    "these", "those", "would", "could", "should", "about", "other", "only",
    "over", "upon", "must", "what", "when", "where", "while", "being",
])

DATE_PATTERNS = [
    re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b"),
    re.compile(r"\b\d{4}-\d{1,2}-\d{1,2}\b"),
    re.compile(r"\b\d{1,2}-\d{1,2}-\d{4}\b"),
]

AMOUNT_PATTERNS = [
    re.compile(r"\$[\d,]+(?:\.\d+)?"),
    re.compile(r"USD\s*[\d,]+(?:\.\d+)?"),
    re.compile(r"₹\s*[\d,]+(?:\.\d+)?"),
    re.compile(r"INR\s*[\d,]+(?:\.\d+)?"),
    re.compile(r"Rs\.?\s*[\d,]+(?:\.\d+)?"),
]

PROJECT_CODE_PATTERNS = [
    re.compile(r"\b[A-Z]{2,4}-\d{4}-\d{3}\b"),
    re.compile(r"\bKM-\d+-\d+\b"),
    re.compile(r"\bPROJ-\d+\b"),
    re.compile(r"\b[A-Z]{2,4}-\d{3,4}\b(?!-\d)"),
]

PERSONNEL_PATTERN = re.compile(
    r"\b(?:Mr|Mrs|Ms|Dr|Shri|Smt|Er)\.?\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?"
)


def detect_language(text: Optional[str]) -> str:
    """Return english, malayalam or mixed based on the scripts present."""
    if not text:
        return Language.ENGLISH.value
    has_malayalam = bool(MALAYALAM_PATTERN.search(text))
    has_latin = bool(LATIN_PATTERN.search(text))
    if has_malayalam and has_latin:
        return Language.MIXED.value
    if has_malayalam:
        return Language.MALAYALAM.value
    return Language.ENGLISH.value


def extractive_summary(text: str, max_length: int = SUMMARY_CHAR_LIMIT) -> str:
    """First three sentences longer than ten characters, capped at max_length."""
    sentences = [s.strip() for s in SENTENCE_SPLIT.split(text or "") if len(s.strip()) > 10]
    summary = ". ".join(sentences[:SUMMARY_SENTENCES]).strip()
    if len(summary) > max_length:
        summary = summary[:max_length - 3] + "..."
    return summary


def extract_keywords(text: str, limit: int = KEYWORD_LIMIT) -> List[str]:
    """
    Top terms by frequency, ties kept in first-seen order.

    Words of three characters or fewer and stopwords are ignored.
    """
    words = NON_WORD.sub(" ", (text or "").lower()).split()
    counts = Counter(w for w in words if len(w) > 3 and w not in STOPWORDS and not w.isdigit())
    return [word for word, _ in counts.most_common(limit)]


def _unique_matches(patterns, text: str) -> List[str]:
    found: List[str] = []
    for pattern in patterns:
        for match in pattern.findall(text):
            value = match.strip()
            if value and value not in found:
                found.append(value)
    return found


def _department_mentions(text: str) -> List[str]:
    mentions = []
    for department in Department:
        # Codes such as IT or HR only count in upper case
        if re.search(rf"\b{department.value}\b", text):
            mentions.append(department.value)
            continue
        spoken = department.value.replace("_", " ")
        if len(spoken) > 3 and re.search(rf"\b{spoken}\b", text, re.IGNORECASE):
            mentions.append(department.value)
    return mentions


def extract_entities(text: Optional[str]) -> Dict[str, List[str]]:
    """Regex entity extraction: dates, amounts, project codes, departments, personnel."""
    text = text or ""
    return {
        "dates": _unique_matches(DATE_PATTERNS, text),
        "amounts": _unique_matches(AMOUNT_PATTERNS, text),
        "project_codes": _unique_matches(PROJECT_CODE_PATTERNS, text),
        "departments": _department_mentions(text),
        "personnel": _unique_matches([PERSONNEL_PATTERN], text),
    }


def filename_stem(filename: str) -> str:
    return PurePath(filename).name.split(".")[0] or "unknown"
