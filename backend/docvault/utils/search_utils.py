"""
Search utility functions for ranking, highlighting and query suggestions.
Kept separate from the query service so the scoring rules stay pure and testable.
"""
import re
from typing import List

from ..domain.entities import Document
from ..core.logging_config import get_logger

logger = get_logger(__name__)

FILENAME_WEIGHT = 3
SUMMARY_WEIGHT = 2
KEYWORD_WEIGHT = 4
DEPARTMENT_WEIGHT = 1
EXACT_PHRASE_WEIGHT = 5

HIGHLIGHT_CONTEXT = 30
MAX_HIGHLIGHTS = 3
MAX_SUGGESTIONS = 5

SUGGESTION_VOCABULARY = [
    "safety protocol", "maintenance report", "engineering drawing",
    "vendor invoice", "board meeting", "track inspection",
    "electrical system", "rolling stock", "emergency procedure",
    "monsoon operations", "fire safety", "passenger safety",
    "procurement order", "budget allocation", "training manual",
]


def tokenize_query(query: str) -> List[str]:
    """Lower-cased whitespace tokens, duplicates removed, order kept."""
    tokens: List[str] = []
    for token in (query or "").lower().split():
        if token not in tokens:
            tokens.append(token)
    return tokens


def summary_contains_phrase(query: str, document: Document) -> bool:
    """True when the whole query, whitespace-normalized, occurs in the summary."""
    phrase = " ".join((query or "").lower().split())
    return bool(phrase) and phrase in (document.ai_summary or "").lower()


def calculate_relevance_score(query: str, document: Document) -> int:
    """
    Weighted substring score of a document for a query.

    Args:
        query: Raw search query
        document: Candidate document returned by the store

    Returns:
        Integer score; higher ranks first
    """
    tokens = tokenize_query(query)
    phrase = " ".join((query or "").lower().split())
    filename = (document.original_filename or "").lower()
    summary = (document.ai_summary or "").lower()
    keywords = [str(k).lower() for k in (document.ai_keywords or [])]

    score = 0
    for token in tokens:
        if token in filename:
            score += FILENAME_WEIGHT
        if token in summary:
            score += SUMMARY_WEIGHT
        score += KEYWORD_WEIGHT * sum(1 for keyword in keywords if token in keyword)

    if phrase and phrase in summary:
        score += EXACT_PHRASE_WEIGHT

    if phrase and phrase in (document.department or "").lower():
        score += DEPARTMENT_WEIGHT

    return score


def extract_search_highlights(query: str, summary: str) -> List[str]:
    """Up to three '...context...' snippets around query matches in the summary."""
    if not summary:
        return []

    highlights: List[str] = []
    for token in tokenize_query(query):
        pattern = re.compile(rf"\w*{re.escape(token)}\w*", re.IGNORECASE)
        for match in pattern.finditer(summary):
            start = max(0, match.start() - HIGHLIGHT_CONTEXT)
            end = min(len(summary), match.end() + HIGHLIGHT_CONTEXT)
            snippet = f"...{summary[start:end]}..."
            if snippet not in highlights:
                highlights.append(snippet)
            if len(highlights) >= MAX_HIGHLIGHTS:
                return highlights
    return highlights


def generate_search_suggestions(query: str) -> List[str]:
    """Related domain queries whose text contains the query or whose first word the query contains."""
    query_lower = " ".join((query or "").lower().split())
    if not query_lower:
        return []

    suggestions = []
    for term in SUGGESTION_VOCABULARY:
        first_word = term.split(" ")[0]
        if query_lower in term or first_word in query_lower:
            suggestions.append(term)
    return suggestions[:MAX_SUGGESTIONS]
