"""
Derived document insights shown alongside the stored AI intelligence.
"""
import math
from typing import List

from ..domain import taxonomy
from ..domain.entities import Document

URGENCY_SCORES = {"critical": 10, "urgent": 7, "priority": 5, "routine": 2}
SAFETY_TERMS = ("safety", "emergency", "critical", "urgent", "compliance")
MAX_PRIORITY = 100

_FILENAME_CATEGORIES = [
    (("safety", "emergency"), "Safety Critical"),
    (("maintenance", "inspection"), "Maintenance"),
    (("drawing", "design"), "Engineering"),
    (("invoice", "bill", "payment"), "Financial"),
    (("policy", "procedure"), "Administrative"),
    (("training", "manual"), "Training Material"),
]


def estimate_read_time(file_size: int) -> str:
    """Rough estimate: one megabyte takes about five minutes to read."""
    minutes = math.ceil((file_size or 0) / (1024 * 1024) * 5)
    if minutes < 60:
        return f"{minutes} min"
    return f"{minutes // 60}h {minutes % 60}m"


def categorize_document(document: Document) -> str:
    filename = (document.original_filename or "").lower()
    for terms, category in _FILENAME_CATEGORIES:
        if any(term in filename for term in terms):
            return category
    return "General Document"


def calculate_priority_score(document: Document) -> int:
    score = URGENCY_SCORES.get(document.urgency_level, 0)
    score += 2 * len(document.compliance_flags or [])
    for keyword in document.ai_keywords or []:
        if any(term in str(keyword).lower() for term in SAFETY_TERMS):
            score += 3
    return min(score, MAX_PRIORITY)


def sharing_recommendations(document: Document) -> List[str]:
    recommendations = []
    if document.ai_classification == taxonomy.SAFETY_TRAINING:
        recommendations.append("Share with all station controllers")
        recommendations.append("Add to safety training materials")
    elif document.ai_classification == taxonomy.MAINTENANCE_OPERATION:
        recommendations.append("Forward to preventive maintenance team")
        recommendations.append("Archive in maintenance knowledge base")

    related = [d for d in (document.extracted_entities or {}).get("departments", []) if d != document.department]
    if related:
        recommendations.append(f"Notify: {', '.join(related)}")
    return recommendations[:3]
