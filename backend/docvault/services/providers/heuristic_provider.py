"""
Heuristic AI Provider.

Deterministic, local stand-in for the ML service. It is the fallback the
enrichment service uses whenever the remote provider fails, and can be
selected directly with AI_PROVIDER=heuristic for offline deployments.
"""
import re
import time
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import List, Optional, Tuple

from .base import AIProvider, ClassificationResult, SummaryResult
from ...domain import taxonomy
from ...utils.text_analysis import (
    detect_language,
    extract_entities,
    extract_keywords,
    extractive_summary,
    filename_stem,
)
from ...core.logging_config import get_logger

logger = get_logger(__name__)

HEURISTIC_SUMMARY_CONFIDENCE = 0.6


@dataclass(frozen=True)
class ClassificationRule:
    """One tier of the keyword classifier; rules are tried in order."""
    document_type: str
    confidence: float
    filename_terms: Tuple[str, ...] = ()
    filename_tokens: Tuple[str, ...] = ()
    content_terms: Tuple[str, ...] = ()
    extensions: Tuple[str, ...] = ()
    key_points: Tuple[str, ...] = ()
    departments: Tuple[str, ...] = ()
    compliance_flags: Tuple[str, ...] = ()

    def matches(self, filename: str, tokens: List[str], extension: str, content: str) -> bool:
        return (
            any(term in filename for term in self.filename_terms)
            or any(token in tokens for token in self.filename_tokens)
            or any(term in content for term in self.content_terms)
            or extension in self.extensions
        )


CLASSIFICATION_RULES = (
    ClassificationRule(
        document_type=taxonomy.MAINTENANCE_OPERATION,
        confidence=0.85,
        filename_terms=("maintenance", "inspection", "repair", "operation", "schedule"),
        content_terms=("maintenance", "operation"),
        extensions=("dwg", "dxf"),
        key_points=("Maintenance activity", "Operational procedure", "Equipment status", "Technical drawing"),
        departments=("MAINTENANCE", "OPERATIONS", "METRO_ENGINEERING"),
    ),
    ClassificationRule(
        document_type=taxonomy.FINANCE_PROCUREMENT,
        confidence=0.85,
        filename_terms=("bill", "invoice", "purchase", "budget", "financial", "audit"),
        content_terms=("payment", "procurement", "budget"),
        extensions=("xlsx",),
        key_points=("Financial transaction", "Purchase order", "Budget allocation", "Vendor payment"),
        departments=("FINANCE", "PROCUREMENT"),
    ),
    ClassificationRule(
        document_type=taxonomy.COMPLIANCE_REGULATORY,
        confidence=0.90,
        filename_terms=("compliance", "regulation", "standard"),
        content_terms=("regulation", "mandatory", "compliance", "standard"),
        key_points=("Regulatory requirement", "Compliance standard", "Legal obligation", "Audit findings"),
        departments=("LEGAL", "ADMINISTRATION", "QUALITY_ASSURANCE"),
        compliance_flags=("regulation", "compliance", "mandatory"),
    ),
    ClassificationRule(
        document_type=taxonomy.SAFETY_TRAINING,
        confidence=0.90,
        filename_terms=("safety", "training", "hazard", "incident", "emergency"),
        content_terms=("safety", "training", "emergency"),
        key_points=("Safety protocol", "Training material", "Hazard identification", "Emergency procedure"),
        departments=("SAFETY", "HR", "OPERATIONS"),
        compliance_flags=("safety", "mandatory"),
    ),
    ClassificationRule(
        document_type=taxonomy.HUMAN_RESOURCES,
        confidence=0.85,
        filename_terms=("employee", "policy", "staff", "personnel"),
        filename_tokens=("hr",),
        content_terms=("employee", "policy", "personnel"),
        key_points=("HR policy", "Employee guidelines", "Personnel management", "Organizational procedure"),
        departments=("HR", "ADMINISTRATION"),
    ),
    ClassificationRule(
        document_type=taxonomy.LEGAL_GOVERNANCE,
        confidence=0.85,
        filename_terms=("legal", "contract", "agreement", "board", "minutes", "governance"),
        content_terms=("contract", "board", "legal"),
        key_points=("Legal analysis", "Contract terms", "Board decision", "Governance framework"),
        departments=("LEGAL", "ADMINISTRATION"),
        compliance_flags=("legal", "contract"),
    ),
)

DEFAULT_RULE = ClassificationRule(
    document_type=taxonomy.GENERAL_COMMUNICATION,
    confidence=0.60,
    key_points=("Document communication", "Information sharing", "General correspondence"),
    departments=("ADMINISTRATION",),
)

_FILENAME_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def select_rule(text: str, filename: str) -> ClassificationRule:
    """First rule whose filename, extension or content terms match."""
    name = PurePath(filename).name.lower()
    extension = PurePath(name).suffix.lstrip(".")
    tokens = [t for t in _FILENAME_TOKEN_SPLIT.split(PurePath(name).stem) if t]
    content = (text or "").lower()

    for rule in CLASSIFICATION_RULES:
        if rule.matches(name, tokens, extension, content):
            return rule
    return DEFAULT_RULE


class HeuristicProvider(AIProvider):
    """
    Rule-based classifier and extractive summarizer.
    Pure local computation: no network, no randomness.
    """
    name = "heuristic"

    async def classify(self, text: str, filename: str, file_type: str,
                       department: Optional[str] = None) -> ClassificationResult:
        started = time.perf_counter()
        rule = select_rule(text, filename)

        relevance = list(rule.departments)
        if department and department not in relevance:
            relevance.insert(0, department)

        entities = extract_entities(text)
        entities["departments"] = list(dict.fromkeys(relevance + entities["departments"]))

        base_name = PurePath(filename).name
        result = ClassificationResult(
            document_type=rule.document_type,
            confidence=rule.confidence,
            keywords=list(rule.key_points[:5]),
            entities=entities,
            processing_time=time.perf_counter() - started,
            language=detect_language(text),
            key_points=list(rule.key_points),
            compliance_flags=list(rule.compliance_flags),
            department_relevance=relevance,
            summary=f"{rule.document_type} document: {base_name}",
            source=self.name,
        )
        logger.info(f"Heuristic classification: {result.document_type} ({result.confidence}) for {base_name}")
        return result

    async def summarize(self, text: str, filename: str, document_type: Optional[str],
                        max_summary_length: int = 500) -> SummaryResult:
        started = time.perf_counter()
        base_name = PurePath(filename).name

        summary = extractive_summary(text, max_summary_length) if text else ""
        if summary:
            keywords = extract_keywords(text)
        else:
            summary = f"Document summary for {base_name}"
            keywords = ["document", "file", filename_stem(base_name)]

        logger.info(f"Heuristic summary generated for {base_name} ({len(summary)} chars)")
        return SummaryResult(
            summary=summary,
            keywords=keywords,
            confidence=HEURISTIC_SUMMARY_CONFIDENCE,
            processing_time=time.perf_counter() - started,
            source=self.name,
        )
