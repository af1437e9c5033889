"""
Document type taxonomy.

The active label set is the coarse, seven-class taxonomy. The ML service
may still answer with labels from the older fine-grained taxonomy; those
are remapped onto the coarse classes when NORMALIZE_LEGACY_LABELS is on.
"""
from typing import Optional

MAINTENANCE_OPERATION = "maintenance&operation"
FINANCE_PROCUREMENT = "finance&procurement"
COMPLIANCE_REGULATORY = "compliance&regulatory"
SAFETY_TRAINING = "safety&training"
HUMAN_RESOURCES = "humanresources"
LEGAL_GOVERNANCE = "legal&governance"
GENERAL_COMMUNICATION = "general communication"

DOCUMENT_TYPES = (
    MAINTENANCE_OPERATION,
    FINANCE_PROCUREMENT,
    COMPLIANCE_REGULATORY,
    SAFETY_TRAINING,
    HUMAN_RESOURCES,
    LEGAL_GOVERNANCE,
    GENERAL_COMMUNICATION,
)

LEGACY_LABELS = {
    "engineering_drawing": MAINTENANCE_OPERATION,
    "maintenance_report": MAINTENANCE_OPERATION,
    "operational_manual": MAINTENANCE_OPERATION,
    "technical_specification": MAINTENANCE_OPERATION,
    "vendor_bill": FINANCE_PROCUREMENT,
    "purchase_order": FINANCE_PROCUREMENT,
    "financial_report": FINANCE_PROCUREMENT,
    "audit_report": FINANCE_PROCUREMENT,
    "compliance_document": COMPLIANCE_REGULATORY,
    "safety_notice": SAFETY_TRAINING,
    "training_material": SAFETY_TRAINING,
    "hr_policy": HUMAN_RESOURCES,
    "legal_opinion": LEGAL_GOVERNANCE,
    "board_minutes": LEGAL_GOVERNANCE,
    "correspondence": GENERAL_COMMUNICATION,
    "other": GENERAL_COMMUNICATION,
}


def normalize_label(label: Optional[str], remap_legacy: bool = True) -> str:
    """
    Map a classifier label onto the active taxonomy.

    With remapping on, anything outside the coarse taxonomy (legacy or
    unknown) lands in a coarse class; unknown labels become
    general communication. With remapping off the cleaned label is kept.
    """
    if not label or not str(label).strip():
        return GENERAL_COMMUNICATION
    cleaned = str(label).strip().lower()
    if cleaned in DOCUMENT_TYPES or not remap_legacy:
        return cleaned
    return LEGACY_LABELS.get(cleaned, GENERAL_COMMUNICATION)
