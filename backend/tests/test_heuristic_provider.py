import pytest

from docvault.services.providers import HeuristicProvider


@pytest.fixture
def provider():
    return HeuristicProvider()


@pytest.mark.parametrize("filename,text,expected,confidence", [
    ("safety_notice.pdf", "", "safety&training", 0.90),
    ("quarterly_invoice.pdf", "", "finance&procurement", 0.85),
    ("site_plan.dwg", "", "maintenance&operation", 0.85),
    ("budget.xlsx", "", "finance&procurement", 0.85),
    ("hr_guidelines.docx", "", "humanresources", 0.85),
    ("lease_contract.pdf", "", "legal&governance", 0.85),
    ("memo.txt", "This is mandatory under the new regulation.", "compliance&regulatory", 0.90),
    ("three_rivers.pdf", "", "general communication", 0.60),
])
async def test_rule_tiers(provider, filename, text, expected, confidence):
    result = await provider.classify(text, filename, "unknown")
    assert result.document_type == expected
    assert result.confidence == confidence
    assert result.source == "heuristic"


async def test_content_terms_classify_when_filename_is_neutral(provider):
    result = await provider.classify("Emergency evacuation drill for all staff.", "scan_0042.pdf", "document")
    assert result.document_type == "safety&training"
    assert "safety" in result.compliance_flags


async def test_upload_department_leads_relevance(provider):
    result = await provider.classify("", "notice.txt", "document", department="FINANCE")
    assert result.department_relevance[0] == "FINANCE"
    assert "FINANCE" in result.entities["departments"]


async def test_language_is_detected(provider):
    result = await provider.classify("മെട്രോ station notice", "notice.txt", "document")
    assert result.language == "mixed"


async def test_summary_of_text(provider):
    text = "Rail grinding is scheduled for Sunday night. Trains will terminate early at Palarivattom."
    result = await provider.summarize(text, "notice.txt", "maintenance&operation")
    assert result.summary.startswith("Rail grinding is scheduled")
    assert result.confidence == 0.6
    assert "grinding" in result.keywords
    assert len(result.keywords) <= 8


async def test_summary_without_text_uses_filename(provider):
    result = await provider.summarize("", "scan.jpg", None)
    assert result.summary == "Document summary for scan.jpg"
    assert result.keywords == ["document", "file", "scan"]
