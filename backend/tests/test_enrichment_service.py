import json

import httpx
import pytest

from docvault.services.enrichment_service import EnrichmentService, clamp_confidence
from docvault.domain import taxonomy
from docvault.services.providers import AIProviderFactory, DemoProvider, HeuristicProvider, RemoteMLProvider

INVOICE_TEXT = "Invoice of ₹1,50,000 received on 12/03/2024 for rolling stock spares."


def _remote(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RemoteMLProvider(
        base_url="http://ml.test",
        classify_url="http://ml.test/api/classify",
        summary_url="http://ml.test/api/summarize",
        ocr_url="http://ml.test/api/process/document",
        client=client,
    )


def _service(handler, **kwargs):
    return EnrichmentService(provider=_remote(handler), fallback=HeuristicProvider(), **kwargs)


def _json_handler(classify=None, summarize=None, ocr=None, status_code=200):
    def handler(request):
        payloads = {"/api/classify": classify, "/api/summarize": summarize, "/api/process/document": ocr}
        body = payloads.get(request.url.path)
        if body is None:
            return httpx.Response(404, json={"success": False})
        return httpx.Response(status_code, json=body)
    return handler


def test_clamp_confidence():
    assert clamp_confidence(None) == 0.0
    assert clamp_confidence(-0.2) == 0.0
    assert clamp_confidence(1.7) == 1.0
    assert clamp_confidence(0.42) == 0.42


async def test_remote_classification_is_used_and_payload_sent():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "success": True, "category": "finance&procurement", "confidence": 0.93,
            "keywords": ["invoice"], "language": "english",
        })

    result = await _service(handler).classify(INVOICE_TEXT, "bill.pdf", "document", "FINANCE")

    assert seen["body"]["filename"] == "bill.pdf"
    assert seen["body"]["text"] == INVOICE_TEXT
    assert result.document_type == "finance&procurement"
    assert result.confidence == 0.93
    assert result.source == "remote"


async def test_empty_entity_buckets_are_filled_locally():
    handler = _json_handler(classify={"success": True, "category": "finance&procurement", "confidence": 0.8})
    result = await _service(handler).classify(INVOICE_TEXT, "bill.pdf", "document")

    assert "12/03/2024" in result.entities["dates"]
    assert result.entities["amounts"]


async def test_legacy_labels_are_remapped():
    handler = _json_handler(classify={"success": True, "category": "vendor_bill", "confidence": 0.8})
    result = await _service(handler).classify("", "bill.pdf", "document")
    assert result.document_type == "finance&procurement"


async def test_legacy_labels_kept_when_remapping_is_off():
    handler = _json_handler(classify={"success": True, "category": "Vendor_Bill ", "confidence": 0.8})
    result = await _service(handler, remap_legacy=False).classify("", "bill.pdf", "document")
    assert result.document_type == "vendor_bill"


async def test_out_of_range_confidence_is_clamped():
    handler = _json_handler(classify={"success": True, "category": "humanresources", "confidence": 7})
    result = await _service(handler).classify("", "policy.pdf", "document")
    assert result.confidence == 1.0


async def test_reported_failure_falls_back_to_heuristics():
    handler = _json_handler(classify={"success": False, "error": "model not loaded"})
    result = await _service(handler).classify("", "safety_notice.pdf", "document")

    assert result.source == "heuristic"
    assert result.document_type == "safety&training"
    assert result.confidence == pytest.approx(0.90)


async def test_server_error_falls_back_to_heuristics():
    handler = _json_handler(classify={"success": True, "category": "x"}, status_code=500)
    result = await _service(handler).classify("", "quarterly_invoice.pdf", "document")
    assert result.source == "heuristic"
    assert result.document_type == "finance&procurement"


async def test_transport_failure_falls_back_for_summaries():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = await _service(handler).summarize("", "memo.txt", "general communication")

    assert result.source == "heuristic"
    assert result.summary == "Document summary for memo.txt"


async def test_remote_summary_is_truncated():
    handler = _json_handler(summarize={"success": True, "summary": "x" * 900, "confidence": 0.7})
    result = await _service(handler).summarize("text", "memo.txt", "general communication", max_summary_length=100)
    assert len(result.summary) == 100
    assert result.source == "remote"


async def test_plain_text_is_extracted_locally(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("  Platform screen doors inspected.  ", encoding="utf-8")

    def handler(request):
        raise AssertionError("OCR must not be called for plain text")

    text = await _service(handler).extract_text(str(path), "notes.txt", "document")
    assert text == "Platform screen doors inspected."


async def test_unreadable_pdf_yields_empty_text(tmp_path):
    path = tmp_path / "scan.pdf"
    path.write_bytes(b"%PDF-1.4 broken")
    service = EnrichmentService(provider=HeuristicProvider())
    assert await service.extract_text(str(path), "scan.pdf", "document") == ""


async def test_images_go_to_remote_ocr(tmp_path):
    path = tmp_path / "signal.png"
    path.write_bytes(b"\x89PNG fake")
    handler = _json_handler(ocr={"success": True, "text": "Signal box 14 ", "confidence": 0.95})

    text = await _service(handler).extract_text(str(path), "signal.png", "image/png")
    assert text == "Signal box 14"


async def test_failed_ocr_yields_empty_text(tmp_path):
    path = tmp_path / "signal.png"
    path.write_bytes(b"\x89PNG fake")
    handler = _json_handler(ocr={"success": False})

    assert await _service(handler).extract_text(str(path), "signal.png", "image/png") == ""


async def test_health_check_reflects_remote_status():
    def handler(request):
        return httpx.Response(503)

    assert await _service(handler).health_check() is False


@pytest.mark.parametrize("provider_type, expected", [
    ("heuristic", HeuristicProvider),
    ("demo", DemoProvider),
    ("Remote", RemoteMLProvider),
    ("something-else", HeuristicProvider),
])
def test_provider_factory(provider_type, expected):
    assert isinstance(AIProviderFactory.get_provider(provider_type), expected)


async def test_demo_provider_is_deterministic_per_filename():
    provider = DemoProvider()
    first = await provider.classify("", "tender.pdf", "document", "FINANCE")
    second = await provider.classify("anything", "tender.pdf", "document")

    assert first.document_type == second.document_type
    assert first.document_type in taxonomy.DOCUMENT_TYPES
    assert 0.7 <= first.confidence <= 1.0
    assert first.source == "demo"


async def test_timeouts_fall_back_to_heuristics():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    service = _service(handler)
    classification = await service.classify("", "safety_notice.pdf", "document")
    summary = await service.summarize("", "safety_notice.pdf", classification.document_type)

    assert classification.source == "heuristic"
    assert classification.document_type == "safety&training"
    assert summary.source == "heuristic"
    assert summary.summary == "Document summary for safety_notice.pdf"
