import asyncio
import logging
from urllib.parse import unquote

PDF_BYTES = b"%PDF-1.4\n% scanned notice without a text layer\n"
TXT = "text/plain"


def _txt(name, text):
    return (name, text.encode("utf-8"), TXT)


def test_root_and_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["success"] is True

    health = client.get("/health")
    assert health.status_code == 200
    body = health.json()
    assert body["database"] == "connected"
    assert body["ai_provider"] == "heuristic"

    assert client.get("/ready").json() == {"ready": True}


def test_upload_safety_notice_without_ml_service(upload, safety_user):
    response = upload(safety_user, [("safety_notice.pdf", PDF_BYTES, "application/pdf")])

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert "timestamp" in body
    assert body["errors"] == []

    document = body["documents"][0]
    assert document["original_filename"] == "safety_notice.pdf"
    assert document["department"] == "SAFETY"
    assert document["ai_classification"] == "safety&training"
    assert abs(document["classification_confidence"] - 0.90) < 1e-9
    assert document["processing_status"] == "completed"


def test_uploaded_document_is_never_left_pending(client, upload, safety_user):
    upload(safety_user, [_txt("report.txt", "Weekly report for the depot. Nothing unusual observed.")])

    documents = client.get("/api/documents", headers=safety_user).json()["documents"]
    assert documents
    for document in documents:
        assert document["processing_status"] in ("completed", "failed")
        assert 0.0 <= document["classification_confidence"] <= 1.0
        assert document["processing_completed_at"] is not None


def test_download_returns_original_bytes(client, upload, safety_user):
    content = "Evacuation drill on platform 2. All staff must attend.".encode("utf-8")
    doc_id = upload(safety_user, [("drill plan.txt", content, TXT)]).json()["documents"][0]["id"]

    response = client.get(f"/api/documents/{doc_id}/download", headers=safety_user)

    assert response.status_code == 200
    assert response.content == content
    assert "drill plan.txt" in unquote(response.headers["content-disposition"])


def test_upload_rejects_missing_department(client, safety_user):
    response = client.post(
        "/api/documents/upload",
        headers=safety_user,
        files=[("files", _txt("a.txt", "hello there, general kenobi"))],
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Department is required"
    assert body["status_code"] == 400
    assert body["path"] == "/api/documents/upload"


def test_upload_rejects_unknown_department(upload, safety_user):
    response = upload(safety_user, [_txt("a.txt", "some text here")], department="CATERING")
    assert response.status_code == 400
    assert "Invalid department" in response.json()["message"]


def test_upload_rejects_request_without_files(client, safety_user):
    response = client.post("/api/documents/upload", headers=safety_user, data={"department": "SAFETY"})
    assert response.status_code == 400
    assert response.json()["message"] == "No files uploaded"


def test_upload_rejects_unknown_urgency(upload, safety_user):
    response = upload(safety_user, [_txt("a.txt", "some text here")], urgency_level="whenever")
    assert response.status_code == 400


def test_upload_department_is_case_insensitive(upload, safety_user):
    response = upload(safety_user, [_txt("a.txt", "some text here")], department="safety")
    assert response.status_code == 201
    assert response.json()["documents"][0]["department"] == "SAFETY"


def test_partial_batch_failure_keeps_good_files(upload, safety_user):
    response = upload(safety_user, [
        ("payload.exe", b"MZ\x90\x00", "application/octet-stream"),
        _txt("minutes.txt", "Board minutes for the quarterly review. Approved unanimously."),
    ])

    assert response.status_code == 201
    body = response.json()
    assert len(body["documents"]) == 1
    assert body["errors"] == [{"filename": "payload.exe", "error": "Unsupported file type: payload.exe"}]


def test_batch_where_every_file_fails(upload, safety_user):
    response = upload(safety_user, [("payload.exe", b"MZ", "application/octet-stream")])

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["filename"] == "payload.exe"


def test_duplicate_upload_is_reported(upload, safety_user):
    content = _txt("circular.txt", "Circular regarding uniforms. Effective from next month.")
    first = upload(safety_user, [content]).json()["documents"][0]
    second = upload(safety_user, [content]).json()["documents"][0]

    assert first["duplicate_of"] is None
    assert second["duplicate_of"] == first["id"]
    assert second["id"] != first["id"]


def test_pagination_pages_do_not_overlap(client, upload, safety_user):
    for batch in (range(10), range(10, 12)):
        files = [_txt(f"log_{i}.txt", f"Inspection log number {i} for the depot.") for i in batch]
        assert upload(safety_user, files).status_code == 201

    page1 = client.get("/api/documents?page=1&limit=10", headers=safety_user).json()
    page2 = client.get("/api/documents?page=2&limit=10", headers=safety_user).json()

    ids1 = {d["id"] for d in page1["documents"]}
    ids2 = {d["id"] for d in page2["documents"]}
    assert len(ids1) == 10
    assert len(ids2) == 2
    assert ids1.isdisjoint(ids2)
    assert page1["pagination"]["total"] == 12
    assert page1["pagination"]["has_more"] is True
    assert page2["pagination"]["has_more"] is False


def test_listing_is_newest_first(client, upload, safety_user):
    first = upload(safety_user, [_txt("old.txt", "The older document in the list.")]).json()["documents"][0]
    second = upload(safety_user, [_txt("new.txt", "The newer document in the list.")]).json()["documents"][0]

    ids = [d["id"] for d in client.get("/api/documents", headers=safety_user).json()["documents"]]
    assert ids.index(second["id"]) < ids.index(first["id"])


def test_department_isolation(client, upload, safety_user, finance_user, admin_user):
    doc_id = upload(safety_user, [_txt("fire_notice.txt", "Fire notice for the station. Exits must stay clear.")]).json()["documents"][0]["id"]

    listing = client.get("/api/documents?department=SAFETY", headers=finance_user).json()
    assert listing["documents"] == []
    assert listing["pagination"]["total"] == 0

    search = client.get("/api/documents/search?q=fire", headers=finance_user).json()
    assert search["results"] == []

    forbidden = client.get(f"/api/documents/{doc_id}", headers=finance_user)
    assert forbidden.status_code == 403
    assert forbidden.json()["success"] is False

    assert client.get(f"/api/documents/{doc_id}", headers=admin_user).status_code == 200
    admin_listing = client.get("/api/documents", headers=admin_user).json()
    assert [d["id"] for d in admin_listing["documents"]] == [doc_id]


def test_search_ranks_exact_phrase_higher(client, upload, safety_user):
    exact = upload(safety_user, [_txt(
        "bridge_notes.txt",
        "Track circuit failure reported near Aluva station. Signal crews dispatched overnight.",
    )]).json()["documents"][0]
    upload(safety_user, [_txt(
        "depot_notes.txt",
        "Failure of track lighting reported. Circuit breakers replaced at depot.",
    )])

    response = client.get("/api/documents/search?q=track circuit", headers=safety_user)

    assert response.status_code == 200
    body = response.json()
    assert body["total_found"] == 2
    assert body["results"][0]["id"] == exact["id"]
    assert body["results"][0]["relevance_score"] > body["results"][1]["relevance_score"]
    assert body["results"][0]["search_highlights"]
    assert "search_time_ms" in body


def test_summary_phrase_match_outranks_filename_and_keyword_hits(client, store, safety_user):
    def _seed(**values):
        data = {
            "filename": values["original_filename"], "file_size": 10, "mime_type": TXT,
            "file_path": "/tmp/" + values["original_filename"], "department": "SAFETY",
            "uploaded_by": 1, "processing_status": "completed",
        }
        data.update(values)
        return asyncio.run(store.create_document(data))

    notice = _seed(original_filename="station_notice.txt", ai_summary="Fire drill on platform 2 at 10am.")
    _seed(
        original_filename="fire_plan.txt",
        ai_summary="Evacuation routes for the depot.",
        ai_keywords=["firefighting", "fires", "fireproof"],
    )

    body = client.get("/api/documents/search?q=fire", headers=safety_user).json()

    assert [r["original_filename"] for r in body["results"]] == ["station_notice.txt", "fire_plan.txt"]
    assert body["results"][0]["id"] == notice.id
    assert body["results"][0]["relevance_score"] < body["results"][1]["relevance_score"]


def test_search_requires_query(client, safety_user):
    response = client.get("/api/documents/search?q=%20%20", headers=safety_user)
    assert response.status_code == 400
    assert response.json()["message"] == "Search query is required"


def test_search_suggestions(client, upload, safety_user):
    upload(safety_user, [_txt("fire.txt", "Fire safety audit completed for all stations.")])
    body = client.get("/api/documents/search?q=safety", headers=safety_user).json()
    assert "safety protocol" in body["search_suggestions"]
    assert len(body["search_suggestions"]) <= 5


def test_get_unknown_document_is_404(client, safety_user):
    response = client.get("/api/documents/4242", headers=safety_user)
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_malformed_document_id_is_rejected(client, safety_user):
    response = client.get("/api/documents/not-a-number", headers=safety_user)
    assert response.status_code == 422
    assert response.json()["success"] is False
    assert response.json()["detail"]


def test_summary_endpoint_includes_insights(client, upload, safety_user):
    doc_id = upload(
        safety_user,
        [_txt("emergency_plan.txt", "Emergency evacuation plan for Edappally station. Safety wardens assigned.")],
        urgency_level="critical",
    ).json()["documents"][0]["id"]

    body = client.get(f"/api/documents/{doc_id}/summary", headers=safety_user).json()

    assert body["success"] is True
    assert body["ai_classification"] == "safety&training"
    insights = body["insights"]
    assert insights["priority_score"] >= 10
    assert insights["estimated_read_time"]
    assert insights["document_category"]


def test_delete_with_missing_file_still_removes_record(client, upload, storage, safety_user, caplog):
    doc_id = upload(safety_user, [_txt("gone.txt", "This file will vanish from disk.")]).json()["documents"][0]["id"]
    for path in (storage.documents_dir / "safety").glob("*_gone.txt"):
        path.unlink()

    with caplog.at_level(logging.WARNING):
        response = client.delete(f"/api/documents/{doc_id}", headers=safety_user)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert client.get(f"/api/documents/{doc_id}", headers=safety_user).status_code == 404
    assert any("already missing" in record.getMessage() for record in caplog.records)


def test_delete_requires_owner_or_elevated_role(client, upload, safety_user, token_for, admin_user):
    doc_id = upload(safety_user, [_txt("owned.txt", "Owned by the first safety engineer.")]).json()["documents"][0]["id"]
    colleague = token_for(user_id=3, username="meera", department="SAFETY", role="engineer")

    assert client.delete(f"/api/documents/{doc_id}", headers=colleague).status_code == 403
    assert client.delete(f"/api/documents/{doc_id}", headers=admin_user).status_code == 200


def test_reprocess_twice_does_not_duplicate(client, upload, safety_user):
    doc_id = upload(safety_user, [_txt("audit.txt", "Compliance audit of station fire exits. Mandatory review.")]).json()["documents"][0]["id"]

    for _ in range(2):
        response = client.post(f"/api/documents/{doc_id}/process", headers=safety_user)
        assert response.status_code == 200
        assert response.json()["document"]["processing_status"] in ("completed", "failed")
        assert response.json()["document"]["id"] == doc_id

    listing = client.get("/api/documents", headers=safety_user).json()
    assert listing["pagination"]["total"] == 1


def test_reprocess_missing_file_is_404(client, upload, storage, safety_user):
    doc_id = upload(safety_user, [_txt("lost.txt", "This file goes missing before reprocessing.")]).json()["documents"][0]["id"]
    for path in (storage.documents_dir / "safety").glob("*_lost.txt"):
        path.unlink()

    response = client.post(f"/api/documents/{doc_id}/process", headers=safety_user)
    assert response.status_code == 404


def test_unknown_project_is_rejected(upload, safety_user):
    response = upload(safety_user, [_txt("a.txt", "some text here")], project_id=77)
    assert response.status_code == 400
    assert "Project 77" in response.json()["message"]


def test_responses_carry_request_id(client, safety_user):
    response = client.get("/api/documents", headers={**safety_user, "X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
