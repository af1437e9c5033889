import hashlib
import io
import re

import pytest
from fastapi import UploadFile

from docvault.api.exceptions import FileTooLargeError
from docvault.services.storage import LocalFileStorage


@pytest.fixture
async def storage(tmp_path):
    storage = LocalFileStorage(tmp_path)
    await storage.initialize()
    return storage


async def test_initialize_creates_department_directories(storage):
    assert (storage.documents_dir / "safety").is_dir()
    assert (storage.documents_dir / "rolling_stock").is_dir()


async def test_destinations_are_unique_and_sanitized(storage):
    first = storage.build_destination("SAFETY", "fire drill (v2).pdf")
    second = storage.build_destination("SAFETY", "fire drill (v2).pdf")

    assert first != second
    assert first.parent == storage.documents_dir / "safety"
    assert re.match(r"^\d{4}-\d{2}-\d{2}_[0-9a-f]{8}_fire_drill__v2_\.pdf$", first.name)


async def test_destination_creates_missing_department_directory(tmp_path):
    storage = LocalFileStorage(tmp_path / "fresh")
    destination = storage.build_destination("FINANCE", "bill.pdf")
    assert destination.parent.is_dir()


async def test_save_upload_streams_and_hashes(storage):
    content = b"track renewal plan" * 1000
    upload = UploadFile(file=io.BytesIO(content), filename="plan.txt")

    stored = await storage.save_upload(upload, "CIVIL", max_bytes=1024 * 1024)

    assert stored.size == len(content)
    assert stored.sha256 == hashlib.sha256(content).hexdigest()
    assert await storage.read_bytes(stored.path) == content


async def test_oversized_upload_leaves_nothing_behind(storage):
    upload = UploadFile(file=io.BytesIO(b"0123456789"), filename="big.txt")

    with pytest.raises(FileTooLargeError):
        await storage.save_upload(upload, "CIVIL", max_bytes=5)

    assert list((storage.documents_dir / "civil").iterdir()) == []


async def test_delete_reports_missing_files(storage):
    upload = UploadFile(file=io.BytesIO(b"x"), filename="x.txt")
    stored = await storage.save_upload(upload, "IT", max_bytes=10)

    assert await storage.delete_file(stored.path) is True
    assert await storage.file_exists(stored.path) is False
    assert await storage.delete_file(stored.path) is False
