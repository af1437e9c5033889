import os

# Configuration is read at import time, so set it before docvault is imported
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["DATABASE_TYPE"] = "memory"
os.environ["AI_PROVIDER"] = "heuristic"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ELEVATED_ROLES"] = "admin,director"

import pytest
from fastapi.testclient import TestClient

from docvault.auth import create_access_token
from docvault.main import create_app
from docvault.routers.dependencies import ServiceContainer
from docvault.services.database import MemoryAdapter
from docvault.services.enrichment_service import EnrichmentService
from docvault.services.providers import HeuristicProvider
from docvault.services.storage import LocalFileStorage


def make_token(user_id=1, username="asha", department="SAFETY", role="engineer", **extra):
    claims = {"userId": user_id, "username": username, "department": department, "role": role}
    claims.update(extra)
    return create_access_token(claims)


def auth_header(**kwargs):
    return {"Authorization": f"Bearer {make_token(**kwargs)}"}


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(tmp_path / "uploads")


@pytest.fixture
def store():
    return MemoryAdapter()


@pytest.fixture
def container(store, storage):
    return ServiceContainer.build(
        store=store,
        storage=storage,
        enrichment=EnrichmentService(provider=HeuristicProvider()),
    )


@pytest.fixture
def client(container):
    app = create_app(container)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def safety_user():
    return auth_header(user_id=1, username="asha", department="SAFETY", role="engineer")


@pytest.fixture
def finance_user():
    return auth_header(user_id=2, username="ravi", department="FINANCE", role="accountant")


@pytest.fixture
def admin_user():
    return auth_header(user_id=99, username="director", department="MANAGEMENT", role="admin")


@pytest.fixture
def token_for():
    return auth_header


@pytest.fixture
def upload(client):
    """POST a multipart upload; files is a list of (filename, bytes, content type)."""

    def _upload(headers, files, department="SAFETY", **data):
        form = {"department": department}
        form.update({k: str(v) for k, v in data.items()})
        return client.post(
            "/api/documents/upload",
            headers=headers,
            files=[("files", f) for f in files],
            data=form,
        )

    return _upload
