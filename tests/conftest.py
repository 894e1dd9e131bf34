import os
from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("APP_SESSION_SECRET", "test-session-secret")
os.environ.setdefault("APP_DEBUG", "false")
os.environ.setdefault("STORAGE_BACKEND", "file")

from app.core.dto.contact_form import AttachmentModel, ValidatedContactModel
from app.core.services.auth_service import pwd_context
from app.core.storage import FileContactStore, RelationalContactStore
from app.infrastructure.config.config import AdminConfig, StorageConfig
from app.infrastructure.database.adapters.pg_connection import DatabaseConnection
from app.main import create_app
from app.utils.enums import StorageBackendEnum


ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "Str0ng-admin-pass"


@pytest.fixture(scope="session")
def admin_password() -> str:
    return ADMIN_PASSWORD


@pytest.fixture(scope="session")
def admin_password_hash() -> str:
    return pwd_context.hash(ADMIN_PASSWORD)


@pytest.fixture
def admin_config(admin_password_hash: str) -> AdminConfig:
    return AdminConfig(
        USERNAME=ADMIN_USERNAME,
        PASSWORD_HASH=admin_password_hash,
        LOGIN_FAILURE_DELAY_SECONDS=0.05,
    )


@pytest.fixture
def storage_config(tmp_path) -> StorageConfig:
    return StorageConfig(
        CONTACTS_FILE=str(tmp_path / "contacts.json"),
        UPLOADS_DIR=str(tmp_path / "uploads"),
    )


@pytest.fixture
async def file_store(storage_config: StorageConfig):
    store = FileContactStore(storage_config.CONTACTS_FILE)
    await store.init_storage()
    yield store
    await store.close()


@pytest.fixture
async def relational_store(tmp_path):
    store = RelationalContactStore(
        DatabaseConnection(f"sqlite+aiosqlite:///{tmp_path / 'contacts.db'}")
    )
    await store.init_storage()
    yield store
    await store.close()


@pytest.fixture(params=list(StorageBackendEnum), ids=lambda backend: backend.value)
def storage_backend(request) -> StorageBackendEnum:
    return request.param


@pytest.fixture
async def store(storage_backend: StorageBackendEnum, storage_config: StorageConfig, tmp_path):
    if storage_backend == StorageBackendEnum.FILE:
        contact_store = FileContactStore(storage_config.CONTACTS_FILE)
    else:
        contact_store = RelationalContactStore(
            DatabaseConnection(f"sqlite+aiosqlite:///{tmp_path / 'contacts.db'}")
        )
    await contact_store.init_storage()
    yield contact_store
    await contact_store.close()


@pytest.fixture
def make_fields():
    def _make(**overrides) -> ValidatedContactModel:
        values = {
            "name": "Jane Doe",
            "phone": "5551234567",
            "email": "jane@example.com",
            "zip": "12345",
            "preferred_date": date(2026, 11, 2),
            "preferred_time": "Morning",
            "items": "Old couch and two mattresses",
            "location": "Garage",
        }
        values.update(overrides)
        return ValidatedContactModel(**values)

    return _make


@pytest.fixture
def attachment() -> AttachmentModel:
    return AttachmentModel(
        stored_filename="1760000000000-42.jpg",
        original_name="couch.jpg",
        public_path="/data/uploads/1760000000000-42.jpg",
        size_bytes=2048,
        mime_type="image/jpeg",
    )


@pytest.fixture
async def app(store, storage_backend, storage_config, admin_config):
    application = create_app(
        store=store,
        storage_config=storage_config.model_copy(update={"BACKEND": storage_backend}),
        admin_config=admin_config,
    )
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
async def admin_client(client):
    response = await client.post(
        "/api/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client
