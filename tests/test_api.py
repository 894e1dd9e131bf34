from datetime import datetime
from pathlib import Path

from sqlalchemy.exc import OperationalError

from app.core.repositories.contact_form_repository import ContactRepository
from app.core.storage import FileContactStore
from app.core.storage import file_store as file_store_module
from app.infrastructure.notifications.hub import CONNECTED_EVENT, QueueConnection


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def form(**overrides):
    data = {
        "name": "Jane Doe",
        "phone": "(555) 123-4567",
        "email": "jane@example.com",
        "zip": "12345",
        "when": "2026-11-02",
        "time": "Morning",
        "items": "Old couch and two mattresses",
        "location": "Backyard",
    }
    data.update(overrides)
    return data


async def submit(client, **overrides):
    return await client.post("/api/contact", data=form(**overrides))


async def test_health(client, storage_backend):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "storage": storage_backend.value}


async def test_submit_contact(client, store):
    response = await submit(client)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Contact request received!",
        "imageCount": 0,
    }
    [contact] = await store.list_all()
    assert contact.phone == "5551234567"
    assert contact.preferred_date.isoformat() == "2026-11-02"


async def test_submit_accepts_preferred_date_field(client, store):
    data = form()
    data.pop("when")
    data["preferredDate"] = "2026-11-03"

    response = await client.post("/api/contact", data=data)

    assert response.status_code == 200
    [contact] = await store.list_all()
    assert contact.preferred_date.isoformat() == "2026-11-03"


async def test_submit_with_images(client, store, storage_config):
    files = [
        ("images", ("couch.png", PNG_BYTES, "image/png")),
        ("images", ("../../etc/mattress.jpg", b"\xff\xd8\xff" + b"\x00" * 32, "image/jpeg")),
    ]

    response = await client.post("/api/contact", data=form(), files=files)

    assert response.status_code == 200
    assert response.json()["imageCount"] == 2
    [contact] = await store.list_all()
    assert [image.original_name for image in contact.images] == ["couch.png", "mattress.jpg"]
    for image in contact.images:
        assert image.public_path == f"/data/uploads/{image.stored_filename}"
        assert "/" not in image.stored_filename
    stored = sorted(path.name for path in Path(storage_config.UPLOADS_DIR).iterdir())
    assert stored == sorted(image.stored_filename for image in contact.images)


async def test_invalid_field_rejected(client, store):
    response = await submit(client, phone="123")

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid phone number format"}
    assert await store.list_all() == []


async def test_missing_fields_rejected(client):
    data = form()
    data.pop("name")

    response = await client.post("/api/contact", data=data)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Missing required fields"}


async def test_invalid_image_rejected(client, store, storage_config):
    files = [("images", ("notes.txt", b"hello there", "text/plain"))]

    response = await client.post("/api/contact", data=form(), files=files)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"].startswith("Invalid file type")
    assert await store.list_all() == []


async def test_too_many_images_rejected(client, store):
    files = [("images", (f"photo{index}.png", PNG_BYTES, "image/png")) for index in range(6)]

    response = await client.post("/api/contact", data=form(), files=files)

    assert response.status_code == 400
    assert response.json()["message"] == "Too many files. Maximum: 5"
    assert await store.list_all() == []


async def test_submission_notifies_admins(app, client):
    connection = QueueConnection()
    await app.state.notification_hub.register(connection)
    assert await connection.receive(timeout=1) == CONNECTED_EVENT

    response = await submit(client)

    assert response.status_code == 200
    event = await connection.receive(timeout=1)
    assert event["type"] == "new_contact"


async def test_admin_routes_require_login(client, store):
    await submit(client)
    [contact] = await store.list_all()

    assert (await client.get("/api/admin/contacts")).status_code == 401
    assert (await client.get("/api/admin/stats")).status_code == 401
    assert (await client.get("/api/admin/stream")).status_code == 401

    response = await client.patch(f"/api/admin/contacts/{contact.id}", json={"status": "completed"})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

    response = await client.delete(f"/api/admin/contacts/{contact.id}")
    assert response.status_code == 401

    [unchanged] = await store.list_all()
    assert unchanged.status == "new"


async def test_login_failures(client):
    response = await client.post("/api/admin/login", json={"username": "admin", "password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}

    response = await client.post("/api/admin/login", json={"username": "admin"})
    assert response.status_code == 400
    assert response.json() == {"error": "Username and password required"}

    response = await client.get("/api/admin/auth-check")
    assert response.json() == {"isAuthenticated": False, "username": None}


async def test_admin_session_lifecycle(admin_client):
    response = await admin_client.get("/api/admin/auth-check")
    assert response.json() == {"isAuthenticated": True, "username": "admin"}

    response = await admin_client.post("/api/admin/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logged out successfully"}

    response = await admin_client.get("/api/admin/auth-check")
    assert response.json()["isAuthenticated"] is False
    assert (await admin_client.get("/api/admin/contacts")).status_code == 401


async def test_moderation_flow(admin_client):
    await submit(admin_client, name="First Person")
    await submit(admin_client, name="Second Person")
    await submit(admin_client, name="Third Person")

    response = await admin_client.get("/api/admin/contacts")
    assert response.status_code == 200
    contacts = response.json()
    assert [contact["name"] for contact in contacts] == ["Third Person", "Second Person", "First Person"]
    assert contacts[0]["preferredDate"] == "2026-11-02"
    assert contacts[0]["preferredTime"] == "Morning"
    ids = [contact["id"] for contact in contacts]

    response = await admin_client.patch(f"/api/admin/contacts/{ids[0]}", json={"status": "contacted"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["contact"]["status"] == "contacted"
    assert datetime.fromisoformat(body["contact"]["updated_at"]) > datetime.fromisoformat(
        contacts[0]["updated_at"]
    )

    await admin_client.patch(f"/api/admin/contacts/{ids[1]}", json={"status": "completed"})

    response = await admin_client.get("/api/admin/stats")
    assert response.json() == {"total": 3, "new": 1, "contacted": 1, "completed": 1}

    response = await admin_client.delete(f"/api/admin/contacts/{ids[2]}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Contact deleted"}

    response = await admin_client.delete(f"/api/admin/contacts/{ids[2]}")
    assert response.status_code == 404
    assert response.json() == {"error": "Contact not found"}

    response = await admin_client.get("/api/admin/stats")
    assert response.json()["total"] == 2


async def test_moderation_rejects_bad_input(admin_client):
    await submit(admin_client)
    [contact] = (await admin_client.get("/api/admin/contacts")).json()

    response = await admin_client.patch(f"/api/admin/contacts/{contact['id']}", json={"status": "archived"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid status value"}

    response = await admin_client.patch(f"/api/admin/contacts/{contact['id']}", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid status value"}

    response = await admin_client.patch("/api/admin/contacts/abc", json={"status": "contacted"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid ID format"}

    response = await admin_client.patch("/api/admin/contacts/999", json={"status": "contacted"})
    assert response.status_code == 404

    response = await admin_client.delete("/api/admin/contacts/abc")
    assert response.status_code == 400


async def test_uploads_are_admin_only(client, admin_password):
    files = [("images", ("couch.png", PNG_BYTES, "image/png"))]
    await client.post("/api/contact", data=form(), files=files)

    await client.post("/api/admin/login", json={"username": "admin", "password": admin_password})
    [contact] = (await client.get("/api/admin/contacts")).json()
    path = contact["images"][0]["path"]

    response = await client.get(path)
    assert response.status_code == 200
    assert response.content == PNG_BYTES

    assert (await client.get("/data/uploads/missing.png")).status_code == 404

    await client.post("/api/admin/logout")
    assert (await client.get(path)).status_code == 401


SECRET_CAUSE = "could not connect to 10.0.0.5:5432 as junk2clean"


def break_storage(monkeypatch, store):
    """Make every read and write of `store` fail at the I/O layer."""
    if isinstance(store, FileContactStore):
        def fail(*args, **kwargs):
            raise OSError(SECRET_CAUSE)

        monkeypatch.setattr(file_store_module, "read_contacts_document", fail)
        monkeypatch.setattr(store, "_write_document", fail)
    else:
        async def fail(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception(SECRET_CAUSE))

        monkeypatch.setattr(ContactRepository, "add_item", fail)
        monkeypatch.setattr(ContactRepository, "get_all_ordered", fail)
        monkeypatch.setattr(ContactRepository, "get_stats", fail)


async def test_storage_failure_on_submit(client, store, monkeypatch):
    break_storage(monkeypatch, store)

    response = await submit(client)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to process request"}
    assert "10.0.0.5" not in response.text


async def test_storage_failure_on_admin_routes(admin_client, store, monkeypatch):
    break_storage(monkeypatch, store)

    for path in ("/api/admin/contacts", "/api/admin/stats"):
        response = await admin_client.get(path)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process request"}
        assert "10.0.0.5" not in response.text


async def test_out_of_range_id_is_not_found(admin_client):
    huge_id = "9" * 20

    response = await admin_client.patch(f"/api/admin/contacts/{huge_id}", json={"status": "contacted"})
    assert response.status_code == 404
    assert response.json() == {"error": "Contact not found"}

    response = await admin_client.delete(f"/api/admin/contacts/{huge_id}")
    assert response.status_code == 404


async def test_long_preferred_time_rejected(client, store):
    response = await submit(client, time="x" * 51)

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Preferred time must be at most 50 characters",
    }
    assert await store.list_all() == []
