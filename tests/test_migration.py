import json

import pytest

from app.core.storage import RelationalContactStore
from app.infrastructure.database.adapters.pg_connection import DatabaseConnection
from app.utils import migrate_json_to_db
from app.utils.enums import ContactStatusEnum
from app.utils.migrate_json_to_db import MigrationAborted, migrate_contacts


def legacy_record(record_id, name, status="new", **extra):
    record = {
        "id": record_id,
        "timestamp": "2024-03-01T12:00:00.000Z",
        "name": name,
        "phone": "5551234567",
        "email": "",
        "zip": "12345",
        "preferredDate": "2024-03-05",
        "preferredTime": "Afternoon",
        "items": "Garage full of boxes",
        "location": "",
        "images": [
            {
                "filename": "1709294400000-1.jpg",
                "originalName": "garage.jpg",
                "path": "/data/uploads/1709294400000-1.jpg",
                "size": 1024,
                "mimetype": "image/jpeg",
            }
        ],
        "status": status,
    }
    record.update(extra)
    return record


@pytest.fixture
def contacts_file(tmp_path):
    path = tmp_path / "contacts.json"
    path.write_text(
        json.dumps(
            [
                legacy_record(1709294400000, "Alice Smith", status="completed"),
                legacy_record(1709294400001, "Bob Jones"),
                legacy_record(1709294400002, "Broken Record", phone="not a phone", zip=None),
            ]
        ),
        encoding="utf-8",
    )
    return path


async def test_migrates_and_reports_failures(relational_store, contacts_file):
    source_before = contacts_file.read_bytes()

    report = await migrate_contacts(relational_store, str(contacts_file))

    assert (report.total, report.migrated, report.skipped, report.failed) == (3, 2, 0, 1)
    assert report.failures == ["1709294400002"]
    assert not report.succeeded
    assert contacts_file.read_bytes() == source_before

    contacts = {contact.name: contact for contact in await relational_store.list_all()}
    assert set(contacts) == {"Alice Smith", "Bob Jones"}
    alice = contacts["Alice Smith"]
    assert alice.status == ContactStatusEnum.COMPLETED
    assert alice.email is None
    assert alice.preferred_time == "Afternoon"
    assert alice.images[0].original_name == "garage.jpg"
    assert alice.timestamp.replace(tzinfo=None).isoformat() == "2024-03-01T12:00:00"


async def test_rerun_skips_migrated_records(relational_store, contacts_file):
    await migrate_contacts(relational_store, str(contacts_file))

    report = await migrate_contacts(relational_store, str(contacts_file))

    assert (report.migrated, report.skipped, report.failed) == (0, 2, 1)
    assert len(await relational_store.list_all()) == 2


async def test_empty_source(relational_store, tmp_path):
    report = await migrate_contacts(relational_store, str(tmp_path / "missing.json"))

    assert report.total == 0
    assert report.succeeded


async def test_unreadable_source_aborts(relational_store, tmp_path):
    path = tmp_path / "contacts.json"
    path.write_text('{"not": "a list"}', encoding="utf-8")

    with pytest.raises(MigrationAborted):
        await migrate_contacts(relational_store, str(path))


async def test_connection_failure_aborts_before_writing(contacts_file, monkeypatch):
    store = RelationalContactStore(DatabaseConnection("sqlite+aiosqlite:///:memory:"))

    async def unavailable():
        return False

    monkeypatch.setattr(store, "check_connection", unavailable)

    with pytest.raises(MigrationAborted):
        await migrate_contacts(store, str(contacts_file))
    await store.close()


async def test_run_exit_codes(tmp_path, contacts_file):
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'migrated.db'}"

    assert await migrate_json_to_db.run(str(contacts_file), database_url) == 2

    valid_file = tmp_path / "valid.json"
    valid_file.write_text(json.dumps([legacy_record(1, "Carol White")]), encoding="utf-8")
    assert await migrate_json_to_db.run(str(valid_file), database_url) == 0

    broken_file = tmp_path / "broken.json"
    broken_file.write_text("[{", encoding="utf-8")
    assert await migrate_json_to_db.run(str(broken_file), database_url) == 1


async def test_status_is_written_with_the_row(relational_store, contacts_file, monkeypatch):
    async def unavailable(*args, **kwargs):
        raise AssertionError("status must not need a second write")

    monkeypatch.setattr(relational_store, "update_status", unavailable)

    report = await migrate_contacts(relational_store, str(contacts_file))

    assert report.migrated == 2
    stats = await relational_store.stats()
    assert (stats.new, stats.completed) == (1, 1)
