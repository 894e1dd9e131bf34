"""
One-shot copy of contacts.json into the relational store.

The source document is only read. Each migrated row remembers the id it had
in the JSON file (legacy_id), so running the script again skips records that
are already in the database instead of duplicating them.

    python -m app.utils.migrate_json_to_db --file data/contacts.json
"""
import argparse
import asyncio
import sys
from dataclasses import dataclass, field

from app.core.dto.contact_form import ContactRequestModel, ValidatedContactModel
from app.core.storage.file_store import read_contacts_document
from app.core.storage.relational_store import RelationalContactStore
from app.infrastructure.config.config import STORAGE_CONFIG
from app.infrastructure.database.adapters.pg_connection import DatabaseConnection
from app.infrastructure.logging import get_logger


logger = get_logger(__name__)


class MigrationAborted(Exception):
    pass


@dataclass
class MigrationReport:
    total: int = 0
    migrated: int = 0
    skipped: int = 0
    failed: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.failed == 0


async def migrate_contacts(store: RelationalContactStore, json_path: str) -> MigrationReport:
    print("1. Testing database connection...")
    if not await store.check_connection():
        raise MigrationAborted("Database connection failed")

    print("2. Initializing database schema...")
    try:
        await store.init_storage()
    except Exception as exc:
        raise MigrationAborted(f"Schema initialization failed: {exc}") from exc

    print("3. Reading existing JSON data...")
    try:
        records = read_contacts_document(json_path)
    except (OSError, ValueError) as exc:
        raise MigrationAborted(f"Could not read {json_path}: {exc}") from exc

    report = MigrationReport(total=len(records))
    if not records:
        print("📄 No contacts found in JSON file. Nothing to migrate")
        return report

    print(f"📊 Found {len(records)} contacts to migrate")
    already_migrated = await store.get_legacy_ids()

    for raw in records:
        raw_id = raw.get("id") if isinstance(raw, dict) else None
        legacy_id = str(raw_id) if raw_id is not None else None
        label = raw.get("name") if isinstance(raw, dict) else None

        if legacy_id and legacy_id in already_migrated:
            report.skipped += 1
            print(f"⏭️  Skipped: {label} (ID: {legacy_id} already migrated)")
            continue

        try:
            contact = ContactRequestModel.model_validate(raw)
            fields = ValidatedContactModel(
                **contact.model_dump(include=set(ValidatedContactModel.model_fields))
            )
            created = await store.create(
                fields,
                contact.images,
                legacy_id=contact.id,
                timestamp=contact.timestamp,
                status=contact.status,
            )
        except Exception as exc:
            report.failed += 1
            report.failures.append(legacy_id or "?")
            logger.error("contact_migration_failed", legacy_id=legacy_id, error=str(exc))
            print(f"❌ Failed to migrate contact {legacy_id} ({label}): {exc}")
            continue

        already_migrated.add(contact.id)
        report.migrated += 1
        print(f"✅ Migrated: {contact.name} (ID: {contact.id} → {created.id})")

    print("\n📊 Migration Summary:")
    print(f"✅ Successfully migrated: {report.migrated} contacts")
    print(f"⏭️  Already migrated: {report.skipped} contacts")
    print(f"❌ Failed migrations: {report.failed} contacts")
    print(f"📄 Total in JSON file: {report.total} contacts")
    if not report.succeeded:
        print("\n⚠️  Some contacts failed to migrate, re-run after fixing them. The JSON file is left intact")
    return report


async def run(json_path: str, database_url: str | None = None) -> int:
    store = RelationalContactStore(DatabaseConnection(database_url))
    try:
        report = await migrate_contacts(store, json_path)
    except MigrationAborted as exc:
        logger.error("contact_migration_aborted", error=str(exc))
        print(f"❌ Migration failed: {exc}")
        return 1
    finally:
        await store.close()
    return 0 if report.succeeded else 2


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Copy contacts.json into the database"
    )
    parser.add_argument(
        "--file",
        default=STORAGE_CONFIG.CONTACTS_FILE,
        help="Path to contacts.json (defaults to STORAGE_CONTACTS_FILE)",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy async URL, defaults to the DB_* settings",
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.file, args.database_url)))


if __name__ == "__main__":
    main()
