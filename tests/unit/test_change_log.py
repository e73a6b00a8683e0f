import uuid

from product_ethics import audit
from product_ethics.audit import ChangedEntityType, ChangeType
from product_ethics.db import schemas
from product_ethics.db.repositories import changelog as changelog_repo


def test_log_change_stores_plain_values(db, make_client):
    client = make_client()
    entity_id = uuid.uuid4()
    entry = audit.log_change(
        db,
        client=client,
        entity_type=ChangedEntityType.PRODUCT,
        entity_id=entity_id,
        change_type=ChangeType.EDITED,
        change_text="name:Cola",
    )
    assert entry.changed_entity_type == "product"
    assert entry.change_type == "edited"
    assert entry.client_id == client.id
    assert entry.created_at is not None

    read = schemas.ChangeLog.model_validate(entry)
    assert read.entity_id == entity_id
    assert read.change_text == "name:Cola"


def test_log_change_defaults_to_unknown(db, make_client):
    entry = audit.log_change(db, client=make_client())
    assert entry.changed_entity_type == "unknown"
    assert entry.change_type == "unknown"
    assert entry.entity_id is None


def test_get_change_logs_filters(db, make_client):
    alice = make_client()
    bob = make_client()
    product_id = uuid.uuid4()
    store_id = uuid.uuid4()
    audit.log_product(db, client=alice, product_id=product_id, change_type=ChangeType.CREATED, text="Tea")
    audit.log_product(db, client=bob, product_id=product_id, change_type=ChangeType.EDITED, text="Green tea")
    audit.log_store(db, client=alice, store_id=store_id, change_type=ChangeType.CREATED, text="Kiosk")

    assert len(changelog_repo.get_change_logs(db)) == 3
    assert len(changelog_repo.get_change_logs(db, client_id=alice.id)) == 2
    assert {log.change_text for log in changelog_repo.get_change_logs(db, entity_id=product_id)} == {"Tea", "Green tea"}
    assert [log.entity_id for log in changelog_repo.get_change_logs(db, entity_type="store")] == [store_id]
    edits = changelog_repo.get_change_logs(db, change_type="edited")
    assert [log.client_id for log in edits] == [bob.id]
    assert len(changelog_repo.get_change_logs(db, limit=2)) == 2
    assert len(changelog_repo.get_change_logs(db, skip=2)) == 1
