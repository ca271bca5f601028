import pytest
from sqlalchemy.exc import IntegrityError

from app.crud import import_items, import_jobs


@pytest.fixture
def job(db, user):
    return import_jobs.create(db, {"user_id": user.id, "source_type": "csv", "state": "preview"})


def _item(job_id, **kw):
    data = {"import_job_id": job_id, "raw_row": {"Subject": "Math"}}
    data.update(kw)
    return data


def test_create_returns_stored_record_with_id(db, job):
    item = import_items.create(db, _item(job.id))
    assert item.id is not None
    assert item.status == "preview"
    assert import_items.find_by_id(db, item.id).raw_row == {"Subject": "Math"}


def test_find_by_id_missing_returns_none(db):
    assert import_items.find_by_id(db, 12345) is None


def test_find_by_job_is_ascending_and_empty_for_unknown_job(db, job):
    created = import_items.bulk_create(db, [_item(job.id, raw_row={"n": i}) for i in range(5)])
    found = import_items.find_by_import_job_id(db, job.id)
    assert [i.id for i in found] == sorted(i.id for i in created)
    assert import_items.find_by_import_job_id(db, job.id + 100) == []


def test_find_by_job_and_status(db, job):
    a, b, c = import_items.bulk_create(db, [_item(job.id), _item(job.id), _item(job.id)])
    import_items.update_status(db, a.id, "failed")
    import_items.update_status(db, c.id, "failed")
    failed = import_items.find_by_import_job_id_and_status(db, job.id, "failed")
    assert [i.id for i in failed] == [a.id, c.id]
    assert [i.id for i in import_items.find_by_import_job_id_and_status(db, job.id, "preview")] == [b.id]


def test_bulk_create_is_all_or_nothing(db, job):
    with pytest.raises(IntegrityError):
        import_items.bulk_create(db, [_item(job.id), _item(None)])
    assert import_items.find_by_import_job_id(db, job.id) == []


def test_unknown_status_is_rejected(db, job):
    item = import_items.create(db, _item(job.id))
    with pytest.raises(ValueError):
        import_items.update_status(db, item.id, "done")
    with pytest.raises(ValueError):
        import_items.create(db, _item(job.id, status="bogus"))


def test_update_status_on_missing_id_is_noop(db):
    assert import_items.update_status(db, 999, "created") is None


def test_update_returns_refreshed_record_or_none(db, job):
    item = import_items.create(db, _item(job.id))
    updated = import_items.update(db, item.id, {"room": "B-12", "status": "skipped"})
    assert updated.room == "B-12"
    assert updated.status == "skipped"
    assert import_items.update(db, 999, {"room": "X"}) is None


def test_delete_is_idempotent(db, job):
    item = import_items.create(db, _item(job.id))
    import_items.delete(db, item.id)
    import_items.delete(db, item.id)
    assert import_items.find_by_id(db, item.id) is None


def test_find_all_returns_everything(db, job):
    import_items.bulk_create(db, [_item(job.id), _item(job.id)])
    assert len(import_items.find_all(db)) == 2


def test_deleting_job_removes_its_items(db, job):
    item = import_items.create(db, _item(job.id))
    import_jobs.delete(db, job.id)
    db.expunge_all()
    assert import_items.find_by_id(db, item.id) is None
    assert import_jobs.find_by_id(db, job.id) is None
