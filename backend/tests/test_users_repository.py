import pytest

from app.core.errors import UserValidationError
from app.core.security import verify_password
from app.crud import users


def test_create_and_find_by_email(db):
    u = users.create(db, {"email": "a@example.com", "displayName": "  Alice "}, password="secret-pass")
    assert u.id is not None
    assert u.display_name == "Alice"
    assert u.last_login_at is None
    assert verify_password("secret-pass", u.password_hash)
    assert users.find_by_email(db, "a@example.com").id == u.id
    assert users.find_by_email(db, "missing@example.com") is None


def test_create_rejects_invalid_record(db):
    with pytest.raises(UserValidationError) as exc:
        users.create(db, {"email": "invalid-email", "display_name": ""})
    assert [e.field for e in exc.value.errors] == ["email", "displayName"]
    assert users.count(db) == 0


def test_update_validates_and_returns_none_for_missing(db, user):
    updated = users.update(db, user.id, {"display_name": "Renamed"})
    assert updated.display_name == "Renamed"
    with pytest.raises(UserValidationError):
        users.update(db, user.id, {"display_name": ""})
    assert users.update(db, 999, {"display_name": "x"}) is None


def test_update_last_login_sets_timestamp(db, user):
    users.update_last_login(db, user.id)
    db.expire_all()
    assert users.find_by_id(db, user.id).last_login_at is not None


def test_delete_reports_whether_a_row_was_removed(db, user):
    assert users.count(db) == 1
    assert users.delete(db, user.id) is True
    assert users.delete(db, user.id) is False
    assert users.find_all(db) == []


def test_email_is_stored_and_looked_up_in_lower_case(db):
    u = users.create(db, {"email": "Mixed.Case@Example.COM", "display_name": "Mixed"})
    assert u.email == "mixed.case@example.com"
    assert users.find_by_email(db, "MIXED.case@example.com").id == u.id
    assert users.update(db, u.id, {"email": "Renamed@Example.com"}).email == "renamed@example.com"
