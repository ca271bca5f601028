import datetime as dt

import pytest

from app.services.validation import (
    is_valid_date,
    is_valid_days_of_week,
    is_valid_time,
    validate_user,
)

def test_valid_user_has_no_errors():
    assert validate_user({"email": "test@example.com", "displayName": "Test User"}) == []

def test_invalid_email_is_one_error_on_email():
    errors = validate_user({"email": "invalid-email", "displayName": "Test User"})
    assert len(errors) == 1
    assert errors[0].field == "email"

def test_empty_email_is_one_error_on_email():
    errors = validate_user({"email": "", "displayName": "Test User"})
    assert len(errors) == 1
    assert errors[0].field == "email"

def test_empty_display_name_is_one_error_on_display_name():
    errors = validate_user({"email": "test@example.com", "displayName": ""})
    assert len(errors) == 1
    assert errors[0].field == "displayName"

def test_optional_last_login_is_accepted():
    record = {"email": "test@example.com", "displayName": "Test User", "lastLoginAt": dt.datetime.now(dt.timezone.utc)}
    assert validate_user(record) == []

def test_snake_case_keys_are_accepted():
    assert validate_user({"email": "test@example.com", "display_name": "Test User", "last_login_at": None}) == []

def test_errors_are_ordered_one_per_field():
    errors = validate_user({"email": "nope", "displayName": "   ", "lastLoginAt": "not a timestamp"})
    assert [e.field for e in errors] == ["email", "displayName", "lastLoginAt"]

def test_missing_fields_are_reported():
    errors = validate_user({})
    assert [e.field for e in errors] == ["email", "displayName"]

@pytest.mark.parametrize("value,ok", [("9:00", True), ("09:30", True), ("23:59", True), ("24:00", False), ("9.00", False)])
def test_time_format(value, ok):
    assert is_valid_time(value) is ok

@pytest.mark.parametrize("value,ok", [("MO,WE,FR", True), ("1,3,5", True), ("mo, tu", True), ("MO,XX", False)])
def test_days_of_week(value, ok):
    assert is_valid_days_of_week(value) is ok

@pytest.mark.parametrize("value,ok", [("2025-01-31", True), ("2025-02-30", False), ("31.01.2025", False)])
def test_date_format(value, ok):
    assert is_valid_date(value) is ok
