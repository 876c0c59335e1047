"""Service-level tests for credentials, tokens and task scoping."""

from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from jose import jwt

from task_manager.exceptions import (
    DuplicateEmail,
    NotFound,
    TokenExpired,
    TokenMalformed,
    ValidationFailed,
)
from task_manager.models.user import User
from task_manager.services.auth import (
    authenticate_user,
    create_user,
    get_password_hash,
    get_user_by_email,
    verify_password,
)
from task_manager.services.task_service import TaskService
from task_manager.services.tokens import TokenService

DUE = datetime(2025, 1, 1)


def as_utc(value):
    """Read back a stored datetime as naive UTC, whatever the backend returns."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.replace(tzinfo=None)


@pytest.fixture
def ann(db):
    return create_user(db, "Ann", "ann@x.com", "secret1")


@pytest.fixture
def bob(db):
    return create_user(db, "Bob", "bob@example.com", "hunter22")


# Passwords


def test_password_hash_is_salted():
    """Test that hashing the same password twice gives different hashes."""
    first = get_password_hash("secret1")
    second = get_password_hash("secret1")
    assert first != second
    assert verify_password("secret1", first)
    assert verify_password("secret1", second)


def test_verify_password_wrong_password():
    assert not verify_password("wrong", get_password_hash("secret1"))


@pytest.mark.parametrize("bad_hash", ["", "not-a-hash", "$2b$12$truncated"])
def test_verify_password_malformed_hash(bad_hash):
    """Test that malformed hashes never match and never raise."""
    assert verify_password("secret1", bad_hash) is False


# Credential store


def test_create_user_normalizes_email(db):
    user = create_user(db, " Ann ", "Ann@X.com", "secret1")
    assert user.email == "ann@x.com"
    assert user.name == "Ann"
    assert get_user_by_email(db, "ANN@x.com").id == user.id


def test_create_user_duplicate_email(db, ann):
    with pytest.raises(DuplicateEmail):
        create_user(db, "Other Ann", "ANN@X.COM", "secret2")
    assert db.query(User).count() == 1


def test_create_user_race_on_unique_index(db, ann):
    """Test that losing the race after the existence check still yields DuplicateEmail."""
    # Simulate a concurrent insert landing between the check and our commit
    with patch("task_manager.services.auth.get_user_by_email", return_value=None):
        with pytest.raises(DuplicateEmail):
            create_user(db, "Ann Again", "ann@x.com", "secret2")

    assert db.query(User).filter(User.email == "ann@x.com").count() == 1


def test_create_user_missing_fields(db):
    with pytest.raises(ValidationFailed):
        create_user(db, "", "ann@x.com", "secret1")
    with pytest.raises(ValidationFailed):
        create_user(db, "Ann", "ann@x.com", "")


def test_authenticate_user(db, ann):
    assert authenticate_user(db, "ann@x.com", "secret1").id == ann.id
    assert authenticate_user(db, "ann@x.com", "wrong") is None
    assert authenticate_user(db, "nobody@x.com", "secret1") is None


# Tokens


def test_token_round_trip():
    tokens = TokenService("secret")
    claims = tokens.verify(tokens.issue(42))
    assert claims.user_id == 42
    assert abs(claims.issued_at - datetime.now(UTC)) < timedelta(minutes=1)


def test_token_expires_after_24_hours():
    tokens = TokenService("secret")
    payload = jwt.get_unverified_claims(tokens.issue(1))
    assert payload["exp"] - payload["iat"] == 24 * 60 * 60


def test_token_for_one_user_never_names_another():
    tokens = TokenService("secret")
    assert tokens.verify(tokens.issue(1)).user_id == 1
    assert tokens.verify(tokens.issue(2)).user_id == 2


def test_expired_token():
    tokens = TokenService("secret", lifetime=timedelta(seconds=-1))
    with pytest.raises(TokenExpired):
        tokens.verify(tokens.issue(1))


def test_tampered_token():
    tokens = TokenService("secret")
    header, payload, signature = tokens.issue(1).split(".")
    forged_payload = jwt.encode({"sub": "2"}, "secret").split(".")[1]
    with pytest.raises(TokenMalformed):
        tokens.verify(f"{header}.{forged_payload}.{signature}")


def test_wrong_secret():
    with pytest.raises(TokenMalformed):
        TokenService("secret").verify(TokenService("other").issue(1))


def test_garbage_token():
    with pytest.raises(TokenMalformed):
        TokenService("secret").verify("garbage")


def test_token_without_subject():
    token = jwt.encode(
        {"iat": datetime.now(UTC), "exp": datetime.now(UTC) + timedelta(hours=1)}, "secret"
    )
    with pytest.raises(TokenMalformed):
        TokenService("secret").verify(token)


# Tasks


def test_create_task_defaults(db, ann):
    task = TaskService(db).create_task(ann.id, "Write spec", "draft v1", DUE)
    assert task.status == "pending"
    assert task.priority == "medium"
    assert task.owner_id == ann.id
    assert task.reminder_date is None


@pytest.mark.parametrize(
    "title,description,due_date",
    [(None, "draft v1", DUE), ("Write spec", "", DUE), ("Write spec", "draft v1", None)],
)
def test_create_task_missing_fields(db, ann, title, description, due_date):
    with pytest.raises(ValidationFailed):
        TaskService(db).create_task(ann.id, title, description, due_date)


def test_create_task_invalid_enum(db, ann):
    with pytest.raises(ValidationFailed):
        TaskService(db).create_task(ann.id, "Write spec", "draft v1", DUE, status="done")
    with pytest.raises(ValidationFailed):
        TaskService(db).create_task(ann.id, "Write spec", "draft v1", DUE, priority="urgent")


def test_tasks_are_scoped_to_owner(db, ann, bob):
    service = TaskService(db)
    task = service.create_task(ann.id, "Write spec", "draft v1", DUE)

    with pytest.raises(NotFound):
        service.get_task(bob.id, task.id)
    with pytest.raises(NotFound):
        service.update_task(bob.id, task.id, {"status": "completed"})
    with pytest.raises(NotFound):
        service.set_reminder(bob.id, task.id, DUE)
    with pytest.raises(NotFound):
        service.delete_task(bob.id, task.id)

    assert service.list_tasks(bob.id) == []
    assert service.get_task(ann.id, task.id).status == "pending"


def test_list_tasks_filter_and_sort(db, ann):
    service = TaskService(db)
    service.create_task(ann.id, "late", "d", datetime(2025, 3, 1), status="completed")
    service.create_task(ann.id, "early", "d", datetime(2025, 1, 1), priority="high")
    service.create_task(ann.id, "middle", "d", datetime(2025, 2, 1), priority="high")

    assert [t.title for t in service.list_tasks(ann.id)] == ["early", "middle", "late"]
    assert [t.title for t in service.list_tasks(ann.id, sort="desc")] == [
        "late",
        "middle",
        "early",
    ]
    assert [t.title for t in service.list_tasks(ann.id, status="completed")] == ["late"]
    assert [t.title for t in service.list_tasks(ann.id, priority="high", sort="desc")] == [
        "middle",
        "early",
    ]
    assert service.list_tasks(ann.id, status="in-progress") == []


def test_list_tasks_invalid_sort(db, ann):
    with pytest.raises(ValidationFailed):
        TaskService(db).list_tasks(ann.id, sort="random")


def test_update_task_partial(db, ann):
    service = TaskService(db)
    task = service.create_task(ann.id, "Write spec", "draft v1", DUE)

    updated = service.update_task(ann.id, task.id, {"status": "in-progress"})
    assert updated.status == "in-progress"
    assert updated.title == "Write spec"
    assert updated.priority == "medium"


@pytest.mark.parametrize(
    "changes",
    [
        {"title": None},
        {"title": "   "},
        {"status": "someday"},
        {"due_date": "tomorrow"},
        {"owner_id": 999},
    ],
)
def test_update_task_rejects_bad_changes(db, ann, changes):
    service = TaskService(db)
    task = service.create_task(ann.id, "Write spec", "draft v1", DUE)

    with pytest.raises(ValidationFailed):
        service.update_task(ann.id, task.id, changes)

    unchanged = service.get_task(ann.id, task.id)
    assert unchanged.title == "Write spec"
    assert unchanged.owner_id == ann.id


def test_delete_task_is_not_found_every_time_after(db, ann):
    service = TaskService(db)
    task = service.create_task(ann.id, "Write spec", "draft v1", DUE)
    service.delete_task(ann.id, task.id)

    for _ in range(3):
        with pytest.raises(NotFound):
            service.delete_task(ann.id, task.id)


def test_set_reminder(db, ann):
    service = TaskService(db)
    task = service.create_task(ann.id, "Write spec", "draft v1", DUE)
    reminder = datetime(2024, 12, 31, 9, 0)

    updated = service.set_reminder(ann.id, task.id, reminder)
    assert updated.reminder_date.replace(tzinfo=None) == reminder


def test_set_reminder_missing_date(db, ann):
    service = TaskService(db)
    task = service.create_task(ann.id, "Write spec", "draft v1", DUE)
    with pytest.raises(ValidationFailed):
        service.set_reminder(ann.id, task.id, None)


def test_password_is_not_trimmed(db):
    user = create_user(db, "Ann", "ann@x.com", "  secret1  ")
    assert authenticate_user(db, "ann@x.com", "  secret1  ").id == user.id
    assert authenticate_user(db, "ann@x.com", "secret1") is None


def test_get_task_out_of_range_id(db, ann):
    service = TaskService(db)
    for task_id in (0, -1, 2**31, 2**63, 10**20):
        with pytest.raises(NotFound):
            service.get_task(ann.id, task_id)
        with pytest.raises(NotFound):
            service.delete_task(ann.id, task_id)


def test_due_dates_are_stored_in_utc(db, ann):
    service = TaskService(db)
    plus_five = timezone(timedelta(hours=5))
    offset = service.create_task(
        ann.id, "offset", "d", datetime(2025, 1, 1, 10, 0, tzinfo=plus_five)
    )
    naive = service.create_task(ann.id, "naive", "d", datetime(2025, 1, 1, 7, 0))

    assert as_utc(offset.due_date) == datetime(2025, 1, 1, 5, 0)
    assert as_utc(naive.due_date) == datetime(2025, 1, 1, 7, 0)
    assert [t.title for t in service.list_tasks(ann.id)] == ["offset", "naive"]
    assert [t.title for t in service.list_tasks(ann.id, sort="desc")] == ["naive", "offset"]


def test_update_due_date_is_stored_in_utc(db, ann):
    service = TaskService(db)
    task = service.create_task(ann.id, "Write spec", "draft v1", DUE)
    minus_three = timezone(timedelta(hours=-3))

    updated = service.update_task(
        ann.id, task.id, {"due_date": datetime(2025, 1, 1, 22, 0, tzinfo=minus_three)}
    )
    assert as_utc(updated.due_date) == datetime(2025, 1, 2, 1, 0)
