import pytest

from perfdesk.core.exceptions import ConflictError, ValidationError
from perfdesk.models.user import User, UserRole
from perfdesk.repositories import UserRepository


def _duplicate_of(user):
    return User(
        name="Copy",
        email=user.email,
        hashed_password="x",
        role=UserRole.EMPLOYEE,
        is_active=True,
    )


def test_integrity_error_becomes_conflict(db_session, admin_user):
    with pytest.raises(ConflictError):
        UserRepository(db_session).create(_duplicate_of(admin_user))


def test_conflict_rollback_keeps_earlier_rows(db_session, admin_user, employee_user):
    repo = UserRepository(db_session)
    with pytest.raises(ConflictError):
        repo.create(_duplicate_of(admin_user))

    assert repo.get_by_email(admin_user.email) is not None
    assert repo.get_by_email(employee_user.email) is not None

    updated = repo.update(employee_user, {"department": "Audit"})
    assert updated.department == "Audit"


def test_update_rejects_unknown_columns(db_session, employee_user):
    with pytest.raises(ValidationError):
        UserRepository(db_session).update(employee_user, {"favourite_colour": "teal"})
