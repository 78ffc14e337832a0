"""UserService tests — add / update rules and the internal-error edge."""

import pytest

from userdir.db.store import UserStore
from userdir.errors import InternalError, NotFoundError, ValidationError
from userdir.services.user_query import QuerySpec
from userdir.services.user_service import UserCriteria, UserService, is_valid_email


def _criteria(**overrides):
    values = {
        "first_name": "Martina",
        "last_name": "Luciani",
        "email": "martina@test.it",
        "phone_number": "+393331112233",
    }
    values.update(overrides)
    return UserCriteria(**values)


@pytest.fixture()
def svc():
    return UserService(UserStore())


def test_add_user_assigns_id(svc):
    user = svc.add_user(_criteria())
    assert user.id
    assert svc.store.get_by_id(user.id).email == "martina@test.it"


def test_add_users_get_distinct_ids(svc):
    a = svc.add_user(_criteria())
    b = svc.add_user(_criteria(email="other@test.it"))
    assert a.id != b.id


@pytest.mark.parametrize(
    "field, value, message",
    [
        ("first_name", None, "First name is required"),
        ("last_name", "  ", "Last name is required"),
        ("email", "", "Email is required"),
        ("phone_number", None, "Phone is required"),
        ("email", "not-an-email", "Email is not valid"),
        ("phone_number", "3331112233", "Phone is not valid"),
    ],
)
def test_add_user_validation(svc, field, value, message):
    with pytest.raises(ValidationError) as exc:
        svc.add_user(_criteria(**{field: value}))
    assert exc.value.code == 400
    assert exc.value.message == message
    assert svc.store.count() == 0


def test_update_user(svc):
    user = svc.add_user(_criteria())
    svc.update_user(_criteria(first_name="Marta"), user.id)
    assert svc.store.get_by_id(user.id).first_name == "Marta"


@pytest.mark.parametrize("guid", [None, "", "   "])
def test_update_requires_guid(svc, guid):
    with pytest.raises(ValidationError) as exc:
        svc.update_user(_criteria(), guid)
    assert exc.value.message == "Guid is required"


def test_update_unknown_user_is_400(svc):
    with pytest.raises(NotFoundError) as exc:
        svc.update_user(_criteria(), "no-such-guid")
    assert exc.value.code == 400
    assert exc.value.message == "User not found"


def test_email_registered(svc):
    svc.add_user(_criteria())
    assert svc.email_registered("Martina@Test.it")
    assert not svc.email_registered("nobody@test.it")


def test_created_user_is_queryable_by_email(svc):
    created = svc.add_user(_criteria(email="unique.person@test.it"))
    svc.add_user(_criteria(first_name="Mario", email="mario@test.it"))

    page = svc.get_users(QuerySpec(query="unique.person", limit=10))

    assert page.total == 1
    view = page.items[0]
    assert view.id == created.id
    assert (view.first_name, view.last_name, view.email, view.phone_number) == (
        "Martina", "Luciani", "unique.person@test.it", "+393331112233",
    )


class _ExplodingStore(UserStore):
    def insert(self, user):
        raise RuntimeError("boom")

    def update(self, user_id, **fields):
        raise RuntimeError("boom")


def test_unexpected_add_fault_is_internal_error():
    svc = UserService(_ExplodingStore())
    with pytest.raises(InternalError) as exc:
        svc.add_user(_criteria())
    assert exc.value.code == 500
    assert "boom" not in exc.value.message


def test_unexpected_update_fault_is_internal_error():
    svc = UserService(_ExplodingStore())
    with pytest.raises(InternalError):
        svc.update_user(_criteria(), "some-guid")


@pytest.mark.parametrize(
    "email, ok",
    [
        ("martina@test.it", True),
        ("a.b+c@sub.example.com", True),
        ("no-at-sign", False),
        ("x@y", False),
        (None, False),
    ],
)
def test_is_valid_email(email, ok):
    assert is_valid_email(email) is ok
