from unittest import mock

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from loyaltea.core.errors import ErrorKind, ServiceError
from loyaltea.core.tokens import TokenClaims, TokenIssuer
from loyaltea.services.user_service import UserService

EMAIL = "user@example.com"
PASSWORD = "super-secret-password"
NAME = "Test User"


def _kind(excinfo) -> ErrorKind:
    return excinfo.value.kind


def test_register_returns_user_and_verifiable_token(user_service, token_issuer):
    result = user_service.register(EMAIL, PASSWORD, NAME)

    assert ObjectId.is_valid(result.user.id)
    assert result.user.email == EMAIL
    assert result.user.name == NAME
    assert result.user.password != PASSWORD

    claims = token_issuer.verify(result.token)
    assert claims.user_id == result.user.id
    assert claims.email == EMAIL


def test_register_stores_only_a_digest(user_service, users_collection):
    result = user_service.register(EMAIL, PASSWORD, NAME)

    doc = users_collection.find_one({"_id": ObjectId(result.user.id)})
    assert doc["password"] != PASSWORD
    assert PASSWORD not in doc["password"]
    assert doc["created_at"] is not None
    assert doc["updated_at"] is not None


def test_register_rejects_duplicate_email(user_service):
    user_service.register(EMAIL, PASSWORD, NAME)

    with pytest.raises(ServiceError) as excinfo:
        user_service.register(EMAIL, "another-password", "Someone Else")

    assert _kind(excinfo) is ErrorKind.EMAIL_EXISTS


def test_register_email_match_is_case_sensitive(user_service):
    user_service.register(EMAIL, PASSWORD, NAME)

    result = user_service.register(EMAIL.upper(), PASSWORD, NAME)

    assert result.user.email == "USER@EXAMPLE.COM"


@pytest.mark.parametrize(
    "email, password, name, kind",
    [
        ("not-an-email", PASSWORD, NAME, ErrorKind.INVALID_EMAIL),
        ("user@example", PASSWORD, NAME, ErrorKind.INVALID_EMAIL),
        (EMAIL, "1234567", NAME, ErrorKind.INVALID_PASSWORD),
        (EMAIL, PASSWORD, "   ", ErrorKind.INVALID_NAME),
    ],
)
def test_register_validation(user_service, users_collection, email, password, name, kind):
    with pytest.raises(ServiceError) as excinfo:
        user_service.register(email, password, name)

    assert _kind(excinfo) is kind
    assert users_collection.count_documents({}) == 0


def test_register_accepts_eight_character_password(user_service):
    result = user_service.register(EMAIL, "12345678", NAME)
    assert result.user.email == EMAIL


def test_store_duplicate_on_insert_reports_email_exists(user_service, user_repo):
    user_service.register(EMAIL, PASSWORD, NAME)

    # Simulate the race: the pre-check sees no user, the unique index rejects.
    with mock.patch.object(user_repo, "find_by_email", return_value=None):
        with pytest.raises(ServiceError) as excinfo:
            user_service.register(EMAIL, PASSWORD, NAME)

    assert _kind(excinfo) is ErrorKind.EMAIL_EXISTS


def test_login_success_issues_token(user_service, token_issuer):
    registered = user_service.register(EMAIL, PASSWORD, NAME)

    result = user_service.login(EMAIL, PASSWORD)

    assert result.user.id == registered.user.id
    assert token_issuer.verify(result.token).user_id == registered.user.id


def test_login_failures_are_indistinguishable(user_service):
    user_service.register(EMAIL, PASSWORD, NAME)

    with pytest.raises(ServiceError) as wrong_password:
        user_service.login(EMAIL, "wrong-password")
    with pytest.raises(ServiceError) as unknown_email:
        user_service.login("nobody@example.com", PASSWORD)

    assert _kind(wrong_password) is ErrorKind.INVALID_CREDENTIALS
    assert _kind(unknown_email) is ErrorKind.INVALID_CREDENTIALS
    assert str(wrong_password.value) == str(unknown_email.value)


def test_get_by_id_round_trip(user_service):
    registered = user_service.register(EMAIL, PASSWORD, NAME)

    user = user_service.get_by_id(registered.user.id)

    assert user.email == EMAIL
    assert user.name == NAME
    assert user.password != PASSWORD


@pytest.mark.parametrize("operation", ["get", "update", "delete"])
def test_missing_user_is_not_found(user_service, operation):
    missing = str(ObjectId())

    with pytest.raises(ServiceError) as excinfo:
        if operation == "get":
            user_service.get_by_id(missing)
        elif operation == "update":
            user_service.update(missing, EMAIL, NAME)
        else:
            user_service.delete(missing)

    assert _kind(excinfo) is ErrorKind.NOT_FOUND


@pytest.mark.parametrize("operation", ["get", "update", "delete"])
def test_malformed_id_is_invalid(user_service, operation):
    with pytest.raises(ServiceError) as excinfo:
        if operation == "get":
            user_service.get_by_id("123")
        elif operation == "update":
            user_service.update("123", EMAIL, NAME)
        else:
            user_service.delete("not-an-object-id")

    assert _kind(excinfo) is ErrorKind.INVALID_ID


def test_update_changes_email_and_name(user_service):
    registered = user_service.register(EMAIL, PASSWORD, NAME)
    before = registered.user.updated_at

    updated = user_service.update(registered.user.id, "new@example.com", "New Name")

    assert updated.email == "new@example.com"
    assert updated.name == "New Name"
    assert updated.updated_at >= before

    reloaded = user_service.get_by_id(registered.user.id)
    assert reloaded.email == "new@example.com"
    assert reloaded.name == "New Name"


def test_update_to_email_of_other_user_conflicts(user_service):
    user_service.register("other@example.com", PASSWORD, "Other")
    registered = user_service.register(EMAIL, PASSWORD, NAME)

    with pytest.raises(ServiceError) as excinfo:
        user_service.update(registered.user.id, "other@example.com", NAME)

    assert _kind(excinfo) is ErrorKind.EMAIL_EXISTS


def test_update_with_invalid_new_email(user_service):
    registered = user_service.register(EMAIL, PASSWORD, NAME)

    with pytest.raises(ServiceError) as excinfo:
        user_service.update(registered.user.id, "broken", NAME)

    assert _kind(excinfo) is ErrorKind.INVALID_EMAIL


def test_name_only_update_skips_email_checks(user_service, user_repo):
    registered = user_service.register(EMAIL, PASSWORD, NAME)

    with mock.patch.object(user_repo, "find_by_email") as find_by_email:
        updated = user_service.update(registered.user.id, EMAIL, "Renamed")

    find_by_email.assert_not_called()
    assert updated.name == "Renamed"


def test_delete_removes_user(user_service, users_collection):
    registered = user_service.register(EMAIL, PASSWORD, NAME)

    user_service.delete(registered.user.id)

    assert users_collection.count_documents({}) == 0
    with pytest.raises(ServiceError) as excinfo:
        user_service.get_by_id(registered.user.id)
    assert _kind(excinfo) is ErrorKind.NOT_FOUND


def test_get_current_resolves_token_owner(user_service, token_issuer):
    registered = user_service.register(EMAIL, PASSWORD, NAME)
    claims: TokenClaims = token_issuer.verify(registered.token)

    assert user_service.get_current(claims).id == registered.user.id


def test_store_failure_surfaces_as_store_unavailable(user_service, user_repo):
    with mock.patch.object(
        user_repo.collection,
        "find_one",
        side_effect=ServerSelectionTimeoutError("no servers"),
    ):
        with pytest.raises(ServiceError) as excinfo:
            user_service.login(EMAIL, PASSWORD)

    assert _kind(excinfo) is ErrorKind.STORE_UNAVAILABLE


def test_register_removes_account_when_signing_fails(user_repo, users_collection):
    service = UserService(user_repo, TokenIssuer("tests-secret-key", algorithm="RS256"))

    with pytest.raises(ServiceError) as excinfo:
        service.register(EMAIL, PASSWORD, NAME)

    assert _kind(excinfo) is ErrorKind.TOKEN_SIGNING_FAILED
    assert users_collection.count_documents({}) == 0
