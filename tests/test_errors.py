from loyaltea.core.errors import STATUS_BY_KIND, ErrorKind, ServiceError


def test_every_error_kind_has_a_status():
    assert set(STATUS_BY_KIND) == set(ErrorKind)


def test_status_categories():
    expected = {
        ErrorKind.INVALID_EMAIL: 400,
        ErrorKind.INVALID_PASSWORD: 400,
        ErrorKind.INVALID_ID: 400,
        ErrorKind.INVALID_PAYLOAD: 400,
        ErrorKind.EMAIL_EXISTS: 409,
        ErrorKind.NOT_FOUND: 404,
        ErrorKind.UNKNOWN_PROVIDER: 404,
        ErrorKind.INVALID_CREDENTIALS: 401,
        ErrorKind.STORE_UNAVAILABLE: 500,
        ErrorKind.SUBSCRIPTION_FAILED: 500,
        ErrorKind.HASHING_FAILED: 500,
        ErrorKind.TOKEN_SIGNING_FAILED: 500,
    }
    for kind, status_code in expected.items():
        assert ServiceError(kind).status_code == status_code


def test_internal_detail_is_not_the_public_message():
    error = ServiceError(ErrorKind.STORE_UNAVAILABLE, "connection refused to 10.0.0.5")

    assert error.public_message == "Internal server error"
    assert "10.0.0.5" in str(error)
