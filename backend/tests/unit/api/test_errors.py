import pytest

from src.mdnotes.api.errors import status_for
from src.mdnotes.core.exceptions import (
    AliasConflictError,
    AuthorizationDeniedError,
    InvalidInputError,
    NotFoundError,
)


@pytest.mark.parametrize(
    "error, expected",
    [
        (NotFoundError("missing", identifier="x"), 404),
        (AliasConflictError("taken"), 400),
        (InvalidInputError("bad"), 400),
        (AuthorizationDeniedError("write", identifier="x"), 403),
        (AuthorizationDeniedError("write", identifier="x", anonymous=True), 401),
    ],
)
def test_status_for(error, expected):
    assert status_for(error) == expected


def test_error_details():
    error = AuthorizationDeniedError("update permissions", identifier="meeting")
    assert error.message == "Update permissions denied!"
    assert error.to_details() == {"kind": "authorization_denied", "identifier": "meeting"}
    assert InvalidInputError("bad").to_details() == {"kind": "validation"}
