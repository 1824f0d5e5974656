"""Tests for response dispatch and parameter records."""

import pydantic
import pytest

from intercom_client.restapi import types


def test_parse_resource_user_list_with_pages():
    """A user.list body parses users and the pagination block."""
    result = types.parse_resource(
        {
            "type": "user.list",
            "total_count": 2,
            "users": [{"type": "user", "id": "1"}, {"type": "user", "id": "2"}],
            "pages": {
                "type": "pages",
                "page": 1,
                "per_page": 1,
                "total_pages": 2,
                "next": "https://api.intercom.io/users?page=2",
            },
        },
    )

    assert isinstance(result, types.UserList)
    assert [u.id for u in result.users] == ["1", "2"]
    assert result.pages is not None
    assert result.pages.next == "https://api.intercom.io/users?page=2"


def test_parse_resource_unknown_type_is_raw():
    """Unregistered types are returned as plain dicts."""
    data = {"type": "company", "id": "c1"}
    assert types.parse_resource(data) is data


def test_parse_resource_invalid_user_raises():
    """A typed body that does not fit its model fails validation."""
    with pytest.raises(pydantic.ValidationError):
        types.parse_resource({"type": "user", "created_at": "yesterday"})


def test_is_error_tags_results():
    """Only ErrorList counts as an error."""
    assert types.is_error(types.ErrorList.missing_parameter("missing"))
    assert not types.is_error(types.User(id="1"))
    assert not types.is_error({"id": "10"})


def test_missing_parameter_code():
    """missing_parameter uses the parameter_not_found code."""
    errors = types.ErrorList.missing_parameter("Get requires an `id` parameter")
    assert errors.errors[0].code == types.PARAMETER_NOT_FOUND


def test_user_keeps_unknown_fields():
    """Fields outside the declared model survive as extras."""
    user = types.User.model_validate({"type": "user", "id": "1", "pseudonym": "Blue"})
    assert user.model_extra == {"pseudonym": "Blue"}


@pytest.mark.parametrize(
    ("params", "expected"),
    [
        ({}, False),
        ({"id": None, "email": "", "user_id": None}, False),
        ({"id": 0}, True),
        ({"user_id": "u"}, True),
    ],
)
def test_user_identity_is_identified(params: dict, expected: bool):
    """Presence ignores None and empty strings only."""
    assert types.UserIdentity.model_validate(params).is_identified is expected


def test_list_options_only_set_fields():
    """Unset options are left out of the query."""
    options = types.ListOptions.model_validate({"created_since": 365, "extra": 1})
    assert options.query_params() == {"created_since": 365}
