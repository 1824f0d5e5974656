"""API response and request parameter types for the Intercom REST API.

Pydantic models representing the structure of data returned by the Intercom
REST API, plus explicit parameter records used by the resource clients.
Responses are tagged by their ``type`` field; :func:`parse_resource` maps a
decoded JSON body onto the matching model.
"""

from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

PARAMETER_NOT_FOUND = "parameter_not_found"


def is_present(value: Any) -> bool:
    """Return True if a parameter value counts as supplied."""
    return value is not None and value != ""


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class Error(BaseModel):
    """A single error record from an error list."""

    code: str = ""
    message: str = ""


class ErrorList(BaseModel):
    """Failure result: an ordered list of errors.

    Returned both by the API (``"type": "error.list"``) and locally when a
    caller omits a required identifying parameter.
    """

    type: Literal["error.list"] = "error.list"
    request_id: str | None = None
    errors: list[Error] = Field(default_factory=list)

    @classmethod
    def single(cls, code: str, message: str) -> "ErrorList":
        """Build an error list holding one error."""
        return cls(errors=[Error(code=code, message=message)])

    @classmethod
    def missing_parameter(cls, message: str) -> "ErrorList":
        """Build the error list returned when a required parameter is absent."""
        return cls.single(PARAMETER_NOT_FOUND, message)


class Page(BaseModel):
    """Pagination block of a list response."""

    model_config = ConfigDict(extra="allow")

    type: str = "pages"
    page: int | None = None
    per_page: int | None = None
    total_pages: int | None = None
    next: str | None = None


class User(BaseModel):
    """A single Intercom user.

    Only commonly used fields are declared; anything else the API sends is
    kept as an extra attribute.
    """

    model_config = ConfigDict(extra="allow")

    type: Literal["user"] = "user"

    # Identification
    id: str | None = None
    user_id: str | None = None
    email: str | None = None

    # Profile
    name: str | None = None
    phone: str | None = None
    unsubscribed_from_emails: bool | None = None

    # Timestamps (Unix seconds)
    created_at: int | None = None
    updated_at: int | None = None
    signed_up_at: int | None = None
    last_request_at: int | None = None

    custom_attributes: dict[str, Any] = Field(default_factory=dict)
    companies: dict[str, Any] | list[Any] | None = None


class UserList(BaseModel):
    """A page of users from list, search or scroll."""

    model_config = ConfigDict(extra="allow")

    type: Literal["user.list"] = "user.list"
    users: list[User] = Field(default_factory=list)
    pages: Page | None = None
    total_count: int | None = None

    # Only present on scroll responses
    scroll_param: str | None = None


Resource: TypeAlias = User | UserList
Result: TypeAlias = Resource | ErrorList | dict[str, Any]

RESOURCE_TYPES: dict[str, type[BaseModel]] = {
    "error.list": ErrorList,
    "user": User,
    "user.list": UserList,
}


def parse_resource(data: Any) -> Result:
    """Map a decoded JSON body to the model registered for its ``type``.

    Bodies with no ``type`` or an unregistered one are returned unchanged;
    non-object bodies are wrapped under ``data``.
    """
    if not isinstance(data, dict):
        return {"data": data}
    model = RESOURCE_TYPES.get(data.get("type", ""))
    if model is None:
        return data
    return model.model_validate(data)


def is_error(result: Result) -> bool:
    """Return True if the result is a failure."""
    return isinstance(result, ErrorList)


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class UserIdentity(BaseModel):
    """Fields that address a single user, in precedence order.

    Values are forwarded as given; only their presence is checked.
    """

    model_config = ConfigDict(extra="ignore")

    id: Any = None
    email: Any = None
    user_id: Any = None

    @property
    def is_identified(self) -> bool:
        return any(is_present(v) for v in (self.id, self.email, self.user_id))


class UserSearch(BaseModel):
    """Search criteria: an email or a custom user_id."""

    model_config = ConfigDict(extra="ignore")

    email: Any = None
    user_id: Any = None


class ListOptions(BaseModel):
    """Filters accepted by the user list endpoint.

    Values are passed through verbatim; the API validates them.
    """

    model_config = ConfigDict(extra="ignore")

    page: Any = None
    per_page: Any = None
    order: Any = None
    sort: Any = None
    created_since: Any = None

    def query_params(self) -> dict[str, Any]:
        """Return the options that were set, as query parameters."""
        return self.model_dump(exclude_none=True)
