"""User resource client for the Intercom API.

Translates user operations into requests against the ``/users`` collection.
Required identifying parameters are checked locally; when they are missing
an ErrorList is returned and no request is made. Everything else is left to
the API to validate.

See: https://developers.intercom.com/intercom-api-reference/v1.1/reference#users
"""

from collections.abc import Mapping
from typing import Any, TypeAlias, TypeVar
from urllib.parse import quote, urlencode

import structlog
from pydantic import BaseModel

from ..restapi import RequestHandler, types

logger = structlog.get_logger(__name__)

COLLECTION_PATH = "/users"
SCROLL_PATH = f"{COLLECTION_PATH}/scroll"
DELETE_REQUEST_PATH = "/user_delete_requests"

# Body key holding the Intercom id in a permanent deletion request.
DELETE_REQUEST_ID_FIELD = "intercom_user_id"

UPDATE_MISSING_IDENTITY = "Update requires one of `id`, `email` or `user_id`"
GET_MISSING_ID = "Get requires an `id` parameter"
SEARCH_MISSING_IDENTITY = "Search requires one of `email` or `user_id`"
# Archive reports the search wording; existing consumers match on it.
ARCHIVE_MISSING_IDENTITY = SEARCH_MISSING_IDENTITY

Params: TypeAlias = BaseModel | Mapping[str, Any] | None

M = TypeVar("M", bound=BaseModel)


class InvariantViolationError(Exception):
    """Raised when a user path is resolved without any identifying field.

    Every public operation validates its parameters first, so this signals a
    bug in the calling code rather than bad input.
    """


def _as_model(model: type[M], params: Params) -> M:
    """Coerce a mapping or another parameter model into ``model``."""
    if isinstance(params, model):
        return params
    if isinstance(params, BaseModel):
        params = params.model_dump()
    return model.model_validate(dict(params or {}))


def _body(data: Params) -> dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_none=True)
    return dict(data or {})


def resolve_identity_path(params: Params) -> str:
    """Build the URI addressing a single user.

    Precedence is ``id`` (``/users/{id}``), then ``email``, then ``user_id``
    (both as a query on ``/users``).

    Raises:
        InvariantViolationError: If none of the identifying fields is present.
    """
    identity = _as_model(types.UserIdentity, params)

    if types.is_present(identity.id):
        return f"{COLLECTION_PATH}/{quote(str(identity.id), safe='')}"
    if types.is_present(identity.email):
        return f"{COLLECTION_PATH}?{urlencode({'email': identity.email})}"
    if types.is_present(identity.user_id):
        return f"{COLLECTION_PATH}?{urlencode({'user_id': identity.user_id})}"

    msg = "No [id], [email] or [user_id] provided to identify user"
    raise InvariantViolationError(msg)


class UserResourceClient:
    """Accessor for the ``/users`` resource.

    Stateless apart from the request handler it delegates to. Each call makes
    at most one request and returns the handler's result unchanged: a
    :class:`~intercom_client.restapi.types.User`,
    :class:`~intercom_client.restapi.types.UserList`, a raw dict, or an
    :class:`~intercom_client.restapi.types.ErrorList`. Callers check
    :func:`~intercom_client.restapi.types.is_error` before use.

    Example::

        users = client.users.search({"email": "test1@test.com"})
        user = users.users[0]

        user = client.users.update({"id": user.id, "email": "test2@test.com"})
    """

    def __init__(self, request_handler: RequestHandler):
        self._request_handler = request_handler

    @property
    def request_handler(self) -> RequestHandler:
        return self._request_handler

    def create(self, data: Params) -> types.Result:
        """Create a user, or update the one matched by ``id``/``email``/``user_id``.

        Args:
            data: User attributes, e.g. ``{"email": ..., "companies": [...]}``.

        Returns:
            The created User or an ErrorList.
        """
        return self._request_handler.post(COLLECTION_PATH, _body(data))

    def update(self, data: Params) -> types.Result:
        """Update the user matched by the ``id``, ``email`` or ``user_id`` in data.

        Returns:
            The updated User, or an ErrorList when no identifying field is
            present (no request is made in that case).
        """
        if not _as_model(types.UserIdentity, data).is_identified:
            return types.ErrorList.missing_parameter(UPDATE_MISSING_IDENTITY)

        return self.create(data)

    def list(self, options: Params = None) -> types.Result:
        """Retrieve a page of users.

        Recognised options are ``page``, ``per_page`` (default 50, max 60),
        ``order``, ``sort`` (created_at, last_request_at, signed_up_at or
        updated_at) and ``created_since`` (days). Other keys are dropped.

        Returns:
            A UserList whose ``pages`` can be followed with :meth:`next_page`,
            or an ErrorList.
        """
        query = _as_model(types.ListOptions, options).query_params()
        uri = f"{COLLECTION_PATH}?{urlencode(query)}" if query else COLLECTION_PATH
        return self._request_handler.get(uri)

    def get(self, id: str | int | None) -> types.Result:  # noqa: A002
        """Retrieve a user by primary Intercom id."""
        if not types.is_present(id):
            return types.ErrorList.missing_parameter(GET_MISSING_ID)

        return self._request_handler.get(resolve_identity_path({"id": id}))

    def search(self, params: Params) -> types.Result:
        """Find users by ``email`` or custom ``user_id``.

        Searching by user_id returns a single User rather than a UserList.
        """
        search = _as_model(types.UserSearch, params)
        if not (types.is_present(search.email) or types.is_present(search.user_id)):
            return types.ErrorList.missing_parameter(SEARCH_MISSING_IDENTITY)

        return self._request_handler.get(resolve_identity_path(params))

    def scroll(self) -> types.Result:
        """Start scrolling over all users.

        Scrolled lists only move forward; use :meth:`next_page` to continue.
        """
        return self._request_handler.get(SCROLL_PATH)

    def archive(self, params: Params) -> types.Result:
        """Archive a user identified by ``id``, ``email`` or ``user_id``."""
        if not _as_model(types.UserIdentity, params).is_identified:
            return types.ErrorList.missing_parameter(ARCHIVE_MISSING_IDENTITY)

        return self._request_handler.delete(resolve_identity_path(params))

    def permanently_delete(self, id: str | int) -> types.Result:  # noqa: A002
        """Permanently remove a user by Intercom id.

        Returns:
            Usually a raw dict holding the ``id`` of the deletion request, or
            an ErrorList.
        """
        logger.info("Requesting permanent user deletion", intercom_user_id=id)
        return self._request_handler.post(
            DELETE_REQUEST_PATH,
            {DELETE_REQUEST_ID_FIELD: id},
        )

    def next_page(self, user_list: types.UserList) -> types.Result | None:
        """Fetch the page after ``user_list``.

        Scroll results continue via their ``scroll_param``; paged results
        follow ``pages.next``.

        Returns:
            The next result, or None when there are no more pages.
        """
        if user_list.scroll_param:
            if not user_list.users:
                return None
            query = urlencode({"scroll_param": user_list.scroll_param})
            return self._request_handler.get(f"{SCROLL_PATH}?{query}")

        if user_list.pages is not None and user_list.pages.next:
            return self._request_handler.get_url(user_list.pages.next)

        return None
