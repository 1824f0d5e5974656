"""Intercom REST API package.

Provides the HTTP request handler shared by resource clients and the typed
models that API responses are mapped onto.

Exports:
    RequestHandler: HTTP handler with authentication and error mapping.
    types: Module containing Pydantic models for API responses and parameters.
    DEFAULT_API_VERSION: Default Intercom API version.
    DEFAULT_BASE_URL: Default Intercom API base URL.
    DEFAULT_TIMEOUT: Default HTTP request timeout.
"""

from . import types
from .handler import (
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    RequestHandler,
)

__all__ = [
    "DEFAULT_API_VERSION",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "RequestHandler",
    "types",
]
