"""Intercom API client.

Typed accessors for the Intercom customer-messaging REST API. Method calls
are mapped onto HTTP requests and responses onto typed resources or error
lists.
"""

__version__ = "0.1.0"
