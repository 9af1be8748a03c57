"""
SolrSchema Exceptions
=====================

Error taxonomy for schema reads and mutations.

    SolrSchemaError
     ├── ValidationError              builder finalized without mandatory data
     ├── SchemaAccessError            schema could not be fetched or parsed
     ├── SchemaModificationException  engine rejected an add/remove mutation
     └── TransportFailure             raised by transports, wrapped by callers
"""

from typing import Any, Optional


class SolrSchemaError(Exception):
    """Base class for all solrschema errors."""


class ValidationError(SolrSchemaError, ValueError):
    """A definition is missing mandatory attributes. Never reaches the endpoint."""


class SchemaAccessError(SolrSchemaError):
    """The schema of a collection could not be retrieved or parsed."""

    def __init__(self, message: str, collection: Optional[str] = None):
        super().__init__(message)
        self.collection = collection


class SchemaModificationException(SolrSchemaError):
    """
    The endpoint rejected a schema mutation.

    Attributes:
        field_name: Field (or "source -> dest" copy-field) the mutation targeted
        command: Endpoint command name, e.g. "add-field" or "delete-field"
        detail: Rejection detail reported by the engine
    """

    def __init__(self, field_name: str, command: str, detail: str):
        super().__init__(f"{command} '{field_name}' rejected: {detail}")
        self.field_name = field_name
        self.command = command
        self.detail = detail


class TransportFailure(SolrSchemaError):
    """
    A request to the schema endpoint failed at the transport level.

    Attributes:
        status: HTTP status, or None when no response was received
        body: Decoded response body, if any
    """

    def __init__(self, message: str, status: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body
