"""
SolrSchema Operations — Collection-Bound Schema Facade
======================================================

Single entry point for reading and changing the schema of one collection.

    with SchemaOperations("collection1", hosts=["http://localhost:8983/solr"]) as ops:
        print(ops.get_schema_name(), ops.get_schema_version())

        ops.add_field(
            new_field_definition().named("title_s").typed_as("string").indexed().stored().create()
        )
        schema = ops.read_schema()

Every call is synchronous and goes to the endpoint; no schema state is
cached between calls and no request is retried. Concurrent mutations on
the same collection may race; nothing here serializes them.
"""

from typing import List, Optional, Tuple, Union

from .definition import CopyFieldDefinition, FieldDefinition, SchemaDefinition
from .mutator import SchemaMutator
from .reader import SchemaReader
from .transport import SchemaTransport, SolrTransport


class SchemaOperations:
    """
    Schema operations bound to a fixed collection name.

    Either inject a ``transport`` (whose lifecycle stays with the caller) or
    pass connection settings and let the facade create a ``SolrTransport``.
    """

    def __init__(
        self,
        collection: str,
        transport: Optional[SchemaTransport] = None,
        hosts: Optional[List[str]] = None,
        basic_auth: Optional[Tuple[str, str]] = None,
        bearer_token: Optional[str] = None,
        verify_certs: bool = True,
        request_timeout: Optional[float] = None
    ):
        """
        Bind schema operations to a collection.

        Args:
            collection: Name of the collection whose schema is managed
            transport: Transport to use; settings below are ignored when given
            hosts: List of Solr base URLs (default: ["http://localhost:8983/solr"])
            basic_auth: Tuple of (username, password)
            bearer_token: Token for bearer authentication
            verify_certs: Verify SSL certificates
            request_timeout: Per-request timeout in seconds
        """
        self.collection = collection
        self._owns_transport = transport is None

        if transport is None:
            transport = SolrTransport(
                hosts=hosts,
                basic_auth=basic_auth,
                bearer_token=bearer_token,
                verify_certs=verify_certs,
                request_timeout=request_timeout
            )

        self._transport = transport
        self._reader = SchemaReader(transport)
        self._mutator = SchemaMutator(transport)

    def get_schema_name(self) -> str:
        return self._reader.get_schema_name(self.collection)

    def get_schema_version(self) -> float:
        return self._reader.get_schema_version(self.collection)

    def read_schema(self) -> SchemaDefinition:
        """Fetch a fresh snapshot of the collection schema."""
        return self._reader.read_schema(self.collection)

    def add_field(self, definition: Union[FieldDefinition, CopyFieldDefinition]) -> None:
        """
        Add a field or a copy field.

        A FieldDefinition with copy-to targets also adds one copy field per
        target, after the field itself. A failure part-way leaves the
        requests already applied in place.

        Raises:
            SchemaModificationException: If the engine rejects a request
            TypeError: If ``definition`` is neither kind of definition
        """
        if isinstance(definition, FieldDefinition):
            self._mutator.add_field(self.collection, definition)
        elif isinstance(definition, CopyFieldDefinition):
            self._mutator.add_copy_field(self.collection, definition)
        else:
            raise TypeError(
                f"Expected FieldDefinition or CopyFieldDefinition, got {type(definition).__name__}"
            )

    def remove_field(self, name: str) -> None:
        """
        Remove a field by name.

        Raises:
            SchemaModificationException: If the field is absent or not removable
        """
        self._mutator.remove_field(self.collection, name)

    def close(self):
        """Close the transport if this facade created it."""
        if self._owns_transport:
            self._transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
