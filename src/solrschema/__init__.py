"""
SolrSchema — Schema Definition & Synchronization for Solr Collections
=====================================================================

Reads the live schema of a Solr collection into an immutable model, adds
and removes fields and copy fields through the Schema API, and reports
rejected mutations with the engine's own error messages.

Components:
    definition   FieldDefinition, CopyFieldDefinition, SchemaDefinition, builders
    reader       SchemaReader (GET /<collection>/schema)
    mutator      SchemaMutator (add-field, add-copy-field, delete-field)
    operations   SchemaOperations, the collection-bound facade
    sync         diff_schema / sync_schema for desired-state definitions
    transport    SchemaTransport, SolrTransport (elastic-transport)

Usage:
    from solrschema import SchemaOperations, new_field_definition

    ops = SchemaOperations("collection1")
    ops.add_field(new_field_definition().named("title_s").typed_as("string").stored().create())
    field = ops.read_schema().get_field_definition("title_s")

License: MIT
"""

__version__ = "0.1.0"

import logging

from .definition import (
    CopyFieldDefinition,
    FieldDefinition,
    SchemaDefinition,
    new_copy_field_definition,
    new_field_definition,
)
from .exceptions import (
    SchemaAccessError,
    SchemaModificationException,
    SolrSchemaError,
    TransportFailure,
    ValidationError,
)
from .operations import SchemaOperations
from .sync import SchemaDiff, diff_schema, sync_schema
from .transport import SchemaTransport, SolrTransport

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CopyFieldDefinition",
    "FieldDefinition",
    "SchemaDefinition",
    "new_copy_field_definition",
    "new_field_definition",
    "SchemaAccessError",
    "SchemaModificationException",
    "SolrSchemaError",
    "TransportFailure",
    "ValidationError",
    "SchemaOperations",
    "SchemaDiff",
    "diff_schema",
    "sync_schema",
    "SchemaTransport",
    "SolrTransport",
]
