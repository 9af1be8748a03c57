"""
SolrSchema Mutator — Schema Modification Commands
=================================================

Translates definitions into endpoint commands:

    {"add-field":      {"name": ..., "type": ..., "indexed": ..., ...}}
    {"add-copy-field": {"source": ..., "dest": [...]}}
    {"delete-field":   {"name": ...}}

and turns engine rejections into ``SchemaModificationException``.

A field carrying copy-to targets is added in several requests: the field
first, then one add-copy-field per target. If a later request fails the
earlier ones stay applied; there is no rollback.
"""

import logging
from typing import Any, Dict, List, Mapping

from .definition import CopyFieldDefinition, FieldDefinition
from .exceptions import SchemaModificationException, TransportFailure
from .transport import SchemaTransport

logger = logging.getLogger(__name__)


def field_payload(field: FieldDefinition) -> Dict[str, Any]:
    """Build the add-field attributes; copy-to targets are never included."""
    attributes: Dict[str, Any] = {
        "name": field.name,
        "type": field.type,
        "indexed": field.indexed,
        "stored": field.stored,
        "multiValued": field.multi_valued,
        "required": field.required
    }
    if field.default_value is not None:
        attributes["default"] = field.default_value
    return attributes


def copy_field_payload(copy_field: CopyFieldDefinition) -> Dict[str, Any]:
    attributes: Dict[str, Any] = {
        "source": copy_field.source,
        "dest": [copy_field.destination]
    }
    if copy_field.max_chars is not None:
        attributes["maxChars"] = copy_field.max_chars
    return attributes


def _error_messages(body: Any) -> List[str]:
    """Collect rejection messages from a response body (empty if none)."""
    if not isinstance(body, Mapping):
        return []

    messages: List[str] = []
    for item in body.get("errors") or []:
        if isinstance(item, Mapping):
            messages.extend(str(m).strip() for m in item.get("errorMessages", []))
        else:
            messages.append(str(item).strip())

    error = body.get("error")
    if isinstance(error, Mapping):
        for detail in error.get("details") or []:
            if isinstance(detail, Mapping):
                messages.extend(str(m).strip() for m in detail.get("errorMessages", []))
        if not messages and error.get("msg"):
            messages.append(str(error["msg"]).strip())

    return messages


def _rejected(body: Mapping[str, Any]) -> bool:
    header = body.get("responseHeader")
    status = header.get("status", 0) if isinstance(header, Mapping) else 0
    return bool(body.get("errors")) or "error" in body or status != 0


class SchemaMutator:
    """
    Applies add/remove mutations to a collection schema.

    Example:
        mutator = SchemaMutator(transport)
        mutator.add_field("collection1", field)
        mutator.remove_field("collection1", "obsolete_s")
    """

    def __init__(self, transport: SchemaTransport):
        self._transport = transport

    def _submit(self, collection: str, command: str, attributes: Dict[str, Any], identity: str):
        try:
            body = self._transport.request(collection, payload={command: attributes})
        except TransportFailure as e:
            detail = "; ".join(_error_messages(e.body)) or str(e)
            raise SchemaModificationException(identity, command, detail) from e

        if _rejected(body):
            detail = "; ".join(_error_messages(body)) or "rejected without error message"
            raise SchemaModificationException(identity, command, detail)

        logger.info("Applied %s '%s' on collection '%s'", command, identity, collection)

    def add_field(self, collection: str, field: FieldDefinition) -> None:
        """
        Add a field, then one copy field per copy-to target.

        Args:
            collection: Target collection
            field: Field to add

        Raises:
            SchemaModificationException: On the first rejected request
        """
        self._submit(collection, "add-field", field_payload(field), field.name)
        for copy_field in field.copy_field_definitions():
            self.add_copy_field(collection, copy_field)

    def add_copy_field(self, collection: str, copy_field: CopyFieldDefinition) -> None:
        self._submit(
            collection,
            "add-copy-field",
            copy_field_payload(copy_field),
            f"{copy_field.source} -> {copy_field.destination}"
        )

    def remove_field(self, collection: str, name: str) -> None:
        """
        Delete a field.

        Raises:
            SchemaModificationException: If the field does not exist or cannot be removed
        """
        self._submit(collection, "delete-field", {"name": name}, name)
