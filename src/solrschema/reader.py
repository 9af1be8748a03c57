"""
SolrSchema Reader — Live Schema Introspection
=============================================

Fetches schema state from the endpoint and parses it into the schema model.
Each call issues exactly one request; nothing is cached.
"""

import logging
from typing import Any, List, Mapping, Optional

from .definition import CopyFieldDefinition, FieldDefinition, SchemaDefinition
from .exceptions import SchemaAccessError, TransportFailure
from .transport import SchemaTransport

logger = logging.getLogger(__name__)

# Field entry key -> FieldDefinition attribute
FLAG_ATTRIBUTES = {
    "indexed": "indexed",
    "stored": "stored",
    "multiValued": "multi_valued",
    "required": "required",
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def parse_copy_fields(entries: Any) -> List[CopyFieldDefinition]:
    """
    Parse ``copyFields`` entries.

    A ``dest`` given as a list yields one definition per destination.
    """
    if not isinstance(entries, list):
        raise ValueError("'copyFields' must be a list")

    copy_fields = []
    for entry in entries:
        source = entry["source"]
        destinations = entry["dest"]
        if isinstance(destinations, str):
            destinations = [destinations]
        max_chars = entry.get("maxChars")
        for dest in destinations:
            copy_fields.append(CopyFieldDefinition(
                source,
                dest,
                int(max_chars) if max_chars is not None else None
            ))
    return copy_fields


def parse_field(entry: Mapping[str, Any], copy_fields: List[CopyFieldDefinition]) -> FieldDefinition:
    """
    Parse one ``fields`` entry; unknown keys are ignored.

    Copy-to targets come from the entry's own ``copyFields`` key when present,
    otherwise from the snapshot copy fields whose source is this field.
    """
    name = entry["name"]
    flags = {
        attribute: _as_bool(entry.get(key, False))
        for key, attribute in FLAG_ATTRIBUTES.items()
    }

    if "copyFields" in entry:
        reported = entry["copyFields"]
        targets = (reported,) if isinstance(reported, str) else tuple(reported)
    else:
        targets = tuple(cf.destination for cf in copy_fields if cf.source == name)

    default = entry.get("default")

    return FieldDefinition(
        name=name,
        type=entry["type"],
        default_value=None if default is None else str(default),
        copy_fields=targets,
        **flags
    )


def parse_schema(document: Mapping[str, Any], collection: Optional[str] = None) -> SchemaDefinition:
    """
    Parse a full schema document into a SchemaDefinition.

    Args:
        document: Response body, either ``{"schema": {...}}`` or the schema itself
        collection: Collection name recorded on the snapshot

    Raises:
        SchemaAccessError: If required parts are missing or malformed
    """
    schema = document.get("schema", document)
    try:
        copy_fields = parse_copy_fields(schema.get("copyFields", []))
        fields = [parse_field(entry, copy_fields) for entry in schema.get("fields", [])]
        return SchemaDefinition(
            name=schema["name"],
            version=float(schema["version"]),
            fields=fields,
            copy_fields=copy_fields,
            unique_key=schema.get("uniqueKey"),
            collection_name=collection
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise SchemaAccessError(
            f"Malformed schema for collection '{collection}': {e!r}",
            collection=collection
        ) from e


class SchemaReader:
    """
    Reads schema state of a collection through a transport.

    Example:
        reader = SchemaReader(transport)
        schema = reader.read_schema("collection1")
    """

    def __init__(self, transport: SchemaTransport):
        self._transport = transport

    def _fetch(self, collection: str, path: str = "") -> Mapping[str, Any]:
        try:
            return self._transport.request(collection, path=path)
        except TransportFailure as e:
            raise SchemaAccessError(
                f"Cannot read schema of collection '{collection}': {e}",
                collection=collection
            ) from e

    def get_schema_name(self, collection: str) -> str:
        """
        Return the declared schema name.

        Raises:
            SchemaAccessError: If the endpoint is unreachable or the response malformed
        """
        body = self._fetch(collection, "name")
        name = body.get("name")
        if not isinstance(name, str):
            raise SchemaAccessError(
                f"Schema name missing in response for collection '{collection}'",
                collection=collection
            )
        return name

    def get_schema_version(self, collection: str) -> float:
        """
        Return the schema version.

        Raises:
            SchemaAccessError: If the endpoint is unreachable or the response malformed
        """
        body = self._fetch(collection, "version")
        try:
            return float(body["version"])
        except (KeyError, TypeError, ValueError) as e:
            raise SchemaAccessError(
                f"Schema version missing in response for collection '{collection}'",
                collection=collection
            ) from e

    def read_schema(self, collection: str) -> SchemaDefinition:
        """
        Fetch and parse a complete schema snapshot.

        Returns:
            Fresh SchemaDefinition, independent of earlier snapshots
        """
        schema = parse_schema(self._fetch(collection), collection)
        logger.debug(
            "Read schema '%s' v%s of '%s': %d fields, %d copy fields",
            schema.name, schema.version, collection,
            len(schema.fields), len(schema.copy_fields)
        )
        return schema
