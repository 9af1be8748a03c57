"""
SolrSchema Definition — Immutable Schema Model
==============================================

Value types describing a collection schema:

    SchemaDefinition (snapshot: name, version, unique key)
     ├── FieldDefinition*      name, type, flags, default, copy-to targets
     └── CopyFieldDefinition*  source -> dest

Definitions are assembled with builders and never change afterwards:

    field = (new_field_definition()
             .named("title_s")
             .typed_as("string")
             .indexed()
             .stored()
             .copy_to("_text_")
             .create())

    copy = new_copy_field_definition().copy_from("title_s").to("all_s").create()

Equality is structural: two definitions are equal when every attribute is.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .exceptions import ValidationError


@dataclass(frozen=True)
class CopyFieldDefinition:
    """Rule copying indexed content from ``source`` into ``destination``."""

    source: str
    destination: str
    max_chars: Optional[int] = None


@dataclass(frozen=True)
class FieldDefinition:
    """
    A named, typed field of a schema.

    The engine reports defaults as strings, so ``default_value`` is a string.
    Copy-to targets are kept sorted; the engine lists copy fields sorted by
    source and destination, not in the order they were added.
    """

    name: str
    type: str
    indexed: bool = False
    stored: bool = False
    multi_valued: bool = False
    required: bool = False
    default_value: Optional[str] = None
    copy_fields: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "copy_fields", tuple(sorted(self.copy_fields)))

    def copy_field_definitions(self) -> List[CopyFieldDefinition]:
        """Expand copy-to targets into one CopyFieldDefinition per target."""
        return [CopyFieldDefinition(self.name, dest) for dest in self.copy_fields]

    def without_copy_fields(self) -> "FieldDefinition":
        return replace(self, copy_fields=())


class FieldDefinitionBuilder:
    """Accumulates field attributes until ``create()`` is called."""

    def __init__(self):
        self._name: Optional[str] = None
        self._type: Optional[str] = None
        self._indexed = False
        self._stored = False
        self._multi_valued = False
        self._required = False
        self._default_value: Optional[str] = None
        self._copy_fields: List[str] = []

    def named(self, name: str) -> "FieldDefinitionBuilder":
        self._name = name
        return self

    def typed_as(self, type_name: str) -> "FieldDefinitionBuilder":
        self._type = type_name
        return self

    def indexed(self) -> "FieldDefinitionBuilder":
        self._indexed = True
        return self

    def stored(self) -> "FieldDefinitionBuilder":
        self._stored = True
        return self

    def multi_valued(self) -> "FieldDefinitionBuilder":
        self._multi_valued = True
        return self

    def required(self) -> "FieldDefinitionBuilder":
        self._required = True
        return self

    def defaulted_to(self, value: Any) -> "FieldDefinitionBuilder":
        self._default_value = None if value is None else str(value)
        return self

    def copy_to(self, *names: str) -> "FieldDefinitionBuilder":
        self._copy_fields.extend(names)
        return self

    def create(self) -> FieldDefinition:
        """
        Finalize the field.

        Raises:
            ValidationError: If name or type is missing, or a copy-to target is blank
        """
        if not self._name:
            raise ValidationError("Field definition requires a name")
        if not self._type:
            raise ValidationError(f"Field definition '{self._name}' requires a type")
        if any(not dest for dest in self._copy_fields):
            raise ValidationError(f"Field definition '{self._name}' has a blank copy-to target")

        return FieldDefinition(
            name=self._name,
            type=self._type,
            indexed=self._indexed,
            stored=self._stored,
            multi_valued=self._multi_valued,
            required=self._required,
            default_value=self._default_value,
            copy_fields=tuple(self._copy_fields)
        )


class CopyFieldDefinitionBuilder:
    """Accumulates copy-field endpoints until ``create()`` is called."""

    def __init__(self):
        self._source: Optional[str] = None
        self._destination: Optional[str] = None
        self._max_chars: Optional[int] = None

    def copy_from(self, source: str) -> "CopyFieldDefinitionBuilder":
        self._source = source
        return self

    def to(self, destination: str) -> "CopyFieldDefinitionBuilder":
        self._destination = destination
        return self

    def limited_to(self, max_chars: int) -> "CopyFieldDefinitionBuilder":
        self._max_chars = max_chars
        return self

    def create(self) -> CopyFieldDefinition:
        if not self._source:
            raise ValidationError("Copy field definition requires a source field")
        if not self._destination:
            raise ValidationError(
                f"Copy field definition from '{self._source}' requires a destination field"
            )
        return CopyFieldDefinition(self._source, self._destination, self._max_chars)


def new_field_definition() -> FieldDefinitionBuilder:
    return FieldDefinitionBuilder()


def new_copy_field_definition() -> CopyFieldDefinitionBuilder:
    return CopyFieldDefinitionBuilder()


class SchemaDefinition:
    """
    Read-only, point-in-time snapshot of a collection schema.

    Fields are keyed by name; looking up an unknown name returns None.
    Copy fields keep the order reported by the engine and may repeat.

    Example:
        schema = operations.read_schema()
        field = schema.get_field_definition("id")
        if field is None:
            ...
    """

    def __init__(
        self,
        name: str,
        version: float,
        fields: Iterable[FieldDefinition] = (),
        copy_fields: Iterable[CopyFieldDefinition] = (),
        unique_key: Optional[str] = None,
        collection_name: Optional[str] = None
    ):
        """
        Build a snapshot.

        Args:
            name: Schema name declared by the engine
            version: Schema version reported by the engine
            fields: Field definitions, names must be unique
            copy_fields: Copy field definitions
            unique_key: Name of the unique key field, if reported
            collection_name: Collection the snapshot was read from

        Raises:
            ValidationError: If two fields share a name
        """
        self._name = name
        self._version = version
        self._unique_key = unique_key
        self._collection_name = collection_name

        self._fields: Dict[str, FieldDefinition] = {}
        for field in fields:
            if field.name in self._fields:
                raise ValidationError(f"Duplicate field '{field.name}' in schema '{name}'")
            self._fields[field.name] = field

        self._copy_fields: Tuple[CopyFieldDefinition, ...] = tuple(copy_fields)

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> float:
        return self._version

    @property
    def unique_key(self) -> Optional[str]:
        return self._unique_key

    @property
    def collection_name(self) -> Optional[str]:
        return self._collection_name

    @property
    def fields(self) -> Tuple[FieldDefinition, ...]:
        return tuple(self._fields.values())

    @property
    def field_names(self) -> List[str]:
        return list(self._fields)

    @property
    def copy_fields(self) -> Tuple[CopyFieldDefinition, ...]:
        return self._copy_fields

    def get_field_definition(self, name: str) -> Optional[FieldDefinition]:
        """Return the field named ``name``, or None if the snapshot has none."""
        return self._fields.get(name)

    def contains_field(self, name: str) -> bool:
        return name in self._fields

    def copy_fields_from(self, source: str) -> List[CopyFieldDefinition]:
        return [cf for cf in self._copy_fields if cf.source == source]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaDefinition):
            return NotImplemented
        return (
            self._name == other._name
            and self._version == other._version
            and self._unique_key == other._unique_key
            and self._collection_name == other._collection_name
            and self._fields == other._fields
            and self._copy_fields == other._copy_fields
        )

    def __hash__(self) -> int:
        return hash((self._name, self._version, self._collection_name, tuple(self._fields)))

    def __repr__(self) -> str:
        return (
            f"SchemaDefinition(name={self._name!r}, version={self._version!r}, "
            f"fields={len(self._fields)}, copy_fields={len(self._copy_fields)})"
        )
