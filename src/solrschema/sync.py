"""
SolrSchema Sync — Diff and Apply Desired Definitions
====================================================

Compares desired field and copy-field definitions with a live snapshot and
adds whatever is missing. Existing fields are never replaced: a field that
exists with different attributes is reported as a conflict and logged.

Typical usage:
    diff = sync_schema(operations, [title_field, year_field])
    if diff.conflicting_fields:
        ...
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from .definition import CopyFieldDefinition, FieldDefinition, SchemaDefinition
from .operations import SchemaOperations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaDiff:
    """Definitions a live schema lacks, plus fields that exist but differ."""

    missing_fields: Tuple[FieldDefinition, ...] = ()
    conflicting_fields: Tuple[Tuple[FieldDefinition, FieldDefinition], ...] = ()
    missing_copy_fields: Tuple[CopyFieldDefinition, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.missing_fields or self.conflicting_fields or self.missing_copy_fields)


def diff_schema(
    live: SchemaDefinition,
    fields: Iterable[FieldDefinition],
    copy_fields: Iterable[CopyFieldDefinition] = ()
) -> SchemaDiff:
    """
    Compute what has to be added for ``live`` to contain the desired definitions.

    Copy-to targets of missing fields are not listed separately; adding the
    field adds them. Copy-to targets of present fields are checked against
    the live copy fields like explicit copy fields.

    Args:
        live: Current schema snapshot
        fields: Desired field definitions
        copy_fields: Desired explicit copy field definitions

    Returns:
        SchemaDiff
    """
    missing = []
    conflicts = []
    wanted_copies = []

    for field in fields:
        current = live.get_field_definition(field.name)
        if current is None:
            missing.append(field)
            continue
        if current.without_copy_fields() != field.without_copy_fields():
            conflicts.append((field, current))
        wanted_copies.extend(field.copy_field_definitions())

    wanted_copies.extend(copy_fields)

    present = {(cf.source, cf.destination) for cf in live.copy_fields}
    for field in missing:
        present.update((cf.source, cf.destination) for cf in field.copy_field_definitions())
    missing_copies = []
    for copy_field in wanted_copies:
        key = (copy_field.source, copy_field.destination)
        if key not in present:
            present.add(key)
            missing_copies.append(copy_field)

    return SchemaDiff(tuple(missing), tuple(conflicts), tuple(missing_copies))


def sync_schema(
    operations: SchemaOperations,
    fields: Iterable[FieldDefinition],
    copy_fields: Iterable[CopyFieldDefinition] = ()
) -> SchemaDiff:
    """
    Read the live schema once and add missing fields, then missing copy fields.

    Returns:
        The diff that was applied (conflicts are reported, not applied)

    Raises:
        SchemaAccessError: If the live schema cannot be read
        SchemaModificationException: On the first rejected mutation; earlier ones stay applied
    """
    diff = diff_schema(operations.read_schema(), fields, copy_fields)

    for desired, current in diff.conflicting_fields:
        logger.warning(
            "Field '%s' on collection '%s' differs from desired definition: live=%r desired=%r",
            desired.name, operations.collection, current, desired
        )

    for field in diff.missing_fields:
        operations.add_field(field)
    for copy_field in diff.missing_copy_fields:
        operations.add_field(copy_field)

    logger.info(
        "Synced collection '%s': %d fields, %d copy fields added, %d conflicts",
        operations.collection,
        len(diff.missing_fields),
        len(diff.missing_copy_fields),
        len(diff.conflicting_fields)
    )
    return diff
