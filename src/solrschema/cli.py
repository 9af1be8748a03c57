"""
SolrSchema CLI — Command-Line Interface
=======================================

Command-line interface for schema operations on a collection.

Usage:
    python -m solrschema name collection1
    python -m solrschema version collection1
    python -m solrschema show collection1
    python -m solrschema add-field collection1 title_s string --indexed --stored --copy-to _text_
    python -m solrschema add-copy-field collection1 title_s all_s --max-chars 256
    python -m solrschema remove-field collection1 title_s
"""

import argparse
import logging
import sys
from typing import List, Optional

from .definition import new_copy_field_definition, new_field_definition
from .exceptions import SolrSchemaError
from .operations import SchemaOperations


def get_hosts(args) -> List[str]:
    """Extract hosts from args."""
    if args.hosts:
        return args.hosts.split(",")
    return ["http://localhost:8983/solr"]


def open_operations(args) -> SchemaOperations:
    basic_auth = (args.user, args.password or "") if args.user else None
    return SchemaOperations(
        args.collection,
        hosts=get_hosts(args),
        basic_auth=basic_auth,
        bearer_token=args.token,
        request_timeout=args.timeout
    )


def cmd_name(args):
    """Print the schema name."""
    with open_operations(args) as ops:
        print(ops.get_schema_name())


def cmd_version(args):
    """Print the schema version."""
    with open_operations(args) as ops:
        print(ops.get_schema_version())


def cmd_show(args):
    """Print fields and copy fields."""
    with open_operations(args) as ops:
        schema = ops.read_schema()

    print(f"\nSchema: {schema.name} (version {schema.version})")
    if schema.unique_key:
        print(f"Unique key: {schema.unique_key}")

    print(f"\n{'Field':<30} {'Type':<20} {'Flags':<12} {'Default'}")
    print("-" * 75)
    for field in schema.fields:
        flags = "".join([
            "I" if field.indexed else "-",
            "S" if field.stored else "-",
            "M" if field.multi_valued else "-",
            "R" if field.required else "-",
        ])
        default = "" if field.default_value is None else str(field.default_value)
        print(f"{field.name:<30} {field.type:<20} {flags:<12} {default}")

    print(f"\n{'Copy from':<30} {'Copy to':<30} {'Max chars'}")
    print("-" * 75)
    for copy_field in schema.copy_fields:
        max_chars = "" if copy_field.max_chars is None else str(copy_field.max_chars)
        print(f"{copy_field.source:<30} {copy_field.destination:<30} {max_chars}")


def cmd_add_field(args):
    """Add a field."""
    builder = new_field_definition().named(args.name).typed_as(args.type)
    if args.indexed:
        builder.indexed()
    if args.stored:
        builder.stored()
    if args.multi_valued:
        builder.multi_valued()
    if args.required:
        builder.required()
    if args.default is not None:
        builder.defaulted_to(args.default)
    if args.copy_to:
        builder.copy_to(*args.copy_to)
    field = builder.create()

    with open_operations(args) as ops:
        ops.add_field(field)

    print(f"Added field: {field.name} ({field.type})")
    for dest in field.copy_fields:
        print(f"  Copy to: {dest}")


def cmd_add_copy_field(args):
    """Add a copy field."""
    builder = new_copy_field_definition().copy_from(args.source).to(args.dest)
    if args.max_chars is not None:
        builder.limited_to(args.max_chars)
    copy_field = builder.create()

    with open_operations(args) as ops:
        ops.add_field(copy_field)

    print(f"Added copy field: {copy_field.source} -> {copy_field.destination}")


def cmd_remove_field(args):
    """Remove a field."""
    with open_operations(args) as ops:
        ops.remove_field(args.name)

    print(f"Removed field: {args.name}")


COMMANDS = {
    "name": cmd_name,
    "version": cmd_version,
    "show": cmd_show,
    "add-field": cmd_add_field,
    "add-copy-field": cmd_add_copy_field,
    "remove-field": cmd_remove_field,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="solrschema",
        description="SolrSchema — read and modify Solr collection schemas"
    )

    # Global options
    parser.add_argument(
        "--hosts",
        help="Solr base URLs (comma-separated)",
        default=None
    )
    parser.add_argument("--user", help="Basic auth user", default=None)
    parser.add_argument("--password", help="Basic auth password", default=None)
    parser.add_argument("--token", help="Bearer token", default=None)
    parser.add_argument("--timeout", type=float, help="Request timeout (seconds)", default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    for command, help_text in [
        ("name", "Show schema name"),
        ("version", "Show schema version"),
        ("show", "Show fields and copy fields"),
    ]:
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("collection", help="Collection name")

    # add-field command
    add_parser = subparsers.add_parser("add-field", help="Add a field")
    add_parser.add_argument("collection", help="Collection name")
    add_parser.add_argument("name", help="Field name")
    add_parser.add_argument("type", help="Field type")
    add_parser.add_argument("--indexed", action="store_true", help="Index the field")
    add_parser.add_argument("--stored", action="store_true", help="Store the field")
    add_parser.add_argument("--multi-valued", action="store_true", help="Allow multiple values")
    add_parser.add_argument("--required", action="store_true", help="Require a value")
    add_parser.add_argument("--default", help="Default value")
    add_parser.add_argument("--copy-to", action="append", help="Copy target (repeatable)")

    # add-copy-field command
    copy_parser = subparsers.add_parser("add-copy-field", help="Add a copy field")
    copy_parser.add_argument("collection", help="Collection name")
    copy_parser.add_argument("source", help="Source field")
    copy_parser.add_argument("dest", help="Destination field")
    copy_parser.add_argument("--max-chars", type=int, help="Maximum characters copied")

    # remove-field command
    remove_parser = subparsers.add_parser("remove-field", help="Remove a field")
    remove_parser.add_argument("collection", help="Collection name")
    remove_parser.add_argument("name", help="Field name")

    # Parse and dispatch
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        handler(args)
    except SolrSchemaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
