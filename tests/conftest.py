"""Shared fixtures: an in-process stand-in for a Solr schema endpoint."""

import copy
import fnmatch

import pytest

from solrschema.exceptions import TransportFailure
from solrschema.operations import SchemaOperations
from solrschema.transport import SchemaTransport

COLLECTION_NAME = "collection1"

FIELD_TYPES = {"string", "text_general", "long", "plong", "pint", "boolean", "pdate"}

DATA_DRIVEN_SCHEMA = {
    "name": "example-data-driven-schema",
    "version": 1.6,
    "uniqueKey": "id",
    "fieldTypes": [{"name": t, "class": "solr.StrField"} for t in sorted(FIELD_TYPES)],
    "fields": [
        {"name": "_root_", "type": "string", "docValues": False, "indexed": True, "stored": False},
        {"name": "_text_", "type": "text_general", "multiValued": True, "indexed": True, "stored": False},
        {"name": "_version_", "type": "long", "indexed": True, "stored": True},
        {"name": "id", "type": "string", "multiValued": False, "indexed": True,
         "required": True, "stored": True},
    ],
    "dynamicFields": [
        {"name": "*_s", "type": "string", "indexed": True, "stored": True},
        {"name": "*_t", "type": "text_general", "indexed": True, "stored": True},
    ],
    "copyFields": [{"source": "*", "dest": "_text_"}],
}


class FakeSolrSchemaEndpoint(SchemaTransport):
    """
    Applies schema commands to an in-memory managed schema the way Solr does.

    Rejections are reported as HTTP 400 with an ``error`` object, or, with
    ``errors_in_body=True``, as HTTP 200 with an ``errors`` list like older
    Solr releases.
    """

    def __init__(self, schema=None, collection=COLLECTION_NAME, errors_in_body=False):
        self.schema = copy.deepcopy(schema or DATA_DRIVEN_SCHEMA)
        self.collection = collection
        self.errors_in_body = errors_in_body
        self.requests = []
        self.closed = False
        self.fail_on = set()

    def _header(self, status=0):
        return {"status": status, "QTime": 1}

    def _reject(self, command, attributes, message):
        if self.errors_in_body:
            return {
                "responseHeader": self._header(),
                "errors": [{command: attributes, "errorMessages": [message + "\n"]}],
            }
        raise TransportFailure(
            f"POST /{self.collection}/schema returned HTTP 400",
            status=400,
            body={
                "responseHeader": self._header(400),
                "error": {
                    "metadata": ["error-class", "org.apache.solr.api.ApiBag$ExceptionWithErrObject"],
                    "details": [{command: attributes, "errorMessages": [message + "\n"]}],
                    "msg": "error processing commands",
                    "code": 400,
                },
            },
        )

    def _field_names(self):
        return {f["name"] for f in self.schema["fields"]}

    def _resolves(self, name):
        if name in self._field_names():
            return True
        return any(fnmatch.fnmatchcase(name, d["name"]) for d in self.schema["dynamicFields"])

    def request(self, collection, payload=None, path=""):
        self.requests.append((collection, payload, path))

        if collection != self.collection:
            raise TransportFailure(f"GET /{collection}/schema returned HTTP 404", status=404,
                                   body="<html>Not Found</html>")

        if payload is None:
            if path == "name":
                return {"responseHeader": self._header(), "name": self.schema["name"]}
            if path == "version":
                return {"responseHeader": self._header(), "version": self.schema["version"]}
            schema = copy.deepcopy(self.schema)
            schema["copyFields"].sort(key=lambda cf: (cf["source"], cf["dest"]))
            return {"responseHeader": self._header(), "schema": schema}

        (command, attributes), = payload.items()
        if command in self.fail_on:
            return self._reject(command, attributes, f"Simulated failure of {command}")
        handler = getattr(self, "_" + command.replace("-", "_"))
        return handler(command, attributes)

    def _add_field(self, command, attributes):
        name = attributes.get("name")
        if name in self._field_names():
            return self._reject(command, attributes, f"Field '{name}' already exists.")
        if attributes.get("type") not in FIELD_TYPES:
            return self._reject(command, attributes,
                                f"Field '{name}': Field type '{attributes.get('type')}' not found.")
        self.schema["fields"].append(dict(attributes))
        return {"responseHeader": self._header()}

    def _add_copy_field(self, command, attributes):
        source = attributes["source"]
        for dest in attributes["dest"]:
            if not self._resolves(source) or not self._resolves(dest):
                return self._reject(command, attributes,
                                    f"copyField source :'{source}' or dest :'{dest}' is not a valid field")
            if {"source": source, "dest": dest} in self.schema["copyFields"]:
                return self._reject(command, attributes,
                                    f"Copy field directive from '{source}' to '{dest}' already exists.")
        for dest in attributes["dest"]:
            entry = {"source": source, "dest": dest}
            if "maxChars" in attributes:
                entry["maxChars"] = attributes["maxChars"]
            self.schema["copyFields"].append(entry)
        return {"responseHeader": self._header()}

    def _delete_field(self, command, attributes):
        name = attributes["name"]
        if name not in self._field_names():
            return self._reject(command, attributes,
                                f"The field '{name}' is not present in this schema, and so cannot be deleted.")
        if any(cf["source"] == name or cf["dest"] == name for cf in self.schema["copyFields"]):
            return self._reject(command, attributes,
                                f"Can't delete '{name}' because it's referred to by at least one copy field directive.")
        self.schema["fields"] = [f for f in self.schema["fields"] if f["name"] != name]
        return {"responseHeader": self._header()}

    def close(self):
        self.closed = True


@pytest.fixture
def endpoint():
    return FakeSolrSchemaEndpoint()


@pytest.fixture
def schema_ops(endpoint):
    return SchemaOperations(COLLECTION_NAME, transport=endpoint)
