"""SolrTransport tests: request building with elastic-transport mocked, decoding over real HTTP."""

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import MagicMock, patch

import pytest
from elastic_transport import ConnectionError as TransportConnectionError

from solrschema.definition import new_field_definition
from solrschema.exceptions import TransportFailure
from solrschema.operations import SchemaOperations
from solrschema.transport import SolrTransport


def _response(status=200, body=None):
    meta = MagicMock()
    meta.status = status
    return meta, {"responseHeader": {"status": 0}} if body is None else body


@pytest.fixture
def transport_cls():
    with patch("solrschema.transport.Transport") as cls:
        cls.return_value.perform_request.return_value = _response()
        yield cls


def test_builds_nodes_without_retries(transport_cls):
    SolrTransport(hosts=["http://solr1:8983/solr", "http://solr2:8983/solr"])

    args, kwargs = transport_cls.call_args
    node_configs = args[0]
    assert [(n.host, n.port, n.path_prefix) for n in node_configs] == [
        ("solr1", 8983, "/solr"),
        ("solr2", 8983, "/solr"),
    ]
    assert kwargs["max_retries"] == 0
    assert kwargs["retry_on_status"] == ()
    assert kwargs["retry_on_timeout"] is False


def test_read_is_a_get_on_schema_resource(transport_cls):
    SolrTransport().request("collection1", path="name")

    args, kwargs = transport_cls.return_value.perform_request.call_args
    assert args == ("GET", "/collection1/schema/name")
    assert "body" not in kwargs
    assert kwargs["headers"]["accept"] == "application/json"


def test_mutation_is_a_json_post(transport_cls):
    payload = {"delete-field": {"name": "xxx"}}
    SolrTransport(request_timeout=2.5).request("collection1", payload=payload)

    args, kwargs = transport_cls.return_value.perform_request.call_args
    assert args == ("POST", "/collection1/schema")
    assert kwargs["body"] == payload
    assert kwargs["headers"]["content-type"] == "application/json"
    assert kwargs["request_timeout"] == 2.5


def test_collection_name_is_percent_encoded():
    assert SolrTransport.schema_target("my coll/x") == "/my%20coll%2Fx/schema"
    assert SolrTransport.schema_target("c", "version") == "/c/schema/version"


def test_basic_auth_header(transport_cls):
    SolrTransport(basic_auth=("solr", "SolrRocks")).request("collection1")

    _, kwargs = transport_cls.return_value.perform_request.call_args
    assert kwargs["headers"]["authorization"] == "Basic c29scjpTb2xyUm9ja3M="


def test_bearer_auth_header(transport_cls):
    SolrTransport(bearer_token="abc").request("collection1")

    _, kwargs = transport_cls.return_value.perform_request.call_args
    assert kwargs["headers"]["authorization"] == "Bearer abc"


def test_error_status_raises_with_body(transport_cls):
    error_body = {"error": {"msg": "error processing commands", "code": 400}}
    transport_cls.return_value.perform_request.return_value = _response(400, error_body)

    with pytest.raises(TransportFailure) as excinfo:
        SolrTransport().request("collection1", payload={"delete-field": {"name": "xxx"}})

    assert excinfo.value.status == 400
    assert excinfo.value.body == error_body


def test_non_json_body_raises(transport_cls):
    transport_cls.return_value.perform_request.return_value = _response(200, "<html></html>")

    with pytest.raises(TransportFailure, match="non-JSON"):
        SolrTransport().request("collection1")


def test_connection_error_raises_transport_failure(transport_cls):
    transport_cls.return_value.perform_request.side_effect = TransportConnectionError("refused")

    with pytest.raises(TransportFailure) as excinfo:
        SolrTransport().request("collection1")

    assert excinfo.value.status is None
    assert isinstance(excinfo.value.__cause__, TransportConnectionError)


def test_close_closes_transport(transport_cls):
    with SolrTransport():
        pass

    transport_cls.return_value.close.assert_called_once()


class SchemaHandler(BaseHTTPRequestHandler):
    """Serves Solr-style schema replies labelled with ``content_type``."""

    content_type = "text/plain;charset=utf-8"
    replies = {
        ("GET", "/solr/collection1/schema/name"): (200, {"responseHeader": {"status": 0},
                                                         "name": "example-data-driven-schema"}),
        ("POST", "/solr/collection1/schema"): (200, {"responseHeader": {"status": 0}}),
    }

    def _reply(self, method):
        if method == "POST":
            self.rfile.read(int(self.headers.get("content-length", 0)))
        status, body = self.replies.get(
            (method, self.path),
            (404, {"error": {"msg": "Not Found", "code": 404}})
        )
        data = json.dumps(body).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", self.content_type)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def do_GET(self):
        self._reply("GET")

    def do_POST(self):
        self._reply("POST")

    def log_message(self, format, *args):
        pass


@pytest.fixture(params=["text/plain;charset=utf-8", "application/json;charset=utf-8"])
def solr_url(request):
    handler = type("Handler", (SchemaHandler,), {"content_type": request.param})
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/solr"
    server.shutdown()
    server.server_close()


def test_decodes_json_replies_over_http(solr_url):
    with SolrTransport(hosts=[solr_url]) as transport:
        assert transport.request("collection1", path="name")["name"] == "example-data-driven-schema"
        assert transport.request("collection1", payload={"add-field": {"name": "b_s", "type": "string"}}) == {
            "responseHeader": {"status": 0}
        }


def test_http_error_reply_is_decoded_into_failure(solr_url):
    with SolrTransport(hosts=[solr_url]) as transport:
        with pytest.raises(TransportFailure) as excinfo:
            transport.request("unknown", path="name")

    assert excinfo.value.status == 404
    assert excinfo.value.body["error"]["code"] == 404


def test_operations_over_http_with_plain_text_replies(solr_url):
    ops = SchemaOperations("collection1", hosts=[solr_url])
    try:
        assert ops.get_schema_name() == "example-data-driven-schema"
        ops.add_field(new_field_definition().named("b_s").typed_as("string").create())
    finally:
        ops.close()
