"""
SolrSchema Transport — Schema Endpoint Access
=============================================

Every schema read and mutation goes through a ``SchemaTransport``:

    request(collection, payload=None, path="")

A request without payload is a read (GET), a request with payload is a
mutation command posted as JSON. ``SolrTransport`` implements this on top
of elastic-transport, the HTTP layer shared with the Elasticsearch client:

    /<collection>/schema          full schema
    /<collection>/schema/name     schema name
    /<collection>/schema/version  schema version

Retries are disabled: a failed round-trip raises ``TransportFailure``
immediately. Timeouts are the transport's concern (``request_timeout``).
"""

import base64
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from elastic_transport import JsonSerializer, Transport, TransportError
from elastic_transport.client_utils import percent_encode, url_to_node_config

from .exceptions import TransportFailure

logger = logging.getLogger(__name__)

DEFAULT_HOSTS = ["http://localhost:8983/solr"]


class SchemaTransport:
    """Narrow interface consumed by the schema reader and mutator."""

    def request(
        self,
        collection: str,
        payload: Optional[Mapping[str, Any]] = None,
        path: str = ""
    ) -> Mapping[str, Any]:
        """
        Send one request to the schema endpoint of ``collection``.

        Args:
            collection: Collection whose schema is addressed
            payload: Mutation command, or None for a read
            path: Schema sub-resource ("name", "version") or "" for the full schema

        Returns:
            Decoded response body

        Raises:
            TransportFailure: On connection errors, non-2xx status or undecodable body
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release underlying connections."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class SolrTransport(SchemaTransport):
    """
    Schema transport talking HTTP/JSON to Solr nodes.

    Example:
        transport = SolrTransport(hosts=["http://solr1:8983/solr"], basic_auth=("solr", "secret"))
        body = transport.request("collection1", path="name")
    """

    def __init__(
        self,
        hosts: Optional[List[str]] = None,
        basic_auth: Optional[Tuple[str, str]] = None,
        bearer_token: Optional[str] = None,
        verify_certs: bool = True,
        request_timeout: Optional[float] = None
    ):
        """
        Initialize the transport.

        Args:
            hosts: List of Solr base URLs including the context path
            basic_auth: Tuple of (username, password)
            bearer_token: Token for bearer authentication (JWT auth plugin)
            verify_certs: Verify SSL certificates
            request_timeout: Per-request timeout in seconds
        """
        node_configs = []
        for url in hosts or DEFAULT_HOSTS:
            node_config = url_to_node_config(url, use_default_ports_for_scheme=True)
            if node_config.scheme == "https":
                node_config = node_config.replace(verify_certs=verify_certs)
            node_configs.append(node_config)

        self._headers: Dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json"
        }
        if basic_auth:
            token = base64.b64encode(":".join(basic_auth).encode("utf-8")).decode("ascii")
            self._headers["authorization"] = f"Basic {token}"
        elif bearer_token:
            self._headers["authorization"] = f"Bearer {bearer_token}"

        self._request_timeout = request_timeout
        # Solr configsets label JSON responses as text/plain
        self._transport = Transport(
            node_configs,
            serializers={"text/plain": JsonSerializer()},
            max_retries=0,
            retry_on_status=(),
            retry_on_timeout=False
        )

    @staticmethod
    def schema_target(collection: str, path: str = "") -> str:
        """Return the request target for a collection's schema (sub-)resource."""
        target = f"/{percent_encode(collection, '')}/schema"
        if path:
            target += f"/{path}"
        return target

    def request(
        self,
        collection: str,
        payload: Optional[Mapping[str, Any]] = None,
        path: str = ""
    ) -> Mapping[str, Any]:
        method = "GET" if payload is None else "POST"
        target = self.schema_target(collection, path)
        logger.debug("%s %s %s", method, target, payload if payload is not None else "")

        kwargs: Dict[str, Any] = {"headers": self._headers}
        if payload is not None:
            kwargs["body"] = payload
        if self._request_timeout is not None:
            kwargs["request_timeout"] = self._request_timeout

        try:
            meta, body = self._transport.perform_request(method, target, **kwargs)
        except TransportError as e:
            raise TransportFailure(f"{method} {target} failed: {e}") from e

        if not 200 <= meta.status < 300:
            raise TransportFailure(
                f"{method} {target} returned HTTP {meta.status}",
                status=meta.status,
                body=body
            )
        if not isinstance(body, Mapping):
            raise TransportFailure(
                f"{method} {target} returned a non-JSON body",
                status=meta.status,
                body=body
            )
        return body

    def close(self) -> None:
        self._transport.close()
