from typing import Any, Callable, Dict, List, Optional, Tuple
from http import HTTPStatus
from pathlib import Path
import logging
import ssl

from elasticsearch import (
    ApiError,
    Elasticsearch,
    SerializationError,
    TransportError,
)
from pydantic import ValidationError

from es_quickstart.config import load_settings
from es_quickstart.index.errors import (
    ConfigError,
    ConnectionFailed,
    ErrorResponse,
    MalformedResponse,
)
from es_quickstart.index.responses import ErrorBody

logger = logging.getLogger(__name__)

DEFAULT_HOST = "http://localhost:9200"


def status_line(status: int) -> str:
    """Render a status code the way HTTP does, e.g. ``201 Created``."""
    try:
        return f"{status} {HTTPStatus(status).phrase}"
    except ValueError:
        return str(status)


def _tls_context(min_version: str) -> ssl.SSLContext:
    try:
        version = ssl.TLSVersion[min_version.replace(".", "_")]
    except KeyError:
        raise ConfigError(f"unknown TLS version {min_version!r}") from None
    context = ssl.create_default_context()
    context.minimum_version = version
    return context


def _transport_detail(exc: TransportError) -> str:
    causes = "; ".join(str(err) for err in exc.errors)
    return causes or str(exc.message)


class ElasticClient:
    """
    High-level wrapper for interacting with Elasticsearch.

    Every call goes through ``_call``, which turns client exceptions into the
    quickstart's own error types and hands back ``(status, body)``.
    """

    def __init__(
        self,
        hosts: str | List[str] = DEFAULT_HOST,
        username: Optional[str] = None,
        password: Optional[str] = None,
        connections_per_node: Optional[int] = None,
        request_timeout: Optional[float] = None,
        tls_min_version: Optional[str] = None,
        max_retries: int = 0,
        **client_kwargs: Any,
    ) -> None:
        self.hosts = [hosts] if isinstance(hosts, str) else list(hosts)

        if username is not None and password is not None:
            client_kwargs["basic_auth"] = (username, password)
        if connections_per_node is not None:
            client_kwargs["connections_per_node"] = connections_per_node
        if request_timeout is not None:
            client_kwargs["request_timeout"] = request_timeout
        if tls_min_version is not None:
            if all(host.startswith("https://") for host in self.hosts):
                client_kwargs["ssl_context"] = _tls_context(tls_min_version)
            else:
                logger.warning("tls_min_version=%s ignored: hosts are not all https", tls_min_version)

        self.es = Elasticsearch(self.hosts, max_retries=max_retries, **client_kwargs)

    # ------------------------------------------------------------------
    # ALT CONSTRUCTORS FROM CONFIG
    # ------------------------------------------------------------------
    @classmethod
    def from_config(cls, es_cfg: Dict[str, Any]) -> "ElasticClient":
        cfg = dict(es_cfg)
        hosts = cfg.pop("hosts", None) or cfg.pop("host", None) or DEFAULT_HOST
        transport: Dict[str, Any] = cfg.pop("transport", None) or {}

        try:
            return cls(hosts=hosts, **transport, **cfg)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"invalid elasticsearch settings: {exc}") from exc

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "ElasticClient":
        settings = load_settings(config_path)
        logger.info("Loading ElasticClient from YAML config at %s", config_path)
        return cls.from_config(settings.elasticsearch)

    # ---------------------------------------------------
    # REQUEST PLUMBING
    # ---------------------------------------------------
    def _call(self, operation: str, method: Callable[..., Any], **params: Any) -> Tuple[int, Any]:
        try:
            resp = method(**params)
        except ApiError as exc:
            raise self._error_response(operation, exc) from exc
        except SerializationError as exc:
            raise MalformedResponse(f"error parsing the response body: {exc}", operation) from exc
        except TransportError as exc:
            raise ConnectionFailed(f"error getting response: {_transport_detail(exc)}", operation) from exc

        return resp.meta.status, resp.body

    @staticmethod
    def _error_response(operation: str, exc: ApiError) -> ErrorResponse:
        status = exc.meta.status
        try:
            body = ErrorBody.model_validate(exc.body)
        except ValidationError:
            # Not an error object; keep whatever the server said.
            return ErrorResponse(status, None, str(exc.body or exc.message), operation)
        return ErrorResponse(status, body.error_type, body.reason, operation)

    def close(self) -> None:
        self.es.close()

    # ---------------------------------------------------
    # 1. CLUSTER INFO
    # ---------------------------------------------------
    def info(self) -> Tuple[int, Any]:
        return self._call("info", self.es.info)

    # ---------------------------------------------------
    # 2. SINGLE DOCUMENT WRITE / READ
    # ---------------------------------------------------
    def index(
        self,
        index_name: str,
        doc_id: str,
        document: Dict[str, Any],
        refresh: str = "true",
    ) -> Tuple[int, Any]:
        logger.debug("Indexing document '%s' into '%s' (refresh=%s)", doc_id, index_name, refresh)
        return self._call(
            "index",
            self.es.index,
            index=index_name,
            id=doc_id,
            document=document,
            refresh=refresh,
        )

    def get(self, index_name: str, doc_id: str) -> Tuple[int, Any]:
        return self._call("get", self.es.get, index=index_name, id=doc_id)

    # ---------------------------------------------------
    # 3. SEARCH
    # ---------------------------------------------------
    def search(self, index_name: str, query: Dict[str, Any]) -> Tuple[int, Any]:
        logger.debug("Executing search on index '%s' with query=%s", index_name, query)
        return self._call(
            "search",
            self.es.search,
            index=index_name,
            query=query,
            track_total_hits=True,
        )

    # ---------------------------------------------------
    # 4. DELETE INDEX
    # ---------------------------------------------------
    def delete_index(self, index_name: str) -> None:
        _, exists = self._call("delete_index", self.es.indices.exists, index=index_name)
        if exists:
            self._call("delete_index", self.es.indices.delete, index=index_name)
            logger.info("Index '%s' deleted.", index_name)
        else:
            logger.info("Index '%s' does not exist; nothing to delete.", index_name)
