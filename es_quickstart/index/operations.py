"""
The three quickstart steps: read cluster info, index a document, search.

Each step logs what it found and returns a typed result. Failures are raised
as ``ElasticDemoError`` subclasses; deciding whether to stop is left to the
caller.
"""

from typing import Any, Dict
import logging

from elasticsearch import __versionstr__ as client_version

from es_quickstart.index.elastic_client import ElasticClient, status_line
from es_quickstart.index.queries import build_match_query
from es_quickstart.index.responses import (
    ClusterInfo,
    GetResult,
    IndexResult,
    SearchResult,
    decode,
)

logger = logging.getLogger(__name__)


def read_cluster_info(client: ElasticClient) -> ClusterInfo:
    _, body = client.info()
    info = decode(ClusterInfo, body, "info")

    logger.info("Client: %s", client_version)
    logger.info("Server: %s", info.version.number)
    return info


def index_document(
    client: ElasticClient,
    index_name: str,
    doc_id: str,
    document: Dict[str, Any],
    refresh: str = "true",
) -> IndexResult:
    status, body = client.index(index_name, doc_id, document, refresh=refresh)
    result = decode(IndexResult, body, "index")

    logger.info("[%s] %s; version=%d", status_line(status), result.result, result.version)
    return result


def fetch_document(client: ElasticClient, index_name: str, doc_id: str) -> GetResult:
    _, body = client.get(index_name, doc_id)
    return decode(GetResult, body, "get")


def run_search(client: ElasticClient, index_name: str, field: str, text: str) -> SearchResult:
    status, body = client.search(index_name, build_match_query(field, text))
    result = decode(SearchResult, body, "search")

    logger.info(
        "[%s] %d hits; took: %dms",
        status_line(status),
        result.hits.total.value,
        result.took,
    )
    for hit in result.hits.hits:
        logger.info(" * ID=%s, %s", hit.id, hit.source)
    return result
