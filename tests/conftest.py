from __future__ import annotations

import os
from typing import Any, Dict, Iterable, Optional

import pytest
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig, ObjectApiResponse
from elasticsearch import ConnectionError as ESConnectionError
from elasticsearch import NotFoundError

from es_quickstart.index.elastic_client import ElasticClient


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: tests that require a running Elasticsearch cluster",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.getenv("ES_RUN_INTEGRATION") == "1":
        return

    skip_integration = pytest.mark.skip(
        reason="Set ES_RUN_INTEGRATION=1 to run integration tests"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def make_meta(status: int) -> ApiResponseMeta:
    return ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )


def make_response(status: int, body: Any) -> ObjectApiResponse:
    return ObjectApiResponse(body=body, meta=make_meta(status))


INFO_BODY = {
    "name": "node-1",
    "cluster_name": "docker-cluster",
    "cluster_uuid": "a1b2c3",
    "version": {"number": "8.13.4", "build_flavor": "default", "lucene_version": "9.10.0"},
    "tagline": "You Know, for Search",
}


class FakeIndices:
    def __init__(self, es: "FakeElasticsearch") -> None:
        self._es = es

    def exists(self, index: str) -> ObjectApiResponse:
        self._es.calls.append("indices.exists")
        found = index in self._es.store
        return make_response(200 if found else 404, found)

    def delete(self, index: str) -> ObjectApiResponse:
        self._es.calls.append("indices.delete")
        self._es.store.pop(index, None)
        return make_response(200, {"acknowledged": True})


class FakeElasticsearch:
    """
    In-memory stand-in for ``elasticsearch.Elasticsearch``.

    Documents are visible immediately; ``match`` queries succeed when any
    lower-cased token of the query text appears in the field value.
    """

    def __init__(self, fail_on: Iterable[str] = (), overrides: Optional[Dict[str, Any]] = None) -> None:
        self.store: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.versions: Dict[tuple, int] = {}
        self.calls: list[str] = []
        self.fail_on = set(fail_on)
        self.overrides = overrides or {}
        self.indices = FakeIndices(self)
        self.closed = False

    def _enter(self, name: str) -> Optional[ObjectApiResponse]:
        self.calls.append(name)
        if name in self.fail_on:
            raise ESConnectionError("Connection refused")
        override = self.overrides.get(name)
        if isinstance(override, Exception):
            raise override
        return override

    def close(self) -> None:
        self.closed = True

    def info(self) -> ObjectApiResponse:
        override = self._enter("info")
        if override is not None:
            return override
        return make_response(200, INFO_BODY)

    def index(self, index: str, id: str, document: Dict[str, Any], refresh: Any = None) -> ObjectApiResponse:
        override = self._enter("index")
        if override is not None:
            return override

        key = (index, id)
        version = self.versions.get(key, 0) + 1
        self.versions[key] = version
        self.store.setdefault(index, {})[id] = dict(document)

        created = version == 1
        return make_response(
            201 if created else 200,
            {
                "_index": index,
                "_id": id,
                "_version": version,
                "result": "created" if created else "updated",
                "forced_refresh": refresh in ("true", True),
                "_shards": {"total": 2, "successful": 1, "failed": 0},
                "_seq_no": version - 1,
                "_primary_term": 1,
            },
        )

    def get(self, index: str, id: str) -> ObjectApiResponse:
        override = self._enter("get")
        if override is not None:
            return override

        source = self.store.get(index, {}).get(id)
        if source is None:
            raise NotFoundError(
                "NotFound",
                make_meta(404),
                {"_index": index, "_id": id, "found": False},
            )
        return make_response(
            200,
            {
                "_index": index,
                "_id": id,
                "_version": self.versions[(index, id)],
                "found": True,
                "_source": source,
            },
        )

    def search(self, index: str, query: Dict[str, Any], track_total_hits: Any = None) -> ObjectApiResponse:
        override = self._enter("search")
        if override is not None:
            return override

        if index not in self.store:
            raise NotFoundError(
                "index_not_found_exception",
                make_meta(404),
                {
                    "error": {
                        "type": "index_not_found_exception",
                        "reason": f"no such index [{index}]",
                    },
                    "status": 404,
                },
            )

        ((field, text),) = query["match"].items()
        wanted = set(str(text).lower().split())
        hits = [
            {"_index": index, "_id": doc_id, "_score": 0.2876821, "_source": source}
            for doc_id, source in self.store[index].items()
            if wanted & set(str(source.get(field, "")).lower().split())
        ]
        return make_response(
            200,
            {
                "took": 3,
                "timed_out": False,
                "hits": {
                    "total": {"value": len(hits), "relation": "eq"},
                    "max_score": 0.2876821 if hits else None,
                    "hits": hits,
                },
            },
        )


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
def client(fake_es: FakeElasticsearch) -> ElasticClient:
    es_client = ElasticClient()
    es_client.es = fake_es
    return es_client
