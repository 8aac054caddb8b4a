import logging
import sys

from es_quickstart.config import Settings, load_settings
from es_quickstart.index.elastic_client import ElasticClient
from es_quickstart.index.errors import ElasticDemoError
from es_quickstart.index.operations import (
    index_document,
    read_cluster_info,
    run_search,
)


def setup_logging() -> None:
    """Configure application-wide logging behavior."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run(client: ElasticClient, settings: Settings) -> None:
    """
    Quickstart walk-through against a live cluster:

    1. Read cluster info
    2. Index the demo document (refresh=true)
    3. Search the index for the demo query

    The first failing step raises and the remaining steps are skipped.
    """
    demo = settings.demo

    # ---------------------------------------
    # 1. Cluster info
    # ---------------------------------------
    read_cluster_info(client)

    # ---------------------------------------
    # 2. Index document
    # ---------------------------------------
    index_document(client, demo.index, demo.document_id, demo.document)

    # ---------------------------------------
    # 3. Search
    # ---------------------------------------
    run_search(client, demo.index, demo.query_field, demo.query_text)


def main() -> None:
    setup_logging()

    try:
        settings = load_settings()
        client = ElasticClient.from_config(settings.elasticsearch)
    except ElasticDemoError as exc:
        logging.error("Error creating the client: %s", exc)
        sys.exit(1)

    logging.info("Connecting to Elasticsearch at %s", ", ".join(client.hosts))

    try:
        run(client, settings)
    except ElasticDemoError as exc:
        logging.error("%s", exc)
        sys.exit(1)
    finally:
        client.close()

    logging.info("Quickstart completed.")


if __name__ == "__main__":
    main()
