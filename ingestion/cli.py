#!/usr/bin/env python3
"""
Load customer-service documents into a vector collection.

Usage:
    python -m ingestion.cli documents/returns.pdf documents/faq.docx
    python -m ingestion.cli --collection tenant_a --strategy swap
    python -m ingestion.cli --workers 4 -v

Environment:
    INGEST_DOCUMENTS: Comma-separated document paths (when none are given)
    CHAT_COLLECTION: Target collection (default: customer_service)
    CHROMA_DIR, OLLAMA_BASE_URL, EMBEDDING_MODEL: Store and embedding settings
"""

import argparse
import logging
import sys
from pathlib import Path

from common.exceptions import ChatbotError, format_error_chain
from common.logging_config import setup_logging
from vector_store.collection_manager import CollectionManager
from vector_store.embedder import OllamaEmbedder
from vector_store.models import StoreConfig

from .config import STRATEGIES, IngestionConfig
from .service import IngestionService

logger = logging.getLogger(__name__)


def discover_documents(config: IngestionConfig) -> list[str]:
    if config.documents:
        return list(config.documents)
    directory = Path(config.documents_dir)
    if not directory.is_dir():
        return []
    return [str(p) for p in sorted(directory.iterdir()) if p.is_file()]


def main(argv: list[str] | None = None) -> int:
    config = IngestionConfig.from_env()

    parser = argparse.ArgumentParser(description="Ingest documents into a chatbot collection")
    parser.add_argument("paths", nargs="*", help="Documents to ingest (.pdf, .docx, .txt)")
    parser.add_argument("--collection", default=config.collection,
                        help=f"Target collection (default: {config.collection})")
    parser.add_argument("--strategy", choices=STRATEGIES, default=config.strategy,
                        help="recreate drops and reloads in place, swap loads a new version "
                             f"and repoints the name (default: {config.strategy})")
    parser.add_argument("--workers", type=int, default=config.workers,
                        help=f"Parallel embedding workers (default: {config.workers})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    config.collection = args.collection
    config.strategy = args.strategy
    config.workers = max(1, args.workers)

    paths = args.paths or discover_documents(config)
    if not paths:
        logger.error(f"No documents given and none found in {config.documents_dir}/")
        return 1

    store_config = StoreConfig.from_env()
    service = IngestionService(
        manager=CollectionManager(store_config),
        embedder=OllamaEmbedder.from_config(store_config),
        config=config,
    )

    try:
        stats = service.run(paths)
    except (ChatbotError, ValueError) as e:
        logger.error(f"Ingestion failed:\n{format_error_chain(e)}")
        return 1

    print(
        f"{stats.collection}: {stats.chunks_stored} chunk(s) stored from "
        f"{stats.files_loaded} file(s); {stats.files_skipped} skipped, "
        f"{stats.files_aborted} aborted, {stats.chunks_failed} chunk(s) failed"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
