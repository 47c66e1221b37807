from dataclasses import dataclass, field
import os

from dotenv import load_dotenv

STRATEGIES = ("recreate", "swap")


@dataclass
class IngestionConfig:
    documents: list[str] = field(default_factory=list)
    documents_dir: str = "documents"
    collection: str = "customer_service"
    chunk_size: int = 512
    chunk_overlap: int = 200
    strategy: str = "recreate"
    workers: int = 1

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown ingestion strategy '{self.strategy}'. Use one of: {STRATEGIES}")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")

    @classmethod
    def from_env(cls) -> "IngestionConfig":
        load_dotenv()
        raw_documents = os.environ.get("INGEST_DOCUMENTS", "")
        return cls(
            documents=[p.strip() for p in raw_documents.split(",") if p.strip()],
            documents_dir=os.environ.get("INGEST_DOCUMENTS_DIR", cls.documents_dir),
            collection=os.environ.get("CHAT_COLLECTION", cls.collection),
            chunk_size=int(os.environ.get("CHUNK_SIZE", cls.chunk_size)),
            chunk_overlap=int(os.environ.get("CHUNK_OVERLAP", cls.chunk_overlap)),
            strategy=os.environ.get("INGEST_STRATEGY", cls.strategy),
            workers=int(os.environ.get("INGEST_WORKERS", cls.workers)),
        )
