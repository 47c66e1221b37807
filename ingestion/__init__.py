from .config import IngestionConfig
from .service import IngestionService, IngestStats

__all__ = ["IngestStats", "IngestionConfig", "IngestionService"]
