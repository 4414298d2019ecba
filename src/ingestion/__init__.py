"""Remote record store access"""

from src.ingestion.record_client import RecordStoreClient

__all__ = ["RecordStoreClient"]
