"""Input adapters that normalize raw player documents."""

from .players import IngestReport, documents_to_records, load_player_documents

__all__ = [
    "IngestReport",
    "documents_to_records",
    "load_player_documents",
]
