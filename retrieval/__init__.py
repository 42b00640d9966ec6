"""
Retrieval Module for the FinChat backend.

This module provides context retrieval:
- Embedding generation (Hugging Face feature extraction)
- Pinecone intent search
- Persona-specific context enrichment
"""

from .embedder import EmbeddingService, EmbeddingConfig, EmbeddingError
from .pinecone_client import PineconeClient, PineconeConfig, InvalidQueryError, SearchError
from .context_enricher import ContextEnricher, EnrichmentResult

__all__ = [
    "EmbeddingService",
    "EmbeddingConfig",
    "EmbeddingError",
    "PineconeClient",
    "PineconeConfig",
    "InvalidQueryError",
    "SearchError",
    "ContextEnricher",
    "EnrichmentResult",
]
