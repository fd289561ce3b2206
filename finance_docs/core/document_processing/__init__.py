"""
Document processing pipeline.

PDF bytes -> text -> overlapping chunks -> embeddings -> chunk store,
with the document status store as the single place results become visible.

Exports: IngestionOrchestrator, DocumentPipelineSettings, get_pipeline_settings
"""

from .configs import DocumentPipelineSettings, get_pipeline_settings
from .entrypoint import IngestionOrchestrator

__all__ = [
    "IngestionOrchestrator",
    "DocumentPipelineSettings",
    "get_pipeline_settings",
]
