"""Service layer modules."""

from .ai_service import AIService, OllamaModelService
from .config_repository import ConfigRepository
from .document_parser import DocumentParser
from .resume_pipeline import ResumePipeline
from .snapshot_service import SnapshotService

__all__ = [
    "AIService",
    "OllamaModelService",
    "ConfigRepository",
    "DocumentParser",
    "ResumePipeline",
    "SnapshotService",
]
