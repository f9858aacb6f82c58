"""Data models for the application."""

from .ai_config import AIProvider, AIProviderConfig, DEFAULT_OLLAMA_ENDPOINT
from .document import FileValidationResult, ParsedDocument, SupportedFileType, UploadedFile
from .resume import CanonicalResumeData, Education, Experience, PersonalInfo, Project, SkillCategory
from .resume_config import ResumeRenderConfig
from .status import ProcessingStatus

__all__ = [
    "AIProvider",
    "AIProviderConfig",
    "DEFAULT_OLLAMA_ENDPOINT",
    "FileValidationResult",
    "ParsedDocument",
    "SupportedFileType",
    "UploadedFile",
    "CanonicalResumeData",
    "Education",
    "Experience",
    "PersonalInfo",
    "Project",
    "SkillCategory",
    "ResumeRenderConfig",
    "ProcessingStatus",
]
