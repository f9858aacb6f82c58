"""Utility modules."""

from .logger import get_logger, setup_logging, SuppressedWarningsFilter
from .file_utils import ensure_directory, save_json, load_json, load_json_or_default
from .file_validation import validate_file, get_file_type, format_file_size, MAX_FILE_SIZE
from .model_detection import (
    is_vision_model,
    get_recommended_scale,
    get_max_pages,
    get_model_capabilities,
    ModelCapabilities,
)
from .json_extraction import (
    extract_json_text,
    parse_json_object,
    dedupe_experience,
    sanitize_response,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "SuppressedWarningsFilter",
    "ensure_directory",
    "save_json",
    "load_json",
    "load_json_or_default",
    "validate_file",
    "get_file_type",
    "format_file_size",
    "MAX_FILE_SIZE",
    "is_vision_model",
    "get_recommended_scale",
    "get_max_pages",
    "get_model_capabilities",
    "ModelCapabilities",
    "extract_json_text",
    "parse_json_object",
    "dedupe_experience",
    "sanitize_response",
]
