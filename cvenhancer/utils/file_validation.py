"""
Upload validation: size ceiling and file type resolution.
"""

from typing import Dict, List, Optional

from cvenhancer.models.document import FileValidationResult, SupportedFileType


MAX_FILE_SIZE = 10 * 1024 * 1024

MIME_TYPES: Dict[SupportedFileType, List[str]] = {
    SupportedFileType.PDF: ["application/pdf"],
    SupportedFileType.DOCX: [
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
    ],
    SupportedFileType.JPEG: ["image/jpeg", "image/jpg"],
    SupportedFileType.PNG: ["image/png"],
}

EXTENSIONS: Dict[str, SupportedFileType] = {
    "pdf": SupportedFileType.PDF,
    "docx": SupportedFileType.DOCX,
    "jpeg": SupportedFileType.JPEG,
    "jpg": SupportedFileType.JPEG,
    "png": SupportedFileType.PNG,
}

SIZE_ERROR = "File size exceeds 10MB limit"
TYPE_ERROR = "Unsupported file type. Please upload PDF, DOCX, JPEG, or PNG files"


def get_file_type(content_type: Optional[str], filename: Optional[str]) -> Optional[SupportedFileType]:
    """
    Resolve the logical file type, by declared MIME type first and then extension.

    Args:
        content_type: Declared MIME type (may be empty or generic)
        filename: Original filename

    Returns:
        Resolved type, or None if neither matches
    """
    mime = (content_type or "").split(";")[0].strip().lower()
    for file_type, mimes in MIME_TYPES.items():
        if mime in mimes:
            return file_type

    if filename and "." in filename:
        extension = filename.rsplit(".", 1)[-1].lower()
        return EXTENSIONS.get(extension)

    return None


def validate_file(
    size: int,
    content_type: Optional[str],
    filename: Optional[str],
    max_size: int = MAX_FILE_SIZE
) -> FileValidationResult:
    """
    Validate upload metadata. Pure; never touches the file contents.

    Args:
        size: File size in bytes
        content_type: Declared MIME type
        filename: Original filename
        max_size: Size ceiling in bytes

    Returns:
        FileValidationResult with either ``file_type`` or ``error`` set
    """
    if size > max_size:
        return FileValidationResult(is_valid=False, error=SIZE_ERROR)

    file_type = get_file_type(content_type, filename)
    if file_type is None:
        return FileValidationResult(is_valid=False, error=TYPE_ERROR)

    return FileValidationResult(is_valid=True, file_type=file_type)


def format_file_size(num_bytes: int) -> str:
    """Human-readable size, e.g. ``512 B``, ``1.5 KB``, ``2.0 MB``."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"
