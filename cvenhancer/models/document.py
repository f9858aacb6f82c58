"""Uploaded file and extraction result models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class SupportedFileType(str, Enum):
    """Logical file types accepted for upload."""
    PDF = "pdf"
    DOCX = "docx"
    JPEG = "jpeg"
    PNG = "png"

    @property
    def is_image(self) -> bool:
        return self in (SupportedFileType.JPEG, SupportedFileType.PNG)

    @property
    def image_mime_type(self) -> str:
        """MIME type used when the file is embedded as a data URL."""
        return "image/jpeg" if self is SupportedFileType.JPEG else "image/png"


class UploadedFile(BaseModel):
    """User-selected binary. Consumed by extraction, never retained."""
    content: bytes
    filename: str = ""
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


class FileValidationResult(BaseModel):
    """Outcome of validating an uploaded file's metadata."""
    is_valid: bool
    file_type: Optional[SupportedFileType] = None
    error: Optional[str] = None


class ParsedDocument(BaseModel):
    """
    Extraction output.

    Text mode carries ``text``; vision mode carries ``images`` (bare base64,
    the provider payload form) and ``data_urls`` (browser-displayable form).
    """
    is_vision_mode: bool
    text: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    data_urls: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_mode(self) -> "ParsedDocument":
        if self.is_vision_mode:
            if self.text is not None:
                raise ValueError("Vision-mode documents must not carry text")
            if not self.images or len(self.images) != len(self.data_urls):
                raise ValueError("Vision-mode documents need matching images and data URLs")
        else:
            if self.text is None:
                raise ValueError("Text-mode documents must carry text")
            if self.images or self.data_urls:
                raise ValueError("Text-mode documents must not carry images")
        return self

    @classmethod
    def from_text(cls, text: str) -> "ParsedDocument":
        return cls(is_vision_mode=False, text=text)

    @classmethod
    def from_images(cls, images: List[str], data_urls: List[str]) -> "ParsedDocument":
        return cls(is_vision_mode=True, images=images, data_urls=data_urls)
