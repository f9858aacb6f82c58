"""
Document extraction: turn a validated upload into text or page images.
"""

import base64
import io
from typing import Optional

import fitz  # PyMuPDF
from docx import Document

from cvenhancer.exceptions import ExtractionError
from cvenhancer.models.ai_config import AIProviderConfig
from cvenhancer.models.document import ParsedDocument, SupportedFileType, UploadedFile
from cvenhancer.utils.file_validation import format_file_size
from cvenhancer.utils.logger import get_logger
from cvenhancer.utils.model_detection import get_model_capabilities
from cvenhancer.utils.pdf_to_image import PDFRasterizer

logger = get_logger(__name__)


class DocumentParser:
    """Extract resume content, choosing text or vision mode per file type and model."""

    def __init__(self, rasterizer: Optional[PDFRasterizer] = None):
        """
        Initialize document parser.

        Args:
            rasterizer: PDF rasterizer used for vision mode
        """
        self.rasterizer = rasterizer or PDFRasterizer()

    def parse_file(
        self,
        uploaded: UploadedFile,
        file_type: SupportedFileType,
        ai_config: Optional[AIProviderConfig] = None
    ) -> ParsedDocument:
        """
        Extract content from an uploaded file.

        PDFs go through vision mode when the configured model accepts
        images, text mode otherwise. DOCX is always text; JPEG/PNG are
        always vision since they have no text layer to extract.

        Args:
            uploaded: File as uploaded by the user
            file_type: Type resolved by the validator
            ai_config: Provider settings, used to pick the extraction mode

        Returns:
            ParsedDocument in text or vision mode

        Raises:
            ExtractionError: Unsupported type or undecodable content
        """
        model = ai_config.active_model if ai_config else None
        provider = ai_config.provider if ai_config else None
        capabilities = get_model_capabilities(model, provider)

        logger.info(
            f"📄 Parsing {uploaded.filename or 'upload'} "
            f"({file_type.value}, {format_file_size(uploaded.size)}), model={model or 'none'}"
        )

        if file_type is SupportedFileType.PDF:
            if capabilities.supports_vision:
                return self._parse_pdf_as_images(
                    uploaded.content, capabilities.scale, capabilities.max_pages
                )
            return self._parse_pdf_text(uploaded.content)
        if file_type is SupportedFileType.DOCX:
            return self._parse_docx(uploaded.content)
        if file_type.is_image:
            return self._parse_image(uploaded.content, file_type)

        raise ExtractionError(f"Unsupported file type: {file_type}")

    def _parse_pdf_as_images(self, content: bytes, scale: float, max_pages: int) -> ParsedDocument:
        try:
            pages = self.rasterizer.render_pages(content, scale=scale, max_pages=max_pages)
        except (RuntimeError, ValueError) as e:
            raise ExtractionError(f"Failed to render PDF pages: {e}") from e

        if not pages:
            raise ExtractionError("PDF has no pages to render")

        logger.info(f"👁️  Vision mode: {len(pages)} page image(s)")
        return ParsedDocument.from_images(
            images=[page.base64 for page in pages],
            data_urls=[page.data_url for page in pages],
        )

    def _parse_pdf_text(self, content: bytes) -> ParsedDocument:
        try:
            doc = fitz.open(stream=content, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise ExtractionError(f"Failed to read PDF: {e}") from e

        if doc.page_count == 0:
            doc.close()
            raise ExtractionError("PDF has no pages")

        try:
            page_texts = [page.get_text() for page in doc]
        except (RuntimeError, ValueError) as e:
            raise ExtractionError(f"Failed to extract PDF text: {e}") from e
        finally:
            doc.close()

        text = "\n".join(page_texts).strip()
        logger.info(f"📝 Text mode: {len(page_texts)} page(s), {len(text)} characters")
        return ParsedDocument.from_text(text)

    def _parse_docx(self, content: bytes) -> ParsedDocument:
        try:
            doc = Document(io.BytesIO(content))
        except Exception as e:
            raise ExtractionError(f"Failed to read DOCX: {e}") from e

        lines = [para.text for para in doc.paragraphs if para.text.strip()]

        # Resumes often lay out contact details and skills in tables
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(" ".join(cells))

        text = "\n".join(lines).strip()
        logger.info(f"📝 Text mode: DOCX, {len(text)} characters")
        return ParsedDocument.from_text(text)

    def _parse_image(self, content: bytes, file_type: SupportedFileType) -> ParsedDocument:
        try:
            pixmap = fitz.Pixmap(content)
        except Exception as e:
            raise ExtractionError(f"Failed to read image file: {e}") from e

        encoded = base64.b64encode(content).decode("ascii")
        data_url = f"data:{file_type.image_mime_type};base64,{encoded}"
        logger.info(f"👁️  Vision mode: {file_type.value} image {pixmap.width}x{pixmap.height}")
        return ParsedDocument.from_images(images=[encoded], data_urls=[data_url])
