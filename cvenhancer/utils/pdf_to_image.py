"""
PDF page rasterization for vision-capable models.
"""

import base64
from typing import List, NamedTuple

import fitz  # PyMuPDF

from .logger import get_logger

logger = get_logger(__name__)


class RenderedPage(NamedTuple):
    """One rasterized page as PNG."""
    page_number: int
    width: int
    height: int
    png_bytes: bytes

    @property
    def base64(self) -> str:
        """Provider payload form, without the data-URL prefix."""
        return base64.b64encode(self.png_bytes).decode("ascii")

    @property
    def data_url(self) -> str:
        return f"data:image/png;base64,{self.base64}"


class PDFRasterizer:
    """Render PDF pages to PNG bitmaps with PyMuPDF."""

    def render_pages(self, pdf_bytes: bytes, scale: float = 2.0, max_pages: int = 3) -> List[RenderedPage]:
        """
        Render the first pages of a PDF.

        Pages are rendered in document order starting at page 1. Each
        bitmap's size is the page's intrinsic rect multiplied by ``scale``.

        Args:
            pdf_bytes: Raw PDF content
            scale: Zoom factor applied to both axes
            max_pages: Upper bound on the number of rendered pages

        Returns:
            List of rendered pages, at most ``max_pages`` long

        Raises:
            RuntimeError: PyMuPDF's FileDataError for unreadable input
        """
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        try:
            pages_to_process = min(doc.page_count, max_pages)
            matrix = fitz.Matrix(scale, scale)
            pages = []

            for index in range(pages_to_process):
                page = doc.load_page(index)
                pixmap = page.get_pixmap(matrix=matrix, alpha=False)
                pages.append(RenderedPage(
                    page_number=index + 1,
                    width=pixmap.width,
                    height=pixmap.height,
                    png_bytes=pixmap.tobytes("png"),
                ))

            logger.info(
                f"🖼️  Rendered {len(pages)}/{doc.page_count} PDF page(s) at scale {scale}"
            )
            return pages
        finally:
            doc.close()
