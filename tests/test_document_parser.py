import base64

import pytest

from conftest import make_pdf
from cvenhancer.exceptions import ExtractionError
from cvenhancer.models.ai_config import AIProviderConfig
from cvenhancer.models.document import SupportedFileType, UploadedFile
from cvenhancer.services.document_parser import DocumentParser
from cvenhancer.utils.pdf_to_image import PDFRasterizer


def _config(model, provider="ollama"):
    return AIProviderConfig(provider=provider, models={provider: model}, api_keys={provider: "key"})


def test_pdf_with_text_model_extracts_text(pdf_bytes):
    parsed = DocumentParser().parse_file(
        UploadedFile(content=pdf_bytes, filename="cv.pdf"), SupportedFileType.PDF, _config("llama3.1:8b")
    )

    assert not parsed.is_vision_mode
    assert "Jane Doe" in parsed.text
    assert parsed.images == []


def test_pdf_without_config_uses_text_mode(pdf_bytes):
    parsed = DocumentParser().parse_file(UploadedFile(content=pdf_bytes), SupportedFileType.PDF)
    assert not parsed.is_vision_mode


def test_pdf_with_vision_model_is_rasterized_and_capped():
    pdf = make_pdf(pages=5)
    parsed = DocumentParser().parse_file(
        UploadedFile(content=pdf, filename="cv.pdf"), SupportedFileType.PDF, _config("llava:7b")
    )

    assert parsed.is_vision_mode
    assert parsed.text is None
    assert len(parsed.images) == 2
    assert all(url.startswith("data:image/png;base64,") for url in parsed.data_urls)
    assert parsed.data_urls[0].endswith(parsed.images[0])
    assert base64.b64decode(parsed.images[0]).startswith(b"\x89PNG")


def test_short_pdf_renders_every_page():
    parsed = DocumentParser().parse_file(
        UploadedFile(content=make_pdf(pages=2)), SupportedFileType.PDF, _config("gpt-4o", "openai")
    )
    assert len(parsed.images) == 2


def test_docx_extracts_paragraphs_and_tables(docx_bytes):
    parsed = DocumentParser().parse_file(
        UploadedFile(content=docx_bytes, filename="cv.docx"), SupportedFileType.DOCX, _config("llava:7b")
    )

    assert not parsed.is_vision_mode
    assert "Senior Data Engineer at Acme" in parsed.text
    assert "Skills Python, SQL" in parsed.text


def test_image_is_always_vision_mode(png_bytes):
    parsed = DocumentParser().parse_file(
        UploadedFile(content=png_bytes, filename="scan.png"), SupportedFileType.PNG, _config("llama3.1:8b")
    )

    assert parsed.is_vision_mode
    assert parsed.images == [base64.b64encode(png_bytes).decode("ascii")]
    assert parsed.data_urls[0].startswith("data:image/png;base64,")


def test_jpeg_data_url_uses_jpeg_mime(png_bytes):
    parsed = DocumentParser().parse_file(UploadedFile(content=png_bytes), SupportedFileType.JPEG)
    assert parsed.data_urls[0].startswith("data:image/jpeg;base64,")


@pytest.mark.parametrize("model", ["llama3.1:8b", "llava:7b"])
def test_corrupt_pdf_raises_extraction_error(model):
    with pytest.raises(ExtractionError):
        DocumentParser().parse_file(
            UploadedFile(content=b"this is not a pdf"), SupportedFileType.PDF, _config(model)
        )


def test_corrupt_docx_raises_extraction_error():
    with pytest.raises(ExtractionError):
        DocumentParser().parse_file(UploadedFile(content=b"not a zip"), SupportedFileType.DOCX)


def test_corrupt_image_raises_extraction_error():
    with pytest.raises(ExtractionError):
        DocumentParser().parse_file(UploadedFile(content=b"not an image"), SupportedFileType.PNG)


def test_rasterizer_scales_page_size():
    pdf = make_pdf(pages=1)
    small = PDFRasterizer().render_pages(pdf, scale=1.0, max_pages=1)[0]
    large = PDFRasterizer().render_pages(pdf, scale=2.0, max_pages=1)[0]

    assert small.page_number == 1
    assert large.width == pytest.approx(small.width * 2, abs=2)
    assert large.height == pytest.approx(small.height * 2, abs=2)


def test_claude_without_model_uses_default_vision_model(pdf_bytes):
    config = AIProviderConfig(provider="claude", api_keys={"claude": "sk-ant"})

    parsed = DocumentParser().parse_file(UploadedFile(content=pdf_bytes), SupportedFileType.PDF, config)

    assert parsed.is_vision_mode
    assert len(parsed.images) == 1


def test_openai_without_model_uses_default_text_model(pdf_bytes):
    config = AIProviderConfig(provider="openai", api_keys={"openai": "sk-test"})

    parsed = DocumentParser().parse_file(UploadedFile(content=pdf_bytes), SupportedFileType.PDF, config)

    assert not parsed.is_vision_mode
    assert "Jane Doe" in parsed.text
