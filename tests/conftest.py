import io
import json
from types import SimpleNamespace

import fitz  # PyMuPDF
import pytest
from docx import Document

from cvenhancer.config.settings import Settings
from cvenhancer.models.ai_config import AIProviderConfig
from cvenhancer.services.config_repository import ConfigRepository


SAMPLE_RESUME = {
    "personalInfo": {
        "name": "Jane Doe",
        "title": "Data Engineer",
        "email": "jane@example.com",
        "phone": "555-0100",
        "location": "Berlin",
    },
    "experience": [
        {
            "company": "Acme",
            "location": "Berlin",
            "title": "Senior Data Engineer",
            "dateRange": "2021 - Present",
            "duties": [
                "Built streaming pipelines processing 2M events per day",
                "Cut warehouse costs by 30%",
                "Mentored four engineers",
                "Migrated batch jobs to Airflow",
                "Owned on-call rotation",
            ],
        },
        {
            "company": "Globex",
            "location": "Munich",
            "title": "Data Engineering Intern",
            "dateRange": "2019 - 2020",
            "duties": ["Wrote ETL scripts"],
        },
        {
            "company": "Initech",
            "location": "Remote",
            "title": "Data Analyst",
            "dateRange": "2018 - 2019",
            "duties": ["Built dashboards", "Automated weekly reports"],
        },
    ],
    "education": [
        {
            "institution": "TU Berlin",
            "degree": "MSc",
            "field": "Computer Science",
            "location": "Berlin",
            "dateRange": "2016 - 2018",
        },
        {
            "institution": "Online Academy",
            "degree": "Certificate",
            "location": "Remote",
            "dateRange": "2015",
        },
    ],
    "skills": [
        {"categoryTitle": "Languages", "skills": ["Python", "SQL", "Scala"]},
        {"categoryTitle": "Tools", "skills": ["Airflow", "Kafka", "dbt"]},
    ],
}


class FakeOpenAIClient:
    """Stands in for ``openai.OpenAI``; records chat.completions.create calls."""

    def __init__(self, content="", error=None, on_request=None):
        self.content = content
        self.error = error
        self.on_request = on_request
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        if self.on_request:
            self.on_request(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(role="assistant", content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeClaudeClient:
    """Stands in for ``anthropic.Anthropic``; records messages.create calls."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.requests = []
        self.messages = SimpleNamespace(create=self._create)

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self.text)])


class FakeOllamaClient:
    """Stands in for ``ollama.Client``; records generate calls."""

    def __init__(self, response=None, error=None, models=None):
        self.response = response or {}
        self.error = error
        self.models = models or []
        self.requests = []

    def generate(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        return self.response

    def list(self):
        if self.error:
            raise self.error
        return {"models": [{"model": name} for name in self.models]}


def make_pdf(pages=1, text="Jane Doe"):
    doc = fitz.open()
    for number in range(pages):
        page = doc.new_page()
        page.insert_text((72, 72), f"{text} - page {number + 1}")
    data = doc.tobytes()
    doc.close()
    return data


def make_png(width=4, height=4):
    pixmap = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
    pixmap.clear_with(255)
    return pixmap.tobytes("png")


def make_docx():
    doc = Document()
    doc.add_paragraph("Jane Doe")
    doc.add_paragraph("Senior Data Engineer at Acme")
    table = doc.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Skills"
    table.cell(0, 1).text = "Python, SQL"
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def sample_resume():
    return json.loads(json.dumps(SAMPLE_RESUME))


@pytest.fixture
def sample_reply(sample_resume):
    return json.dumps(sample_resume)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        state_file=tmp_path / "state.json",
        snapshots_dir=tmp_path / "json_cv_data",
    )


@pytest.fixture
def repository(settings):
    return ConfigRepository.from_settings(settings)


@pytest.fixture
def openai_config():
    return AIProviderConfig(provider="openai", api_keys={"openai": "sk-test"}, models={"openai": "gpt-4"})


@pytest.fixture
def pdf_bytes():
    return make_pdf()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def docx_bytes():
    return make_docx()
