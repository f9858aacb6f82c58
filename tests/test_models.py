import pytest
from pydantic import ValidationError

from cvenhancer.exceptions import ConfigurationError, InvalidTransitionError
from cvenhancer.models.ai_config import AIProvider, AIProviderConfig, DEFAULT_OLLAMA_ENDPOINT
from cvenhancer.models.document import ParsedDocument, SupportedFileType
from cvenhancer.models.resume import CanonicalResumeData
from cvenhancer.models.resume_config import EducationPlacement, ResumeRenderConfig
from cvenhancer.models.status import ProcessingStatus, check_transition, is_busy


def test_legacy_single_key_config_is_migrated():
    config = AIProviderConfig.model_validate({"provider": "claude", "apiKey": "sk-ant", "model": "claude-3-haiku"})

    assert config.provider == AIProvider.CLAUDE
    assert config.api_keys == {"claude": "sk-ant"}
    assert config.models == {"claude": "claude-3-haiku"}
    assert config.active_model == "claude-3-haiku"


def test_chatgpt_alias_maps_to_openai():
    config = AIProviderConfig.model_validate({"provider": "chatgpt", "apiKey": "sk-test"})
    assert config.provider == AIProvider.OPENAI
    assert config.api_key_for() == "sk-test"


def test_per_provider_mapping_wins_over_legacy_fields():
    config = AIProviderConfig.model_validate({
        "provider": "openai",
        "apiKeys": {"openai": "sk-new"},
        "apiKey": "sk-old",
        "models": {"openai": "gpt-4o"},
        "model": "gpt-4",
    })
    assert config.api_key_for() == "sk-new"
    assert config.active_model == "gpt-4o"


def test_storage_round_trip_keeps_camel_case():
    config = AIProviderConfig(provider="ollama", models={"ollama": "llava:7b"}, ollama_endpoint="http://gpu:11434/")
    stored = config.to_storage()

    assert stored["provider"] == "ollama"
    assert stored["ollamaEndpoint"] == "http://gpu:11434"
    assert AIProviderConfig.model_validate(stored) == config


def test_missing_api_key_is_a_configuration_error():
    config = AIProviderConfig(provider="openai", api_keys={"openai": "   "})
    with pytest.raises(ConfigurationError):
        config.require_api_key()


def test_ollama_needs_no_api_key():
    config = AIProviderConfig(provider="ollama")
    assert config.require_api_key() is None
    assert config.ollama_endpoint == DEFAULT_OLLAMA_ENDPOINT


def test_unknown_provider_is_rejected():
    with pytest.raises(ValidationError):
        AIProviderConfig.model_validate({"provider": "gemini"})


def test_resume_accepts_alternate_field_names():
    resume = CanonicalResumeData.model_validate({
        "personalInfo": {"name": "Jane", "linkedin": None},
        "experience": [{"company": "Acme", "title": "Engineer", "dates": "2020", "duties": ["Did things"]}],
        "education": [{"university": "TU Berlin", "fieldOfStudy": "CS", "date": "2018"}],
        "skills": [{"title": "Languages", "skills": ["Python"]}],
    })

    assert resume.experience[0].date_range == "2020"
    assert resume.education[0].institution == "TU Berlin"
    assert resume.education[0].field == "CS"
    assert resume.skills[0].category_title == "Languages"

    data = resume.to_json_dict()
    assert data["experience"][0]["dateRange"] == "2020"
    assert data["skills"][0]["categoryTitle"] == "Languages"
    assert "linkedin" not in data["personalInfo"]


def test_resume_rejects_wrong_shapes():
    with pytest.raises(ValidationError):
        CanonicalResumeData.model_validate({"experience": "none"})


def test_parsed_document_modes_are_exclusive():
    assert ParsedDocument.from_text("hello").text == "hello"
    with pytest.raises(ValidationError):
        ParsedDocument(is_vision_mode=True, text="hello", images=["a"], data_urls=["b"])
    with pytest.raises(ValidationError):
        ParsedDocument.from_images(images=["a", "b"], data_urls=["x"])
    with pytest.raises(ValidationError):
        ParsedDocument(is_vision_mode=False, images=["a"], data_urls=["b"])


def test_render_config_fills_missing_sections():
    config = ResumeRenderConfig.model_validate({"education": {"maxEntries": 1}})

    assert config.education.placement == EducationPlacement.MAIN_CONTENT
    assert config.pdf.single_page_export is False
    assert config.to_storage()["education"]["maxEntries"] == 1


def test_render_config_bounds():
    with pytest.raises(ValidationError):
        ResumeRenderConfig.model_validate({"experience": {"maxJobs": 0}})


def test_status_transitions():
    check_transition(ProcessingStatus.IDLE, ProcessingStatus.PARSING)
    check_transition(ProcessingStatus.PARSING, ProcessingStatus.ENHANCING)
    check_transition(ProcessingStatus.ENHANCING, ProcessingStatus.COMPLETED)
    check_transition(ProcessingStatus.ERROR, ProcessingStatus.PARSING)

    with pytest.raises(InvalidTransitionError):
        check_transition(ProcessingStatus.IDLE, ProcessingStatus.ENHANCING)
    with pytest.raises(InvalidTransitionError):
        check_transition(ProcessingStatus.COMPLETED, ProcessingStatus.ERROR)


def test_busy_statuses():
    assert is_busy(ProcessingStatus.PARSING)
    assert is_busy(ProcessingStatus.ENHANCING)
    assert not is_busy(ProcessingStatus.COMPLETED)


def test_only_images_are_image_types():
    assert SupportedFileType.JPEG.is_image
    assert SupportedFileType.PNG.is_image
    assert not SupportedFileType.PDF.is_image
    assert not SupportedFileType.DOCX.is_image


def test_active_model_falls_back_to_provider_default():
    assert AIProviderConfig(provider="claude").active_model == "claude-3-5-sonnet-latest"
    assert AIProviderConfig(provider="openai", models={"openai": "  "}).active_model == "gpt-4"
    assert AIProviderConfig(provider="ollama").active_model == "llama3.1"


def test_public_shape_reports_key_presence_only():
    config = AIProviderConfig(provider="claude", api_keys={"claude": "sk-ant", "openai": " "})
    data = config.to_public()

    assert "apiKeys" not in data
    assert "sk-ant" not in str(data)
    assert data["hasApiKey"] == {"openai": False, "claude": True, "ollama": False}


def test_key_flags_are_not_taken_as_keys():
    config = AIProviderConfig.model_validate({"provider": "openai", "apiKeys": {"openai": True, "claude": None}})
    assert config.api_keys == {}
    assert config.api_key_for() is None


def test_with_stored_keys_fills_only_missing_keys():
    stored = AIProviderConfig(provider="openai", api_keys={"openai": "sk-old", "claude": "sk-ant"})
    submitted = AIProviderConfig.model_validate({"provider": "claude", "apiKeys": {"openai": "sk-new"}})

    merged = submitted.with_stored_keys(stored)

    assert merged.api_keys == {"openai": "sk-new", "claude": "sk-ant"}
    assert merged.provider == AIProvider.CLAUDE
    assert submitted.with_stored_keys(None) is submitted
