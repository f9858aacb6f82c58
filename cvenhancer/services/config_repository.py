"""
Local key-value persistence for provider settings, render settings, and UI state.

Everything lives in one JSON state file with one top-level key per concern.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from cvenhancer.config.settings import Settings
from cvenhancer.exceptions import ConfigurationError
from cvenhancer.models.ai_config import AIProviderConfig
from cvenhancer.models.resume_config import ResumeRenderConfig
from cvenhancer.utils.file_utils import load_json, load_json_or_default, save_json
from cvenhancer.utils.logger import get_logger

logger = get_logger(__name__)


AI_CONFIG_KEY = "cvenhancer:aiConfig"
RESUME_CONFIG_KEY = "cvenhancer:resumeConfig"
APP_STATE_KEY = "cvenhancer:app"


class AppState(BaseModel):
    """Small bits of UI state that survive restarts."""
    job_title: str = Field(default="", alias="jobTitle")
    selected_json_file: Optional[str] = Field(default=None, alias="selectedJsonFile")

    class Config:
        populate_by_name = True
        extra = "ignore"


class ConfigRepository:
    """Explicit load/save contract over the persisted state file."""

    def __init__(self, state_file: Path, resume_config_template: Path, default_ollama_endpoint: Optional[str] = None):
        """
        Initialize repository.

        Args:
            state_file: JSON file holding all persisted keys
            resume_config_template: Bundled default render config
            default_ollama_endpoint: Endpoint used when a stored config has none
        """
        self.state_file = Path(state_file)
        self.resume_config_template = Path(resume_config_template)
        self.default_ollama_endpoint = default_ollama_endpoint

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfigRepository":
        return cls(
            state_file=settings.state_file,
            resume_config_template=settings.resume_config_template,
            default_ollama_endpoint=settings.default_ollama_endpoint,
        )

    def _read_state(self) -> Dict[str, Any]:
        return load_json_or_default(self.state_file, {})

    def _write_key(self, key: str, value: Any) -> None:
        state = self._read_state()
        state[key] = value
        save_json(state, self.state_file)

    # AI provider settings

    def load_ai_config(self) -> Optional[AIProviderConfig]:
        """
        Load provider settings, migrating legacy single key/model shapes.

        Returns:
            Stored config, or None if the user never configured a provider

        Raises:
            ConfigurationError: The stored config is malformed
        """
        stored = self._read_state().get(AI_CONFIG_KEY)
        if not stored:
            return None
        if not isinstance(stored, dict):
            raise ConfigurationError("Stored AI provider settings are corrupt; please configure them again")
        if self.default_ollama_endpoint and not stored.get("ollamaEndpoint"):
            stored = {**stored, "ollamaEndpoint": self.default_ollama_endpoint}
        try:
            return AIProviderConfig.model_validate(stored)
        except ValidationError as e:
            raise ConfigurationError(f"Stored AI provider settings are invalid: {e}") from e

    def save_ai_config(self, config: AIProviderConfig) -> None:
        self._write_key(AI_CONFIG_KEY, config.to_storage())
        logger.info(f"Saved AI provider settings (provider={config.provider.value})")

    # Render settings

    def load_default_resume_config(self) -> ResumeRenderConfig:
        return ResumeRenderConfig.model_validate(load_json(self.resume_config_template))

    def load_resume_config(self) -> ResumeRenderConfig:
        """Bundled defaults overridden section by section by the persisted copy."""
        defaults = self.load_default_resume_config().to_storage()
        stored = self._read_state().get(RESUME_CONFIG_KEY) or {}
        merged = {
            section: {**values, **(stored.get(section) or {})}
            for section, values in defaults.items()
        }
        return ResumeRenderConfig.model_validate(merged)

    def save_resume_config(self, config: ResumeRenderConfig) -> None:
        self._write_key(RESUME_CONFIG_KEY, config.to_storage())
        logger.info("Saved resume render settings")

    def reset_resume_config(self) -> ResumeRenderConfig:
        config = self.load_default_resume_config()
        self.save_resume_config(config)
        return config

    # UI state

    def load_app_state(self) -> AppState:
        return AppState.model_validate(self._read_state().get(APP_STATE_KEY) or {})

    def save_app_state(self, app_state: AppState) -> None:
        self._write_key(APP_STATE_KEY, app_state.model_dump(by_alias=True))

    def update_app_state(self, **changes: Any) -> AppState:
        app_state = self.load_app_state().model_copy(update=changes)
        self.save_app_state(app_state)
        return app_state
