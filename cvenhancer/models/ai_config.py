"""AI provider configuration models."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from cvenhancer.exceptions import ConfigurationError


DEFAULT_OLLAMA_ENDPOINT = "http://localhost:11434"


class AIProvider(str, Enum):
    """Supported enhancement backends."""
    OPENAI = "openai"
    CLAUDE = "claude"
    OLLAMA = "ollama"

    @classmethod
    def parse(cls, value: Any) -> "AIProvider":
        """Resolve a provider tag, mapping the legacy ``chatgpt`` alias to OpenAI."""
        if isinstance(value, cls):
            return value
        tag = str(value or "").strip().lower()
        if tag == "chatgpt":
            return cls.OPENAI
        if tag == "anthropic":
            return cls.CLAUDE
        return cls(tag)

    @property
    def requires_api_key(self) -> bool:
        return self is not AIProvider.OLLAMA


DEFAULT_MODELS: Dict[AIProvider, str] = {
    AIProvider.OPENAI: "gpt-4",
    AIProvider.CLAUDE: "claude-3-5-sonnet-latest",
    AIProvider.OLLAMA: "llama3.1",
}


def _normalize_mapping(mapping: Optional[Dict[str, Any]]) -> Dict[str, str]:
    if mapping is None:
        return {}
    if not isinstance(mapping, dict):
        raise ValueError(f"Expected a provider mapping, got {type(mapping).__name__}")
    normalized: Dict[str, str] = {}
    for key, value in mapping.items():
        # Anything but a string (null, or a has-key flag echoed back) means "not submitted"
        if not isinstance(value, str):
            continue
        normalized[AIProvider.parse(key).value] = value
    return normalized


class AIProviderConfig(BaseModel):
    """
    User-supplied provider settings.

    Older persisted configs stored a single ``apiKey``/``model`` pair for the
    active provider. Those are migrated on load into the per-provider
    ``apiKeys``/``models`` mappings; values already present in the mappings
    take precedence.
    """
    provider: AIProvider = AIProvider.OPENAI
    api_keys: Dict[str, str] = Field(default_factory=dict, alias="apiKeys")
    models: Dict[str, str] = Field(default_factory=dict)
    ollama_endpoint: str = Field(default=DEFAULT_OLLAMA_ENDPOINT, alias="ollamaEndpoint")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def migrate_legacy_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        provider = AIProvider.parse(data.get("provider") or AIProvider.OPENAI)
        data["provider"] = provider

        api_keys = _normalize_mapping(data.pop("api_keys", None))
        api_keys.update(_normalize_mapping(data.pop("apiKeys", None)))
        models = _normalize_mapping(data.pop("models", None))

        legacy_key = data.pop("apiKey", None)
        legacy_key = data.pop("api_key", None) or legacy_key
        if isinstance(legacy_key, str) and legacy_key and provider.requires_api_key:
            api_keys.setdefault(provider.value, legacy_key)

        legacy_model = data.pop("model", None)
        if isinstance(legacy_model, str) and legacy_model:
            models.setdefault(provider.value, legacy_model)

        data["apiKeys"] = api_keys
        data["models"] = models
        if "ollama_endpoint" in data and "ollamaEndpoint" not in data:
            data["ollamaEndpoint"] = data.pop("ollama_endpoint")
        return data

    @field_validator("ollama_endpoint")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return (value or DEFAULT_OLLAMA_ENDPOINT).rstrip("/")

    def api_key_for(self, provider: Optional[AIProvider] = None) -> Optional[str]:
        provider = provider or self.provider
        key = self.api_keys.get(provider.value)
        return key.strip() if key and key.strip() else None

    def model_for(self, provider: Optional[AIProvider] = None) -> Optional[str]:
        provider = provider or self.provider
        model = self.models.get(provider.value)
        return model.strip() if model and model.strip() else None

    @property
    def active_model(self) -> str:
        """Model that will actually be called: the configured one, else the provider default."""
        return self.model_for(self.provider) or DEFAULT_MODELS[self.provider]

    def require_api_key(self) -> Optional[str]:
        """
        Return the active provider's API key.

        Raises:
            ConfigurationError: If the provider needs a key and none is set
        """
        key = self.api_key_for()
        if self.provider.requires_api_key and not key:
            raise ConfigurationError("Please configure AI provider settings first")
        return key

    def to_storage(self) -> Dict[str, Any]:
        """Serialize in the persisted (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True)

    def to_public(self) -> Dict[str, Any]:
        """Storage shape without secrets: ``apiKeys`` becomes ``hasApiKey`` flags."""
        data = self.to_storage()
        data.pop("apiKeys", None)
        data["hasApiKey"] = {provider.value: self.api_key_for(provider) is not None for provider in AIProvider}
        return data

    def with_stored_keys(self, stored: Optional["AIProviderConfig"]) -> "AIProviderConfig":
        """Fill API keys this config leaves out from a previously stored config."""
        if stored is None:
            return self
        return self.model_copy(update={"api_keys": {**stored.api_keys, **self.api_keys}})
