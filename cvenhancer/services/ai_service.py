"""
AI Service for resume enhancement with OpenAI, Claude (Anthropic), and Ollama.

Each provider is an ``EnhancementBackend``: it builds the SDK request for a
parsed document, sends it, and pulls the raw reply text out of the SDK
response. ``AIService`` is written once against that interface and turns
the reply into ``CanonicalResumeData``.
"""

from abc import ABC, abstractmethod
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Type

import anthropic
import httpx
import ollama
import openai
from pydantic import ValidationError

from cvenhancer.config.settings import GenerationSettings, Settings
from cvenhancer.exceptions import ConfigurationError, ProviderError, ResponseFormatError
from cvenhancer.models.ai_config import DEFAULT_MODELS, AIProvider, AIProviderConfig
from cvenhancer.models.document import ParsedDocument
from cvenhancer.models.resume import CanonicalResumeData
from cvenhancer.models.resume_config import ResumeRenderConfig
from cvenhancer.services.prompts import (
    OLLAMA_JSON_PROMPT,
    RESUME_ENHANCEMENT_PROMPT,
    build_user_content,
)
from cvenhancer.utils.json_extraction import sanitize_response
from cvenhancer.utils.logger import get_logger


logger = get_logger(__name__)


def _status_text(status_code: Optional[int]) -> str:
    if status_code is None:
        return "Unknown status"
    try:
        return f"{status_code} {HTTPStatus(status_code).phrase}"
    except ValueError:
        return str(status_code)


def _field(obj: Any, name: str) -> Any:
    """Read a field from an SDK response that may be a dict or a model."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _media_type(data_url: str) -> str:
    # data:image/png;base64,....
    return data_url.split(";", 1)[0][len("data:"):] or "image/png"


class EnhancementBackend(ABC):
    """One provider's request shaping and response extraction."""

    provider: AIProvider
    default_model: str
    display_name: str

    def __init__(
        self,
        ai_config: AIProviderConfig,
        generation: GenerationSettings,
        timeout: Optional[float] = None,
        client: Any = None
    ):
        """
        Initialize backend.

        Args:
            ai_config: User provider settings
            generation: Sampling parameters from application settings
            timeout: Optional request timeout in seconds
            client: Pre-built SDK client (created lazily when omitted)
        """
        self.ai_config = ai_config
        self.generation = generation
        self.timeout = timeout
        self._client = client

    @property
    def model(self) -> str:
        return self.ai_config.model_for(self.provider) or self.default_model

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _client_kwargs(self) -> Dict[str, Any]:
        # No automatic retry: a failure goes straight back to the operator
        kwargs: Dict[str, Any] = {"max_retries": 0}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs

    @abstractmethod
    def _create_client(self) -> Any:
        """Build the SDK client."""

    @abstractmethod
    def build_request(
        self,
        parsed: ParsedDocument,
        job_title: Optional[str] = None,
        render_config: Optional[ResumeRenderConfig] = None
    ) -> Dict[str, Any]:
        """Keyword arguments for the SDK call."""

    @abstractmethod
    def send(self, request: Dict[str, Any]) -> Any:
        """Perform the SDK call, mapping SDK failures to ProviderError."""

    @abstractmethod
    def parse_response(self, response: Any) -> str:
        """Raw reply text from the SDK response."""

    def enhance(
        self,
        parsed: ParsedDocument,
        job_title: Optional[str] = None,
        render_config: Optional[ResumeRenderConfig] = None
    ) -> str:
        """
        Send the document to the provider and return the raw reply.

        Raises:
            ProviderError: Non-success status or unreachable endpoint
            ResponseFormatError: Provider replied with nothing
        """
        request = self.build_request(parsed, job_title, render_config)
        mode = f"vision, {len(parsed.images)} image(s)" if parsed.is_vision_mode else "text"

        logger.info(f"\n{'='*70}")
        logger.info(f"🤖 AI REQUEST - ENHANCE RESUME ({self.provider.value}/{self.model}, {mode})")
        if job_title:
            logger.info(f"Target role: {job_title}")
        logger.info(f"{'='*70}")

        response = self.send(request)
        text = self.parse_response(response)

        if not text or not text.strip():
            raise ResponseFormatError(f"{self.display_name} returned an empty response")

        logger.info(f"✅ AI RESPONSE ({len(text)} chars)")
        return text


class OpenAIBackend(EnhancementBackend):
    """Chat Completions with a JSON-object response format."""

    provider = AIProvider.OPENAI
    default_model = DEFAULT_MODELS[AIProvider.OPENAI]
    display_name = "OpenAI"

    def _create_client(self) -> Any:
        return openai.OpenAI(api_key=self.ai_config.require_api_key(), **self._client_kwargs())

    def build_request(
        self,
        parsed: ParsedDocument,
        job_title: Optional[str] = None,
        render_config: Optional[ResumeRenderConfig] = None
    ) -> Dict[str, Any]:
        user_text = build_user_content(parsed, job_title, render_config)

        if parsed.is_vision_mode:
            user_content: Any = [{"type": "text", "text": user_text}]
            user_content.extend(
                {"type": "image_url", "image_url": {"url": url}} for url in parsed.data_urls
            )
        else:
            user_content = user_text

        g = self.generation
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": RESUME_ENHANCEMENT_PROMPT},
                {"role": "user", "content": user_content},
            ],
            "max_tokens": g.max_tokens,
            "response_format": {"type": "json_object"},
        }
        optional = {
            "temperature": g.temperature,
            "top_p": g.top_p,
            "frequency_penalty": g.frequency_penalty,
            "presence_penalty": g.presence_penalty,
            # OpenAI accepts at most 4 stop sequences
            "stop": g.stop_sequences[:4] or None,
        }
        request.update({key: value for key, value in optional.items() if value is not None})
        return request

    def send(self, request: Dict[str, Any]) -> Any:
        try:
            return self.client.chat.completions.create(**request)
        except openai.APIStatusError as e:
            raise ProviderError(
                f"OpenAI API error: {_status_text(e.status_code)}",
                provider=self.provider.value,
                status_code=e.status_code,
                body=e.message,
            ) from e
        except openai.APIConnectionError as e:
            raise ProviderError(
                f"OpenAI API unreachable: {e}", provider=self.provider.value
            ) from e

    def parse_response(self, response: Any) -> str:
        choices = _field(response, "choices") or []
        if not choices:
            return ""
        message = _field(choices[0], "message")
        return _field(message, "content") or ""


class ClaudeBackend(EnhancementBackend):
    """
    Messages API with an assistant prefill of ``{``.

    The system prompt is folded into the user turn; the reply is the
    continuation of the prefill, so ``{`` is put back in front of it.
    """

    provider = AIProvider.CLAUDE
    default_model = DEFAULT_MODELS[AIProvider.CLAUDE]
    display_name = "Claude"

    PREFILL = "{"

    def _create_client(self) -> Any:
        return anthropic.Anthropic(api_key=self.ai_config.require_api_key(), **self._client_kwargs())

    def build_request(
        self,
        parsed: ParsedDocument,
        job_title: Optional[str] = None,
        render_config: Optional[ResumeRenderConfig] = None
    ) -> Dict[str, Any]:
        user_text = f"{RESUME_ENHANCEMENT_PROMPT}\n\n{build_user_content(parsed, job_title, render_config)}"

        if parsed.is_vision_mode:
            user_content: Any = [
                {
                    "type": "image",
                    "source": {"type": "base64", "media_type": _media_type(url), "data": image},
                }
                for image, url in zip(parsed.images, parsed.data_urls)
            ]
            user_content.append({"type": "text", "text": user_text})
        else:
            user_content = user_text

        g = self.generation
        request: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": g.max_tokens,
            "messages": [
                {"role": "user", "content": user_content},
                {"role": "assistant", "content": self.PREFILL},
            ],
        }

        # Claude rejects temperature and top_p together
        if g.top_p is not None:
            request["top_p"] = g.top_p
        elif g.temperature is not None:
            request["temperature"] = g.temperature

        # Whitespace-only stop sequences are rejected by the API
        stop_sequences = [stop for stop in g.stop_sequences if stop.strip()]
        if stop_sequences:
            request["stop_sequences"] = stop_sequences
        return request

    def send(self, request: Dict[str, Any]) -> Any:
        try:
            return self.client.messages.create(**request)
        except anthropic.APIStatusError as e:
            raise ProviderError(
                f"Claude API error: {_status_text(e.status_code)}",
                provider=self.provider.value,
                status_code=e.status_code,
                body=e.message,
            ) from e
        except anthropic.APIConnectionError as e:
            raise ProviderError(
                f"Claude API unreachable: {e}", provider=self.provider.value
            ) from e

    def parse_response(self, response: Any) -> str:
        blocks = _field(response, "content") or []
        text = "".join(
            _field(block, "text") or ""
            for block in blocks
            if (_field(block, "type") or "text") == "text"
        )
        if not text.strip():
            return ""
        if text.lstrip().startswith(self.PREFILL):
            return text
        return self.PREFILL + text


class OllamaBackend(EnhancementBackend):
    """Local ``/api/generate`` call with ``format: json`` and a skeleton prompt."""

    provider = AIProvider.OLLAMA
    default_model = DEFAULT_MODELS[AIProvider.OLLAMA]
    display_name = "Ollama"

    # Some models put the answer somewhere other than "response"
    RESPONSE_FIELDS = ("response", "thinking", "message", "content")

    @property
    def endpoint(self) -> str:
        return self.ai_config.ollama_endpoint

    def _create_client(self) -> Any:
        kwargs: Dict[str, Any] = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return ollama.Client(host=self.endpoint, **kwargs)

    def build_request(
        self,
        parsed: ParsedDocument,
        job_title: Optional[str] = None,
        render_config: Optional[ResumeRenderConfig] = None
    ) -> Dict[str, Any]:
        g = self.generation
        options = {
            "temperature": g.temperature,
            "top_p": g.top_p,
            "num_predict": g.max_tokens,
            "repeat_penalty": g.repeat_penalty,
            "presence_penalty": g.presence_penalty,
            "stop": g.stop_sequences or None,
        }
        request: Dict[str, Any] = {
            "model": self.model,
            "prompt": f"{OLLAMA_JSON_PROMPT}\n\n{build_user_content(parsed, job_title, render_config)}",
            "stream": False,
            "format": "json",
            "options": {key: value for key, value in options.items() if value is not None},
        }
        if parsed.is_vision_mode:
            request["images"] = list(parsed.images)
        return request

    def send(self, request: Dict[str, Any]) -> Any:
        try:
            return self.client.generate(**request)
        except ollama.ResponseError as e:
            raise ProviderError(
                f"Ollama API error: {_status_text(e.status_code)}: {e.error}",
                provider=self.provider.value,
                status_code=e.status_code,
                body=e.error,
            ) from e
        except (ConnectionError, httpx.TransportError) as e:
            raise ProviderError(
                f"Ollama API unreachable at {self.endpoint}: {e}", provider=self.provider.value
            ) from e

    def parse_response(self, response: Any) -> str:
        for name in self.RESPONSE_FIELDS:
            value = _field(response, name)
            if isinstance(value, str) and value.strip():
                return value
        return ""


BACKENDS: Dict[AIProvider, Type[EnhancementBackend]] = {
    AIProvider.OPENAI: OpenAIBackend,
    AIProvider.CLAUDE: ClaudeBackend,
    AIProvider.OLLAMA: OllamaBackend,
}


class AIService:
    """Resume enhancement against the configured provider."""

    def __init__(self, settings: Settings, clients: Optional[Dict[AIProvider, Any]] = None):
        """
        Initialize AI Service.

        Args:
            settings: Application settings (generation parameters, timeout)
            clients: Optional pre-built SDK clients keyed by provider
        """
        self.settings = settings
        self.clients = clients or {}

    def get_backend(self, ai_config: AIProviderConfig) -> EnhancementBackend:
        backend_cls = BACKENDS.get(ai_config.provider)
        if backend_cls is None:
            raise ConfigurationError(f"Unsupported AI provider: {ai_config.provider}")
        return backend_cls(
            ai_config,
            self.settings.generation,
            timeout=self.settings.request_timeout,
            client=self.clients.get(ai_config.provider),
        )

    def enhance_resume(
        self,
        parsed: ParsedDocument,
        ai_config: Optional[AIProviderConfig],
        job_title: Optional[str] = None,
        render_config: Optional[ResumeRenderConfig] = None
    ) -> CanonicalResumeData:
        """
        Enhance a parsed resume into the canonical schema.

        Args:
            parsed: Extracted text or page images
            ai_config: Provider settings
            job_title: Optional target role woven into the prompt
            render_config: Optional render settings used as writing guidelines

        Returns:
            Normalized resume data

        Raises:
            ConfigurationError: Missing provider config or API key
            ProviderError: Provider failed or was unreachable
            ResponseFormatError: Reply could not be turned into a resume
        """
        if ai_config is None:
            raise ConfigurationError("Please configure AI provider settings first")
        ai_config.require_api_key()

        backend = self.get_backend(ai_config)
        raw = backend.enhance(parsed, job_title, render_config)
        data = sanitize_response(raw)

        try:
            resume = CanonicalResumeData.model_validate(data)
        except ValidationError as e:
            raise ResponseFormatError(f"AI response does not match the resume schema: {e}") from e

        logger.info(
            f"✅ Resume enhanced: {len(resume.experience)} job(s), "
            f"{len(resume.education)} education entr(ies), {len(resume.skills)} skill categor(ies)"
        )
        return resume


class OllamaModelService:
    """Enumerate models available on a local Ollama server."""

    def __init__(self, settings: Settings, client: Any = None):
        self.settings = settings
        self._client = client

    def list_models(self, endpoint: Optional[str] = None) -> List[str]:
        """
        List model names from ``{endpoint}/api/tags``.

        Raises:
            ProviderError: Server unreachable or returned an error
        """
        endpoint = (endpoint or self.settings.default_ollama_endpoint).rstrip("/")
        client = self._client or ollama.Client(host=endpoint)

        try:
            response = client.list()
        except ollama.ResponseError as e:
            raise ProviderError(
                f"Ollama API error: {_status_text(e.status_code)}: {e.error}",
                provider=AIProvider.OLLAMA.value,
                status_code=e.status_code,
                body=e.error,
            ) from e
        except (ConnectionError, httpx.TransportError) as e:
            raise ProviderError(
                f"Ollama API unreachable at {endpoint}: {e}", provider=AIProvider.OLLAMA.value
            ) from e

        names = []
        for entry in _field(response, "models") or []:
            name = _field(entry, "model") or _field(entry, "name")
            if name:
                names.append(name)
        logger.info(f"Found {len(names)} Ollama model(s) at {endpoint}")
        return names
