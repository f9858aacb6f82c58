"""
Model capability heuristics based on the model name.

Nothing here asks the provider what a model can do; the name is the only
input, so a vision model with an unusual name is treated as text-only.
"""

from typing import NamedTuple, Optional

from cvenhancer.models.ai_config import AIProvider


VL_MODEL_PATTERNS = [
    # Ollama VL models
    "llava",
    "bakllava",
    "llava-llama3",
    "llava-phi3",
    "moondream",
    "cogvlm",
    "qwen-vl",
    "qwen2-vl",
    "qwen3-vl",
    "minicpm-v",
    "internvl",

    # OpenAI VL models
    "gpt-4-vision",
    "gpt-4o",
    "gpt-4-turbo",

    # Claude 3 family all accept images
    "claude-3",

    # Generic markers
    "vision",
    "-vl",
    "_vl",
]

DEFAULT_SCALE = 2.0
DEFAULT_MAX_PAGES = 3


class ModelCapabilities(NamedTuple):
    supports_vision: bool
    scale: float
    max_pages: int


def is_vision_model(model_name: Optional[str], provider: Optional[AIProvider] = None) -> bool:
    """
    Check if a model accepts image input.

    Args:
        model_name: Model name as configured by the user
        provider: Provider the model belongs to (currently unused)

    Returns:
        True if the name contains a known vision pattern
    """
    if not model_name:
        return False

    lower_name = model_name.lower()
    return any(pattern in lower_name for pattern in VL_MODEL_PATTERNS)


def get_recommended_scale(model_name: Optional[str]) -> float:
    """Rasterization scale: lower for small models, higher for large ones."""
    if not model_name:
        return DEFAULT_SCALE

    lower_name = model_name.lower()
    if "mini" in lower_name or "7b" in lower_name:
        return 1.5
    if "70b" in lower_name or "large" in lower_name:
        return 2.5
    return DEFAULT_SCALE


def get_max_pages(model_name: Optional[str]) -> int:
    """Maximum number of PDF pages to send in vision mode."""
    if not model_name:
        return DEFAULT_MAX_PAGES

    lower_name = model_name.lower()
    if "mini" in lower_name or "7b" in lower_name:
        return 2
    if "8b" in lower_name or "13b" in lower_name:
        return 3
    return 4


def get_model_capabilities(
    model_name: Optional[str],
    provider: Optional[AIProvider] = None
) -> ModelCapabilities:
    return ModelCapabilities(
        supports_vision=is_vision_model(model_name, provider),
        scale=get_recommended_scale(model_name),
        max_pages=get_max_pages(model_name),
    )
