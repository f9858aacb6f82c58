"""
Configuration settings management with environment variable support.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

from cvenhancer.models.ai_config import DEFAULT_OLLAMA_ENDPOINT


# Load environment variables
load_dotenv()

BUNDLED_RESUME_CONFIG = Path(__file__).parent / "resume_config.json"


class GenerationSettings(BaseModel):
    """Sampling parameters passed verbatim to the AI providers."""
    temperature: Optional[float] = 0.3
    top_p: Optional[float] = None
    max_tokens: int = 4096
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    repeat_penalty: Optional[float] = None
    stop_sequences: List[str] = Field(default_factory=list)


class Settings(BaseSettings):
    """Main application settings."""

    # Application settings from environment
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, validation_alias="LOG_FILE")
    host: str = Field(default="127.0.0.1", validation_alias="HOST")
    port: int = Field(default=5001, validation_alias="PORT")

    # Upload limits
    max_upload_size: int = Field(default=10 * 1024 * 1024, validation_alias="MAX_UPLOAD_SIZE")

    # Provider transport
    default_ollama_endpoint: str = Field(
        default=DEFAULT_OLLAMA_ENDPOINT, validation_alias="OLLAMA_ENDPOINT"
    )
    request_timeout: Optional[float] = Field(default=None, validation_alias="REQUEST_TIMEOUT")

    # Generation parameters
    temperature: Optional[float] = Field(default=0.3, validation_alias="AI_TEMPERATURE")
    top_p: Optional[float] = Field(default=None, validation_alias="AI_TOP_P")
    max_tokens: int = Field(default=4096, validation_alias="AI_MAX_TOKENS")
    frequency_penalty: Optional[float] = Field(default=None, validation_alias="AI_FREQUENCY_PENALTY")
    presence_penalty: Optional[float] = Field(default=None, validation_alias="AI_PRESENCE_PENALTY")
    repeat_penalty: Optional[float] = Field(default=None, validation_alias="AI_REPEAT_PENALTY")
    stop_sequences: List[str] = Field(default_factory=list, validation_alias="AI_STOP_SEQUENCES")

    # Local storage
    state_file: Path = Field(default=Path("data/state.json"), validation_alias="STATE_FILE")
    snapshots_dir: Path = Field(default=Path("data/json_cv_data"), validation_alias="SNAPSHOTS_DIR")
    resume_config_template: Path = BUNDLED_RESUME_CONFIG

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

    @property
    def generation(self) -> GenerationSettings:
        return GenerationSettings(
            temperature=self.temperature,
            top_p=self.top_p,
            max_tokens=self.max_tokens,
            frequency_penalty=self.frequency_penalty,
            presence_penalty=self.presence_penalty,
            repeat_penalty=self.repeat_penalty,
            stop_sequences=self.stop_sequences,
        )

    @classmethod
    def from_json(cls, config_path: str = "config.json") -> "Settings":
        """
        Load settings from JSON configuration file.

        Args:
            config_path: Path to JSON configuration file

        Returns:
            Settings instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        try:
            with open(config_path, 'r') as f:
                config_data = json.load(f)

            settings = cls(**config_data)
            settings.snapshots_dir.mkdir(parents=True, exist_ok=True)
            return settings

        except FileNotFoundError:
            raise FileNotFoundError(
                f"❌ Config file not found: {config_path}\n"
                "   Please create config.json or rely on environment variables"
            )
        except json.JSONDecodeError as e:
            raise ValueError(f"❌ Invalid JSON in config file: {e}")
        except ValidationError as e:
            raise ValueError(f"❌ Invalid configuration: {e}")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Values come from the environment (and ``.env``); ``config.json`` is
    used instead when it exists in the working directory.

    Returns:
        Settings instance (cached)
    """
    if Path("config.json").exists():
        return Settings.from_json("config.json")
    return Settings()
