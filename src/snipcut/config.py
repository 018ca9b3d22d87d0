"""Configuration management for snipcut."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (``SNIPCUT_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="SNIPCUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Directories
    temp_dir: Path | None = None

    # Transcription
    whisper_model: str = "base"
    transcription_language: str | None = "en"

    # Detection
    max_concurrent_clips: int = 2
    detector_timeout_s: float = 120.0
    silence_detection_enabled: bool = True
    default_aggressiveness: str = "natural"

    # Cut list
    pause_threshold: float = 0.3
    caption_chunk_size: int = 8
    merge_epsilon: float = 0.001
    silence_dedup_gap: float = 0.1
    default_fps: int = 30

    # Logging
    log_level: str = "INFO"

    def ensure_directories(self) -> None:
        """Create the scratch directory if one is configured."""
        if self.temp_dir is not None:
            self.temp_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
