# File: namesplice/core/config/settings.py

import os
import shutil
from pathlib import Path
from typing import Tuple


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    # --- Paths ---
    # namesplice/core/config/settings.py -> config -> core -> namesplice -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    ARTIFACTS_DIR: Path = DATA_DIR / "artifacts"
    MODELS_DIR: Path = BASE_DIR / "models"

    # --- Database ---
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "namesplice_db")
    USE_SQLITE: bool = _env_bool("USE_SQLITE", "false")

    @property
    def DATABASE_URL(self) -> str:
        explicit = os.getenv("DATABASE_URL")
        if explicit:
            return explicit

        # Only fallback to SQLite if explicitly requested.
        if self.USE_SQLITE:
            return "sqlite:///./namesplice.db"

        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # --- External Tools ---
    FFMPEG_BINARY: str = os.getenv("FFMPEG_BINARY_PATH", shutil.which("ffmpeg") or "ffmpeg")
    FFPROBE_BINARY: str = os.getenv("FFPROBE_BINARY_PATH", shutil.which("ffprobe") or "ffprobe")

    # --- Transcription ---
    # 'openai' uses the hosted Whisper API, 'local' runs Whisper on this machine.
    TRANSCRIBER_BACKEND: str = os.getenv("TRANSCRIBER_BACKEND", "openai")
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    WHISPER_API_MODEL: str = os.getenv("WHISPER_API_MODEL", "whisper-1")
    WHISPER_LANGUAGE: str = os.getenv("WHISPER_LANGUAGE", "en")
    WHISPER_MODEL_NAME: str = os.getenv("WHISPER_MODEL_NAME", "base")
    WHISPER_DEVICE: str = "cuda" if _env_bool("USE_CUDA", "false") else "cpu"

    # --- Detection ---
    PLACEHOLDER_TOKEN: str = os.getenv("PLACEHOLDER_TOKEN", "prospect")
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(25 * 1024 * 1024)))
    ALLOWED_MEDIA_TYPES: Tuple[str, ...] = (
        "audio/mpeg",
        "audio/mp4",
        "audio/wav",
        "audio/webm",
        "video/mp4",
        "video/webm",
        "video/quicktime",
    )

    # --- Voice Synthesis ---
    ELEVENLABS_API_KEY: str = os.getenv("ELEVENLABS_API_KEY", "")
    ELEVENLABS_MODEL_ID: str = os.getenv("ELEVENLABS_MODEL_ID", "eleven_monolingual_v1")
    ELEVENLABS_OUTPUT_FORMAT: str = os.getenv("ELEVENLABS_OUTPUT_FORMAT", "mp3_44100_128")
    ELEVENLABS_TIMEOUT_SECONDS: float = float(os.getenv("ELEVENLABS_TIMEOUT_SECONDS", "60"))
    MAX_NAME_LENGTH: int = int(os.getenv("MAX_NAME_LENGTH", "50"))
    SYNTHESIS_MAX_ATTEMPTS: int = int(os.getenv("SYNTHESIS_MAX_ATTEMPTS", "3"))

    # --- Delivery ---
    SPEED_TEST_URL: str = os.getenv("SPEED_TEST_URL", "https://httpbin.org/bytes/100000")
    SPEED_TEST_TIMEOUT_SECONDS: float = float(os.getenv("SPEED_TEST_TIMEOUT_SECONDS", "10"))
    BANDWIDTH_CACHE_TTL_SECONDS: float = float(os.getenv("BANDWIDTH_CACHE_TTL_SECONDS", str(30 * 60)))
    VERIFY_VARIANTS: bool = _env_bool("VERIFY_VARIANTS", "false")
    VARIANT_PROBE_TIMEOUT_SECONDS: float = float(os.getenv("VARIANT_PROBE_TIMEOUT_SECONDS", "5"))

    # --- Storage ---
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "")

    def ensure_dirs(self):
        """Creates necessary data directories if they don't exist."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.ARTIFACTS_DIR.mkdir(parents=True, exist_ok=True)
        self.MODELS_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
