from pydantic import SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Socratic Tales"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"

    GEMINI_API_KEY: SecretStr = SecretStr("")
    GEMINI_HOST: str = "https://generativelanguage.googleapis.com"
    GEMINI_API_VERSION: str = "v1beta"

    STORY_MODEL_NAME: str = "gemini-2.5-pro"
    SPEECH_MODEL_NAME: str = "gemini-2.5-flash-preview-tts"
    SPEECH_VOICE_NAME: str = "Puck"
    ILLUSTRATION_MODEL_NAME: str = "gemini-2.5-flash-image"
    ILLUSTRATION_ASPECT_RATIO: str = "1:1"

    # Gemini TTS emits 24 kHz mono PCM unless the MIME type says otherwise
    SPEECH_SAMPLE_RATE: int = 24000

    CONTEXT_WINDOW_SIZE: int = 3
    REQUEST_TIMEOUT_SECONDS: float = 120.0

    FRIENDLY_ERROR_MESSAGE: str = "Oops! The magic wand sputtered. Please try again!"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)

    @computed_field
    @property
    def GEMINI_MODELS_URL(self) -> str:
        return f"{self.GEMINI_HOST}/{self.GEMINI_API_VERSION}/models"


settings = Settings()
