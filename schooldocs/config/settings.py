from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "schooldocs"
    db_username: str = "schooldocs"
    db_password: str = "secret"

    worker_poll_interval_seconds: int = 5
    max_concurrent_documents: int = 4

    storage_public_base_url: str = ""
    storage_bucket: str = "documents"

    ocr_provider: str = "azure"
    azure_vision_endpoint: str = ""
    azure_vision_api_key: str = ""
    google_vision_api_key: str = ""
    ocr_poll_interval_seconds: float = 1.0
    ocr_max_poll_attempts: int = 10
    ocr_timeout_seconds: int = 30

    vision_provider: str = "azure"
    vision_timeout_seconds: int = 15

    classification_provider: str = "openai"
    classification_api_key: str = ""
    classification_model_name: str = "gpt-4o-mini"
    classification_base_url: str = ""
    classification_timeout_seconds: int = 30
    classification_temperature: float = 0.1
    classification_max_tokens: int = 1000

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    document_api_base_url: str = "http://localhost:8000"
    tracker_initial_delay_seconds: float = 2.0
    tracker_poll_interval_seconds: float = 5.0
    tracker_max_poll_attempts: int = 30
    tracker_completed_eviction_seconds: float = 5.0
    tracker_request_timeout_seconds: int = 10
