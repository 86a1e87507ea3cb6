"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Collector endpoint
    endpoint_url: str = (
        "https://script.google.com/macros/s/"
        "AKfycbya1Sjm8jyJxrD-qSuP0QL9gOqqlv5ETa-ZAoZ1Z1s_aZ4xDYnp-y_FuuLQTcLbf794/exec"
    )
    submit_timeout_seconds: float = 10.0

    # Local slot
    storage_dir: str = ".collector"
    storage_slot: str = "projectCollectorFormData"

    # Logging
    log_level: str = "info"
    json_logs: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "COLLECTOR_",
    }


settings = Settings()
