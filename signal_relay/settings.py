from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Allowed cross-origin source for the signaling channel
    CORS_ORIGIN: str = "*"

    # Media server settings
    MEDIA_SERVER_URL: str = "http://localhost:5000"
    MEDIA_SERVER_API_KEY: SecretStr = SecretStr("your-secret-key")
    MEDIA_SERVER_TIMEOUT: float = 10.0  # seconds

    ENVIRONMENT: str = "development"

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str = "logs/logging_errors.log"
    # Paths to exclude from access logs (e.g., /metrics, /health)
    LOG_EXCLUDED_PATHS: list[str] = ["/metrics", "/health"]

    @property
    def CORS_ORIGINS(self) -> list[str]:
        """Split the comma separated CORS_ORIGIN value into a list."""
        return [
            origin.strip()
            for origin in self.CORS_ORIGIN.split(",")
            if origin.strip()
        ]


app_settings = Settings()
