from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AnyHttpUrl, SecretStr

class Settings(BaseSettings):
    mw_api_base_url: AnyHttpUrl
    mw_user_agent: str = "mw-api-ext/0.1"
    http_timeout: float = 15.0

    # Page used when a caller does not name one
    default_page_name: str = "Main Page"

    # Bidirectional JWT secrets
    jwt_client_to_ext_secret: Optional[SecretStr] = None  # For verifying tokens from API callers
    jwt_ext_to_mw_secret: Optional[SecretStr] = None  # For signing tokens to MediaWiki

    jwt_algo: str = "HS256"
    jwt_ttl_seconds: int = 30

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
