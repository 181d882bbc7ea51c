from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "FT_", "env_file": ".env", "env_file_encoding": "utf-8"}

    session_secret: str = Field(min_length=32)
    session_cookie_name: str = Field(default="finance_tracker_session")
    session_max_age_seconds: int = Field(default=60 * 60 * 24 * 7, gt=0)
    session_cookie_secure: bool = Field(default=False)
    db_path: str = Field(default="finance_tracker.db")
    cors_origins: str = Field(default="http://localhost:3000")
    llm_provider: str = Field(default="google", pattern=r"^(google|openai|anthropic)$")
    llm_model: str = Field(default="gemini-2.0-flash")
    google_api_key: str = Field(default="")
    openai_api_key: str = Field(default="")
    anthropic_api_key: str = Field(default="")
    avatar_url_template: str = Field(
        default="https://avatar.iran.liara.run/public?username={username}"
    )
    # By-id transaction lookups/updates/deletes skip the owner check unless enabled.
    enforce_transaction_ownership: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4000)

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
