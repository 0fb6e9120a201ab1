from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # GA4
    ga4_property_id: str = ""
    google_application_credentials: str = ""
    report_timeout_seconds: float = 30.0

    # Anthropic
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    anthropic_max_tokens: int = 1500
    llm_timeout_seconds: float = 60.0

    # Charts
    chart_preview_rows: int = 10

    # App
    allowed_origins: str = "http://localhost:3000"
    rate_limit_per_hour: int = 60
    log_level: str = "INFO"

    @property
    def ga4_property(self) -> str:
        return f"properties/{self.ga4_property_id}"

    @property
    def origins_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",")]

    class Config:
        env_file = ".env"


settings = Settings()
