from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "PhysioAI Monitor"
    env: str = "dev"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./physioai.db"
    # Fixed namespace the whole roster is stored under.
    storage_key: str = "physio_app_data_v1"

    jwt_secret: str = "CHANGE_ME"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 12

    frontend_origin: str = "http://localhost:3000"

    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    ai_timeout_seconds: float = 30.0

    # Demo onboarding: no SMS is sent, the clinician types this code.
    demo_otp: str = "1234"


settings = Settings()
