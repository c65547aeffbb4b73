from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    openai_api_key: str = ""
    completion_base_url: str = "https://api.openai.com/v1"
    completion_model: str = "gpt-4o-mini"
    chat_max_tokens: int = 500
    chat_temperature: float = 0.7
    draft_max_tokens: int = 900
    draft_temperature: float = 0.2
    completion_timeout_seconds: float = 20.0
    completion_max_retries: int = 0
    supabase_url: str = "http://localhost:54321"
    calendar_function_url: Optional[str] = None  # Defaults to <supabase_url>/functions/v1/calendar-integration
    email_function_url: Optional[str] = None  # Defaults to <supabase_url>/functions/v1/email-integration
    collaborator_timeout_seconds: float = 15.0
    default_timezone: str = "UTC"
    display_timezone: str = "Africa/Johannesburg"
    meeting_description: str = "Scheduled via AI Assistant"
    meeting_location: str = "TBD"
    retain_failed_meeting: bool = False
    draft_batch_size: int = 2
    port: int = 8000
    host: str = "0.0.0.0"
    environment: str = "development"
    frontend_url: str = "http://localhost:5173"
    log_level: str = "INFO"
    log_json: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def calendar_url(self) -> str:
        return self.calendar_function_url or f"{self.supabase_url.rstrip('/')}/functions/v1/calendar-integration"

    @property
    def email_url(self) -> str:
        return self.email_function_url or f"{self.supabase_url.rstrip('/')}/functions/v1/email-integration"

settings = Settings()
