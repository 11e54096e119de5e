from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Workout API server; the mobile build pointed at localhost:5001
    api_scheme: str = "http"
    api_host: str = "localhost"
    api_port: int = 5001
    api_base_path: str = "/api"
    request_timeout_seconds: float = 30.0

    # No auth: every record is owned by this placeholder user
    default_user: str = "User"
    # POST /workouts sends only user/type/duration/caloriesBurned/notes; the server assigns the rest
    minimal_create_body: bool = True
    # Drop a list fetch result when a newer fetch was issued after it
    discard_stale_responses: bool = True

    log_level: str = "INFO"
    debug: bool = False

    @property
    def api_base_url(self) -> str:
        """Base URL of the workouts API, without trailing slash."""
        path = "/" + self.api_base_path.strip("/") if self.api_base_path.strip("/") else ""
        return f"{self.api_scheme}://{self.api_host}:{self.api_port}{path}"


settings = Settings()
