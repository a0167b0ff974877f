from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Only needed by the seed script (bypasses RLS)

    # Projects / roles
    admin_role_name: str = "admin"  # Role granted to the creator of a project
    default_project_status: str = "active"

    # Front-end routes returned as redirect targets
    login_route: str = "/login"
    dashboard_route: str = "/dashboard"

    # Auth
    auth_cache_ttl_seconds: int = 60
    auth_cache_max_size: int = 500

    # App
    app_name: str = "workboard-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def project_route(self, project_id: str) -> str:
        return f"/project/{project_id}"

    def workboard_route(self, project_id: str, workboard_id: str) -> str:
        return f"/project/{project_id}/workboard/{workboard_id}"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
