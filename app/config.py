from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # "supabase" - hosted backend, "local" - SQLAlchemy + filesystem
    backend: str = "supabase"

    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = ""
    supabase_timeout: float = 30.0

    cars_table: str = "cars"
    images_bucket: str = "car-images"
    images_prefix: str = "cars"
    items_per_page: int = 5

    # Principals allowed into the dashboard besides app_metadata.role == "admin"
    admin_emails: List[str] = []

    # Local backend
    database_url: str = "sqlite+aiosqlite:///./fleet.db"
    media_root: str = "./media"
    public_base_url: str = "http://localhost:8000"
    local_user_id: str = "local-admin"
    local_user_email: str = "admin@localhost"

    preview_url_prefix: str = "/admin/form/previews/"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
