from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # "file" keeps one JSON record per key under DATA_DIR, "memory" keeps nothing on disk
    STORAGE_BACKEND: str = "file"
    DATA_DIR: str = "data"
    DEFAULTS_PATH: str = "default-markers.json"

    # Durable record keys
    USER_DATA_KEY: str = "rdr2map_user"
    CATEGORIES_KEY: str = "rdr2map_categories"
    VISIBILITY_KEY: str = "rdr2map_visibility"

    DEFAULT_COLOR: str = "#94a3b8"
    PREFERRED_CATEGORY: str = "Custom"
    EXPORT_FILENAME: str = "rdr2-user-data.json"
    FIT_PADDING: int = 20

    # Security / features
    ALLOW_ORIGINS: str = "http://localhost:5173"
    NOTIFICATIONS_MAX: int = 200
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def uses_memory_storage(self) -> bool:
        return self.STORAGE_BACKEND.strip().lower() == "memory"

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.ALLOW_ORIGINS.split(",") if o.strip()]
