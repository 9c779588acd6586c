# File: /app/core/config.py | Version: 2.0 | Title: Central App Settings (Pydantic v2)
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Database ---
    DATABASE_URL: str = "sqlite:///./app.db"

    # --- Security / JWT ---
    SECRET_KEY: str = "CHANGE_ME_FOR_DEV_ONLY"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # --- Work item types ---
    CACHE_CONTROL_WORK_ITEM_TYPE: str = "max-age=300"
    CACHE_CONTROL_WORK_ITEM_TYPES: str = "max-age=300"
    DEFAULT_PAGE_LIMIT: int = 100
    SEED_SYSTEM_SPACE: bool = False  # create the system space + types on startup

    # --- Apps facade (Kubernetes) ---
    APPS_NAMESPACE_PREFIX: str = "fabric8"
    APPS_ENVIRONMENTS: str = "stage,run"
    KUBE_IN_CLUSTER: bool = False

    # v2-style config
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    def get_cache_control_work_item_type(self) -> str:
        return self.CACHE_CONTROL_WORK_ITEM_TYPE

    def get_cache_control_work_item_types(self) -> str:
        return self.CACHE_CONTROL_WORK_ITEM_TYPES

    @property
    def apps_environments(self) -> List[str]:
        return [e.strip() for e in self.APPS_ENVIRONMENTS.split(",") if e.strip()]


settings = Settings()
