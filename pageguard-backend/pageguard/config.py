from pydantic_settings import BaseSettings
from typing import List, Optional

from pageguard.core.findings import Sensitivity

class Settings(BaseSettings):
    # API Configuration
    APP_NAME: str = "PageGuard"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api/v1"

    # Callers are the browser extension's popup and content scripts
    CORS_ORIGINS: List[str] = []
    CORS_ORIGIN_REGEX: Optional[str] = r"^(chrome|moz)-extension://[a-z0-9-]+$"

    # Verdict history / whitelist storage
    DATABASE_URL: str = "sqlite:///./pageguard.db"
    HISTORY_CAPACITY: int = 100

    # Notification sensitivity: all | medium+ | high+
    NOTIFICATION_SENSITIVITY: Sensitivity = Sensitivity.ALL

    # Detection toggles
    ENABLE_PHISHING_DETECTION: bool = True
    ENABLE_MALWARE_DETECTION: bool = True

    # Optional JSON file overriding the built-in intel lists
    INTEL_DB_PATH: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
