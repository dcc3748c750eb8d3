import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Uzak API Ayarları
    api_base_url: str = os.getenv("LIBRARY_API_URL", "http://localhost:5000")
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10"))
    http_retries: int = int(os.getenv("HTTP_RETRIES", "3"))

    # Oturum Ayarları
    token_file: str = os.getenv(
        "LIBRARY_TOKEN_FILE",
        str(Path.home() / ".library-cli" / "session.json"),
    )
    # True ise doğrulama sırasında ağ hatası oturumu kapatır (eski davranış)
    logout_on_verify_network_error: bool = _flag("LOGOUT_ON_VERIFY_NETWORK_ERROR")

    # Uygulama Ayarları
    app_name: str = os.getenv("APP_NAME", "Mini Library System")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()


settings = Settings()
