# postboard/config.py

from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    app_env: str = "local"
    app_url: str = "http://localhost:8000"

    database_url: str = f"sqlite:///{BASE_DIR / 'data' / 'app.db'}"

    # JWT
    jwt_secret_key: str | None = None
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Uploaded images, served under /images
    images_dir: Path = BASE_DIR / "data" / "images"

    # Recipient of UserCreated notifications
    admin_user_id: int = 1

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
