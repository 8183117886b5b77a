from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "image-art-service"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: Literal["critical", "error", "warning", "info", "debug"] = "info"

    fetch_timeout: float = 5.0
    max_fetch_bytes: int = 10 * 1024 * 1024
    render_height: int = 30
    max_render_width: int = 200

    save_images: bool = False
    images_path: str = "images"
    max_saved_images: int | None = None

    terminal_only: bool = False
    client_classifier: Literal["user-agent", "accept"] = "user-agent"


settings = Settings()
