from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Templates (HTML pages, images and annex PDFs)
    TEMPLATES_DIR: Path = PACKAGE_ROOT / "templates"
    PAGE_PORTADA: str = "index.html"
    PAGE_EQUIPOS: str = "index2.html"
    PAGE_FINANCIERO: str = "index3.html"
    ANNEXES_AFTER_EQUIPOS: List[str] = ["anexo1.pdf", "anexo2.pdf"]
    ANNEXES_AFTER_FINANCIERO: List[str] = ["anexo3.pdf"]

    # Rendering
    CHROME_EXECUTABLE: Optional[str] = None
    RENDER_TIMEOUT_SECONDS: float = 120.0
    RENDER_CONCURRENTLY: bool = True

    # Financial assumptions override (JSON)
    FINANCIAL_CONFIG_PATH: Optional[str] = None

    @property
    def internal_base(self) -> str:
        """Base URL the renderer uses to reach this same process."""
        return f"http://127.0.0.1:{self.PORT}"


settings = Settings()
