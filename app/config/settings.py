from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # App Info
    app_name: str = "Inventario Repuestos API"
    version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./inventario.db"

    # CORS
    allowed_origins: List[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = Field(default="INFO", description="Nivel de logging (DEBUG, INFO, WARNING, ERROR)")

    # Paginación
    default_page_limit: int = 50
    max_page_limit: int = 200

    # Stock
    stock_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Plazo máximo para cálculos masivos de stock (None = sin límite)"
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
