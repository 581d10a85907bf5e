# config/settings.py
"""
Configuração centralizada da aplicação usando Pydantic Settings.
As variáveis são carregadas do arquivo .env
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Configuração da aplicação"""

    # Banco de dados
    DATABASE_URL: str

    # JWT
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 720
    ALGORITHM: str = "HS256"

    # CORS
    CORS_ALLOW_ORIGINS: List[str] = ["http://localhost:5173"]

    # Fuso horário de referência para timestamps persistidos
    TIMEZONE: str = "America/Sao_Paulo"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Conciliação planejado x colhido
    RECONCILIACAO_LOCK_TIMEOUT_S: float = 10.0  # Espera máxima pelo lock do planejamento

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
