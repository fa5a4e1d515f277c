# app/core/config.py
import os
from typing import Literal, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration de l'application avec validation Pydantic"""

    # =====================================
    # APPLICATION
    # =====================================
    APP_NAME: str = "Supermarket POS"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # =====================================
    # SÉCURITÉ JWT
    # =====================================
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24h

    # Coût du hash bcrypt
    BCRYPT_ROUNDS: int = 10

    # =====================================
    # BASE DE DONNÉES
    # =====================================
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "postgres")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "supermarket_pos")
    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    SQLALCHEMY_ECHO: bool = False

    # Compte administrateur créé par init_db
    FIRST_ADMIN_NAME: str = "Administrateur"
    FIRST_ADMIN_EMAIL: str = "admin@pos.com"
    FIRST_ADMIN_PASSWORD: str = "Admin123"
    DEFAULT_BRANCH_NAME: str = "Magasin principal"

    # =====================================
    # CORS
    # =====================================
    CORS_ORIGINS: list = ["http://localhost:5173", "http://127.0.0.1:5173"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]

    # =====================================
    # RATE LIMITING
    # =====================================
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # =====================================
    # PERMISSIONS DES ROUTES FRONTEND
    # =====================================
    # "deny" ou "allow" pour une route absente de la table
    ROUTE_DEFAULT_POLICY: Literal["deny", "allow"] = "deny"

    # =====================================
    # LOGGING
    # =====================================
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s [%(correlation_id)s] %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Instance globale des paramètres
settings = Settings()
