import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from typing import Optional
from gamerscove.schemas.enums import StoreBackendEnum

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = "Gamers Cove API"
    API_PREFIX: str = "/api/friendships"

    # Which Relationship Store backs the friendship manager: "sql" or "firestore"
    STORE_BACKEND: StoreBackendEnum = StoreBackendEnum.SQL

    # SQL store
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./gamerscove.db")
    SQL_ECHO: bool = False

    # GCP and Firebase Settings (only read when STORE_BACKEND == "firestore")
    GCP_PROJECT_ID: Optional[str] = os.getenv("GCP_PROJECT_ID")
    # For live deployment, ensure FIRESTORE_EMULATOR_HOST environment variable is NOT set.
    FIRESTORE_EMULATOR_HOST: Optional[str] = os.getenv("FIRESTORE_EMULATOR_HOST") # e.g., "localhost:8080"

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    BACKEND_CORS_ORIGINS: list[str] = [
        "http://localhost:5173",  # gamers-cove-app dev server
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    ]

    class Config:
        case_sensitive = True


settings = Settings()
