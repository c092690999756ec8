"""
Receipt Store application settings.
"""
from pydantic_settings import BaseSettings
from typing import List, Literal


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./data/receipt_store.db"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # File storage
    DATA_DIR: str = "./data"

    # Summary encryption (RECEIPT_ENC_KEY wins over JWT_SECRET)
    RECEIPT_ENC_KEY: str = ""
    JWT_SECRET: str = ""

    # Gemini summarization
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_API_URL: str = ""
    GEMINI_TIMEOUT_SECONDS: float = 30.0

    # Prompt template: "english" or "bilingual"
    SUMMARY_TEMPLATE: Literal["english", "bilingual"] = "english"
    SUMMARY_REGIONAL_LANGUAGE: str = "Hindi"

    # OCR
    OCR_FETCH_TIMEOUT_SECONDS: float = 20.0
    OCR_LANGUAGE: str = "eng"

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = "medassist/receipts"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def gemini_endpoint(self) -> str:
        if self.GEMINI_API_URL:
            return self.GEMINI_API_URL
        return (
            "https://generativelanguage.googleapis.com/v1/models/"
            f"{self.GEMINI_MODEL}:generateContent"
        )


settings = Settings()
