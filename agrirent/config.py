import os
from pathlib import Path

from dotenv import load_dotenv

# Load variables from a local .env file, if present
load_dotenv()

BASE_DIR = Path(__file__).resolve().parents[1]


class Config:
    """Base configuration, read from the environment."""
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-change-me"
    DATA_PATH = os.environ.get("DATA_PATH") or str(BASE_DIR / "data.pkl")
    APP_ENV = os.environ.get("APP_ENV", "development")

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE = os.environ.get("LOG_FILE")
