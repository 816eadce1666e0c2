import os

try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass


class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///chaos.db")
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Used by chaos.client when talking to a running backend.
    CHAOS_API_BASE_URL = os.getenv("CHAOS_API_BASE_URL", "http://localhost:5000")
    CHAOS_API_TIMEOUT = float(os.getenv("CHAOS_API_TIMEOUT", "10"))
