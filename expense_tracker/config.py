# expense_tracker/config.py
import os  # lets us read environment variables (from the OS)
from functools import (
    lru_cache,  # reuse one Settings object for the whole process
)

from dotenv import load_dotenv  # loads variables from a local .env file
from pydantic import BaseModel  # typed, validated settings class

load_dotenv()  # read .env and put those key=value pairs into environment variables

# Fallback for blank/missing currency codes everywhere in the app.
DEFAULT_CURRENCY = "EUR"


class Settings(BaseModel):
    # database connection string; default is a SQLite file in the project folder
    # change effect: point to a different DB (e.g., Postgres) or file path
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./expenses.db")

    # daily historical FX rates (Frankfurter-compatible: GET /{date}?from=&to=)
    fx_base_url: str = os.getenv("FX_BASE_URL", "https://api.frankfurter.dev/v1")
    fx_timeout_seconds: float = float(os.getenv("FX_TIMEOUT_SECONDS", "8"))

    # push relay that owns the subscriptions (POST /subscribe, POST /notify)
    push_server_url: str = os.getenv("PUSH_SERVER_URL", "http://localhost:8080")
    push_timeout_seconds: float = float(os.getenv("PUSH_TIMEOUT_SECONDS", "5"))

    # where a tap on a budget alert should land in the client
    alert_url: str = os.getenv("ALERT_URL", "/app/dashboard")

    # change effect: DEBUG shows every FX cache miss
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache
def get_settings() -> Settings:
    return Settings()  # build from env (already loaded by load_dotenv())
