import os

from dotenv import load_dotenv


load_dotenv()

# "postgres" or "memory"
CUSTOMER_STORAGE = os.getenv("CUSTOMER_STORAGE", "postgres").strip().lower()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# Optional extra log destination next to the console.
LOG_FILE = os.getenv("LOG_FILE") or None

APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8080"))


def get_database_url() -> str:
    # Only the postgres backend needs it, so it is not required at import time.
    try:
        return os.environ["DATABASE_URL"]
    except KeyError:
        raise RuntimeError("DATABASE_URL is not set") from None
