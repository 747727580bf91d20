import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Application settings
    app_name: str = os.getenv("APP_NAME", "LibraNet")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "False")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()

    # Money settings
    currency: str = os.getenv("CURRENCY", "INR")
    daily_fine_rate: float = float(os.getenv("DAILY_FINE_RATE", "10.0"))  # major units per day

    # Lending rules
    default_borrow_limit: int = int(os.getenv("DEFAULT_BORROW_LIMIT", "5"))
    enforce_borrow_limit: bool = _env_flag("ENFORCE_BORROW_LIMIT", "True")

    # CLI settings
    seed_demo_data: bool = _env_flag("SEED_DEMO_DATA", "True")


settings = Settings()
