import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./league.db")
SQL_ECHO = _env_flag("SQL_ECHO", False)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    "http://localhost:4200",
    "http://127.0.0.1:4200",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    CORS_ORIGINS.extend(o.strip() for o in _extra.split(",") if o.strip())

# Fixture planning: reject a season whose first round starts before "now"
ALLOW_PAST_START_DATE = _env_flag("ALLOW_PAST_START_DATE", False)

# Dispute resolution: may the participant who raised a dispute also resolve it
ALLOW_SELF_RESOLUTION = _env_flag("ALLOW_SELF_RESOLUTION", True)
