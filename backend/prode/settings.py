import os

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


APP_NAME = "Prode Standings API"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    CORS_ORIGINS.extend(o.strip() for o in _extra.split(",") if o.strip())

# Qualifier scoring defaults (per team)
QUALIFIED_TEAM_POINTS = _int_env("QUALIFIED_TEAM_POINTS", 1)
EXACT_POSITION_QUALIFIED_POINTS = _int_env("EXACT_POSITION_QUALIFIED_POINTS", 1)
