"""Project-level configuration and path helpers."""

from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "helpdesk.db"
DEFAULT_LOG_PATH = LOGS_DIR / "helpdesk.log"

DEFAULT_API_HOST = "localhost"
DEFAULT_API_PORT = 8000

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def resolve_api_address(host: str | None, port: str | None) -> tuple[str, int]:
    """Resolve API_HOST / API_PORT values, falling back to defaults."""
    api_host = host or DEFAULT_API_HOST
    try:
        api_port = int(port) if port else DEFAULT_API_PORT
    except ValueError:
        raise ValueError(f"API_PORT must be an integer, got {port!r}") from None
    return api_host, api_port
