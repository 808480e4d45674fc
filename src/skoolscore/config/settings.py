from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _to_bool(value: str) -> bool:
    return value.strip().lower() in {"true", "1", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    log_level: str = os.getenv("SKOOLSCORE_LOG_LEVEL", "INFO").upper()
    default_preset: str = os.getenv("SKOOLSCORE_DEFAULT_PRESET", "nigerian_standard")
    default_pass_mark: float = float(os.getenv("SKOOLSCORE_DEFAULT_PASS_MARK", "40"))
    exclude_absent: bool = _to_bool(os.getenv("SKOOLSCORE_EXCLUDE_ABSENT", "false"))

    cors_allowed_origins: tuple[str, ...] = _split_csv(
        os.getenv("SKOOLSCORE_CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )


settings = Settings()
