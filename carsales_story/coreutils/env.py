from dataclasses import dataclass
from dotenv import load_dotenv
import os

load_dotenv()  # take environment variables from .env


def env_get(key: str, default: str | None = None) -> str | None:
    """Get environment variable or return default."""
    return os.getenv(key, default)


def env_int(key: str, default: int) -> int:
    """Get an integer environment variable, failing loudly on junk values."""
    raw = env_get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


@dataclass
class Settings:
    """Runtime settings for the story pipeline"""

    data_source: str = "asian_vs_western_car_sales.csv"
    output_dir: str = "output"
    log_dir: str = "logs"
    bad_rows: str = "strict"
    chart_width: int = 960
    chart_height: int = 600
    dry_run: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from CARSALES_* environment variables"""
        return cls(
            data_source=env_get("CARSALES_DATA_SOURCE", cls.data_source),
            output_dir=env_get("CARSALES_OUTPUT_DIR", cls.output_dir),
            log_dir=env_get("CARSALES_LOG_DIR", cls.log_dir),
            bad_rows=env_get("CARSALES_BAD_ROWS", cls.bad_rows),
            chart_width=env_int("CARSALES_CHART_WIDTH", cls.chart_width),
            chart_height=env_int("CARSALES_CHART_HEIGHT", cls.chart_height),
        )
