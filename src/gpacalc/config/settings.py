from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _env_float(name: str, default: str) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return float(default)


def _env_int(name: str, default: str) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return int(default)


@dataclass(frozen=True)
class Settings:
    max_credits: float = _env_float("GPACALC_MAX_CREDITS", "6")
    min_credits: float = _env_float("GPACALC_MIN_CREDITS", "0.5")

    gpa_decimals: int = _env_int("GPACALC_GPA_DECIMALS", "4")
    qp_decimals: int = _env_int("GPACALC_QP_DECIMALS", "2")

    export_dir: str = os.getenv("GPACALC_EXPORT_DIR", "exports")
    export_prefix: str = os.getenv("GPACALC_EXPORT_PREFIX", "gpa_calculation")

    web_mode: bool = os.getenv("GPACALC_WEB", "0") == "1"
    port: int = _env_int("PORT", "8550")

    log_level: str = os.getenv("GPACALC_LOG_LEVEL", "INFO").upper()


settings = Settings()
