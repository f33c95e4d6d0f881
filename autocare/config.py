"""Settings read from the environment."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

PROJECT_DIR = Path(__file__).parent.parent


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    log_level: str = "WARNING"
    notification_max_age_days: int = 30
    secret_key: str = "dev-secret-key-change-in-prod"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            data_dir=Path(env.get("AUTOCARE_DATA_DIR", PROJECT_DIR / "vehicles")),
            log_level=env.get("AUTOCARE_LOG_LEVEL", "WARNING").upper(),
            notification_max_age_days=int(
                env.get("AUTOCARE_NOTIFICATION_MAX_AGE_DAYS", "30")
            ),
            secret_key=env.get("SECRET_KEY", "dev-secret-key-change-in-prod"),
        )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
