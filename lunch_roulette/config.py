from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

DEFAULT_COOLDOWN_WEEKS = 2


@dataclass(frozen=True)
class RouletteConfig:
    secret_code: str = os.getenv("ROULETTE_SECRET_CODE", "LizRulz!")
    state_path: Path = Path(os.getenv("ROULETTE_STATE_PATH", "data/state.json"))
    session_secret: str = os.getenv("SESSION_SECRET", "lunch-roulette-secret-change-in-production")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


DEFAULT_ROULETTE_CONFIG = RouletteConfig()


def setup_logging(config: RouletteConfig = DEFAULT_ROULETTE_CONFIG) -> None:
    """Configure root logging for the application."""
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
