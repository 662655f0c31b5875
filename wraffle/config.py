"""Runtime settings resolved from the environment and an optional ``.env`` file."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .db.utils import resolve_sqlite_url

ROOT_DIR = Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class Settings:
    """Settings for a single raffle run.

    Attributes
    ----------
    input_path : str
        CSV file with ``name,value,participant,...`` rows.
    output_path : str
        CSV file receiving ``Item,Winner`` rows.
    seed : Optional[int]
        Seed for the random source; ``None`` seeds from the OS.
    log_level : str
        Name of the logging level for console output.
    db_url : str
        SQLAlchemy URL for the database source/sink.
    """

    input_path: str = "raffle_data.csv"
    output_path: str = "raffle_results.csv"
    seed: Optional[int] = None
    log_level: str = "INFO"
    db_url: str = "sqlite:///./raffle.db"


def _parse_seed(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"RAFFLE_SEED must be an integer, got {raw!r}") from exc


def load_db_url(env_file: Optional[Union[str, Path]] = None) -> str:
    """Return ``DB_URL`` with relative SQLite paths made absolute."""

    load_dotenv(env_file)
    return resolve_sqlite_url(os.getenv("DB_URL", Settings.db_url), ROOT_DIR)


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from ``env_file`` (or a discovered ``.env``) and the environment.

    Variables already set in the environment take precedence over the file.

    Raises
    ------
    ValueError
        If ``RAFFLE_SEED`` is set but is not an integer.
    """

    load_dotenv(env_file)
    defaults = Settings()
    return Settings(
        input_path=os.getenv("RAFFLE_INPUT", defaults.input_path),
        output_path=os.getenv("RAFFLE_OUTPUT", defaults.output_path),
        seed=_parse_seed(os.getenv("RAFFLE_SEED")),
        log_level=os.getenv("RAFFLE_LOG_LEVEL", defaults.log_level).upper(),
        db_url=load_db_url(env_file),
    )


__all__ = ["Settings", "load_db_url", "load_settings"]
