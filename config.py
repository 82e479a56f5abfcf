"""
HoopsTourney Configuration

Centralized settings, paths, and constants for the standings engine.
"""

import logging
import sys
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

import appdirs


# Application info
APP_NAME = "HoopsTourney"
APP_AUTHOR = "HoopsTourney"
APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class Paths:
    """Application paths."""
    # Data directory (stores database)
    data_dir: Path = Path(appdirs.user_data_dir(APP_NAME, APP_AUTHOR))

    # Config directory (stores user preferences)
    config_dir: Path = Path(appdirs.user_config_dir(APP_NAME, APP_AUTHOR))

    # Log directory
    log_dir: Path = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))

    @property
    def database(self) -> Path:
        return self.data_dir / "hoopstourney.db"

    @property
    def log_file(self) -> Path:
        return self.log_dir / "hoopstourney.log"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        for dir_path in [self.data_dir, self.config_dir, self.log_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class PhaseSettings:
    """Day numbers marking each tournament phase."""
    # Round-robin days inside the groups
    group_days: tuple[int, ...] = (1, 2, 3, 4, 6)

    # Thursday: play-in matches
    play_in_day: int = 5

    # Sunday: knockout bracket
    finals_day: int = 7


@dataclass(frozen=True)
class ScheduleSettings:
    """Daily time grid used for every match day."""
    first_slot: str = "18:00"

    # Latest allowed start of a slot
    last_slot_start: str = "22:35"

    slot_minutes: int = 15
    break_minutes: int = 5

    fields: tuple[str, ...] = ("A", "B")


@dataclass(frozen=True)
class QualificationSettings:
    """
    Playoff quotas per group position.

    Each entry is (position, direct, play_in); None takes every remaining
    team of that positional pool.
    """
    pool_quotas: tuple[tuple[int, Optional[int], Optional[int]], ...] = (
        (1, None, 0),   # Group winners
        (2, 3, None),   # 3 best seconds direct, the rest to the play-in
        (3, 0, None),
        (4, 0, None),
        (5, 0, 4),      # 4 best fifths
    )

    # Play-in winners joining the Sunday bracket
    play_in_winners: int = 8


@dataclass(frozen=True)
class BracketSettings:
    """Knockout bracket shape for the finals day."""
    bracket_size: int = 16

    # (round, expected matches), in time-slot order
    rounds: tuple[tuple[str, int], ...] = (
        ("round_of_16", 8),
        ("quarter_final", 4),
        ("semi_final", 2),
        ("third_place", 1),
        ("final", 1),
    )


@dataclass(frozen=True)
class LoggingSettings:
    """Logging output settings."""
    level: int = logging.INFO
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    log_to_file: bool = True


# Singleton instances
PATHS = Paths()
PHASE_SETTINGS = PhaseSettings()
SCHEDULE_SETTINGS = ScheduleSettings()
QUALIFICATION_SETTINGS = QualificationSettings()
BRACKET_SETTINGS = BracketSettings()
LOGGING_SETTINGS = LoggingSettings()


def configure_logging(settings: LoggingSettings = LOGGING_SETTINGS, paths: Paths = PATHS) -> None:
    """Install stream (and optionally file) handlers on the root logger."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_to_file:
        handlers.append(logging.FileHandler(paths.log_file, encoding="utf-8", delay=True))

    logging.basicConfig(
        level=settings.level,
        format=settings.format,
        handlers=handlers,
    )


def init_config(paths: Paths = PATHS, logging_settings: LoggingSettings = LOGGING_SETTINGS) -> None:
    """Initialize configuration, create required directories and logging."""
    paths.ensure_directories()
    configure_logging(logging_settings, paths)
