"""
Classroom Simulation Configuration
==================================

This module handles configuration loading for the classroom simulation core.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    CLASSROOM_SIM_SEED            -> simulation.seed
    CLASSROOM_SIM_TICK_HZ         -> simulation.tick_hz
    CLASSROOM_SIM_ACTUATOR_RANGE  -> waves.actuator_range
    CLASSROOM_SIM_LOG_CAPACITY    -> notifications.capacity
    CLASSROOM_SIM_LOG_LEVEL       -> logging.level
    CLASSROOM_SIM_LOG_FORMAT      -> logging.format

Example:
    from classroom_sim.config import settings

    print(settings.simulation.tick_hz)
    print(settings.chatter.cooldown_sec)
    print(settings.waves.actuator_range)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class SimulationConfig(BaseModel):
    """Scheduler and session configuration."""

    name: str = Field(default="classroom-sim", description="Session name")
    tick_hz: float = Field(
        default=60.0,
        gt=0,
        description="Wave pipeline cadence (display refresh rate)",
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed (None = unseeded)",
    )
    log_every_n_ticks: int = Field(
        default=300,
        ge=1,
        description="Emit a tick summary every N ticks",
    )


class ChatterSourceConfig(BaseModel):
    """Student chatter source policy."""

    cooldown_sec: float = Field(default=1.5, ge=0, description="Minimum gap between triggers")
    active_duration_sec: float = Field(default=2.5, gt=0, description="Seat stays active this long")
    probability: float = Field(default=0.02, ge=0, le=1.0, description="Per-tick trigger probability")
    exam_probability: float = Field(default=0.008, ge=0, le=1.0, description="Probability under testMode")
    group_work_probability: float = Field(default=0.05, ge=0, le=1.0, description="Probability under groupWork")
    max_radius: float = Field(default=80.0, gt=0, description="Wave max radius")
    speed: float = Field(default=1.5, gt=0, description="Wave growth per tick")


class ExteriorSourceConfig(BaseModel):
    """Exterior (window) noise source policy."""

    cooldown_sec: float = Field(default=4.0, ge=0, description="Minimum gap between triggers")
    active_duration_sec: float = Field(default=3.0, gt=0, description="exterior_active flag lifetime")
    probability: float = Field(default=0.01, ge=0, le=1.0, description="Per-tick trigger probability")
    max_radius: float = Field(default=200.0, gt=0, description="Wave max radius")
    speed: float = Field(default=2.5, gt=0, description="Wave growth per tick")


class TeacherSourceConfig(BaseModel):
    """Teacher podium voice source policy."""

    cooldown_sec: float = Field(default=5.0, ge=0, description="Minimum gap between triggers")
    active_duration_sec: float = Field(default=3.5, gt=0, description="teacher_speaking flag lifetime")
    probability: float = Field(default=0.008, ge=0, le=1.0, description="Per-tick trigger probability")
    max_radius: float = Field(default=250.0, gt=0, description="Wave max radius")
    speed: float = Field(default=3.0, gt=0, description="Wave growth per tick")


class BehaviorSourceConfig(BaseModel):
    """Exam-time behaviour (cheating) detection policy."""

    cooldown_sec: float = Field(default=15.0, ge=0, description="Minimum gap between detections")
    probability: float = Field(default=0.1, ge=0, le=1.0, description="Per-tick detection probability")
    min_confidence: float = Field(default=75.0, ge=0, le=100.0)
    max_confidence: float = Field(default=95.0, ge=0, le=100.0)

    @model_validator(mode="after")
    def _check_confidence_range(self) -> "BehaviorSourceConfig":
        if self.min_confidence > self.max_confidence:
            raise ValueError("min_confidence must not exceed max_confidence")
        return self


class WaveConfig(BaseModel):
    """Wave propagation and cancellation dispatch configuration."""

    activation_threshold: float = Field(
        default=15.0,
        ge=0,
        description="Noise wave radius that triggers dispatch evaluation",
    )
    actuator_range: float = Field(
        default=400.0,
        gt=0,
        description="Speakers closer than this respond to a wave",
    )
    cancellation_speed: float = Field(default=3.0, gt=0, description="Counter-wave growth per tick")
    cancellation_distance_ratio: float = Field(
        default=0.8,
        gt=0,
        le=1.0,
        description="Counter-wave max radius as a fraction of speaker distance",
    )
    cancellation_max_radius: float = Field(default=150.0, gt=0, description="Counter-wave radius cap")


class ScoringConfig(BaseModel):
    """Discipline score configuration."""

    sample_interval_sec: float = Field(default=2.0, gt=0, description="History sampling interval")
    history_size: int = Field(default=10, ge=6, description="Rolling history length")
    trend_window: int = Field(default=3, ge=1, description="Samples per trend window")
    trend_threshold: float = Field(default=2.0, ge=0, description="Mean difference for rising/falling")
    peak_decay: float = Field(default=0.98, gt=0, le=1.0, description="Peak talkers decay per tick")


class RotationConfig(BaseModel):
    """Multi-classroom dashboard rotation configuration."""

    update_interval_sec: float = Field(default=2.0, gt=0, description="Dashboard update cadence")
    min_interval_sec: float = Field(default=10.0, gt=0, description="Minimum rotation interval")
    max_interval_sec: float = Field(default=18.0, gt=0, description="Maximum rotation interval")
    double_probability: float = Field(default=0.25, ge=0, le=1.0, description="Chance of two classrooms")
    warn_probability: float = Field(default=0.8, ge=0, le=1.0, description="Chance of level 1 vs 2")

    @model_validator(mode="after")
    def _check_interval_range(self) -> "RotationConfig":
        if self.min_interval_sec > self.max_interval_sec:
            raise ValueError("min_interval_sec must not exceed max_interval_sec")
        return self


class NotificationConfig(BaseModel):
    """Notification journal configuration."""

    capacity: int = Field(default=50, ge=1, description="Maximum retained events")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the classroom simulation.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    chatter: ChatterSourceConfig = Field(default_factory=ChatterSourceConfig)
    exterior: ExteriorSourceConfig = Field(default_factory=ExteriorSourceConfig)
    teacher: TeacherSourceConfig = Field(default_factory=TeacherSourceConfig)
    behavior: BehaviorSourceConfig = Field(default_factory=BehaviorSourceConfig)
    waves: WaveConfig = Field(default_factory=WaveConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    rotation: RotationConfig = Field(default_factory=RotationConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path("/app/config.yaml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Simulation settings
    if env_seed := os.environ.get("CLASSROOM_SIM_SEED"):
        config_data.setdefault("simulation", {})["seed"] = int(env_seed)
    if env_hz := os.environ.get("CLASSROOM_SIM_TICK_HZ"):
        config_data.setdefault("simulation", {})["tick_hz"] = float(env_hz)

    # Dispatch settings
    if env_range := os.environ.get("CLASSROOM_SIM_ACTUATOR_RANGE"):
        config_data.setdefault("waves", {})["actuator_range"] = float(env_range)

    # Journal settings
    if env_cap := os.environ.get("CLASSROOM_SIM_LOG_CAPACITY"):
        config_data.setdefault("notifications", {})["capacity"] = int(env_cap)

    # Logging settings
    if env_log := os.environ.get("CLASSROOM_SIM_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("CLASSROOM_SIM_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_fmt


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
