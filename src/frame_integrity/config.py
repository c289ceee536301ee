"""
Frame Integrity Configuration
=============================

This module handles configuration loading for the frame integrity analyzer.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    FRAME_INTEGRITY_SIGNAL_FAMILY      -> classifier.signal_family
    FRAME_INTEGRITY_SIMILARITY_CUTOFF  -> classifier.statistics.similarity_cutoff_db
    FRAME_INTEGRITY_CALIBRATION_FRAMES -> calibration.sample_frames
    FRAME_INTEGRITY_BLUR_KERNEL        -> preprocess.blur_kernel_size
    FRAME_INTEGRITY_WINDOW_CAPACITY    -> classifier.motion.window_capacity
    FRAME_INTEGRITY_LOG_LEVEL          -> logging.level
    FRAME_INTEGRITY_LOG_FORMAT         -> logging.format

Example:
    from frame_integrity.config import settings

    print(settings.classifier.signal_family)
    print(settings.classifier.statistics.similarity_cutoff_db)
"""

import os
import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class PreprocessConfig(BaseModel):
    """Grayscale conversion and denoising applied before any differencing."""

    blur_kernel_size: int = Field(
        default=3,
        gt=0,
        description="Gaussian blur kernel size (odd, square)",
    )

    @field_validator("blur_kernel_size")
    @classmethod
    def _kernel_must_be_odd(cls, value: int) -> int:
        if value % 2 == 0:
            raise ValueError(f"blur_kernel_size must be odd, got {value}")
        return value


class CalibrationConfig(BaseModel):
    """Noise floor calibration over the stream prefix."""

    sample_frames: int = Field(
        default=15,
        ge=2,
        description="Number of leading frames scanned for the noise baseline",
    )
    sanity_bound: float = Field(
        default=1.0,
        gt=0,
        description="Pairs with a difference mean above this are real motion and are skipped",
    )
    default_mu: float = Field(
        default=0.05,
        ge=0,
        description="Baseline mean used when no calibration pair qualifies",
    )
    default_sigma: float = Field(
        default=0.02,
        ge=0,
        description="Baseline std-dev used when no calibration pair qualifies",
    )


class StatisticsRuleConfig(BaseModel):
    """Thresholds for the pixel-statistics rule chain."""

    similarity_cutoff_db: float = Field(
        default=50.0,
        gt=0,
        description="PSNR above which consecutive frames count as duplicates",
    )
    noise_k: float = Field(
        default=2.0,
        ge=0,
        description="Std-dev multiplier added to the calibrated noise mean",
    )
    low_mean_floor: float = Field(
        default=0.0,
        ge=0,
        description="Absolute difference mean below which a frame is a drop (0 disables)",
    )
    merge_motion_floor: float = Field(
        default=1.5,
        ge=0,
        description="Minimum difference mean for the merge rule to apply",
    )
    merge_sharpness_ratio: float = Field(
        default=0.4,
        gt=0,
        le=1.0,
        description="Current sharpness must be below this fraction of both neighbours",
    )


class MotionRuleConfig(BaseModel):
    """Thresholds for the binarized motion-magnitude rule chain."""

    window_capacity: int = Field(
        default=7,
        ge=1,
        description="Number of recent motion samples kept for the local median",
    )
    binarize_threshold: int = Field(
        default=10,
        ge=0,
        le=255,
        description="Intensity difference above which a pixel counts as moving",
    )
    spike_factor: float = Field(
        default=1.5,
        gt=0,
        description="Motion above spike_factor x local median is a drop",
    )
    valley_factor: float = Field(
        default=0.35,
        gt=0,
        description="Motion below valley_factor x local median is a freeze/merge",
    )
    min_window_samples: int = Field(
        default=3,
        ge=1,
        description="Samples required in the window before the freeze rule applies",
    )


class ClassifierConfig(BaseModel):
    """Frame classifier configuration."""

    signal_family: Literal["statistics", "motion"] = Field(
        default="statistics",
        description="Signal family driving the content rules",
    )
    timing_gap_factor: float = Field(
        default=1.5,
        gt=1.0,
        description="Timestamp gap (in nominal intervals) that marks a drop",
    )
    default_frame_rate: float = Field(
        default=30.0,
        gt=0,
        description="Frame rate assumed when the source does not report one",
    )
    log_every_n_frames: int = Field(
        default=100,
        ge=1,
        description="Progress logging interval",
    )
    statistics: StatisticsRuleConfig = Field(default_factory=StatisticsRuleConfig)
    motion: MotionRuleConfig = Field(default_factory=MotionRuleConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the frame integrity analyzer.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    preprocess: PreprocessConfig = Field(default_factory=PreprocessConfig)
    calibration: CalibrationConfig = Field(default_factory=CalibrationConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def find_config_file(config_path: Optional[str] = None) -> Optional[str]:
    """
    Resolve the config file to load.

    Args:
        config_path: Explicit path, or None to search the working directory

    Returns:
        Path of the file to load, or None when the search finds nothing

    Raises:
        FileNotFoundError: If an explicit path does not exist
    """
    if config_path is not None:
        if not Path(config_path).is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return str(config_path)

    for path in (Path("config.yaml"), Path("config.yml")):
        if path.exists():
            return str(path)
    return None


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches the working directory.

    Returns:
        Settings: Loaded configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    config_path = find_config_file(config_path)

    config_data = {}
    if config_path:
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Classifier settings
    if env_family := os.environ.get("FRAME_INTEGRITY_SIGNAL_FAMILY"):
        config_data.setdefault("classifier", {})["signal_family"] = env_family
    if env_cutoff := os.environ.get("FRAME_INTEGRITY_SIMILARITY_CUTOFF"):
        config_data.setdefault("classifier", {}).setdefault("statistics", {})[
            "similarity_cutoff_db"
        ] = float(env_cutoff)
    if env_window := os.environ.get("FRAME_INTEGRITY_WINDOW_CAPACITY"):
        config_data.setdefault("classifier", {}).setdefault("motion", {})[
            "window_capacity"
        ] = int(env_window)

    # Calibration / preprocessing
    if env_frames := os.environ.get("FRAME_INTEGRITY_CALIBRATION_FRAMES"):
        config_data.setdefault("calibration", {})["sample_frames"] = int(env_frames)
    if env_kernel := os.environ.get("FRAME_INTEGRITY_BLUR_KERNEL"):
        config_data.setdefault("preprocess", {})["blur_kernel_size"] = int(env_kernel)

    # Logging settings
    if env_log := os.environ.get("FRAME_INTEGRITY_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("FRAME_INTEGRITY_LOG_FORMAT"):
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
