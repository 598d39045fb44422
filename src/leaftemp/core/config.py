"""
Configuration system with validation and environment awareness.
Based on Pydantic Settings for robust configuration management.
"""
import logging
from pathlib import Path
import yaml
from pydantic import Field, model_validator, ConfigDict
from pydantic_settings import BaseSettings
from typing import Optional, Literal, Union

from leaftemp.core.exceptions import ConfigurationError


class SolverConfig(BaseSettings):
    """Configuration for the bounded leaf temperature solver"""

    # Search interval (°C)
    lower_bound_c: float = Field(-10.0, description="Lowest admissible leaf temperature")
    upper_bound_c: float = Field(90.0, description="Highest admissible leaf temperature")

    # Optimizer
    method: Literal["L-BFGS-B"] = "L-BFGS-B"
    jac: Literal["2-point", "3-point"] = Field(
        "3-point", description="Finite-difference scheme for the residual gradient"
    )
    max_iterations: int = Field(500, gt=0, description="Maximum optimizer iterations")
    ftol: float = Field(1e-12, gt=0, description="Relative objective reduction tolerance")
    gtol: float = Field(1e-9, gt=0, description="Projected gradient tolerance")

    # Acceptance
    balance_tolerance_w_m2: float = Field(
        1e-4, gt=0, description="Largest |losses - gains| accepted as converged"
    )

    # Numerical stability
    min_wind_speed_m_s: float = Field(
        0.001, gt=0, description="Wind speed floor avoiding a zero Reynolds number"
    )

    model_config = ConfigDict(env_prefix="LEAFTEMP_SOLVER_", case_sensitive=False)

    @model_validator(mode="after")
    def validate_bounds(self):
        """Search interval must be non-empty"""
        if self.lower_bound_c >= self.upper_bound_c:
            raise ValueError(
                f"lower_bound_c ({self.lower_bound_c}) must be below "
                f"upper_bound_c ({self.upper_bound_c})"
            )
        return self


class LoggingConfig(BaseSettings):
    """Configuration for logging"""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    model_config = ConfigDict(env_prefix="LEAFTEMP_LOGGING_", case_sensitive=False)


class LeafTempConfig(BaseSettings):
    """Main configuration for the leaf temperature model"""

    project_name: str = "leaftemp"

    solver: SolverConfig = Field(default_factory=SolverConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        env_prefix="LEAFTEMP_",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
    )

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "LeafTempConfig":
        """Load configuration from YAML file"""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        try:
            return cls(**yaml_config)
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration in {yaml_path}: {e}") from e

    def to_yaml(self, yaml_path: Union[str, Path]):
        """Save configuration to YAML file"""
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False)


def configure_logging(config: Optional[LeafTempConfig] = None):
    """Apply the logging section of the configuration to the package logger"""
    config = config or get_config()
    logger = logging.getLogger("leaftemp")
    logger.setLevel(config.logging.log_level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(config.logging.log_format))
        logger.addHandler(handler)

    return logger


# Global configuration instance
_config: Optional[LeafTempConfig] = None


def get_config(config_path: Optional[Path] = None) -> LeafTempConfig:
    """Get or create configuration instance (singleton pattern)"""
    global _config

    if _config is None:
        if config_path and Path(config_path).exists():
            _config = LeafTempConfig.from_yaml(config_path)
        else:
            # Try to load from environment
            _config = LeafTempConfig()

    return _config


def set_config(config: Optional[LeafTempConfig]):
    """Set configuration (useful for testing)"""
    global _config
    _config = config
