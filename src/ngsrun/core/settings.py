"""
Settings for the NGSManager runner, read from the environment.
"""

from pathlib import Path

from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: str = Field(default="INFO", description="Logging level")
    file: str | None = Field(default=None, description="Log file path")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"log level must be one of {valid_levels}")
        return v

    model_config = ConfigDict(env_prefix="NGSRUN_LOG_", env_file=".env", extra="ignore")


class DockerSettings(BaseSettings):
    """Container options written to the generated engine config."""

    cpus: int = Field(default=64, ge=1, description="CPUs granted to each container")
    memory_swappiness: int = Field(default=0, ge=0, le=100)
    fix_ownership: bool = Field(default=True)

    model_config = ConfigDict(env_prefix="NGSRUN_DOCKER_", env_file=".env", extra="ignore")


class RunnerSettings(BaseSettings):
    """Main runner settings.

    ``NGSMANAGER_DIR``, ``WORKDIR`` and ``NEXTFLOW`` are read without a
    prefix so that existing shell setups keep working.
    """

    ngsmanager_dir: Path | None = Field(
        default=None, description="Path to the cohesive-ngsmanager checkout"
    )
    workdir: Path = Field(
        default_factory=lambda: Path.cwd() / "ngsmanager_workdir",
        description="Working directory holding inputs, results and engine state",
    )
    nextflow: Path | None = Field(default=None, description="Path to nextflow")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    docker: DockerSettings = Field(default_factory=DockerSettings)

    @field_validator("ngsmanager_dir", "nextflow", mode="before")
    @classmethod
    def empty_as_unset(cls, v):
        """Treat empty environment values as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("workdir")
    @classmethod
    def absolute_workdir(cls, v: Path) -> Path:
        return v.expanduser().absolute()

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> RunnerSettings:
    """Load settings from the current environment."""
    return RunnerSettings()
