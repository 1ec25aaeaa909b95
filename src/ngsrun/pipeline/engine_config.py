"""
Generated nextflow config controlling Docker execution.

Steps that need helper scripts expect them mounted at ``/scripts`` inside
the container. When the step file already mounts them through
``containerOptions`` the generated config must not mount them again.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ngsrun.core.exceptions import ValidationError
from ngsrun.core.settings import DockerSettings
from ngsrun.pipeline.locator import step_entrypoint

logger = logging.getLogger(__name__)

SCRIPTS_MOUNT_POINT = "/scripts"
SCRIPTS_MOUNT_PATTERN = re.compile(r"containerOptions.*:/scripts")


class ScriptsMount(str, Enum):
    """How the container gets the step's helper scripts."""

    GENERATED = "generated"  # mounted by the generated config
    STEP = "step"  # the step file mounts them itself
    NONE = "none"  # no scripts directory; no config written


@dataclass
class DockerConfig:
    """Docker options for the generated config."""

    cpus: int = 64
    memory_swappiness: int = 0
    fix_ownership: bool = True
    scripts_dir: Optional[Path] = None

    @classmethod
    def from_settings(cls, settings: DockerSettings, scripts_dir: Optional[Path] = None) -> "DockerConfig":
        return cls(
            cpus=settings.cpus,
            memory_swappiness=settings.memory_swappiness,
            fix_ownership=settings.fix_ownership,
            scripts_dir=scripts_dir,
        )

    def run_options(self) -> str:
        # \$ stays escaped in the file so nextflow expands the ids at run time
        options = [
            r"-u \$(id -u):\$(id -g)",
            f"--memory-swappiness {self.memory_swappiness}",
            f"--cpus {self.cpus}",
        ]
        if self.scripts_dir is not None:
            options.append(f"-v {self.scripts_dir}:{SCRIPTS_MOUNT_POINT}:ro")
        return " ".join(options)

    def render(self, comment: str) -> str:
        return (
            f"// Auto-generated CLI config - {comment}\n"
            "docker {\n"
            "    enabled = true\n"
            f'    runOptions = "{self.run_options()}"\n'
            f"    fixOwnership = {str(self.fix_ownership).lower()}\n"
            "}\n"
        )


@dataclass
class EngineConfigResult:
    mount: ScriptsMount
    scripts_dir: Path
    config_path: Optional[Path] = None


def step_has_scripts_mount(step_file: Path) -> bool:
    """True when the step already mounts ``/scripts`` via ``containerOptions``."""
    try:
        text = Path(step_file).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug(f"Could not read step file {step_file}: {exc}")
        return False
    return any(SCRIPTS_MOUNT_PATTERN.search(line) for line in text.splitlines())


def scripts_dir_for(step_file: Path, ngsmanager_dir: Path) -> Path:
    return Path(ngsmanager_dir) / "scripts" / step_entrypoint(step_file)


def write_engine_config(
    step_file: Path,
    ngsmanager_dir: Path,
    destination: Path,
    docker: Optional[DockerSettings] = None,
) -> EngineConfigResult:
    """
    Write ``destination`` when the step needs a Docker config.

    Returns:
        EngineConfigResult; ``config_path`` is None when nothing was written
    """
    docker = docker or DockerSettings()
    scripts_dir = scripts_dir_for(step_file, ngsmanager_dir)

    if step_has_scripts_mount(step_file):
        config = DockerConfig.from_settings(docker)
        comment = "step already has containerOptions with /scripts mount"
        mount = ScriptsMount.STEP
    elif scripts_dir.is_dir():
        config = DockerConfig.from_settings(docker, scripts_dir=scripts_dir)
        comment = "mounts scripts directory for container processes"
        mount = ScriptsMount.GENERATED
    else:
        logger.debug(f"No scripts directory at {scripts_dir}")
        return EngineConfigResult(mount=ScriptsMount.NONE, scripts_dir=scripts_dir)

    destination = Path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(config.render(comment), encoding="utf-8")
    except OSError as exc:
        raise ValidationError(f"Cannot write engine config: {exc}", path=str(destination)) from exc
    logger.info(f"Wrote engine config: {destination}")

    return EngineConfigResult(mount=mount, scripts_dir=scripts_dir, config_path=destination)
