"""
Locates the collaborators a run needs: the NGSManager checkout, the
nextflow binary and the step file.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Iterable, Optional

from ngsrun.core.exceptions import (
    EngineNotFoundError,
    NGSManagerNotFoundError,
    StepNotFoundError,
)

logger = logging.getLogger(__name__)

NGSMANAGER_DIRNAME = "cohesive-ngsmanager"
STEP_SUFFIX = ".nf"


def default_search_dirs() -> list[Path]:
    """Directories searched for a ``cohesive-ngsmanager`` checkout."""
    script_dir = Path(sys.argv[0]).resolve().parent if sys.argv and sys.argv[0] else Path.cwd()
    return [script_dir, Path.cwd()]


def find_ngsmanager_dir(
    configured: Optional[str | Path] = None,
    search_dirs: Optional[Iterable[Path]] = None,
) -> Path:
    """
    Resolve the NGSManager checkout.

    An explicitly configured directory is used as given; otherwise the
    first ``cohesive-ngsmanager`` directory found in ``search_dirs`` wins.

    Raises:
        NGSManagerNotFoundError: If nothing is configured and nothing is found
    """
    if configured:
        path = Path(configured).expanduser().resolve()
        logger.debug(f"Using configured NGSManager directory: {path}")
        return path

    dirs = list(search_dirs) if search_dirs is not None else default_search_dirs()
    for base in dirs:
        candidate = Path(base) / NGSMANAGER_DIRNAME
        if candidate.is_dir():
            logger.debug(f"Found NGSManager directory: {candidate}")
            return candidate.resolve()

    raise NGSManagerNotFoundError([str(Path(base) / NGSMANAGER_DIRNAME) for base in dirs])


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def find_nextflow(
    configured: Optional[str | Path] = None,
    home: Optional[Path] = None,
) -> Path:
    """
    Resolve the nextflow binary.

    Order: the configured path when it is executable, ``nextflow`` on
    PATH, then ``~/.local/bin/nextflow``.

    Raises:
        EngineNotFoundError: If no executable is found
    """
    if configured:
        path = Path(configured).expanduser()
        if _is_executable(path):
            logger.debug(f"Using configured nextflow: {path}")
            return path
        logger.warning(f"NEXTFLOW is set but not executable: {path}")

    on_path = shutil.which("nextflow")
    if on_path:
        logger.debug(f"Found nextflow in PATH: {on_path}")
        return Path(on_path)

    local_bin = (home or Path.home()) / ".local" / "bin" / "nextflow"
    if _is_executable(local_bin):
        logger.debug(f"Found nextflow in {local_bin.parent}")
        return local_bin

    raise EngineNotFoundError()


def steps_dir(ngsmanager_dir: Path) -> Path:
    return Path(ngsmanager_dir) / "steps"


def list_steps(ngsmanager_dir: Path) -> list[str]:
    """Return the sorted step file names shipped with NGSManager."""
    directory = steps_dir(ngsmanager_dir)
    if not directory.is_dir():
        return []
    return sorted(p.name for p in directory.iterdir() if p.name.endswith(STEP_SUFFIX))


def resolve_step(step: str, ngsmanager_dir: Path) -> Path:
    """
    Find the step file for ``step``.

    Accepts a path to a step file, a file name under ``steps/``, or a
    bare step name such as ``1PP_trimming__fastp``.

    Raises:
        StepNotFoundError: If no candidate exists
    """
    directory = steps_dir(ngsmanager_dir)
    candidates = [
        Path(step),
        directory / step,
        directory / f"step_{step}{STEP_SUFFIX}",
    ]
    for candidate in candidates:
        if candidate.is_file():
            logger.debug(f"Resolved step '{step}' to {candidate}")
            return candidate

    raise StepNotFoundError(step, [str(c) for c in candidates])


def step_entrypoint(step_file: Path) -> str:
    """Step name without the ``.nf`` suffix, e.g. ``step_1PP_trimming__fastp``."""
    name = Path(step_file).name
    if name.endswith(STEP_SUFFIX):
        return name[: -len(STEP_SUFFIX)]
    return name
