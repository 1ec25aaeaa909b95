"""
Assembles and runs the nextflow command for a prepared run.

The engine runs in the foreground with its output going straight to the
terminal; its exit status is returned unchanged.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from ngsrun.core.exceptions import EngineNotFoundError
from ngsrun.pipeline.identifiers import RunIdentifiers
from ngsrun.pipeline.layout import RunLayout

logger = logging.getLogger(__name__)


@dataclass
class LaunchRequest:
    """Everything needed to start one step."""

    step_file: Path
    layout: RunLayout
    seq_type: str
    config_path: Optional[Path] = None
    resume: bool = False
    genus_species: Optional[str] = None
    extra_args: list[str] = field(default_factory=list)

    @property
    def ids(self) -> RunIdentifiers:
        return self.layout.ids


class NextflowLauncher:
    """Runs a step through nextflow."""

    def __init__(self, executable: str | Path, dry_run: bool = False):
        self.executable = Path(executable)
        self.dry_run = dry_run

    def build_command(self, request: LaunchRequest) -> list[str]:
        layout = request.layout
        cmd = [str(self.executable), "run", str(request.step_file)]

        if request.config_path is not None:
            cmd.extend(["-c", str(request.config_path)])

        cmd.extend([
            "--cmp", request.ids.cmp,
            "--riscd", request.ids.riscd,
            "--seq_type", request.seq_type,
            "--inputdir", str(layout.input_root),
            "--outdir", str(layout.output_dir),
            "-work-dir", str(layout.work_dir),
        ])

        if request.resume:
            cmd.append("-resume")

        if request.genus_species:
            cmd.extend(["--genus_species", request.genus_species])

        cmd.extend(request.extra_args)
        return cmd

    @staticmethod
    def build_environment(
        layout: RunLayout,
        base: Optional[Mapping[str, str]] = None,
    ) -> dict[str, str]:
        """Environment for the engine: temp files and engine home inside the workdir."""
        env = dict(os.environ if base is None else base)
        env["NXF_TEMP"] = str(layout.tmp_dir)
        env["TMPDIR"] = str(layout.tmp_dir)
        env["NXF_HOME"] = str(layout.nextflow_home)
        return env

    def run(self, request: LaunchRequest) -> int:
        """
        Execute the step.

        Returns:
            The engine's exit status (0 in dry-run mode)

        Raises:
            EngineNotFoundError: If the executable cannot be started
        """
        command = self.build_command(request)

        if self.dry_run:
            logger.info(f"[DRY RUN] Would execute: {' '.join(command)}")
            return 0

        env = self.build_environment(request.layout)
        logger.info(f"Executing: {Path(request.step_file).name}")
        logger.debug(f"Command: {' '.join(command)}")

        start_time = time.time()
        try:
            result = subprocess.run(command, env=env, check=False)
        except OSError as exc:
            logger.error(f"Could not start {self.executable}: {exc}")
            raise EngineNotFoundError(
                f"Cannot execute nextflow at {self.executable}: {exc}",
                executable=str(self.executable),
            ) from exc

        execution_time = time.time() - start_time
        logger.info(f"Engine finished in {execution_time:.2f}s with exit code {result.returncode}")
        return result.returncode


def collect_outputs(layout: RunLayout) -> list[str]:
    """Files and symlinks under ``results/``, relative to the workdir."""
    if not layout.output_dir.is_dir():
        return []
    found = []
    for root, dirs, files in os.walk(layout.output_dir):
        base = Path(root)
        for name in files:
            found.append(base / name)
        # os.walk lists directory symlinks under dirs and does not descend
        for name in dirs:
            if (base / name).is_symlink():
                found.append(base / name)
    return sorted(str(path.relative_to(layout.workdir)) for path in found)
