"""
Working-directory layout for a single run.

::

    <workdir>/
        inputdir/<year>/<cmp>/<acc>/DS<ds>-DT<dt>_<method>/result/
            DS<ds>-DT<dt>_<cmp>_R1.fastq.gz -> <R1>
            DS<ds>-DT<dt>_<cmp>_R2.fastq.gz -> <R2>
        results/
        work/
        .tmp/
        .nextflow/
        cli.config
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ngsrun.core.exceptions import ValidationError
from ngsrun.pipeline.identifiers import RunIdentifiers
from ngsrun.pipeline.validators import validate_output_directory

logger = logging.getLogger(__name__)

READ_SUFFIX = ".fastq.gz"


@dataclass
class RunLayout:
    """Paths for one run under ``workdir``."""

    workdir: Path
    ids: RunIdentifiers

    def __post_init__(self):
        self.workdir = Path(self.workdir).absolute()

    @property
    def input_root(self) -> Path:
        return self.workdir / "inputdir"

    @property
    def input_dir(self) -> Path:
        ids = self.ids
        return (
            self.input_root
            / ids.year
            / ids.cmp
            / ids.input_acc
            / f"{ids.dataset_tag}_{ids.input_method}"
            / "result"
        )

    @property
    def output_dir(self) -> Path:
        return self.workdir / "results"

    @property
    def work_dir(self) -> Path:
        return self.workdir / "work"

    @property
    def tmp_dir(self) -> Path:
        return self.workdir / ".tmp"

    @property
    def nextflow_home(self) -> Path:
        return self.workdir / ".nextflow"

    @property
    def cli_config(self) -> Path:
        return self.workdir / "cli.config"

    @property
    def sample_output_dir(self) -> Path:
        """Where the step writes results for this sample."""
        return self.output_dir / self.ids.year / self.ids.cmp

    def read_name(self, mate: str) -> str:
        return f"{self.ids.dataset_tag}_{self.ids.cmp}_{mate}{READ_SUFFIX}"

    def create(self) -> None:
        """Create the input, results, work and tmp directories."""
        for directory in (self.input_dir, self.output_dir, self.work_dir, self.tmp_dir):
            validate_output_directory(directory)
        logger.debug(f"Created run layout under {self.workdir}")

    def link_reads(self, r1: Path, r2: Optional[Path] = None) -> list[Path]:
        """
        Symlink the reads into the input directory.

        Existing entries with the same name are replaced, so re-running on
        the same sample relinks rather than failing.
        """
        links = [self._force_symlink(r1, self.input_dir / self.read_name("R1"))]
        if r2 is not None:
            links.append(self._force_symlink(r2, self.input_dir / self.read_name("R2")))
        return links

    @staticmethod
    def _force_symlink(target: Path, link: Path) -> Path:
        try:
            if link.is_symlink() or link.exists():
                link.unlink()
            os.symlink(target, link)
        except OSError as exc:
            raise ValidationError(f"Cannot link {link}: {exc}", path=str(link)) from exc
        logger.debug(f"Linked {link} -> {target}")
        return link

    def describe_inputs(self) -> list[str]:
        """One line per entry in the input directory, ``name -> target`` for links."""
        if not self.input_dir.is_dir():
            return []
        lines = []
        for entry in sorted(self.input_dir.iterdir()):
            if entry.is_symlink():
                lines.append(f"{entry.name} -> {os.readlink(entry)}")
            else:
                lines.append(entry.name)
        return lines
