"""
Read-set resolution and sequencing type inference.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ngsrun.pipeline.validators import is_existing_file, validate_file_path

logger = logging.getLogger(__name__)

PAIRED_SEQ_TYPE = "illumina_paired"
SINGLE_SEQ_TYPE = "ion"


@dataclass
class ReadSet:
    """Reads handed to a step, with the sequencing type they imply."""

    r1: Path
    r2: Optional[Path] = None
    seq_type: str = SINGLE_SEQ_TYPE
    # Tokens that looked like an R2 argument but were not files.
    passthrough: list[str] = field(default_factory=list)

    @property
    def paired(self) -> bool:
        return self.r2 is not None


def resolve_reads(
    r1: str | Path,
    second: Optional[str] = None,
    seq_type: Optional[str] = None,
) -> ReadSet:
    """
    Validate the reads and infer the sequencing type.

    ``second`` is the token following R1 on the command line. An existing
    file makes the run paired-end; anything else marks it single-end and
    is kept for the engine. An explicit ``seq_type`` overrides inference.

    Raises:
        InputFileNotFoundError: If R1 does not exist
    """
    reads = ReadSet(r1=validate_file_path(r1))

    if second and not second.startswith("--"):
        if is_existing_file(second):
            reads.r2 = validate_file_path(second)
        else:
            logger.debug(f"'{second}' is not a file, forwarding it to the engine")
            reads.passthrough.append(second)

    reads.seq_type = PAIRED_SEQ_TYPE if reads.paired else SINGLE_SEQ_TYPE
    if seq_type:
        reads.seq_type = seq_type

    return reads
