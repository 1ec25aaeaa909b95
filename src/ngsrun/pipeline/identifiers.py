"""
Identifiers NGSManager expects in directory and file names.

The sample code (DS) is derived from the R1 path so repeated runs on the
same file land in the same input tree.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

INPUT_ACC = "0SQ_rawreads"
INPUT_METHOD = "import"

SAMPLE_CODE_MODULUS = 99999
_HEX_LETTERS_TO_DIGITS = str.maketrans("abcdef", "012345")


def sample_code(r1: str | Path) -> str:
    """
    Five-digit sample code derived from the R1 path.

    The first five hex characters of ``md5(path + "\\n")`` have their
    letters mapped to digits, are read back as hexadecimal, reduced modulo
    99999 and shifted into ``1..99999``.

    >>> sample_code("/data/sample_R1.fastq.gz")
    '06582'
    """
    digest = hashlib.md5(f"{r1}\n".encode("utf-8")).hexdigest()[:5]
    value = int(digest.translate(_HEX_LETTERS_TO_DIGITS), 16)
    return f"{value % SAMPLE_CODE_MODULUS + 1:05d}"


def default_cmp(year: str, ds: str) -> str:
    return f"{year}.CLI.{ds}.1.1"


def build_riscd(dt: str, ds: str, acc: str = INPUT_ACC, method: str = INPUT_METHOD) -> str:
    return f"{dt}-{ds}-{acc}-{method}"


@dataclass(frozen=True)
class RunIdentifiers:
    """Identifiers for one run."""

    year: str
    dt: str
    ds: str
    cmp: str
    input_acc: str = INPUT_ACC
    input_method: str = INPUT_METHOD

    @property
    def riscd(self) -> str:
        return build_riscd(self.dt, self.ds, self.input_acc, self.input_method)

    @property
    def dataset_tag(self) -> str:
        """``DS<ds>-DT<dt>`` prefix shared by the input directory and files."""
        return f"DS{self.ds}-DT{self.dt}"


def generate_identifiers(
    r1: str | Path,
    cmp: Optional[str] = None,
    now: Optional[datetime] = None,
) -> RunIdentifiers:
    """Build the identifiers for a run on ``r1``, honouring a CMP override."""
    now = now or datetime.now()
    year = now.strftime("%Y")
    ds = sample_code(r1)
    return RunIdentifiers(
        year=year,
        dt=now.strftime("%y%m%d"),
        ds=ds,
        cmp=cmp or default_cmp(year, ds),
    )
