"""
Pytest configuration for ngsrun tests
This file configures paths and fixtures for all tests
"""
import os
import stat
import sys
from pathlib import Path

import pytest

# Get the project root directory
PROJECT_ROOT = Path(__file__).parent.parent
SRC_DIR = PROJECT_ROOT / "src"

# Add src to Python path
sys.path.insert(0, str(SRC_DIR))

RUNNER_ENV_VARS = (
    "NGSMANAGER_DIR",
    "WORKDIR",
    "NEXTFLOW",
    "NGSRUN_LOG_LEVEL",
    "NGSRUN_LOG_FILE",
    "NGSRUN_DOCKER_CPUS",
    "NGSRUN_DOCKER_MEMORY_SWAPPINESS",
    "NGSRUN_DOCKER_FIX_OWNERSHIP",
)

FAKE_NEXTFLOW = """#!/bin/sh
printf '%s\\n' "$@" > "$FAKE_NF_LOG"
printf 'NXF_HOME=%s\\nNXF_TEMP=%s\\nTMPDIR=%s\\n' "$NXF_HOME" "$NXF_TEMP" "$TMPDIR" > "$FAKE_NF_LOG.env"
mkdir -p "$NXF_HOME" "$NXF_HOME/../results/sample"
echo done > "$NXF_HOME/../results/sample/report.txt"
exit "${FAKE_NF_EXIT:-0}"
"""


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def make_executable(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate every test from the caller's runner environment and .env file"""
    for name in RUNNER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    run_dir = tmp_path / "cwd"
    run_dir.mkdir()
    monkeypatch.chdir(run_dir)
    return run_dir


@pytest.fixture
def ngsmanager_dir(tmp_path):
    """Minimal cohesive-ngsmanager checkout with three steps"""
    root = tmp_path / "cohesive-ngsmanager"
    steps = root / "steps"
    steps.mkdir(parents=True)

    # Has a scripts directory, no mount in the step itself
    (steps / "step_1PP_trimming__fastp.nf").write_text(
        "process fastp {\n    container 'biocontainers/fastp'\n}\n"
    )
    (root / "scripts" / "step_1PP_trimming__fastp").mkdir(parents=True)

    # Mounts /scripts itself
    (steps / "step_4AN_AMR__resfinder.nf").write_text(
        "process resfinder {\n"
        "    containerOptions = \"-v ${projectDir}/../scripts/step_4AN_AMR__resfinder:/scripts:ro\"\n"
        "}\n"
    )

    # Neither scripts directory nor mount
    (steps / "step_2AS_denovo__spades.nf").write_text("process spades {}\n")

    (steps / "README.md").write_text("not a step\n")
    return root


@pytest.fixture
def reads(tmp_path):
    """Paired FASTQ files"""
    data = tmp_path / "data"
    data.mkdir()
    r1 = data / "sample_R1.fastq.gz"
    r2 = data / "sample_R2.fastq.gz"
    r1.write_bytes(b"@SEQ1\nACGT\n+\nIIII\n")
    r2.write_bytes(b"@SEQ1\nTGCA\n+\nIIII\n")
    return r1, r2


@pytest.fixture
def fake_nextflow(tmp_path, monkeypatch):
    """Executable standing in for nextflow; records its arguments and environment"""
    script = make_executable(tmp_path / "bin" / "nextflow", FAKE_NEXTFLOW)
    log = tmp_path / "nextflow_args.txt"
    monkeypatch.setenv("FAKE_NF_LOG", str(log))
    return script, log


@pytest.fixture
def workdir(tmp_path):
    return tmp_path / "ngsmanager_workdir"


@pytest.fixture
def runner_env(monkeypatch, ngsmanager_dir, fake_nextflow, workdir):
    """Environment variables pointing the CLI at the fake checkout and engine"""
    monkeypatch.setenv("NGSMANAGER_DIR", str(ngsmanager_dir))
    monkeypatch.setenv("NEXTFLOW", str(fake_nextflow[0]))
    monkeypatch.setenv("WORKDIR", str(workdir))
    return os.environ


@pytest.fixture
def make_nextflow():
    """Factory writing a fake nextflow executable at a given path"""
    def _make(path: Path) -> Path:
        return make_executable(path, FAKE_NEXTFLOW)
    return _make
