"""
Tests for the run directory layout
"""

import os

import pytest

from ngsrun.core.exceptions import ValidationError
from ngsrun.pipeline.identifiers import RunIdentifiers
from ngsrun.pipeline.layout import RunLayout


@pytest.fixture
def ids():
    return RunIdentifiers(year="2025", dt="251019", ds="06582", cmp="2025.CLI.06582.1.1")


@pytest.fixture
def layout(workdir, ids):
    return RunLayout(workdir=workdir, ids=ids)


class TestRunLayoutPaths:
    """Tests for derived paths"""

    def test_input_dir(self, layout, workdir):
        """Test the input directory follows the NGSManager convention"""
        expected = (
            workdir / "inputdir" / "2025" / "2025.CLI.06582.1.1" / "0SQ_rawreads"
            / "DS06582-DT251019_import" / "result"
        )
        assert layout.input_dir == expected

    def test_engine_directories(self, layout, workdir):
        """Test results, work, tmp, engine home and config paths"""
        assert layout.input_root == workdir / "inputdir"
        assert layout.output_dir == workdir / "results"
        assert layout.work_dir == workdir / "work"
        assert layout.tmp_dir == workdir / ".tmp"
        assert layout.nextflow_home == workdir / ".nextflow"
        assert layout.cli_config == workdir / "cli.config"
        assert layout.sample_output_dir == workdir / "results" / "2025" / "2025.CLI.06582.1.1"

    def test_read_names(self, layout):
        """Test symlink names carry DS, DT, CMP and the mate"""
        assert layout.read_name("R1") == "DS06582-DT251019_2025.CLI.06582.1.1_R1.fastq.gz"
        assert layout.read_name("R2") == "DS06582-DT251019_2025.CLI.06582.1.1_R2.fastq.gz"

    def test_relative_workdir_is_made_absolute(self, ids, clean_env):
        """Test a relative workdir is anchored at the current directory"""
        layout = RunLayout(workdir="rel", ids=ids)
        assert layout.workdir == clean_env / "rel"


class TestRunLayoutFilesystem:
    """Tests for directory creation and linking"""

    def test_create(self, layout):
        """Test all run directories are created"""
        layout.create()
        for directory in (layout.input_dir, layout.output_dir, layout.work_dir, layout.tmp_dir):
            assert directory.is_dir()

    def test_create_is_repeatable(self, layout):
        """Test creating an existing layout succeeds"""
        layout.create()
        layout.create()
        assert layout.input_dir.is_dir()

    def test_link_paired_reads(self, layout, reads):
        """Test both reads are linked under their convention names"""
        r1, r2 = reads
        layout.create()
        links = layout.link_reads(r1, r2)

        assert [link.name for link in links] == [layout.read_name("R1"), layout.read_name("R2")]
        assert all(link.is_symlink() for link in links)
        assert os.readlink(links[0]) == str(r1)
        assert os.readlink(links[1]) == str(r2)

    def test_link_single_read(self, layout, reads):
        """Test only R1 is linked for single-end runs"""
        layout.create()
        links = layout.link_reads(reads[0])

        assert len(links) == 1
        assert not (layout.input_dir / layout.read_name("R2")).exists()

    def test_relink_replaces_existing(self, layout, reads, tmp_path):
        """Test linking again points the link at the new file"""
        r1, _ = reads
        other = tmp_path / "other_R1.fastq.gz"
        other.write_bytes(b"")
        layout.create()
        layout.link_reads(r1)
        (link,) = layout.link_reads(other)

        assert os.readlink(link) == str(other)

    def test_relink_replaces_regular_file(self, layout, reads):
        """Test a regular file in the way is replaced by the link"""
        layout.create()
        (layout.input_dir / layout.read_name("R1")).write_text("stale")
        (link,) = layout.link_reads(reads[0])

        assert link.is_symlink()

    def test_directory_in_the_way(self, layout, reads):
        """Test a directory at the link name is reported as a validation error"""
        layout.create()
        (layout.input_dir / layout.read_name("R1")).mkdir()

        with pytest.raises(ValidationError, match="Cannot link"):
            layout.link_reads(reads[0])

    def test_describe_inputs(self, layout, reads):
        """Test the listing shows links and their targets"""
        r1, r2 = reads
        assert layout.describe_inputs() == []
        layout.create()
        layout.link_reads(r1, r2)

        assert layout.describe_inputs() == [
            f"{layout.read_name('R1')} -> {r1}",
            f"{layout.read_name('R2')} -> {r2}",
        ]
