"""
Run preparation for NGSManager steps.

- locator: NGSManager checkout, nextflow binary, step files
- reads / identifiers / layout: inputs, names and directory tree
- engine_config: generated Docker config
- launcher: nextflow command and execution
"""

from ngsrun.pipeline.identifiers import RunIdentifiers, generate_identifiers, sample_code
from ngsrun.pipeline.launcher import LaunchRequest, NextflowLauncher, collect_outputs
from ngsrun.pipeline.layout import RunLayout
from ngsrun.pipeline.reads import ReadSet, resolve_reads

__all__ = [
    "LaunchRequest",
    "NextflowLauncher",
    "ReadSet",
    "RunIdentifiers",
    "RunLayout",
    "collect_outputs",
    "generate_identifiers",
    "resolve_reads",
    "sample_code",
]
