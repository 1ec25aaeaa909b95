"""
Command-line entry point: run one NGSManager step through nextflow.

Prepares the input tree and names NGSManager expects, writes the Docker
config, launches the step and exits with nextflow's exit status.
"""

import argparse
import logging
import sys
import textwrap
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from pydantic import ValidationError as SettingsValidationError

from ngsrun import __version__
from ngsrun.core.exceptions import EngineNotFoundError, RunnerError, StepNotFoundError
from ngsrun.core.logging_config import setup_logging
from ngsrun.core.settings import RunnerSettings, get_settings
from ngsrun.pipeline.engine_config import ScriptsMount, write_engine_config
from ngsrun.pipeline.identifiers import generate_identifiers
from ngsrun.pipeline.launcher import LaunchRequest, NextflowLauncher, collect_outputs
from ngsrun.pipeline.layout import RunLayout
from ngsrun.pipeline.locator import (
    find_ngsmanager_dir,
    find_nextflow,
    list_steps,
    resolve_step,
)
from ngsrun.pipeline.reads import resolve_reads

logger = logging.getLogger(__name__)

TITLE = "NGSManager CLI Runner"
RULER = "=" * 64
EXAMPLE_STEP = "step_1PP_trimming__fastp.nf"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ngsrun",
        usage="%(prog)s <step.nf> <R1.fastq.gz> [R2.fastq.gz] [options...]",
        description="Prepare inputs and run a single NGSManager step with nextflow.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog=f"""
<step.nf> is a step file, a file name under steps/, or a step name.
A second file after R1 makes the run paired-end.
Any other parameters are passed directly to nextflow.

Examples:
  # Fastp on paired-end
  %(prog)s {EXAMPLE_STEP} sample_R1.fastq.gz sample_R2.fastq.gz

  # Fastp on single-end (ion torrent)
  %(prog)s {EXAMPLE_STEP} sample.fastq.gz --seq_type ion

  # With extra parameters for resfinder
  %(prog)s step_4AN_AMR__resfinder.nf R1.fq.gz R2.fq.gz --genus_species Salmonella_enterica
        """,
    )

    parser.add_argument(
        "--seq_type",
        metavar="TYPE",
        help="illumina_paired|ion|nanopore (default: auto)",
    )
    parser.add_argument(
        "--genus_species",
        metavar="SP",
        help="E.g.: Salmonella_enterica (required for some steps)",
    )
    parser.add_argument("--cmp", metavar="CODE", help="Sample code (default: auto-generated)")
    parser.add_argument("--resume", action="store_true", help="Resume previous execution")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Prepare inputs and config, print the command, do not run it",
    )
    parser.add_argument("--list-steps", action="store_true", help="List available steps and exit")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def parse_command_line(
    parser: argparse.ArgumentParser,
    argv: Sequence[str],
) -> Tuple[argparse.Namespace, List[str]]:
    """
    Split ``argv`` into runner options and tokens for nextflow.

    The step and R1 are the leading non-option tokens. The token right
    after R1 is the R2 candidate unless it starts with ``--``. The rest
    goes through ``parser``; unknown tokens come back in their original
    order.
    """
    tokens = list(argv)
    positionals: List[Optional[str]] = []
    while tokens and len(positionals) < 2 and not tokens[0].startswith("-"):
        positionals.append(tokens.pop(0))

    second = None
    if len(positionals) == 2 and tokens and not tokens[0].startswith("--"):
        second = tokens.pop(0)

    args, extras = parser.parse_known_args(tokens)
    positionals += [None] * (2 - len(positionals))
    args.step, args.r1 = positionals
    args.r2 = second
    return args, extras


def print_usage(
    parser: argparse.ArgumentParser,
    settings: RunnerSettings,
    ngsmanager_dir: Path,
    nextflow: Optional[Path] = None,
) -> None:
    prog = parser.prog
    print(TITLE)
    print()
    print(f"Usage: {prog} <step.nf> <R1.fastq.gz> [R2.fastq.gz] [options...]")
    print()
    print("Available steps:")
    for step in list_steps(ngsmanager_dir):
        print(f"  {step}")
    print()
    print("Options:")
    print("  --seq_type TYPE       illumina_paired|ion|nanopore (default: auto)")
    print("  --genus_species SP    E.g.: Salmonella_enterica (required for some steps)")
    print("  --cmp CODE            Sample code (default: auto-generated)")
    print("  --resume              Resume previous execution")
    print("  --dry-run             Prepare everything, print the command, do not run it")
    print("  [other parameters]    Passed directly to nextflow")
    print()
    print("Environment variables:")
    print(f"  NGSMANAGER_DIR={ngsmanager_dir}")
    print(f"  WORKDIR={settings.workdir}")
    print(f"  NEXTFLOW={nextflow or ''}")
    print()
    print("Full example:")
    print(f"  {prog} {EXAMPLE_STEP} reads_R1.fastq.gz reads_R2.fastq.gz")


def format_command(command: Sequence[str], width: int = 80) -> str:
    """Fold a command for display, two-space indented."""
    return textwrap.fill(
        " ".join(command),
        width=width,
        initial_indent="  ",
        subsequent_indent="  ",
        break_long_words=False,
        break_on_hyphens=False,
    )


def _print_header(step_file: Path, request: LaunchRequest, r1: Path, r2: Optional[Path]) -> None:
    ids = request.ids
    print(RULER)
    print(TITLE.center(len(RULER)))
    print(RULER)
    print()
    print(f"Step:       {step_file.name}")
    print(f"CMP:        {ids.cmp}")
    print(f"RISCD:      {ids.riscd}")
    print(f"Seq type:   {request.seq_type}")
    print(f"Input R1:   {r1}")
    if r2 is not None:
        print(f"Input R2:   {r2}")
    forwarded = ([f"--genus_species {request.genus_species}"] if request.genus_species else []) + request.extra_args
    if forwarded:
        print(f"Extra:      {' '.join(forwarded)}")
    print()


def _print_inputs(layout: RunLayout) -> None:
    print("Input structure created:")
    print(f"  {layout.input_dir}/")
    for line in layout.describe_inputs():
        print(f"    {line}")
    print()


def _print_config(mount: ScriptsMount, config_path: Optional[Path], scripts_dir: Path) -> None:
    if mount is ScriptsMount.GENERATED:
        print(f"Generated CLI config: {config_path}")
        print(f"  Scripts mount: {scripts_dir}:/scripts")
    elif mount is ScriptsMount.STEP:
        print(f"Generated CLI config: {config_path}")
        print("Note: Step already has containerOptions with /scripts mount, using it")
    else:
        print("Note: No scripts directory found for this step, skipping config generation")
    print()


def _print_footer(exit_code: int, layout: RunLayout) -> None:
    print()
    print(RULER)
    if exit_code == 0:
        print("Completed successfully!")
    else:
        print(f"Completed with warnings/errors (exit code: {exit_code})")
    print()
    print(f"Output: {layout.sample_output_dir}/")
    print()
    print("Generated files:")
    for path in collect_outputs(layout):
        print(f"  {path}")


def execute(
    args: argparse.Namespace,
    extras: List[str],
    settings: RunnerSettings,
    parser: argparse.ArgumentParser,
) -> int:
    """Prepare and launch one step. Returns the process exit status."""
    ngsmanager_dir = find_ngsmanager_dir(settings.ngsmanager_dir)

    if args.list_steps:
        for step in list_steps(ngsmanager_dir):
            print(step)
        return 0

    try:
        nextflow = find_nextflow(settings.nextflow)
    except EngineNotFoundError:
        if not args.dry_run:
            raise
        nextflow = Path("nextflow")
        logger.warning("nextflow not found; dry run continues with 'nextflow'")

    if not args.step or not args.r1:
        print_usage(parser, settings, ngsmanager_dir, nextflow)
        return 1

    try:
        step_file = resolve_step(args.step, ngsmanager_dir)
    except StepNotFoundError as exc:
        logger.error(f"Error: {exc.message}")
        print()
        print_usage(parser, settings, ngsmanager_dir, nextflow)
        return exc.exit_code

    reads = resolve_reads(args.r1, args.r2, args.seq_type)
    ids = generate_identifiers(reads.r1, cmp=args.cmp)
    layout = RunLayout(workdir=settings.workdir, ids=ids)

    request = LaunchRequest(
        step_file=step_file,
        layout=layout,
        seq_type=reads.seq_type,
        resume=args.resume,
        genus_species=args.genus_species,
        extra_args=reads.passthrough + list(extras),
    )
    _print_header(step_file, request, reads.r1, reads.r2)

    layout.create()
    layout.link_reads(reads.r1, reads.r2)
    _print_inputs(layout)

    result = write_engine_config(step_file, ngsmanager_dir, layout.cli_config, settings.docker)
    request.config_path = result.config_path
    _print_config(result.mount, result.config_path, result.scripts_dir)

    launcher = NextflowLauncher(nextflow, dry_run=args.dry_run)
    print("Command:")
    print(format_command(launcher.build_command(request)))
    print()

    print(RULER)
    print("Starting pipeline..." if not args.dry_run else "Dry run, not starting pipeline")
    print(RULER)
    print()
    sys.stdout.flush()

    exit_code = launcher.run(request)
    _print_footer(exit_code, layout)
    return exit_code


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Parse ``argv`` and run; returns the exit status instead of exiting."""
    parser = build_parser()
    args, extras = parse_command_line(parser, sys.argv[1:] if argv is None else argv)

    try:
        settings = get_settings()
    except SettingsValidationError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 1

    setup_logging(settings.logging.level, settings.logging.file)
    if args.verbose:
        logging.getLogger("ngsrun").setLevel(logging.DEBUG)
        for handler in logging.getLogger("ngsrun").handlers:
            handler.setLevel(logging.DEBUG)

    try:
        return execute(args, extras, settings, parser)
    except RunnerError as exc:
        logger.error(f"Error: {exc.message}")
        if exc.hint:
            logger.error(exc.hint)
        return exc.exit_code
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 130


def main():
    """Main entry point with CLI argument parsing."""
    sys.exit(run())


if __name__ == "__main__":
    main()
