"""
Path validation for runner inputs and outputs.
"""

from __future__ import annotations

from pathlib import Path

from ngsrun.core.exceptions import InputFileNotFoundError, ValidationError


def validate_file_path(file_path: str | Path) -> Path:
    """
    Validates an input file and returns its real path.

    Symlinks are followed so the links created later point at the
    actual data rather than at another link.

    Args:
        file_path: Path to validate

    Returns:
        Absolute, resolved Path object

    Raises:
        InputFileNotFoundError: If the path is missing or not a regular file
        ValidationError: If the path is empty or cannot be resolved

    Examples:
        >>> validate_file_path("/data/sample_R1.fastq.gz")  # doctest: +SKIP
        PosixPath('/data/sample_R1.fastq.gz')
    """
    if not file_path:
        raise ValidationError("File path cannot be empty")

    if not Path(file_path).is_file():
        raise InputFileNotFoundError(str(file_path))

    try:
        return Path(file_path).resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise ValidationError(f"Invalid file path: {exc}", path=str(file_path)) from exc


def is_existing_file(file_path: str | Path | None) -> bool:
    """Return True when ``file_path`` names an existing regular file."""
    if not file_path:
        return False
    return Path(file_path).is_file()


def validate_output_directory(
    dir_path: str | Path,
    *,
    create_if_missing: bool = True,
) -> Path:
    """
    Validates output directory path.

    Args:
        dir_path: Directory path to validate
        create_if_missing: Create directory if it doesn't exist

    Returns:
        Validated absolute Path object

    Raises:
        ValidationError: If validation fails
    """
    if not dir_path:
        raise ValidationError("Directory path cannot be empty")

    path = Path(dir_path).absolute()

    if create_if_missing and not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ValidationError(f"Cannot create directory: {exc}", path=str(path)) from exc

    if path.exists() and not path.is_dir():
        raise ValidationError(f"Path is not a directory: {path}", path=str(path))

    return path
