"""
Exceptions raised by the NGSManager runner.

Every error carries the process exit status the CLI should return.
Failures of the engine itself are not exceptions: its exit status is
forwarded unchanged.
"""

from typing import Any


class RunnerError(Exception):
    """Base exception for all runner errors."""

    exit_code = 1

    def __init__(
        self,
        message: str,
        error_code: str = "RUNNER_ERROR",
        details: dict[str, Any] | None = None,
        hint: str | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.hint = hint
        super().__init__(self.message)


class ValidationError(RunnerError):
    """Raised when a path argument fails validation."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(
            message,
            "VALIDATION_ERROR",
            details={"path": path} if path else {},
        )


class InputFileNotFoundError(ValidationError):
    """Raised when a read file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"File '{path}' not found", path=path)
        self.error_code = "FILE_NOT_FOUND"


class NGSManagerNotFoundError(RunnerError):
    """Raised when no cohesive-ngsmanager checkout can be located."""

    def __init__(self, searched: list[str] | None = None):
        super().__init__(
            "NGSMANAGER_DIR not set and cohesive-ngsmanager not found",
            "NGSMANAGER_NOT_FOUND",
            details={"searched": searched or []},
            hint="Set: export NGSMANAGER_DIR=/path/to/cohesive-ngsmanager",
        )


class EngineNotFoundError(RunnerError):
    """Raised when the nextflow binary cannot be found or executed."""

    def __init__(self, message: str = "nextflow not found", executable: str | None = None):
        super().__init__(
            message,
            "ENGINE_NOT_FOUND",
            details={"executable": executable} if executable else {},
            hint=(
                "Install with: curl -s https://get.nextflow.io | bash "
                "&& mv nextflow ~/.local/bin/"
            ),
        )


class StepNotFoundError(RunnerError):
    """Raised when a step name matches no step file."""

    def __init__(self, step: str, candidates: list[str] | None = None):
        super().__init__(
            f"Step '{step}' not found",
            "STEP_NOT_FOUND",
            details={"step": step, "candidates": candidates or []},
        )
        self.step = step
