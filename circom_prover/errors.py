"""Exceptions raised while bridging a STARK proof into a Circom/snarkjs proof."""

from pathlib import Path
from typing import Optional


class PipelineError(Exception):
    """Base exception for all circom-prover failures."""

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        self.stage = stage
        if stage is not None:
            message = f"[{stage}] {message}"
        super().__init__(message)


class MissingFileError(PipelineError):
    """Raised when a file a stage depends on, or should have produced, is absent."""

    def __init__(self, path: Path, reason: Optional[str] = None, stage: Optional[str] = None) -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"missing file {self.path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, stage)


class CommandError(PipelineError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(
        self,
        program: str,
        exit_code: int,
        expected: Optional[Path] = None,
        hint: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> None:
        self.program = program
        self.exit_code = exit_code
        self.expected = expected
        self.hint = hint
        message = f"`{program}` exited with status {exit_code}"
        if expected is not None:
            message += f", expected output {expected} was not produced"
        if hint:
            message += f" ({hint})"
        super().__init__(message, stage)


class PipelineIOError(PipelineError):
    """Raised when a filesystem or process-spawn operation fails."""

    def __init__(self, comment: str, error: OSError, stage: Optional[str] = None) -> None:
        self.comment = comment
        self.error = error
        super().__init__(f"I/O error while {comment}: {error}", stage)


class ProverError(PipelineError):
    """Raised when the STARK prover fails to produce a proof."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        super().__init__(f"STARK proof generation failed: {error}", "prove")


class InvalidProofError(PipelineError):
    """Raised when a freshly generated STARK proof does not verify.

    This points at the upstream proof itself, not at the Circom pipeline.
    """

    def __init__(self, error: Optional[BaseException] = None) -> None:
        self.error = error
        message = "STARK proof does not verify against its own public inputs"
        if error is not None:
            message += f": {error}"
        super().__init__(message, "self-check")
