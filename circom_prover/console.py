"""Console output gated by a logging level."""

from enum import Enum
from pathlib import Path

from rich.console import Console

console = Console()
err_console = Console(stderr=True)


class LoggingLevel(Enum):
    """How much the pipeline prints. Never changes what the pipeline does."""
    QUIET = 0          # Nothing
    DEFAULT = 1        # Progress banners and final artifact paths
    VERBOSE = 2        # ... plus the output of external tools
    VERY_VERBOSE = 3   # ... with external tools in their own verbose mode

    @property
    def print_big_steps(self) -> bool:
        return self is not LoggingLevel.QUIET

    @property
    def print_command_output(self) -> bool:
        return self.value >= LoggingLevel.VERBOSE.value

    @property
    def pass_verbose_flag(self) -> bool:
        return self is LoggingLevel.VERY_VERBOSE

    @classmethod
    def from_verbosity(cls, verbosity: int, quiet: bool = False) -> "LoggingLevel":
        """Map CLI flags (-q, -v, -vv) to a level."""
        if quiet:
            return cls.QUIET
        return cls(min(1 + verbosity, cls.VERY_VERBOSE.value))


def banner(level: LoggingLevel, message: str) -> None:
    """One-line progress banner printed before a pipeline step."""
    if level.print_big_steps:
        console.print(f"[green]{message}[/green]")


def report_success(level: LoggingLevel, proof: Path, verification_key: Path, public: Path) -> None:
    """Print where the externally interesting artifacts ended up."""
    if not level.print_big_steps:
        return
    console.print("[green]Proof generated successfully![/green]")
    console.print(f"Proof file:        {proof}", markup=False, highlight=False, soft_wrap=True)
    console.print(f"Verification key:  {verification_key}", markup=False, highlight=False, soft_wrap=True)
    console.print(f"Public in/outputs: {public}", markup=False, highlight=False, soft_wrap=True)
