"""Blocking invocation of the external Circom / snarkjs / make tools."""

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from rich.markup import escape

from .console import LoggingLevel, console
from .errors import PipelineIOError


@dataclass(frozen=True)
class Executable:
    """An external program and the flag that makes it verbose, if any."""
    program: str
    verbose_argument: Optional[str] = None

    @classmethod
    def circom(cls, program: str = "circom") -> "Executable":
        return cls(program, "--verbose")

    @classmethod
    def snarkjs(cls, program: str = "snarkjs") -> "Executable":
        return cls(program, "-v")

    @classmethod
    def make(cls, program: str = "make") -> "Executable":
        return cls(program)

    @classmethod
    def custom(cls, path: Path) -> "Executable":
        # Relative program paths would be looked up from the child's cwd
        return cls(str(Path(path).resolve()))


def run_command(
    executable: Executable,
    args: Sequence[str],
    cwd: Path,
    logging_level: LoggingLevel,
) -> int:
    """Run ``executable`` with ``args`` in ``cwd`` and wait for it.

    The tool's output is shown only when the logging level asks for it.

    Returns:
        The process exit status.
    """
    argv = [executable.program, *args]
    if logging_level.pass_verbose_flag and executable.verbose_argument:
        argv.append(executable.verbose_argument)

    if logging_level.print_command_output:
        console.print(f"[dim]$ {escape(shlex.join(argv))}  (in {escape(str(cwd))})[/dim]", highlight=False, soft_wrap=True)
        output = None
    else:
        output = subprocess.DEVNULL

    try:
        completed = subprocess.run(argv, cwd=cwd, stdout=output, stderr=output, check=False)
    except OSError as e:
        raise PipelineIOError(f"running `{executable.program}`", e) from e
    return completed.returncode
