"""
Working directory of a circuit and the files the pipeline produces in it.

All operations are synchronous and idempotent: deleting something absent or
creating a directory that exists is not an error.
"""

import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .errors import MissingFileError, PipelineIOError


@dataclass(frozen=True)
class CircuitWorkspace:
    """Paths of every artifact of one circuit, under ``root/<circuit_name>``."""
    root: Path
    circuit_name: str

    @property
    def directory(self) -> Path:
        return Path(self.root) / self.circuit_name

    @property
    def input(self) -> Path:
        return self.directory / "input.json"

    @property
    def circuit(self) -> Path:
        return self.directory / "verifier.circom"

    @property
    def r1cs(self) -> Path:
        return self.directory / "verifier.r1cs"

    @property
    def cpp_dir(self) -> Path:
        return self.directory / "verifier_cpp"

    @property
    def witness_generator(self) -> Path:
        return self.cpp_dir / "verifier"

    @property
    def witness(self) -> Path:
        return self.directory / "witness.wtns"

    @property
    def proving_key(self) -> Path:
        return self.directory / "verifier.zkey"

    @property
    def verification_key(self) -> Path:
        return self.directory / "verification_key.json"

    @property
    def proof(self) -> Path:
        return self.directory / "proof.json"

    @property
    def public(self) -> Path:
        return self.directory / "public.json"


def ensure_dir(path: Path) -> None:
    """Create ``path`` and its parents if needed."""
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PipelineIOError(f"creating directory {path}", e) from e


def check_file(path: Path, reason: Optional[str] = None, stage: Optional[str] = None) -> None:
    """Raise MissingFileError unless ``path`` exists."""
    if not Path(path).exists():
        raise MissingFileError(path, reason, stage)


def delete_file(path: Path) -> None:
    """Remove a file if present."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        raise PipelineIOError(f"deleting {path}", e) from e


def delete_directory(path: Path) -> None:
    """Remove a directory tree if present. A partial removal is an error."""
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise PipelineIOError(f"deleting {path}", e) from e


def delete_path(path: Path) -> None:
    """Remove a file or a directory tree, whichever ``path`` is."""
    if Path(path).is_dir():
        delete_directory(path)
    else:
        delete_file(path)


def canonicalize(path: Path) -> Path:
    """Absolute, symlink-free form of an existing path, for user-facing output."""
    try:
        return Path(path).resolve(strict=True)
    except OSError as e:
        raise PipelineIOError(f"resolving {path}", e) from e


def write_text(path: Path, text: str, comment: str) -> None:
    try:
        Path(path).write_text(text)
    except OSError as e:
        raise PipelineIOError(comment, e) from e


def write_json(path: Path, obj: Any, comment: str) -> None:
    write_text(path, json.dumps(obj), comment)
