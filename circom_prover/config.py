"""Pipeline configuration."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class PipelineConfig:
    """Where the pipeline works and which tools it runs.

    Attributes:
        root: Directory holding one working directory per circuit.
        ptau: Universal (powers of tau) setup file, supplied externally.
        circuits_dir: Directory with ``verify.circom`` and ``air/<name>.circom``.
        circom: Circom compiler executable.
        snarkjs: snarkjs executable.
        make: make executable, used to build the C++ witness generator.
        security: Soundness target in bits for the draw count.
        verify_after_proving: Re-verify the STARK proof before rendering it.
    """
    root: Path = Path("target/circom")
    ptau: Path = Path("final.ptau")
    circuits_dir: Path = Path("circuits")
    circom: str = "circom"
    snarkjs: str = "snarkjs"
    make: str = "make"
    security: int = 128
    verify_after_proving: bool = True
