"""
circom-prover

Bridges STARK proofs into Groth16 proofs: a STARK proof is flattened into
Circom input signals, a verifier circuit is generated with the proof's
parameters, and circom / snarkjs turn it into a succinct proof.

This package provides:
- The pipeline driving circom, make and snarkjs
- Derivation of the Circom verifier template parameters
- The query draw count estimator
- Working directory management

Usage:
    from circom_prover import Pipeline, ProofDescriptor

    descriptor = ProofDescriptor.from_json("bundle.json")
    Pipeline().run("fibonacci", descriptor)
"""

# Configuration and output
from .config import PipelineConfig
from .console import LoggingLevel

# Errors
from .errors import (
    PipelineError,
    MissingFileError,
    CommandError,
    PipelineIOError,
    ProverError,
    InvalidProofError,
)

# Proof description
from .field import BN254_PRIME, GOLDILOCKS, GOLDILOCKS_PRIME, prime_field, two_adicity
from .descriptor import AirMetadata, StarkParameters, RenderedProof, ProofDescriptor
from .prover import ProofSystem, build_descriptor

# Parameters
from .draws import number_of_draws
from .parameters import ParameterSet, derive_parameters, render_main

# Pipeline
from .artifacts import CircuitWorkspace
from .process import Executable, run_command
from .pipeline import Pipeline, Stage, circom_prove, circom_verify

__all__ = [
    # Configuration and output
    "PipelineConfig",
    "LoggingLevel",
    # Errors
    "PipelineError",
    "MissingFileError",
    "CommandError",
    "PipelineIOError",
    "ProverError",
    "InvalidProofError",
    # Proof description
    "GOLDILOCKS",
    "GOLDILOCKS_PRIME",
    "BN254_PRIME",
    "prime_field",
    "two_adicity",
    "AirMetadata",
    "StarkParameters",
    "RenderedProof",
    "ProofDescriptor",
    "ProofSystem",
    "build_descriptor",
    # Parameters
    "number_of_draws",
    "ParameterSet",
    "derive_parameters",
    "render_main",
    # Pipeline
    "CircuitWorkspace",
    "Executable",
    "run_command",
    "Pipeline",
    "Stage",
    "circom_prove",
    "circom_verify",
]

__version__ = "0.1.0"
