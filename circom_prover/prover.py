"""Boundary with the STARK proof system whose proofs are bridged to Circom."""

from typing import Any, Protocol

from .console import LoggingLevel, banner
from .descriptor import AirMetadata, ProofDescriptor, RenderedProof
from .errors import InvalidProofError, ProverError


class ProofSystem(Protocol):
    """What the pipeline needs from a STARK prover.

    Proof generation, verification and the flattening of a proof into Circom
    input signals all live behind this interface.
    """

    def get_pub_inputs(self, trace: Any) -> Any:
        """Public inputs of the computation described by ``trace``."""
        ...

    def prove(self, trace: Any) -> Any:
        """Generate a STARK proof for ``trace``."""
        ...

    def verify(self, proof: Any, public_inputs: Any) -> None:
        """Raise if ``proof`` does not verify against ``public_inputs``."""
        ...

    def describe(self, proof: Any, public_inputs: Any) -> AirMetadata:
        """Verification metadata of ``proof``."""
        ...

    def render(self, proof: Any, public_inputs: Any) -> RenderedProof:
        """Flatten ``proof`` into Circom input signals."""
        ...


def build_descriptor(
    system: ProofSystem,
    trace: Any,
    logging_level: LoggingLevel = LoggingLevel.DEFAULT,
    verify_after_proving: bool = True,
) -> ProofDescriptor:
    """Prove ``trace`` and collect everything the Circom pipeline consumes.

    With ``verify_after_proving`` the fresh proof is checked against its own
    public inputs first; a failure there means the STARK proof itself is bad.

    Raises:
        ProverError: the proof system failed to produce a proof.
        InvalidProofError: the produced proof does not verify.
    """
    banner(logging_level, "Building STARK proof...")

    public_inputs = system.get_pub_inputs(trace)
    try:
        proof = system.prove(trace)
    except Exception as e:
        raise ProverError(e) from e

    if verify_after_proving:
        banner(logging_level, "Verifying STARK proof...")
        try:
            system.verify(proof, public_inputs)
        except Exception as e:
            raise InvalidProofError(e) from e

    banner(logging_level, "Parsing proof to JSON...")
    return ProofDescriptor(
        metadata=system.describe(proof, public_inputs),
        rendered=system.render(proof, public_inputs),
        proof=proof,
        public_inputs=public_inputs,
    )
