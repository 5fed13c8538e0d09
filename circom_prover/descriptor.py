"""STARK proof descriptor: the proof, its public inputs and verification metadata."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Type

import galois

from .field import domain_offset, prime_field, to_field_strings, two_adicity

DEFAULT_FRI_MAX_REMAINDER_SIZE = 256


# --- Metadata Capability ---
class AirMetadata(Protocol):
    """Read-only view of the proof metadata the Circom template is sized from.

    Any proof system can be bridged as long as it exposes these values; the
    parameter derivation never needs more than read access to them.
    """

    @property
    def base_field(self) -> Type[galois.FieldArray]: ...

    @property
    def two_adicity(self) -> int: ...

    @property
    def domain_offset(self) -> int: ...

    @property
    def ce_blowup_factor(self) -> int: ...

    @property
    def folding_factor(self) -> int: ...

    @property
    def grinding_factor(self) -> int: ...

    @property
    def lde_blowup_factor(self) -> int: ...

    @property
    def num_assertions(self) -> int: ...

    @property
    def num_fri_layers(self) -> int: ...

    @property
    def num_public_inputs(self) -> int: ...

    @property
    def num_queries(self) -> int: ...

    @property
    def num_transition_constraints(self) -> int: ...

    @property
    def trace_length(self) -> int: ...

    @property
    def trace_width(self) -> int: ...

    @property
    def lde_domain_size(self) -> int: ...


def _check_power_of_two(name: str, value: int) -> None:
    if value < 1 or value & (value - 1):
        raise ValueError(f"{name} must be a power of two, got {value}")


# --- Concrete Metadata ---
@dataclass(frozen=True)
class StarkParameters:
    """STARK verification metadata, loadable from a JSON object.

    Two-adicity and domain offset are derived from the base field unless
    given explicitly; the FRI layer count is derived from the LDE domain
    size, folding factor and maximum remainder size.
    """
    field_modulus: int
    trace_length: int
    trace_width: int
    lde_blowup_factor: int
    ce_blowup_factor: int
    num_queries: int
    folding_factor: int
    num_assertions: int
    num_transition_constraints: int
    num_public_inputs: int
    grinding_factor: int = 0
    fri_max_remainder_size: int = DEFAULT_FRI_MAX_REMAINDER_SIZE
    primitive_element: Optional[int] = None
    offset: Optional[int] = None
    fri_layers: Optional[int] = None

    def __post_init__(self) -> None:
        _check_power_of_two("trace_length", self.trace_length)
        _check_power_of_two("lde_blowup_factor", self.lde_blowup_factor)
        _check_power_of_two("ce_blowup_factor", self.ce_blowup_factor)
        _check_power_of_two("folding_factor", self.folding_factor)
        if self.num_queries > self.lde_domain_size:
            raise ValueError(
                f"num_queries ({self.num_queries}) exceeds the LDE domain size ({self.lde_domain_size})"
            )

    @classmethod
    def from_json(cls, path: str) -> "StarkParameters":
        """Load metadata from a JSON file."""
        with open(path) as f:
            j = json.load(f)
        return cls.from_dict(j)

    @classmethod
    def from_dict(cls, j: Dict[str, Any]) -> "StarkParameters":
        """Build metadata from a parsed JSON object (camelCase keys)."""
        return cls(
            field_modulus=int(j["fieldModulus"]),
            trace_length=j["traceLength"],
            trace_width=j["traceWidth"],
            lde_blowup_factor=j["blowupFactor"],
            ce_blowup_factor=j["ceBlowupFactor"],
            num_queries=j["nQueries"],
            folding_factor=j["foldingFactor"],
            num_assertions=j["numAssertions"],
            num_transition_constraints=j["numTransitionConstraints"],
            num_public_inputs=j["nPublics"],
            grinding_factor=j.get("grindingFactor", 0),
            fri_max_remainder_size=j.get("friMaxRemainderSize", DEFAULT_FRI_MAX_REMAINDER_SIZE),
            primitive_element=j.get("primitiveElement"),
            offset=j.get("domainOffset"),
            fri_layers=j.get("numFriLayers"),
        )

    @property
    def base_field(self) -> Type[galois.FieldArray]:
        return prime_field(self.field_modulus, self.primitive_element)

    @property
    def two_adicity(self) -> int:
        return two_adicity(self.field_modulus)

    @property
    def domain_offset(self) -> int:
        if self.offset is not None:
            return self.offset
        return domain_offset(self.base_field)

    @property
    def lde_domain_size(self) -> int:
        return self.trace_length * self.lde_blowup_factor

    @property
    def num_fri_layers(self) -> int:
        """Number of FRI folding layers before the remainder is sent in the clear."""
        if self.fri_layers is not None:
            return self.fri_layers
        domain_size = self.lde_domain_size
        layers = 0
        while domain_size > self.fri_max_remainder_size:
            domain_size //= self.folding_factor
            layers += 1
        return layers


# --- Rendered Proof ---
@dataclass
class RenderedProof:
    """A STARK proof flattened into Circom input signals.

    Attributes:
        inputs: Signal name -> (nested) field elements, including the Merkle
                roots and the ``pub_coin_seed`` array.
        fri_tree_depths: Depth of each FRI layer commitment tree, recorded
                         while the proof was flattened.
    """
    inputs: Dict[str, Any] = field(default_factory=dict)
    fri_tree_depths: List[int] = field(default_factory=list)

    @property
    def pub_coin_seed_len(self) -> int:
        return len(self.inputs.get("pub_coin_seed", []))

    def to_json(self, base_field: Type[galois.FieldArray]) -> Dict[str, Any]:
        """Input file contents: every value as a decimal string in ``base_field``."""
        return {name: to_field_strings(base_field, value) for name, value in self.inputs.items()}


# --- Descriptor ---
@dataclass(frozen=True)
class ProofDescriptor:
    """A completed STARK proof together with everything the pipeline needs."""
    metadata: AirMetadata
    rendered: RenderedProof
    proof: Any = None
    public_inputs: Any = None

    @classmethod
    def from_json(cls, path: str) -> "ProofDescriptor":
        """Load a proof bundle: ``{"metadata": ..., "input": ..., "friTreeDepths": ...}``."""
        with open(path) as f:
            j = json.load(f)

        metadata = StarkParameters.from_dict(j["metadata"])
        rendered = RenderedProof(
            inputs=dict(j["input"]),
            fri_tree_depths=list(j.get("friTreeDepths", [])),
        )
        return cls(metadata=metadata, rendered=rendered)
