"""
Parameters of the Circom verifier template.

``Verify`` in ``circuits/verify.circom`` takes its parameters positionally, in
this exact order:

    addicity                     2-adicity of the base field
    ce_blowup_factor             constraint evaluation blowup factor
    domain_offset                LDE coset offset
    folding_factor               FRI folding factor
    fri_tree_depth               list of FRI layer tree depths ([0] if none)
    grinding_factor              proof-of-work bits
    lde_blowup_factor            LDE blowup factor
    num_assertions               boundary assertions
    num_draws                    query draw slots (see draws.py)
    num_fri_layers               FRI layers
    num_pub_coin_seed            length of the public coin seed
    num_public_inputs            public inputs
    num_queries                  query positions
    num_transition_constraints   transition constraints
    trace_length                 execution trace length
    trace_width                  execution trace width
    tree_depth                   log2 of the LDE domain size

The field order of ``ParameterSet`` is that contract. Changing it here without
changing the template silently produces a wrong circuit.
"""

import os
from dataclasses import dataclass, fields
from typing import Iterator, List, Tuple

from .descriptor import ProofDescriptor
from .draws import number_of_draws


@dataclass(frozen=True)
class ParameterSet:
    """Positional arguments of the Circom ``Verify`` template."""
    addicity: int
    ce_blowup_factor: int
    domain_offset: int
    folding_factor: int
    fri_tree_depth: Tuple[int, ...]
    grinding_factor: int
    lde_blowup_factor: int
    num_assertions: int
    num_draws: int
    num_fri_layers: int
    num_pub_coin_seed: int
    num_public_inputs: int
    num_queries: int
    num_transition_constraints: int
    trace_length: int
    trace_width: int
    tree_depth: int

    def items(self) -> Iterator[Tuple[str, str]]:
        """(name, Circom literal) pairs in template order."""
        for f in fields(self):
            yield f.name, _literal(getattr(self, f.name))

    def render(self, indent: str = "    ") -> str:
        """Arguments as ``<literal>, // <name>`` lines, last one without a comma."""
        items = list(self.items())
        lines = []
        for i, (name, literal) in enumerate(items):
            separator = "," if i < len(items) - 1 else ""
            lines.append(f"{literal}{separator} // {name}")
        return ("\n" + indent).join(lines)


def _literal(value) -> str:
    if isinstance(value, tuple):
        depths = value if value else (0,)
        return "[" + ", ".join(str(d) for d in depths) + "]"
    return str(value)


def derive_parameters(descriptor: ProofDescriptor, security: int = 128) -> ParameterSet:
    """Compute the template parameters of a proof."""
    air = descriptor.metadata
    lde_domain_size = air.lde_domain_size

    return ParameterSet(
        addicity=air.two_adicity,
        ce_blowup_factor=air.ce_blowup_factor,
        domain_offset=air.domain_offset,
        folding_factor=air.folding_factor,
        fri_tree_depth=tuple(descriptor.rendered.fri_tree_depths),
        grinding_factor=air.grinding_factor,
        lde_blowup_factor=air.lde_blowup_factor,
        num_assertions=air.num_assertions,
        num_draws=number_of_draws(air.num_queries, lde_domain_size, security),
        num_fri_layers=air.num_fri_layers,
        num_pub_coin_seed=descriptor.rendered.pub_coin_seed_len,
        num_public_inputs=air.num_public_inputs,
        num_queries=air.num_queries,
        num_transition_constraints=air.num_transition_constraints,
        trace_length=air.trace_length,
        trace_width=air.trace_width,
        tree_depth=lde_domain_size.bit_length() - 1,
    )


def render_main(circuit_name: str, parameters: ParameterSet, include_dir: str) -> str:
    """Contents of ``verifier.circom`` for ``circuit_name``.

    ``include_dir`` is the template directory relative to the circuit's
    working directory.
    """
    verify = _join(include_dir, "verify.circom")
    air = _join(include_dir, "air", f"{circuit_name}.circom")
    return (
        "pragma circom 2.0.0;\n"
        "\n"
        f'include "{verify}";\n'
        f'include "{air}";\n'
        "\n"
        "component main {public [ood_frame_constraint_evaluation, ood_trace_frame]} = Verify(\n"
        f"    {parameters.render()}\n"
        ");\n"
    )


def _join(*parts: str) -> str:
    # Circom include paths always use forward slashes
    return os.path.join(*parts).replace(os.sep, "/")


TEMPLATE_PARAMETERS: List[str] = [f.name for f in fields(ParameterSet)]
