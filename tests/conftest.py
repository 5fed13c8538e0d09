"""
Pytest configuration and shared fixtures for circom-prover tests.
"""

import os
import stat
import sys
from pathlib import Path

import pytest

# Add the repository root to the path so the package imports without installing
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from circom_prover.config import PipelineConfig
from circom_prover.descriptor import ProofDescriptor, RenderedProof, StarkParameters
from circom_prover.field import GOLDILOCKS_PRIME


def goldilocks_metadata(**overrides) -> StarkParameters:
    """Small Goldilocks AIR: 64 rows, blowup 8, 4 queries."""
    values = dict(
        field_modulus=GOLDILOCKS_PRIME,
        trace_length=64,
        trace_width=3,
        lde_blowup_factor=8,
        ce_blowup_factor=2,
        num_queries=4,
        folding_factor=4,
        num_assertions=2,
        num_transition_constraints=3,
        num_public_inputs=2,
        grinding_factor=16,
    )
    values.update(overrides)
    return StarkParameters(**values)


def make_descriptor(**overrides) -> ProofDescriptor:
    rendered = RenderedProof(
        inputs={
            "ood_frame_constraint_evaluation": [1, 2],
            "ood_trace_frame": [[3, 4, 5], [6, 7, 8]],
            "trace_commitment": [9],
            "pub_coin_seed": [10, 11, 12, 13],
        },
        fri_tree_depths=[7],
    )
    return ProofDescriptor(metadata=goldilocks_metadata(**overrides), rendered=rendered)


@pytest.fixture
def descriptor() -> ProofDescriptor:
    return make_descriptor()


# --- Fake external tools ---

FAKE_CIRCOM = """#!/bin/sh
echo "circom $*" >> "{log}"
echo r1cs > verifier.r1cs
mkdir -p verifier_cpp
echo all: > verifier_cpp/Makefile
"""

FAKE_MAKE = """#!/bin/sh
echo "make $*" >> "{log}"
cat > verifier <<'EOS'
#!/bin/sh
echo "verifier $*" >> "{log}"
cp "$1" "$2"
EOS
chmod +x verifier
"""

FAKE_SNARKJS = """#!/bin/sh
echo "snarkjs $*" >> "{log}"
case "$1" in
    g16s) echo zkey > "$4" ;;
    zkev) echo '{{"protocol": "groth16"}}' > "$3" ;;
    g16p) echo '{{"pi_a": ["1", "2"]}}' > "$4"; echo '["1", "2"]' > "$5" ;;
    g16v) exit 0 ;;
    *) exit 2 ;;
esac
"""


def write_script(path: Path, text: str) -> Path:
    path.write_text(text)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def tool_log(tmp_path: Path) -> Path:
    """File every fake tool appends its invocation to."""
    return tmp_path / "tools.log"


@pytest.fixture
def config(tmp_path: Path, tool_log: Path) -> PipelineConfig:
    """Pipeline configuration wired to fake circom, make and snarkjs scripts."""
    if os.name != "posix":
        pytest.skip("fake tools are POSIX shell scripts")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    circom = write_script(bin_dir / "circom", FAKE_CIRCOM.format(log=tool_log))
    make = write_script(bin_dir / "make", FAKE_MAKE.format(log=tool_log))
    snarkjs = write_script(bin_dir / "snarkjs", FAKE_SNARKJS.format(log=tool_log))

    ptau = tmp_path / "final.ptau"
    ptau.write_bytes(b"ptau")

    return PipelineConfig(
        root=tmp_path / "target" / "circom",
        ptau=ptau,
        circuits_dir=tmp_path / "circuits",
        circom=str(circom),
        snarkjs=str(snarkjs),
        make=str(make),
    )


def logged_tools(tool_log: Path) -> list:
    """Names of the fake tools that ran, in order."""
    if not tool_log.exists():
        return []
    return [line.split()[0] for line in tool_log.read_text().splitlines()]
