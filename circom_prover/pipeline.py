"""
Pipeline turning a STARK proof into a Groth16 proof of its verification.

Stages, in order, each depending on the previous stage's output:

    1. Render      write input.json and the generated verifier.circom
    2. Compile     circom --r1cs --c verifier.circom
    3. Build       make, in verifier_cpp/
    4. Witness     verifier_cpp/verifier input.json witness.wtns
    5. Setup       snarkjs g16s verifier.r1cs <ptau> verifier.zkey
    6. Export      snarkjs zkev verifier.zkey verification_key.json
    7. Prove       snarkjs g16p verifier.zkey witness.wtns proof.json public.json

Before a stage runs, its inputs must exist and its outputs from any earlier
run are deleted, so a stale file can never pass for a fresh result. The
first failure stops the run; artifacts of completed stages stay on disk.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .artifacts import (
    CircuitWorkspace,
    canonicalize,
    check_file,
    delete_file,
    delete_path,
    ensure_dir,
    write_json,
    write_text,
)
from .config import PipelineConfig
from .console import LoggingLevel, banner, report_success
from .descriptor import ProofDescriptor
from .errors import CommandError
from .parameters import ParameterSet, derive_parameters, render_main
from .process import Executable, run_command
from .prover import ProofSystem, build_descriptor

Runner = Callable[[Executable, Sequence[str], Path, LoggingLevel], int]


@dataclass
class Stage:
    """One external tool invocation with its file pre- and postconditions.

    Attributes:
        name: Short stage name used in error messages.
        executable: Tool to run.
        args: Tool arguments.
        cwd: Working directory of the tool.
        requires: (path, reason) pairs that must exist before running.
        cleanup: Stale outputs deleted before running (files or directories).
        produces: (path, reason) pairs that must exist afterwards.
        banner: Progress line printed before the stage, if any.
        hint: What a non-zero exit status most likely means.
    """
    name: str
    executable: Executable
    args: List[str]
    cwd: Path
    requires: List[Tuple[Path, str]] = field(default_factory=list)
    cleanup: List[Path] = field(default_factory=list)
    produces: List[Tuple[Path, str]] = field(default_factory=list)
    banner: Optional[str] = None
    hint: Optional[str] = None


class Pipeline:
    """Drives the Circom and snarkjs tools for one circuit at a time."""

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        logging_level: LoggingLevel = LoggingLevel.DEFAULT,
        runner: Runner = run_command,
    ) -> None:
        self.config = config or PipelineConfig()
        self.logging_level = logging_level
        self.runner = runner

    def workspace(self, circuit_name: str) -> CircuitWorkspace:
        return CircuitWorkspace(Path(self.config.root), circuit_name)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def write_inputs(self, circuit_name: str, descriptor: ProofDescriptor) -> ParameterSet:
        """Write input.json and verifier.circom for ``descriptor``."""
        ws = self.workspace(circuit_name)
        ensure_dir(ws.directory)
        delete_file(ws.input)
        delete_file(ws.circuit)

        inputs = descriptor.rendered.to_json(descriptor.metadata.base_field)
        write_json(ws.input, inputs, "writing input.json")

        banner(self.logging_level, "Generating Circom code...")
        parameters = derive_parameters(descriptor, self.config.security)
        include_dir = os.path.relpath(
            Path(self.config.circuits_dir).resolve(), ws.directory.resolve()
        )
        write_text(
            ws.circuit,
            render_main(circuit_name, parameters, include_dir),
            "writing circom main file",
        )
        return parameters

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def stages(self, circuit_name: str) -> List[Stage]:
        """Tool stages after rendering, in execution order."""
        ws = self.workspace(circuit_name)
        cfg = self.config
        circom = Executable.circom(cfg.circom)
        snarkjs = Executable.snarkjs(cfg.snarkjs)

        return [
            Stage(
                name="compile",
                banner="Compiling Circom code...",
                executable=circom,
                args=["--r1cs", "--c", ws.circuit.name],
                cwd=ws.directory,
                requires=[(ws.circuit, "generated Circom main must exist")],
                cleanup=[ws.r1cs, ws.cpp_dir],
                produces=[(ws.r1cs, "circom command must have failed")],
                hint="circom could not compile the verifier circuit",
            ),
            Stage(
                name="build",
                banner="Building witness generator...",
                executable=Executable.make(cfg.make),
                args=[],
                cwd=ws.cpp_dir,
                requires=[(ws.cpp_dir, "circom must generate the C++ witness sources")],
                cleanup=[ws.witness_generator],
                produces=[(ws.witness_generator, "make command must have failed")],
                hint="the C++ witness generator did not build",
            ),
            Stage(
                name="witness",
                banner="Computing witness...",
                executable=Executable.custom(ws.witness_generator),
                args=[ws.input.name, ws.witness.name],
                cwd=ws.directory,
                requires=[
                    (ws.witness_generator, "needed for witness generation"),
                    (ws.input, "needed for witness generation"),
                ],
                cleanup=[ws.witness],
                produces=[(ws.witness, "witness generation must have failed")],
                hint="the STARK proof probably does not satisfy the verifier circuit",
            ),
            Stage(
                name="setup",
                banner="Generating circuit-specific key...",
                executable=snarkjs,
                args=["g16s", ws.r1cs.name, str(Path(cfg.ptau).resolve()), ws.proving_key.name],
                cwd=ws.directory,
                requires=[
                    (ws.r1cs, "needed for circuit-specific key generation"),
                    (Path(cfg.ptau), "needed for circuit-specific key generation"),
                ],
                cleanup=[ws.proving_key],
                produces=[(ws.proving_key, "circuit-specific key generation must have failed")],
                hint="snarkjs groth16 setup failed, is the ptau file large enough?",
            ),
            Stage(
                name="export",
                banner="Exporting verification key...",
                executable=snarkjs,
                args=["zkev", ws.proving_key.name, ws.verification_key.name],
                cwd=ws.directory,
                requires=[(ws.proving_key, "needed for verification key export")],
                cleanup=[ws.verification_key],
                produces=[(ws.verification_key, "verification key export must have failed")],
                hint="snarkjs zkey export verificationkey failed",
            ),
            Stage(
                name="prove",
                banner="Generating SNARK proof...",
                executable=snarkjs,
                args=[
                    "g16p",
                    ws.proving_key.name,
                    ws.witness.name,
                    ws.proof.name,
                    ws.public.name,
                ],
                cwd=ws.directory,
                requires=[
                    (ws.proving_key, "needed for proof generation"),
                    (ws.witness, "needed for proof generation"),
                ],
                cleanup=[ws.proof, ws.public],
                produces=[
                    (ws.public, "proof must have failed"),
                    (ws.proof, "proof must have failed"),
                ],
                hint="snarkjs groth16 prove failed",
            ),
        ]

    def verify_stage(self, circuit_name: str) -> Stage:
        """Local Groth16 verification of a produced proof."""
        ws = self.workspace(circuit_name)
        return Stage(
            name="verify",
            banner="Verifying SNARK proof...",
            executable=Executable.snarkjs(self.config.snarkjs),
            args=["g16v", ws.verification_key.name, ws.public.name, ws.proof.name],
            cwd=ws.directory,
            requires=[
                (ws.verification_key, "needed for verification"),
                (ws.public, "needed for verification"),
                (ws.proof, "needed for verification"),
            ],
            hint="the proof does not verify",
        )

    def run_stage(self, stage: Stage) -> None:
        """Check inputs, delete stale outputs, run the tool, check outputs."""
        if stage.banner:
            banner(self.logging_level, stage.banner)

        for path, reason in stage.requires:
            check_file(path, reason, stage.name)

        for path in stage.cleanup:
            delete_path(path)

        exit_code = self.runner(stage.executable, stage.args, stage.cwd, self.logging_level)
        if exit_code != 0:
            expected = stage.produces[0][0] if stage.produces else None
            raise CommandError(
                Path(stage.executable.program).name,
                exit_code,
                expected=expected,
                hint=stage.hint,
                stage=stage.name,
            )

        for path, reason in stage.produces:
            check_file(path, reason, stage.name)

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def run(self, circuit_name: str, descriptor: ProofDescriptor) -> CircuitWorkspace:
        """Render ``descriptor`` and run every stage; raise on the first failure."""
        self.write_inputs(circuit_name, descriptor)
        for stage in self.stages(circuit_name):
            self.run_stage(stage)

        ws = self.workspace(circuit_name)
        if self.logging_level.print_big_steps:
            report_success(
                self.logging_level,
                canonicalize(ws.proof),
                canonicalize(ws.verification_key),
                canonicalize(ws.public),
            )
        return ws

    def verify(self, circuit_name: str) -> None:
        """Verify the proof produced by :meth:`run` with snarkjs."""
        self.run_stage(self.verify_stage(circuit_name))


def circom_prove(
    system: ProofSystem,
    trace: Any,
    circuit_name: str,
    logging_level: LoggingLevel = LoggingLevel.DEFAULT,
    config: Optional[PipelineConfig] = None,
) -> CircuitWorkspace:
    """Prove ``trace`` with ``system`` and bridge the proof to Groth16.

    Proof files end up in ``<config.root>/<circuit_name>/``.
    """
    config = config or PipelineConfig()
    descriptor = build_descriptor(
        system,
        trace,
        logging_level,
        verify_after_proving=config.verify_after_proving,
    )
    return Pipeline(config, logging_level).run(circuit_name, descriptor)


def circom_verify(
    circuit_name: str,
    logging_level: LoggingLevel = LoggingLevel.VERBOSE,
    config: Optional[PipelineConfig] = None,
) -> None:
    """Verify the Groth16 proof of ``circuit_name`` produced by :func:`circom_prove`."""
    Pipeline(config, logging_level).verify(circuit_name)
