"""
Tests for the command-line interface and console levels.
"""

import json

import pytest

from circom_prover.cli import main
from circom_prover.console import LoggingLevel

from conftest import logged_tools

from test_descriptor import METADATA_JSON


@pytest.fixture
def bundle(tmp_path):
    path = tmp_path / "bundle.json"
    path.write_text(json.dumps({
        "metadata": dict(METADATA_JSON, traceLength=32, blowupFactor=8, nQueries=4),
        "input": {
            "ood_frame_constraint_evaluation": ["1"],
            "ood_trace_frame": [["2", "3"]],
            "pub_coin_seed": ["4", "5"],
        },
        "friTreeDepths": [],
    }))
    return path


class TestLoggingLevel:

    @pytest.mark.parametrize("verbosity,quiet,expected", [
        (0, False, LoggingLevel.DEFAULT),
        (1, False, LoggingLevel.VERBOSE),
        (2, False, LoggingLevel.VERY_VERBOSE),
        (5, False, LoggingLevel.VERY_VERBOSE),
        (2, True, LoggingLevel.QUIET),
    ])
    def test_from_verbosity(self, verbosity, quiet, expected):
        assert LoggingLevel.from_verbosity(verbosity, quiet) is expected

    def test_levels_are_cumulative(self):
        assert not LoggingLevel.QUIET.print_big_steps
        assert LoggingLevel.DEFAULT.print_big_steps
        assert not LoggingLevel.DEFAULT.print_command_output
        assert LoggingLevel.VERBOSE.print_command_output
        assert not LoggingLevel.VERBOSE.pass_verbose_flag
        assert LoggingLevel.VERY_VERBOSE.pass_verbose_flag
        assert LoggingLevel.VERY_VERBOSE.print_command_output


class TestCommands:

    def test_draws(self, capsys):
        assert main(["draws", "--queries", "2", "--domain-size", "4", "--security", "1"]) == 0
        assert capsys.readouterr().out.strip() == "3"

    def test_draws_invalid(self, capsys):
        assert main(["draws", "--queries", "5", "--domain-size", "4"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_params(self, bundle, capsys):
        assert main(["params", str(bundle), "--name", "fib", "--security", "20"]) == 0

        out = capsys.readouterr().out
        assert 'include "../../../circuits/air/fib.circom";' in out
        assert "[0], // fri_tree_depth" in out
        assert "2, // num_pub_coin_seed" in out
        assert "8 // tree_depth" in out

    def test_prove_missing_bundle(self, tmp_path, capsys):
        code = main(["prove", str(tmp_path / "nope.json"), "--name", "fib"])

        assert code == 1
        assert "Proof bundle not found" in capsys.readouterr().err

    def test_prove_and_verify(self, bundle, config, tool_log, capsys):
        tool_args = [
            "--root", str(config.root),
            "--ptau", str(config.ptau),
            "--circuits-dir", str(config.circuits_dir),
            "--circom", config.circom,
            "--snarkjs", config.snarkjs,
            "--make", config.make,
        ]

        assert main(["-q", "prove", str(bundle), "--name", "fib", "--security", "20"] + tool_args) == 0
        assert (config.root / "fib" / "proof.json").exists()

        assert main(["verify", "--name", "fib"] + tool_args) == 0
        assert "Proof verified." in capsys.readouterr().out
        assert logged_tools(tool_log)[-1] == "snarkjs"

    def test_pipeline_failure_exit_code(self, bundle, config, capsys):
        config.ptau.unlink()
        code = main([
            "-q", "prove", str(bundle), "--name", "fib",
            "--root", str(config.root),
            "--ptau", str(config.ptau),
            "--circom", config.circom,
            "--snarkjs", config.snarkjs,
            "--make", config.make,
        ])

        assert code == 1
        assert "[setup]" in capsys.readouterr().err
