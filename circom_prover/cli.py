#!/usr/bin/env python3
"""Command-line interface.

Examples:
    circom-prover prove bundle.json --name fibonacci --ptau final.ptau
    circom-prover verify --name fibonacci
    circom-prover draws --queries 42 --domain-size 8192
    circom-prover params bundle.json --name fibonacci
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.markup import escape

from .config import PipelineConfig
from .console import LoggingLevel, console, err_console
from .descriptor import ProofDescriptor
from .draws import number_of_draws
from .errors import PipelineError
from .parameters import derive_parameters, render_main
from .pipeline import Pipeline


def _add_pipeline_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--name',
        required=True,
        help='Circuit name (working directory and circuits/air/<name>.circom)'
    )
    parser.add_argument(
        '--root',
        type=Path,
        default=PipelineConfig.root,
        help='Directory holding the per-circuit working directories'
    )
    parser.add_argument(
        '--ptau',
        type=Path,
        default=PipelineConfig.ptau,
        help='Universal setup (powers of tau) file'
    )
    parser.add_argument(
        '--circuits-dir',
        type=Path,
        default=PipelineConfig.circuits_dir,
        help='Directory with verify.circom and air/<name>.circom'
    )
    parser.add_argument('--circom', default=PipelineConfig.circom, help='circom executable')
    parser.add_argument('--snarkjs', default=PipelineConfig.snarkjs, help='snarkjs executable')
    parser.add_argument('--make', default=PipelineConfig.make, help='make executable')


def _add_security_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--security',
        type=int,
        default=PipelineConfig.security,
        help='Soundness target in bits used for the draw count'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='circom-prover',
        description='Bridge STARK proofs to Groth16 proofs through a Circom verifier circuit'
    )
    parser.add_argument('-q', '--quiet', action='store_true', help='Print nothing')
    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Show external tool output (-vv: run tools in verbose mode)'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    prove = subparsers.add_parser('prove', help='Run the full pipeline on a proof bundle')
    prove.add_argument('bundle', type=Path, help='Proof bundle JSON (metadata + input)')
    _add_pipeline_arguments(prove)
    _add_security_argument(prove)

    verify = subparsers.add_parser('verify', help='Verify a produced Groth16 proof')
    _add_pipeline_arguments(verify)

    draws = subparsers.add_parser('draws', help='Print the number of query draws')
    draws.add_argument('--queries', type=int, required=True, help='Number of FRI queries')
    draws.add_argument('--domain-size', type=int, required=True, help='LDE domain size')
    _add_security_argument(draws)

    params = subparsers.add_parser('params', help='Print the generated verifier.circom')
    params.add_argument('bundle', type=Path, help='Proof bundle JSON (metadata + input)')
    params.add_argument('--name', required=True, help='Circuit name')
    params.add_argument(
        '--include-dir',
        default='../../../circuits',
        help='Template directory as seen from the circuit directory'
    )
    _add_security_argument(params)

    return parser


def _config(args: argparse.Namespace) -> PipelineConfig:
    return PipelineConfig(
        root=args.root,
        ptau=args.ptau,
        circuits_dir=args.circuits_dir,
        circom=args.circom,
        snarkjs=args.snarkjs,
        make=args.make,
        security=getattr(args, 'security', PipelineConfig.security),
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = LoggingLevel.from_verbosity(args.verbose, args.quiet)

    try:
        if args.command == 'draws':
            print(number_of_draws(args.queries, args.domain_size, args.security))

        elif args.command == 'params':
            descriptor = ProofDescriptor.from_json(str(args.bundle))
            parameters = derive_parameters(descriptor, args.security)
            console.print(render_main(args.name, parameters, args.include_dir), end='', markup=False, highlight=False, soft_wrap=True)

        elif args.command == 'prove':
            if not args.bundle.exists():
                err_console.print(f"[red]Error: Proof bundle not found: {escape(str(args.bundle))}[/red]")
                return 1
            descriptor = ProofDescriptor.from_json(str(args.bundle))
            Pipeline(_config(args), level).run(args.name, descriptor)

        elif args.command == 'verify':
            Pipeline(_config(args), level).verify(args.name)
            if level.print_big_steps:
                console.print("[green]Proof verified.[/green]")

    except (PipelineError, ValueError, OSError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
