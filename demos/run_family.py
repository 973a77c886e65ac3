"""
RUN ONE ELEMENT FAMILY WITH ITS PRESET SCENARIO
===============================================
Builds, solves and prints the text report of one family:

    python demos/run_family.py quad
    python demos/run_family.py bar --n-elements 10 --sparse
    python demos/run_family.py hex --nx 2 --ny 2 --nz 2 --json

Every option not given on the command line falls back to the family preset.
"""

import argparse
import logging
import sys

from mini_fem import FAMILIES, FEMError, build_analysis, export_json, export_text


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run one mini_fem element family")
    parser.add_argument("family", choices=sorted(FAMILIES), help="Element family tag")
    parser.add_argument("--n-elements", type=int, default=None)
    parser.add_argument("--n-nodes", type=int, default=None)
    parser.add_argument("--nx", type=int, default=None)
    parser.add_argument("--ny", type=int, default=None)
    parser.add_argument("--nz", type=int, default=None)
    parser.add_argument("--E", type=float, default=None, help="Young's modulus")
    parser.add_argument("--nu", type=float, default=None, help="Poisson ratio")
    parser.add_argument("--workers", type=int, default=1, help="Threads for element matrices")
    parser.add_argument("--sparse", action="store_true", help="Only K entries above 1e-3")
    parser.add_argument("--precision", type=int, default=4)
    parser.add_argument("--json", action="store_true", help="Print the JSON model instead")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    options = {
        "family": args.family,
        "n_elements": args.n_elements,
        "n_nodes": args.n_nodes,
        "nx": args.nx,
        "ny": args.ny,
        "nz": args.nz,
        "E": args.E,
        "nu": args.nu,
        "workers": args.workers,
    }
    config = {k: v for k, v in options.items() if v is not None}

    try:
        result = build_analysis(config)
    except FEMError as e:
        print(f"ERROR: {e}")
        return 1

    summary = result.summary()
    print("=" * 70)
    print(f"{summary['family'].upper()}: {summary['n_nodes']} nodes, "
          f"{summary['n_elements']} elements, {summary['ndof']} DOFs")
    print(f"Max |u| = {summary['max_displacement']:.6e}")
    print("=" * 70)

    if args.json:
        print(export_json(result))
    else:
        print(export_text(result, sparse=args.sparse, precision=args.precision))
    return 0


if __name__ == "__main__":
    sys.exit(main())
