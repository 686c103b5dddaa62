"""Command-line interface for the laminates package.

Quick analyses of a single-material stacking sequence, for example::

    laminates abd --angles 0/45/-45/90 --symmetric
    laminates failure --angles 0,90 --Nx 500 --criterion tsai_wu
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

import numpy as np

from .analysis.buckling import BucklingDimensions, compute_buckling
from .analysis.thermal import service_temperature_limit
from .clt.data.lamina_props import DEFAULT_MATERIAL, MATERIAL_LIBRARY
from .clt.data_utils import GeometryType, Loads
from .clt.laminate import compute_abd, compute_equivalent_properties, compute_stress_strain
from .clt.utils import laminate_builder, parse_angles
from .failure.criteria import FailureCriterion, evaluate_failure, safety_summary
from .failure.progressive import DEFAULT_MAX_ITERATIONS, run_progressive_failure

LOAD_COMPONENTS = ("Nx", "Ny", "Nxy", "Mx", "My", "Mxy")


def _add_stack_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--angles", required=True, help="Ply angles, e.g. 0/45/-45/90")
    parser.add_argument(
        "--material",
        default=DEFAULT_MATERIAL.name,
        choices=sorted(MATERIAL_LIBRARY),
        help="Material of every ply",
    )
    parser.add_argument("--symmetric", action="store_true", help="Mirror the angles")
    parser.add_argument("--copycenter", action="store_true", help="Duplicate the centre ply")
    parser.add_argument("--multiplicity", type=int, default=1, help="Repeat the sequence")


def _add_load_arguments(parser: argparse.ArgumentParser) -> None:
    for component in LOAD_COMPONENTS:
        parser.add_argument(
            f"--{component}", type=float, default=0.0, help=f"{component} resultant"
        )


def _add_failure_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--criterion",
        default=FailureCriterion.MAX_STRESS.value,
        choices=[criterion.value for criterion in FailureCriterion],
    )
    parser.add_argument("--safety-factor", type=float, default=1.5)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI.

    Returns:
        An argparse.ArgumentParser configured for the CLI.
    """
    parser = argparse.ArgumentParser(prog="laminates", description="Composite laminate analysis")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    abd = subparsers.add_parser("abd", help="ABD matrix and equivalent properties")
    _add_stack_arguments(abd)

    stress = subparsers.add_parser("stress", help="Ply stresses under load")
    _add_stack_arguments(stress)
    _add_load_arguments(stress)

    failure = subparsers.add_parser("failure", help="Ply failure indices")
    _add_stack_arguments(failure)
    _add_load_arguments(failure)
    _add_failure_arguments(failure)

    progressive = subparsers.add_parser("progressive", help="Progressive failure simulation")
    _add_stack_arguments(progressive)
    _add_load_arguments(progressive)
    _add_failure_arguments(progressive)
    progressive.add_argument("--max-iterations", type=int, default=DEFAULT_MAX_ITERATIONS)

    buckling = subparsers.add_parser("buckling", help="Buckling estimate")
    _add_stack_arguments(buckling)
    _add_load_arguments(buckling)
    buckling.add_argument(
        "--geometry",
        default=GeometryType.PLATE.value,
        choices=[kind.value for kind in GeometryType],
    )
    buckling.add_argument("--a", type=float, default=1000.0, help="Plate length (mm)")
    buckling.add_argument("--b", type=float, default=1000.0, help="Plate width (mm)")
    buckling.add_argument("--diameter", type=float, default=100.0, help="Tube outer diameter (mm)")
    buckling.add_argument("--length", type=float, default=1000.0, help="Tube length (mm)")

    return parser


def _loads(args: argparse.Namespace) -> Loads:
    return Loads(**{component: getattr(args, component) for component in LOAD_COMPONENTS})


def main(argv: Sequence[str] | None = None) -> int:
    """Main entrypoint for the CLI.

    Args:
        argv: Optional iterable of arguments, defaults to sys.argv if None.

    Returns:
        Process exit code (0 on success, non-zero on failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    plies = laminate_builder(
        parse_angles(args.angles), args.symmetric, args.copycenter, args.multiplicity, args.material
    )
    materials = MATERIAL_LIBRARY

    if args.command == "abd":
        abd = compute_abd(plies, materials)
        properties = compute_equivalent_properties(plies, materials)
        print(abd.matrix)
        print(
            f"Ex={properties.Ex:.1f} Ey={properties.Ey:.1f} Gxy={properties.Gxy:.1f} "
            f"nuxy={properties.nuxy:.4f} h={properties.thickness:.3f}"
        )
        limit = service_temperature_limit(plies, materials)
        if limit is not None:
            print(f"service temperature limit {limit:g} degC")
        return 0

    if args.command == "stress":
        for result in compute_stress_strain(plies, materials, _loads(args)):
            print(
                f"ply {result.ply_index} ({result.angle:g} deg): "
                f"sigma_x={result.sigma_x:.2f} sigma_y={result.sigma_y:.2f} "
                f"tau_xy={result.tau_xy:.2f} von_mises={result.von_mises:.2f}"
            )
        return 0

    if args.command == "failure":
        stresses = compute_stress_strain(plies, materials, _loads(args))
        results = evaluate_failure(plies, materials, stresses, args.safety_factor, args.criterion)
        for result in results:
            status = "PASS" if result.passed else "FAIL"
            print(
                f"ply {result.ply_index} ({result.angle:g} deg): "
                f"FI={result.failure_index:.3f} {result.failure_mode} {status}"
            )
        summary = safety_summary(results, args.safety_factor)
        print(f"critical ply {summary.critical_ply}, max FI {summary.max_failure_index:.3f}")
        return 0 if summary.design_meets_safety else 2

    if args.command == "progressive":
        analysis = run_progressive_failure(
            plies,
            materials,
            _loads(args),
            args.safety_factor,
            args.criterion,
            max_iterations=args.max_iterations,
        )
        for step in analysis.steps:
            print(
                f"iteration {step.iteration}: x{step.load_multiplier:.2f} "
                f"failed={list(step.failed_plies)} max FI={step.max_failure_index:.3f}"
            )
        print(f"ultimate strength multiplier {analysis.ultimate_strength:.2f}")
        return 0

    if args.command == "buckling":
        dims = BucklingDimensions(
            a=args.a, b=args.b, outer_diameter=args.diameter, length=args.length
        )
        result = compute_buckling(compute_abd(plies, materials), _loads(args), args.geometry, dims)
        print(result.buckling_mode)
        critical = [result.critical_load_Nx, result.critical_load_Ny, result.critical_load_Nxy]
        print(np.array(critical))
        if result.buckling_factor is not None:
            print(f"buckling factor {result.buckling_factor:.3f}")
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
