import argparse

from loguru import logger

from .config import EngineConfig
from .field import JULIA, SELF_MAP
from .formulas import FORMULAS, get_formula
from .log import setup_console, setup_logfile
from .orbit import GridRecurrenceDetector, trace_orbit
from .viewport import Viewport


def build_parser(defaults: EngineConfig = None):
    if defaults is None:
        defaults = EngineConfig()
    parser = argparse.ArgumentParser(
        prog="pyceltic",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Escape-time fields and orbit periods of celtic-style maps",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log debug messages to stderr",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="also write log records to this file (rotated)",
    )

    # Options shared by both subcommands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--formula",
        type=int,
        default=defaults.formula,
        choices=range(1, len(FORMULAS) + 1),
        help="; ".join(f"{f.number}: {f.expression}" for f in FORMULAS),
    )
    common.add_argument(
        "--julia",
        type=float,
        nargs=2,
        default=None,
        metavar=("RE", "IM"),
        help="use this constant term (julia mode) instead of the point itself",
    )
    common.add_argument(
        "--escape-radius",
        type=float,
        default=defaults.escape_radius,
        help="magnitude past which an iterate has escaped",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    field = sub.add_parser(
        "field",
        parents=[common],
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="compute the escape-time field and write it as an image",
    )
    field.add_argument(
        "-n",
        "--numpy",
        action="store_true",
        help="use the vectorised numpy evaluator",
    )
    field.add_argument(
        "--workers",
        type=int,
        default=1,
        help="processes for the pure python evaluator",
    )
    field.add_argument(
        "-o",
        "--out-file",
        default="out.png",
        help="The output file to write to",
    )
    field.add_argument(
        "--imax",
        type=int,
        default=defaults.max_iter,
        help="the max iterations to perform",
    )
    field.add_argument(
        "--dims",
        type=int,
        default=[defaults.width, defaults.height],
        nargs=2,
        help="The dimensions of the output image, in pixels",
    )
    field.add_argument(
        "--zoom",
        type=float,
        default=defaults.zoom,
        help="pixels per unit of the complex plane",
    )
    field.add_argument(
        "--offset",
        type=float,
        default=[0.0, 0.0],
        nargs=2,
        help="pan offset in pixels",
    )
    field.add_argument(
        "--wheel",
        type=int,
        default=0,
        help="mouse-wheel zoom steps to apply before computing (negative zooms out)",
    )
    field.add_argument(
        "--anchor",
        type=float,
        default=None,
        nargs=2,
        metavar=("GX", "GY"),
        help="grid point kept fixed by --wheel; defaults to the grid centre",
    )
    field.add_argument(
        "--zoom-factor",
        type=float,
        default=defaults.zoom_factor,
        help="zoom multiplier per wheel step",
    )

    orbit = sub.add_parser(
        "orbit",
        parents=[common],
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="trace the orbit of one point and report its period",
    )
    orbit.add_argument("re", type=float, help="real part of the seed")
    orbit.add_argument("im", type=float, help="imaginary part of the seed")
    orbit.add_argument(
        "--max-steps",
        type=int,
        default=defaults.max_orbit_steps,
        help="the max orbit length",
    )
    orbit.add_argument(
        "--tolerance",
        type=float,
        default=defaults.tolerance,
        help="distance under which two orbit points are the same state",
    )
    orbit.add_argument(
        "--grid",
        action="store_true",
        help="use the spatial-hash recurrence detector",
    )
    orbit.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="do not print the visited points",
    )
    return parser


def run_field(args):
    if args.numpy:
        from .npceltic import compute_field
        kwargs = {}
    else:
        from .pyceltic import compute_field
        kwargs = {"workers": args.workers}

    viewport = Viewport(
        zoom=args.zoom,
        offset_x=args.offset[0],
        offset_y=args.offset[1],
        width=args.dims[0],
        height=args.dims[1],
    )
    if args.wheel:
        settings = EngineConfig(zoom_factor=args.zoom_factor)
        gx, gy = args.anchor if args.anchor else (viewport.width / 2, viewport.height / 2)
        viewport = settings.wheel_zoom(viewport, gx, gy, args.wheel)
    mode = JULIA if args.julia else SELF_MAP
    julia_c = complex(*args.julia) if args.julia else None

    print(f"Formula {args.formula}: {get_formula(args.formula).expression}")
    print(f"mode: {mode}" + (f" c={julia_c}" if julia_c is not None else ""))
    print(f"img_name: {args.out_file}")
    print(f"imax: {args.imax}")
    print(f"dims: {args.dims}")
    print(f"zoom: {viewport.zoom}")
    print(f"offset: {[viewport.offset_x, viewport.offset_y]}")

    fractal = compute_field(viewport, mode, julia_c, args.formula, args.imax,
                            escape_radius=args.escape_radius, **kwargs)

    from .image import save_field
    save_field(fractal, args.out_file)
    logger.info(f"Wrote {args.out_file}")
    print(f"escaped: {int(fractal.escaped().sum())}/{fractal.counts.size}")


def run_orbit(args):
    seed = complex(args.re, args.im)
    c = complex(*args.julia) if args.julia else seed
    detector = GridRecurrenceDetector(args.tolerance) if args.grid else None

    result = trace_orbit(seed, c, args.formula, args.max_steps,
                         escape_radius=args.escape_radius,
                         tolerance=args.tolerance, detector=detector)

    print(f"Orbit of {seed} (c={c}) [{args.formula}]: {result.status} at step {result.steps}")
    if result.period is not None:
        print(f"period: {result.period}")
    if not args.quiet:
        for i, z in enumerate(result.points):
            print(f"{i:5d} {z.real: .10f} {z.imag: .10f}")


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_console("DEBUG" if args.verbose else "INFO")
    file_handler = setup_logfile(args.log_file) if args.log_file else None

    try:
        if args.command == "field":
            run_field(args)
        else:
            run_orbit(args)
    except ValueError as exc:
        parser.error(str(exc))
    finally:
        if file_handler is not None:
            logger.remove(file_handler)


if __name__ == "__main__":
    main()
