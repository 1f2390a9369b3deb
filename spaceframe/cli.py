# spaceframe/cli.py
"""
Command-line entry point.

    spaceframe model.json                       # every combination, JSON to stdout
    spaceframe model.json -c COMB1 -o out.json  # one combination, JSON to a file
    spaceframe model.json --csv results/        # plus CSV tables per combination

Exit codes: 0 all combinations solved, 1 at least one combination failed,
2 the model could not be loaded or has validation errors.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .analyzer import Analyzer
from .errors import ModelLoadError, ModelValidationError
from .io import load_model
from .validate import has_errors, validate_model

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spaceframe",
        description="Linear static analysis of 3D frames (direct stiffness method)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  spaceframe frame.json
  spaceframe frame.json --combination ULS --combination SLS --points 20
  spaceframe frame.json --output results.json --csv results/
        """,
    )
    parser.add_argument("model", help="Path to the model JSON file")
    parser.add_argument(
        "-c", "--combination",
        action="append",
        dest="combinations",
        metavar="NAME",
        help="Load combination to analyze (repeatable; default: all)",
    )
    parser.add_argument(
        "--points",
        type=int,
        default=None,
        help="Segments per member for force diagrams (default: 11)",
    )
    parser.add_argument("-o", "--output", help="Write JSON results to this file instead of stdout")
    parser.add_argument("--csv", metavar="DIR", help="Also write node/member CSV tables to DIR")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _write_csv(directory: Path, results) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for name, result in results.items():
        if not result.success:
            continue
        result.nodes_dataframe().to_csv(directory / f"{name}_nodes.csv", index=False)
        result.member_forces_dataframe().to_csv(directory / f"{name}_members.csv", index=False)
        logger.info("Wrote CSV tables for %s to %s", name, directory)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.points is not None and args.points < 1:
        print("error: --points must be at least 1", file=sys.stderr)
        return EXIT_INVALID

    try:
        model = load_model(args.model)
    except (OSError, ModelLoadError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID

    issues = validate_model(model)
    for issue in issues:
        print(f"{issue.severity}: {issue.path or '<model>'}: {issue.message}", file=sys.stderr)

    if has_errors(issues):
        return EXIT_INVALID

    try:
        analyzer = Analyzer(model)
    except (ModelValidationError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID

    names = args.combinations or [c.name for c in model.load_combinations]
    if not names:
        print("error: model has no load combinations", file=sys.stderr)
        return EXIT_INVALID

    results = {name: analyzer.analyze(name, args.points) for name in names}

    payload = json.dumps({name: r.to_dict() for name, r in results.items()}, indent=2)
    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
    else:
        print(payload)

    if args.csv:
        _write_csv(Path(args.csv), results)

    failed = [name for name, r in results.items() if not r.success]
    for name in failed:
        print(f"error: {name}: {results[name].error}", file=sys.stderr)
    return EXIT_FAILED if failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
