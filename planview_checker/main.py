import argparse
import json
import re
from pathlib import Path

from ezdxf import new

from planview_checker import config
from planview_checker.geometry.plan_view import PlanViewAssembler
from planview_checker.geometry.tolerances import ValidationTolerances
from planview_checker.log_cleaner import cleanup_old_logs
from planview_checker.logger import init_logger, log, log_verbose, shutdown_logger
from planview_checker.reader import PlanViewReader
from planview_checker.utils import get_output_path, load_checks


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Plan View Checker: validates road reference line geometry (s order, continuity, length)."
    )
    parser.add_argument(
        "input_file", help="Path to the JSON plan view file", type=Path
    )
    parser.add_argument(
        "-c", "--checks", nargs="+", default=list(config.DEFAULT_CHECKS),
        help="List of checks to run. Example: -c arc_length continuity"
    )
    parser.add_argument(
        "--cleanup-logs", action="store_true",
        help="Clean up log files older than 1 week before running"
    )
    parser.add_argument(
        "-o", "--output", type=Path, help="Optional path for the output DXF file with error markers"
    )
    parser.add_argument(
        "--csv", type=Path, help="Optional directory for per-road violation CSV files"
    )
    parser.add_argument(
        "--roads", nargs="+", help="Only check these road ids"
    )
    parser.add_argument(
        "--collect-all", action="store_true",
        help="Report every violation instead of stopping at the first one per road"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Save detailed report"
    )
    parser.add_argument(
        "--position-tol", type=float, default=config.THRESHOLDS["position_tolerance"],
        help="Continuity position tolerance (meters)"
    )
    parser.add_argument(
        "--heading-tol", type=float, default=config.THRESHOLDS["heading_tolerance"],
        help="Continuity heading tolerance (radians)"
    )
    parser.add_argument(
        "--length-tol", type=float, default=config.THRESHOLDS["length_tolerance"],
        help="Road length tolerance (relative and absolute)"
    )
    return parser.parse_args(argv)


def csv_safe_id(road_id: str) -> str:
    """Road ids are free strings; keep only characters safe in a file name."""
    return re.sub(r"[^\w.-]", "_", road_id)


def create_output_doc():
    """Clean DXF document holding error markers only."""
    output_doc = new(config.DXF_VERSION)
    if config.XDATA_APPID not in output_doc.appids:
        output_doc.appids.new(config.XDATA_APPID)
    # Ensure all required error layers exist
    for layer in list(config.ERROR_LAYERS.values()) + [config.DEFAULT_ERROR_LAYER]:
        if layer not in output_doc.layers:
            output_doc.layers.new(name=layer, dxfattribs={'color': 7})
    return output_doc


def main(argv=None):
    args = parse_args(argv) if argv is None or isinstance(argv, list) else argv

    if args.cleanup_logs:
        cleanup_old_logs(verbose=args.verbose)

    init_logger(verbose=args.verbose)
    try:
        return _run(args)
    finally:
        shutdown_logger()


def _run(args):
    if not args.input_file.exists():
        log(f"Input file does not exist: {args.input_file}", level="ERROR")
        return 1

    log(f"Input plan view: {args.input_file}")
    log(f"Checks enabled: {args.checks}")

    # ------------------------------------------------------------------
    # 1. Read input roads
    # ------------------------------------------------------------------
    reader = PlanViewReader(allowed_roads=args.roads, verbose=args.verbose)
    try:
        roads = reader.load_json(args.input_file)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        log(f"Failed to read plan view file: {e}", level="ERROR")
        return 1
    log(f"Found {len(roads)} road(s)")

    # ------------------------------------------------------------------
    # 2. Create clean output DXF for error markers only
    # ------------------------------------------------------------------
    output_doc = create_output_doc()
    output_msp = output_doc.modelspace()

    # ------------------------------------------------------------------
    # 3. Load checks and validate every road
    # ------------------------------------------------------------------
    tolerances = ValidationTolerances(
        position_tolerance=args.position_tol,
        heading_tolerance=args.heading_tol,
        length_tolerance=args.length_tol,
    )
    check_params = {
        'verbose': args.verbose,
        'position_tolerance': tolerances.position_tolerance,
        'heading_tolerance': tolerances.heading_tolerance,
        'length_tolerance': tolerances.length_tolerance,
    }
    checks = load_checks(args.checks, check_params)
    assembler = PlanViewAssembler(
        tolerances=tolerances,
        checks=checks,
        early_exit=not args.collect_all,
        verbose=args.verbose,
    )

    if args.csv:
        args.csv.mkdir(parents=True, exist_ok=True)

    failed_roads = 0
    csv_failed = False
    for road in roads:
        log_verbose(f"\n=== Road {road.id} '{road.name}' ({len(road.plan_view)} geometries) ===")
        report = assembler.validate(road.plan_view, road.length, output_msp=output_msp, road_id=road.id)

        for caveat in report.caveats:
            log(f"Road {road.id}: {caveat}", level="WARNING")
        if report.is_valid:
            log(f"Road {road.id}: OK ({report.computed_length():.6f} m)")
        else:
            failed_roads += 1
            for violation in report.violations:
                log(f"Road {road.id}: {violation}", level="WARNING")
        if args.verbose:
            log_verbose(json.dumps(report.summary(), indent=2))

        if args.csv and not report.is_valid:
            csv_path = args.csv / f"road_{csv_safe_id(road.id)}_violations.csv"
            try:
                report.save_csv(csv_path)
                log(f"Saved violations of road {road.id} to: {csv_path}")
            except OSError as e:
                log(f"Failed to save violations of road {road.id}: {e}", level="ERROR")
                csv_failed = True

    # ------------------------------------------------------------------
    # 4. Save error markers
    # ------------------------------------------------------------------
    output_path = args.output or get_output_path(args.input_file)
    try:
        output_doc.saveas(output_path)
        log(f"Saved error markers to: {output_path}")
    except OSError as e:
        log(f"Failed to save output file: {e}", level="ERROR")
        return 1

    # ------------------------------------------------------------------
    # 5. Summary
    # ------------------------------------------------------------------
    log("=== Check Summary ===")
    total_issues = 0
    for check in checks:
        log(f"{check.__class__.__name__}: {check.get_error_count()} issue(s)")
        total_issues += check.get_error_count()

    if total_issues == 0:
        log("No issues detected.")
    else:
        log(f"Total issues found: {total_issues} in {failed_roads} road(s)")

    return 0 if failed_roads == 0 and not csv_failed else 1


if __name__ == "__main__":
    raise SystemExit(main())
