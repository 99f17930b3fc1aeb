#!/usr/bin/env python3
"""
Well Log Viewer - Command-line chart exporter

Fetches curves for one well through the same session pipeline as the web UI
and writes the log chart (and, with --interpret, the cleaned-curve chart) to
disk.

Usage:
    python main.py --list                              # List wells
    python main.py WELL_ID --curves GR,RHOB            # Full logged interval
    python main.py WELL_ID --curves GR --from 1000 --to 2000 --output gr.png
    python main.py WELL_ID --curves GR,NPHI --interpret
    python main.py --errors                            # Show recent errors from logs
"""

import argparse
import sys
from pathlib import Path

import config
from rendering.plotly_renderer import export_figure
from viewer.logging import log_error, print_recent_errors, set_session_id, setup_logging
from viewer.session import ViewerSession


def _print_wells(session: ViewerSession) -> None:
    if not session.wells:
        print("No wells available.")
        return
    print(f"{'ID':<24} {'Name':<30} {'Start':>10} {'Stop':>10}")
    print("-" * 77)
    for w in session.wells:
        print(f"{w.id:<24} {w.display_name:<30} {w.start_depth:>10g} {w.stop_depth:>10g}")


def _cleaned_path(output: Path) -> Path:
    return output.with_name(f"{output.stem}_cleaned{output.suffix}")


def run(args) -> int:
    session = ViewerSession()
    set_session_id(session.session_id)

    try:
        session.load_wells()
    except Exception as e:
        log_error("Loading wells failed", e)
        print(f"Failed to load wells: {e}")
        return 1

    if args.list:
        _print_wells(session)
        return 0

    if not args.well:
        print("A well ID is required (or use --list).")
        return 2
    if session.well(args.well) is None:
        print(f"Unknown well '{args.well}'. Use --list to see available wells.")
        return 2

    try:
        session.select_well(args.well)
    except Exception as e:
        log_error("Loading curves failed", e, {"well": args.well})
        print(f"Failed to load curves: {e}")
        return 1

    if args.curves:
        requested = [c.strip() for c in args.curves.split(",") if c.strip()]
        unknown = [c for c in requested if c not in session.available_curves]
        if unknown:
            print(f"Unknown curves: {', '.join(unknown)}")
            print(f"Available: {', '.join(session.available_curves)}")
            return 2
        selected = session.sync_selection(requested)
        if len(selected) < len(requested):
            print(f"Only the first {config.MAX_CURVES} curves are plotted: {', '.join(selected)}")

    if not session.selection:
        print("No selectable curves for this well.")
        return 2

    session.set_depth_range(
        args.from_depth if args.from_depth is not None else session.from_depth,
        args.to_depth if args.to_depth is not None else session.to_depth,
    )

    try:
        session.load_data()
    except Exception as e:
        log_error("Loading data failed", e, {"well": args.well, "curves": session.selection.names})
        print(f"Failed to load data: {e}")
        return 1

    if args.interpret:
        try:
            session.interpret()
        except Exception as e:
            log_error("AI interpretation failed", e, {"well": args.well})
            print(f"AI interpretation failed: {e}")

    fig = session.log_figure()
    if fig is None:
        print("No data in the requested interval.")
        return 1

    output = Path(args.output)
    result = export_figure(fig, str(output))
    if result["status"] != "success":
        print(result["message"])
        return 1
    info = session.samples.summary()
    print(
        f"Wrote {result['filepath']} ({info['num_points']} samples, "
        f"depth {info['depth_min']:g}-{info['depth_max']:g})"
    )

    if session.interpretation is not None:
        cleaned = session.cleaned_figure()
        if cleaned is not None:
            result = export_figure(cleaned, str(_cleaned_path(Path(result["filepath"]))))
            if result["status"] == "success":
                print(f"Wrote {result['filepath']}")
            else:
                print(result["message"])
        print()
        print(f"Summary: {session.interpretation.summary_text}")

    return 0


def main():
    parser = argparse.ArgumentParser(description="Well Log Viewer — chart exporter")
    parser.add_argument("well", nargs="?", default=None, help="Well ID")
    parser.add_argument("--curves", "-c", default=None,
                        help=f"Comma-separated curve names (max {config.MAX_CURVES}); "
                             "defaults to the first available curve")
    parser.add_argument("--from", dest="from_depth", type=float, default=None,
                        help="Top depth (defaults to the well's start depth)")
    parser.add_argument("--to", dest="to_depth", type=float, default=None,
                        help="Bottom depth (defaults to the well's stop depth)")
    parser.add_argument("--interpret", action="store_true",
                        help="Request an AI interpretation and export the cleaned curves too")
    parser.add_argument("--output", "-o", default="well_log.html",
                        help="Output file (.html, .png or .pdf)")
    parser.add_argument("--list", action="store_true", help="List wells and exit")
    parser.add_argument("--errors", action="store_true", help="Show recent errors from logs and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging on the console")
    args = parser.parse_args()

    setup_logging(verbose=args.verbose)

    if args.errors:
        print_recent_errors()
        return

    sys.exit(run(args))


if __name__ == "__main__":
    main()
