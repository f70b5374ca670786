from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .config import data_config_from_env
from .normalize import TeamRef, load_matches_json
from .render import render_text
from .report import SIDE_FILTERS, ReportFilters, build_report


def _write_json(path: str, obj: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Win-condition report generator")
    parser.add_argument("--input", default=None, help="Path to normalized matches JSON (defaults to WINCON_DATA_PATH)")
    parser.add_argument("--team-id", default=None, help="Team id to analyze (defaults to the file's team)")
    parser.add_argument("--team-name", default=None, help="Display name override")
    parser.add_argument("--window", type=int, default=None, help="Number of most recent matches to include")
    parser.add_argument("--map", default=None, help="Only analyze this map")
    parser.add_argument("--side", choices=SIDE_FILTERS, default=None, help="Side filter for identity analysis")
    parser.add_argument(
        "--output-format", choices=["json", "text"], default="json", help="Output format"
    )
    parser.add_argument("--output", default=None, help="Path to output report JSON/text")
    parser.add_argument("--pdf", default=None, help="Also render the report to this PDF path")
    parser.add_argument("--debug", action="store_true", help="Print debug logs")
    return parser.parse_args()


def main() -> None:
    load_dotenv()
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = data_config_from_env()
    path = Path(args.input) if args.input else config.data_path
    if not path.exists():
        raise SystemExit(f"Match data not found at {path}. Pass --input or set WINCON_DATA_PATH.")

    file_team, matches = load_matches_json(path)
    team_id = args.team_id or (file_team.id if file_team else None)
    if not team_id:
        raise SystemExit("No team id given and the input file has no team entry; pass --team-id.")
    team_name = args.team_name or (file_team.name if file_team and file_team.id == team_id else team_id)

    filters = ReportFilters(
        window=args.window or config.default_window,
        map=args.map,
        side=args.side,
    )
    report = build_report(matches, TeamRef(id=team_id, name=team_name), filters)

    if args.pdf:
        from .report_pdf import build_pdf

        build_pdf(report, args.pdf)

    if args.output_format == "json":
        if args.output:
            _write_json(args.output, report)
            return
        output_text = json.dumps(report, indent=2)
    else:
        output_text = render_text(report)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output_text)
    else:
        print(output_text)


if __name__ == "__main__":
    main()
