"""Command-line interface for Scoresheet.

Reconciles a submissions export against a roster built from a guideline
and a teams list, or prints the chest numbers such a roster allocates.
"""

# Scoresheet
# Copyright (C) 2025  Scoresheet developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from scoresheet.exceptions import ParseException, ScoresheetException
from scoresheet.models.config import ScoresheetConfig
from scoresheet.models.enums import SubmissionStatus
from scoresheet.models.submission import Submission
from scoresheet.session import ScoresheetSession
from scoresheet.utils import set_verbose, setup_logger

logger = setup_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PARSE_ERROR = 2


def _read_text(path: str) -> str:
    # Spreadsheet exports often start with a byte order mark
    return Path(path).read_text(encoding="utf-8-sig")


def load_guideline(path: str) -> Dict[str, Any]:
    """Load a guideline JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_session(args: argparse.Namespace) -> ScoresheetSession:
    """Create a session from the guideline and teams list named in ``args``."""
    guideline = load_guideline(args.guideline)
    config = ScoresheetConfig.from_dict(guideline.get("config", {}))

    if getattr(args, "threshold", None) is not None:
        config.match_threshold = args.threshold
    if getattr(args, "workers", None) is not None:
        config.match_workers = args.workers
    if getattr(args, "stop_on_error", False):
        config.stop_on_linkage_error = True

    teams_list = _read_text(args.teams_list).splitlines()
    return ScoresheetSession.from_guideline(guideline, teams_list, config)


def format_submission(submission: Submission) -> str:
    candidate = submission.match_candidate
    match = (
        f"{candidate.full_name} (#{candidate.chest_number}, "
        f"{submission.match_score:.0%})"
        if candidate
        else "-"
    )
    return (
        f"{submission.row_number:>4}  {submission.status.value:<8}  "
        f"{submission.claimed_name:<28} -> {match:<40} {submission.reason}"
    )


def print_reconciliation(submissions: List[Submission]) -> None:
    print("=" * 70)
    print("SUBMISSION RECONCILIATION")
    print("=" * 70)
    for submission in submissions:
        print(format_submission(submission))
        if submission.details:
            print(f"{'':>16}items: {', '.join(submission.details)}")

    print("-" * 70)
    for status in SubmissionStatus:
        count = sum(1 for s in submissions if s.status is status)
        if count:
            print(f"  {status.value:<10} {count}")
    print("=" * 70)


def run_reconcile(args: argparse.Namespace) -> int:
    session = build_session(args)
    submissions = session.import_submissions(_read_text(args.submissions))

    if args.json:
        print(json.dumps([s.to_dict() for s in submissions], indent=2))
    else:
        print_reconciliation(submissions)
    return EXIT_OK


def run_chest_numbers(args: argparse.Namespace) -> int:
    session = build_session(args)
    individuals = session.roster.individuals

    if args.json:
        print(
            json.dumps(
                [
                    {
                        "chest_number": i.chest_number,
                        "full_name": i.full_name,
                        "team": i.team.name if i.team else None,
                        "level": i.level.code if i.level else None,
                    }
                    for i in individuals
                ],
                indent=2,
            )
        )
        return EXIT_OK

    for individual in sorted(individuals, key=lambda i: i.chest_number):
        team = individual.team.name if individual.team else "?"
        level = individual.level.code if individual.level else "?"
        print(
            f"{individual.chest_number:>6}  {individual.full_name:<30} {team:<12} {level}"
        )
    unassigned = sum(1 for i in individuals if not i.chest_number)
    if unassigned:
        logger.warning(f"{unassigned} individuals have no chest number")
    return EXIT_OK


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="scoresheet",
        description="Reconcile registration submissions and allocate chest numbers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Reconcile a form export against the roster
  scoresheet reconcile guideline.json teams.tsv submissions.tsv

  # Machine-readable report
  scoresheet reconcile guideline.json teams.tsv submissions.tsv --json

  # List allocated chest numbers
  scoresheet chest-numbers guideline.json teams.tsv
        """,
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile = subparsers.add_parser(
        "reconcile", help="Match a submissions export to the roster"
    )
    reconcile.add_argument("guideline", help="Guideline JSON (teams, levels, items)")
    reconcile.add_argument("teams_list", help="Teams list (name, team, year)")
    reconcile.add_argument("submissions", help="Tab separated submissions export")
    reconcile.add_argument(
        "--threshold", type=int, help="Largest edit distance for a name match"
    )
    reconcile.add_argument("--workers", type=int, help="Matching worker threads")
    reconcile.add_argument(
        "--stop-on-error",
        action="store_true",
        help="Abort on the first linkage error instead of continuing",
    )
    reconcile.add_argument("--json", action="store_true", help="Print JSON")
    reconcile.set_defaults(handler=run_reconcile)

    chest_numbers = subparsers.add_parser(
        "chest-numbers", help="Print the chest numbers of the roster"
    )
    chest_numbers.add_argument("guideline", help="Guideline JSON (teams, levels, items)")
    chest_numbers.add_argument("teams_list", help="Teams list (name, team, year)")
    chest_numbers.add_argument("--json", action="store_true", help="Print JSON")
    chest_numbers.set_defaults(handler=run_chest_numbers)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_verbose()

    try:
        return args.handler(args)
    except ParseException as e:
        logger.error(f"Cannot read input: {e}")
        return EXIT_PARSE_ERROR
    except (ScoresheetException, OSError, json.JSONDecodeError) as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
