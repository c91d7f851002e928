"""Command line interface for entitydiff."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from .exceptions import ConfigError, DocumentLoadError
from .config import load_options
from .models import ArrayMatching, ComparisonMode, CompareOptions, ComparisonResult
from .session import ComparisonSession
from .utils import canonical_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="entitydiff",
        description="Compare two JSON documents entity by entity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  entitydiff old.json new.json
  entitydiff old.json new.json --id-path "users[].id" --report report.json
  entitydiff old.json new.json --options options.yaml --filter modified
        """
    )

    parser.add_argument("first", help="Path to the first JSON document")
    parser.add_argument("second", help="Path to the second JSON document")
    parser.add_argument("-i", "--id-path", default="", help="Identifier path used to match entities")
    parser.add_argument("-o", "--options", help="Path to YAML/JSON options file")
    parser.add_argument("-r", "--report", help="Path to output JSON report file")

    parser.add_argument("--mode", choices=[m.value for m in ComparisonMode])
    parser.add_argument("--array-matching", choices=[a.value for a in ArrayMatching])
    parser.add_argument("--normalize-strings", action="store_true", default=None)
    parser.add_argument("--ignore-timestamps", action="store_true", default=None)
    parser.add_argument("--case-insensitive", action="store_true", default=None)
    parser.add_argument("--ignore-extra-keys", action="store_true", default=None)
    parser.add_argument("--tolerance", type=float, help="Numeric tolerance")
    parser.add_argument("--include", action="append", default=[], help="Only report paths containing this pattern")
    parser.add_argument("--exclude", action="append", default=[], help="Skip paths containing this pattern")

    parser.add_argument("--filter", dest="diff_filter", default="all",
                        choices=["all", "added", "deleted", "modified"],
                        help="Only print differences of this kind")
    parser.add_argument("--search", default="", help="Only print differences matching this text")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress console output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def options_from_args(args: argparse.Namespace) -> CompareOptions:
    """Merge the options file (if any) with command line flags."""
    options = load_options(args.options) if args.options else CompareOptions()

    overrides = {}
    if args.mode:
        overrides["mode"] = args.mode
    if args.array_matching:
        overrides["array_matching"] = args.array_matching
    if args.normalize_strings:
        overrides["normalize_strings"] = True
    if args.ignore_timestamps:
        overrides["ignore_timestamps"] = True
    if args.case_insensitive:
        overrides["case_sensitive"] = False
    if args.ignore_extra_keys:
        overrides["ignore_extra_keys"] = True
    if args.tolerance is not None:
        overrides["numeric_tolerance"] = args.tolerance
    if args.include:
        overrides["include_paths"] = args.include
    if args.exclude:
        overrides["exclude_paths"] = args.exclude

    return options.merged(overrides) if overrides else options


def print_result(result: ComparisonResult, session: ComparisonSession):
    summary = result.summary
    print(f"\nComparison: {summary.total_differences} differences "
          f"({summary.added} added, {summary.deleted} deleted, {summary.modified} modified)")
    print(f"  Matched: {len(result.matched)} entities ({summary.equal} identical)")
    if result.only_in_first:
        print(f"  Only in first: {len(result.only_in_first)}")
    if result.only_in_second:
        print(f"  Only in second: {len(result.only_in_second)}")

    if session.visible:
        print(f"\nDifferences ({len(session.visible)} shown):")
        for diff in session.visible:
            print(f"  - [{diff.type.value}] {diff.path}")
            data = diff.to_dict()
            if "value" in data:
                print(f"    Value: {canonical_json(data['value'])}")
            else:
                print(f"    Old: {canonical_json(data['oldValue'])}")
                print(f"    New: {canonical_json(data['newValue'])}")

    stats = session.statistics()
    print("\nStatistics:")
    print(f"  Duration: {stats['duration_ms']}ms")
    print(f"  Match Percentage: {stats['match_percentage']}%")
    print(f"  Accuracy Score: {stats['accuracy_score']}")
    print(f"  Data Integrity: {stats['data_integrity']}")
    print(f"  Change Density: {stats['change_density']}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.search and args.diff_filter != "all":
        parser.error("--search and --filter cannot be combined")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        options = options_from_args(args)
        document1 = ComparisonSession.load_document(args.first)
        document2 = ComparisonSession.load_document(args.second)
    except (ConfigError, DocumentLoadError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    session = ComparisonSession(options)
    result = session.compare(document1, document2, args.id_path)

    if args.search:
        session.search(args.search)
    elif args.diff_filter != "all":
        session.filter_by_type(args.diff_filter)

    if not args.quiet:
        print_result(result, session)

    if args.report:
        report = result.to_dict()
        report["statistics"] = session.statistics()
        with open(args.report, 'w') as f:
            json.dump(report, indent=2, fp=f)
        if not args.quiet:
            print(f"\nReport saved to: {args.report}")

    return 0 if result.is_match else 1


if __name__ == "__main__":
    sys.exit(main())
