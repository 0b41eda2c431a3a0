#!/usr/bin/env python3
"""Shareful CLI: check, list and scaffold SHARE.md documents from the shell or CI."""

import argparse
import json
import logging
import os
import sys

from config import MAX_WORKERS, SHARE_FILENAME, SHARES_DIR
from services.batch import TreeReport, check_paths, find_shares
from services.schema import SOLUTION_TYPES
from services.shares import create_share, list_shares

log = logging.getLogger("shareful")


def _collect(paths: list[str]) -> dict[str, str]:
    """Expand file and directory arguments into {display_path: abs_path}."""
    collected = {}
    for path in paths:
        if os.path.isdir(path):
            for rel in find_shares(path):
                collected[os.path.join(path, rel).replace(os.sep, "/")] = os.path.join(path, rel)
        elif os.path.isfile(path):
            collected[path] = path
        else:
            log.error("No such file or directory: %s", path)
    return collected


def _print_report(report: TreeReport) -> None:
    for path, result in report.results.items():
        for v in result.violations:
            print(f"{path}: {v} - {v.message}")
    status = "OK" if report.is_valid else "FAILED"
    print(
        f"{status}: {len(report.results)} share(s) checked, "
        f"{report.violation_count} violation(s)"
    )


def cmd_check(args) -> int:
    paths = args.paths or [SHARES_DIR]
    collected = _collect(paths)
    if not collected:
        log.error("No %s files found in %s", SHARE_FILENAME, ", ".join(paths))
        return 2

    report = check_paths(collected, root=", ".join(paths), max_workers=args.workers)
    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        _print_report(report)
    return 0 if report.is_valid else 1


def cmd_list(args) -> int:
    result = list_shares(args.shares_dir)
    if "error" in result:
        log.error("%s: %s", result["error"], args.shares_dir or SHARES_DIR)
        return 2
    for share in result["shares"]:
        mark = "ok " if share["valid"] else "ERR"
        tags = ",".join(str(t) for t in share["tags"]) if isinstance(share["tags"], list) else ""
        print(f"{mark} {share['slug']:<40} {str(share['solution_type'] or '-'):<10} {tags}")
    return 0


def cmd_new(args) -> int:
    result = create_share(
        args.title,
        args.problem,
        args.type,
        args.tag or [],
        shares_dir=args.shares_dir,
    )
    if "error" in result:
        log.error(result["error"])
        for v in result.get("violations", []):
            log.error("  %s: %s", v["code"], v["message"])
        return 1
    print(os.path.join(args.shares_dir or SHARES_DIR, result["path"]))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shareful", description="Shareful share tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Validate SHARE.md files or directories")
    check.add_argument("paths", nargs="*", help=f"Files or directories (default: {SHARES_DIR})")
    check.add_argument("--json", action="store_true", help="Print the report as JSON")
    check.add_argument(
        "--workers", type=int, default=MAX_WORKERS, help=f"Parallel checks (default: {MAX_WORKERS})"
    )
    check.set_defaults(func=cmd_check)

    ls = sub.add_parser("list", help="List shares and whether they validate")
    ls.add_argument("--shares-dir", default=None)
    ls.set_defaults(func=cmd_list)

    new = sub.add_parser("new", help="Scaffold shares/<slug>/SHARE.md from a title")
    new.add_argument("title")
    new.add_argument("--problem", required=True, help="One-sentence problem statement")
    new.add_argument("--type", required=True, choices=SOLUTION_TYPES)
    new.add_argument("--tag", action="append", help="Repeat for each tag")
    new.add_argument("--shares-dir", default=None)
    new.set_defaults(func=cmd_new)
    return parser


def main(argv=None) -> int:
    """Entry point for `shareful` CLI command."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
