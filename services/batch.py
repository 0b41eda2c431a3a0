"""Validate every SHARE.md under a directory, one independent job per file."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from config import MAX_WORKERS, SHARE_FILENAME, SHARES_DIR
from services.schema import UNREADABLE_FILE, ValidationResult, Violation
from services.shares import check_layout
from services.validator import parse_document, validate

log = logging.getLogger(__name__)


@dataclass
class TreeReport:
    root: str
    results: dict[str, ValidationResult] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return all(r.is_valid for r in self.results.values())

    @property
    def violation_count(self) -> int:
        return sum(len(r.violations) for r in self.results.values())

    def to_dict(self) -> dict:
        return {
            "root": self.root,
            "is_valid": self.is_valid,
            "file_count": len(self.results),
            "violation_count": self.violation_count,
            "results": {path: r.to_dict() for path, r in self.results.items()},
        }


def find_shares(root: str) -> list[str]:
    """Return relative paths of every SHARE.md beneath root, hidden dirs skipped."""
    found = []
    for dirpath, dirs, files in os.walk(root):
        dirs[:] = sorted(d for d in dirs if not d.startswith("."))
        if SHARE_FILENAME in files:
            rel = os.path.relpath(os.path.join(dirpath, SHARE_FILENAME), root)
            found.append(rel.replace(os.sep, "/"))
    return sorted(found)


def check_file(abs_path: str, rel_path: str) -> ValidationResult:
    """Read and validate one share, adding slug/directory correspondence."""
    try:
        with open(abs_path, encoding="utf-8-sig") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Cannot read %s: %s", abs_path, e)
        return ValidationResult((Violation(UNREADABLE_FILE, message=str(e)),))

    result = validate(content)
    fm, _body, _ = parse_document(content)
    layout = check_layout(rel_path, fm)
    if layout:
        return ValidationResult(result.violations + tuple(layout))
    return result


def check_paths(paths: dict[str, str], root: str, max_workers: int = None) -> TreeReport:
    """Validate {rel_path: abs_path} concurrently and fan results in sorted by rel_path."""
    report = TreeReport(root=root)
    if not paths:
        return report

    with ThreadPoolExecutor(max_workers=max_workers or MAX_WORKERS) as pool:
        futures = {rel: pool.submit(check_file, abs_path, rel) for rel, abs_path in paths.items()}
        for rel in sorted(futures):
            report.results[rel] = futures[rel].result()

    log.debug(
        "Checked %d share(s) under %s, %d violation(s)",
        len(report.results),
        root,
        report.violation_count,
    )
    return report


def check_tree(shares_dir: str = None, max_workers: int = None) -> TreeReport:
    """Validate every share beneath shares_dir."""
    shares_dir = shares_dir or SHARES_DIR
    paths = {rel: os.path.join(shares_dir, rel) for rel in find_shares(shares_dir)}
    return check_paths(paths, shares_dir, max_workers)
