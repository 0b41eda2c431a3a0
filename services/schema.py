"""Share frontmatter schema, violation types, and per-field checks."""

import re
from dataclasses import dataclass
from datetime import date

FIELD_ORDER = ("title", "slug", "tags", "problem", "solution_type", "created")
REQUIRED_SECTIONS = ("Problem", "Solution", "Why It Works", "Context")

SOLUTION_TYPES = ("fix", "workaround", "pattern", "reference", "config")

TITLE_MAX = 128
SLUG_MAX = 64
TAGS_MIN = 1
TAGS_MAX = 10
TAG_MAX = 32
PROBLEM_MAX = 256

SLUG_RE = re.compile(r"[a-z0-9-]+")
DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

# Violation codes
MISSING_FRONTMATTER = "MissingFrontmatter"
INVALID_FRONTMATTER_SYNTAX = "InvalidFrontmatterSyntax"
MISSING_FIELD = "MissingField"
INVALID_FIELD = "InvalidField"
MISSING_SECTION = "MissingSection"
SLUG_MISMATCH = "SlugMismatch"
UNREADABLE_FILE = "UnreadableFile"


class InvalidArgument(TypeError):
    """Raised when validate() is handed no document text at all."""


@dataclass(frozen=True)
class Violation:
    code: str
    name: str | None = None
    reason: str | None = None
    message: str = ""

    def __str__(self) -> str:
        args = [a for a in (self.name, self.reason) if a]
        return f"{self.code}({', '.join(args)})" if args else self.code

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "name": self.name,
            "reason": self.reason,
            "message": self.message,
        }


@dataclass(frozen=True)
class ValidationResult:
    violations: tuple[Violation, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "violations": [v.to_dict() for v in self.violations],
        }


def _invalid(field: str, reason: str, message: str) -> Violation:
    return Violation(INVALID_FIELD, field, reason, message)


def _check_title(value) -> Violation | None:
    if not isinstance(value, str):
        return _invalid("title", "type", f"Field 'title' must be str, got {type(value).__name__}")
    if not 1 <= len(value) <= TITLE_MAX:
        return _invalid(
            "title", "length", f"Field 'title' must be 1-{TITLE_MAX} characters, got {len(value)}"
        )
    return None


def _check_slug(value) -> Violation | None:
    if not isinstance(value, str):
        return _invalid("slug", "type", f"Field 'slug' must be str, got {type(value).__name__}")
    if not 1 <= len(value) <= SLUG_MAX:
        return _invalid(
            "slug", "length", f"Field 'slug' must be 1-{SLUG_MAX} characters, got {len(value)}"
        )
    if not SLUG_RE.fullmatch(value):
        return _invalid(
            "slug",
            "pattern",
            f"Field 'slug' may only contain lowercase letters, digits and hyphens, got {value!r}",
        )
    return None


def _check_tags(value) -> Violation | None:
    if not isinstance(value, list):
        return _invalid("tags", "type", f"Field 'tags' must be list, got {type(value).__name__}")
    if not TAGS_MIN <= len(value) <= TAGS_MAX:
        return _invalid(
            "tags", "length", f"Field 'tags' must have {TAGS_MIN}-{TAGS_MAX} entries, got {len(value)}"
        )
    for tag in value:
        if not isinstance(tag, str):
            return _invalid("tags", "type", f"Tag {tag!r} must be str, got {type(tag).__name__}")
        if len(tag) > TAG_MAX:
            return _invalid(
                "tags", "length", f"Tag {tag!r} exceeds {TAG_MAX} characters ({len(tag)})"
            )
        if tag != tag.lower():
            return _invalid("tags", "case", f"Tag {tag!r} must be lowercase")
    return None


def _check_problem(value) -> Violation | None:
    # "One sentence" is a writing guideline; only the length is enforced.
    if not isinstance(value, str):
        return _invalid(
            "problem", "type", f"Field 'problem' must be str, got {type(value).__name__}"
        )
    if len(value) > PROBLEM_MAX:
        return _invalid(
            "problem",
            "length",
            f"Field 'problem' must be at most {PROBLEM_MAX} characters, got {len(value)}",
        )
    return None


def _check_solution_type(value) -> Violation | None:
    if not isinstance(value, str) or value not in SOLUTION_TYPES:
        return _invalid(
            "solution_type",
            "enum",
            f"Field 'solution_type' must be one of {list(SOLUTION_TYPES)}, got {value!r}",
        )
    return None


def _check_created(value) -> Violation | None:
    if isinstance(value, date):
        value = value.isoformat()
    if isinstance(value, str) and DATE_RE.fullmatch(value):
        try:
            date.fromisoformat(value)
            return None
        except ValueError:
            pass
    return _invalid(
        "created", "date", f"Field 'created' must be a calendar date YYYY-MM-DD, got {value!r}"
    )


SHARE_SCHEMA = {
    "title": _check_title,
    "slug": _check_slug,
    "tags": _check_tags,
    "problem": _check_problem,
    "solution_type": _check_solution_type,
    "created": _check_created,
}


def validate_frontmatter(fm: dict) -> list[Violation]:
    """Return field violations in FIELD_ORDER. Empty list means valid."""
    violations = []
    for field in FIELD_ORDER:
        value = fm.get(field)
        if value is None:
            violations.append(
                Violation(MISSING_FIELD, field, message=f"Missing required field: {field!r}")
            )
            continue
        violation = SHARE_SCHEMA[field](value)
        if violation:
            violations.append(violation)
    return violations


def validate_sections(headings: set[str]) -> list[Violation]:
    """Return a MissingSection violation for each required heading not present."""
    return [
        Violation(MISSING_SECTION, name, message=f"Missing required section: '## {name}'")
        for name in REQUIRED_SECTIONS
        if name not in headings
    ]
