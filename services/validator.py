"""Share document validation: frontmatter block, field checks, required sections.

validate() is pure. It reads only its argument, never logs and never raises for
malformed content; every problem comes back as a Violation so authors can fix
them all in one pass.
"""

import yaml

from services.schema import (
    INVALID_FRONTMATTER_SYNTAX,
    MISSING_FRONTMATTER,
    InvalidArgument,
    ValidationResult,
    Violation,
    validate_frontmatter,
    validate_sections,
)

DELIMITER = "---"
_HEADING_PREFIX = "## "
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _ShareLoader(yaml.SafeLoader):
    """SafeLoader that leaves YYYY-MM-DD scalars as strings.

    The stock resolver turns `2026-13-40` into a date() call that raises
    ValueError outside of yaml.YAMLError.
    """


_ShareLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
# Explicit `!!timestamp` tags stay strings too; `created` is checked by the schema
_ShareLoader.add_constructor(_TIMESTAMP_TAG, yaml.SafeLoader.construct_scalar)


def load_yaml(text: str):
    """Default frontmatter parser."""
    return yaml.load(text, Loader=_ShareLoader)  # noqa: S506


def split_frontmatter(content: str) -> tuple[str | None, str]:
    """Return (yaml_text, body). yaml_text is None when no delimited block opens the file."""
    lines = content.split("\n")
    if lines[0].rstrip("\r") != DELIMITER:
        return None, content

    for i, line in enumerate(lines[1:], 1):
        if line.rstrip("\r") == DELIMITER:
            return "\n".join(lines[1:i]), "\n".join(lines[i + 1 :])

    return None, content


def extract_headings(body: str) -> set[str]:
    """Return the trimmed text of every level-2 heading in body."""
    headings = set()
    for line in body.split("\n"):
        if line.startswith(_HEADING_PREFIX):
            text = line[len(_HEADING_PREFIX) :].strip()
            if text:
                headings.add(text)
    return headings


def parse_document(content: str, load=load_yaml) -> tuple[dict | None, str, list[Violation]]:
    """Split and parse a share. Returns (frontmatter, body, structural violations).

    frontmatter is None whenever field checks should be skipped.
    """
    yaml_text, body = split_frontmatter(content)
    if yaml_text is None:
        return None, body, [
            Violation(
                MISSING_FRONTMATTER,
                message="Document must start with a '---' delimited YAML frontmatter block",
            )
        ]

    try:
        # An empty block is treated as an empty mapping so each field is reported missing
        fm = load(yaml_text)
        fm = {} if fm is None else fm
    except Exception as e:
        # Bad tags (`!!bool maybe`) and deep nesting fail outside yaml.YAMLError
        return None, body, [
            Violation(
                INVALID_FRONTMATTER_SYNTAX,
                message=f"Frontmatter is not valid YAML: {type(e).__name__}: {e}",
            )
        ]

    if not isinstance(fm, dict):
        return None, body, [
            Violation(
                INVALID_FRONTMATTER_SYNTAX,
                message=f"Frontmatter must be a mapping, got {type(fm).__name__}",
            )
        ]
    return fm, body, []


def validate(raw_text: str, load=load_yaml) -> ValidationResult:
    """Validate a SHARE.md document and collect every violation.

    `load` parses the YAML between the delimiters; anything it raises is
    reported as InvalidFrontmatterSyntax.
    """
    if raw_text is None:
        raise InvalidArgument("validate() requires document text, got None")
    if not isinstance(raw_text, str):
        raise InvalidArgument(f"validate() requires str, got {type(raw_text).__name__}")

    fm, body, violations = parse_document(raw_text, load=load)
    if fm is not None:
        violations.extend(validate_frontmatter(fm))
    violations.extend(validate_sections(extract_headings(body)))
    return ValidationResult(tuple(violations))
