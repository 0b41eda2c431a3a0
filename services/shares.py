"""Share directory operations: list, read, write, scaffold, slug/path checks."""

import logging
import os
import re
from datetime import date, datetime

import yaml

from config import SHARE_FILENAME, SHARES_DIR
from services.schema import (
    REQUIRED_SECTIONS,
    SLUG_MAX,
    SLUG_MISMATCH,
    SLUG_RE,
    Violation,
)
from services.validator import parse_document, validate

log = logging.getLogger(__name__)

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")

_SECTION_PROMPTS = {
    "Problem": "What goes wrong, and how it shows up.",
    "Solution": "The fix, with the code or config that applies it.",
    "Why It Works": "The mechanism behind the fix.",
    "Context": "Versions, environments and related links.",
}


def slugify(title: str) -> str:
    """Derive a slug from a title: lowercase, non-alphanumeric runs → single hyphen."""
    slug = _NON_SLUG_RE.sub("-", title.lower()).strip("-")
    return slug[:SLUG_MAX].rstrip("-")


def share_path(slug: str, shares_dir: str = None) -> tuple[str, str | None]:
    """Resolve <shares_dir>/<slug>/SHARE.md. Returns (abs_path, error)."""
    shares_dir = shares_dir or SHARES_DIR
    if not isinstance(slug, str) or not SLUG_RE.fullmatch(slug) or len(slug) > SLUG_MAX:
        return "", f"Invalid slug: {slug!r}"
    abs_path = os.path.realpath(os.path.join(shares_dir, slug, SHARE_FILENAME))
    shares_real = os.path.realpath(shares_dir)
    if not abs_path.startswith(shares_real + os.sep):
        return abs_path, "Path traversal detected"
    return abs_path, None


def check_layout(rel_path: str, frontmatter: dict | None) -> list[Violation]:
    """SlugMismatch when the share's directory name differs from its frontmatter slug.

    A slug that fails its own pattern is already reported by validate().
    """
    slug = (frontmatter or {}).get("slug")
    if not isinstance(slug, str) or not SLUG_RE.fullmatch(slug):
        return []
    dir_name = os.path.basename(os.path.dirname(rel_path.replace(os.sep, "/")))
    if dir_name == slug:
        return []
    return [
        Violation(
            SLUG_MISMATCH,
            "slug",
            message=f"Share lives in {dir_name!r} but its slug is {slug!r}",
        )
    ]


def _json_safe(value):
    """Coerce parsed YAML into JSON-serializable values (dates, bytes, sets → str/list)."""
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_json_safe(v) for v in value]
    if isinstance(value, set | frozenset):
        return sorted((_json_safe(v) for v in value), key=str)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, date | datetime):
        return value.isoformat()
    if value is None or isinstance(value, str | int | float | bool):
        return value
    return str(value)


def list_shares(shares_dir: str = None) -> dict:
    """List shares one level below shares_dir. Returns {shares} or {error}."""
    shares_dir = shares_dir or SHARES_DIR
    if not os.path.isdir(shares_dir):
        return {"error": "Shares directory not found"}

    shares = []
    for name in sorted(os.listdir(shares_dir)):
        fpath = os.path.join(shares_dir, name, SHARE_FILENAME)
        if name.startswith(".") or not os.path.isfile(fpath):
            continue
        try:
            with open(fpath, encoding="utf-8-sig") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Skipping unreadable share %s: %s", fpath, e)
            continue

        fm, _body, _ = parse_document(content)
        fm = fm or {}
        result = validate(content)
        shares.append(
            {
                "slug": name,
                "title": _json_safe(fm.get("title", name)),
                "tags": _json_safe(fm.get("tags") or []),
                "solution_type": _json_safe(fm.get("solution_type")),
                "created": _json_safe(fm.get("created")),
                "valid": result.is_valid,
                "violation_count": len(result.violations),
                "modified": datetime.fromtimestamp(os.stat(fpath).st_mtime).isoformat(),
            }
        )
    return {"shares": shares}


def read_share(slug: str, shares_dir: str = None) -> dict:
    """Read a share. Returns {slug, path, content, frontmatter, body, validation} or {error}."""
    abs_path, err = share_path(slug, shares_dir)
    if err:
        return {"error": err}
    if not os.path.isfile(abs_path):
        return {"error": "Share not found"}

    try:
        with open(abs_path, encoding="utf-8-sig") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        return {"error": str(e)}

    fm, body, _ = parse_document(content)
    return {
        "slug": slug,
        "path": f"{slug}/{SHARE_FILENAME}",
        "content": content,
        "frontmatter": _json_safe(fm or {}),
        "body": body,
        "validation": validate(content).to_dict(),
    }


def write_share(slug: str, content: str, shares_dir: str = None) -> dict:
    """Validate and write a share. Returns {ok, path} or {error, violations}."""
    abs_path, err = share_path(slug, shares_dir)
    if err:
        return {"error": err}

    result = validate(content)
    fm, _body, _ = parse_document(content)
    violations = list(result.violations) + check_layout(f"{slug}/{SHARE_FILENAME}", fm)
    if violations:
        log.info("Rejected share %s: %s", slug, ", ".join(str(v) for v in violations))
        return {
            "error": "Share validation failed",
            "violations": [v.to_dict() for v in violations],
        }

    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    with open(abs_path, "w", encoding="utf-8") as f:
        f.write(content)
    log.info("Wrote share %s", slug)
    return {"ok": True, "path": f"{slug}/{SHARE_FILENAME}"}


def render_share(
    title: str,
    slug: str,
    problem: str,
    solution_type: str,
    tags: list[str],
    created: str,
) -> str:
    """Render a SHARE.md skeleton with the required sections."""
    fm = {
        "title": title,
        "slug": slug,
        "tags": list(tags),
        "problem": problem,
        "solution_type": solution_type,
        "created": created,
    }
    header = yaml.safe_dump(
        fm, sort_keys=False, default_flow_style=False, allow_unicode=True, width=4096
    )
    sections = "\n".join(
        f"## {name}\n\n{_SECTION_PROMPTS[name]}\n" for name in REQUIRED_SECTIONS
    )
    return f"---\n{header}---\n\n{sections}"


def create_share(
    title: str,
    problem: str,
    solution_type: str,
    tags: list[str],
    created: str = None,
    shares_dir: str = None,
) -> dict:
    """Scaffold shares/<slug>/SHARE.md from a title. Returns {ok, slug, path} or {error}."""
    slug = slugify(title)
    abs_path, err = share_path(slug, shares_dir)
    if err:
        return {"error": err}
    if os.path.exists(abs_path):
        return {"error": f"Share already exists: {slug}"}

    content = render_share(
        title, slug, problem, solution_type, tags, created or date.today().isoformat()
    )
    result = write_share(slug, content, shares_dir)
    if "error" in result:
        return result
    return {"ok": True, "slug": slug, "path": result["path"]}
