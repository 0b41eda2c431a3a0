"""Share endpoints: validate raw text, list/read/write/scaffold shares, tree check."""

from flask import Blueprint, current_app, jsonify, request

from services.batch import check_tree
from services.schema import SOLUTION_TYPES
from services.shares import create_share, list_shares, read_share, write_share
from services.validator import validate

bp = Blueprint("shares", __name__)


def _shares_dir() -> str | None:
    return current_app.config.get("SHARES_DIR")


@bp.route("/api/validate", methods=["POST"])
def validate_content():
    """Validate SHARE.md text without touching disk."""
    data = request.get_json(silent=True) or {}
    content = data.get("content")
    if not isinstance(content, str):
        return jsonify({"error": "content must be a string"}), 400
    return jsonify(validate(content).to_dict())


@bp.route("/api/shares", methods=["GET"])
def shares_list():
    result = list_shares(_shares_dir())
    if "error" in result:
        return jsonify(result), 404
    return jsonify(result)


@bp.route("/api/shares", methods=["POST"])
def shares_create():
    """Scaffold a new share from title, problem, solution_type and tags."""
    data = request.get_json(silent=True) or {}
    title = data.get("title")
    problem = data.get("problem", "")
    solution_type = data.get("solution_type")
    tags = data.get("tags", [])
    created = data.get("created")

    if not isinstance(title, str) or not title.strip():
        return jsonify({"error": "title must be a non-empty string"}), 400
    if not isinstance(problem, str):
        return jsonify({"error": "problem must be a string"}), 400
    if solution_type not in SOLUTION_TYPES:
        return jsonify({"error": f"solution_type must be one of {list(SOLUTION_TYPES)}"}), 400
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        return jsonify({"error": "tags must be a list of strings"}), 400
    if created is not None and not isinstance(created, str):
        return jsonify({"error": "created must be a YYYY-MM-DD string"}), 400

    result = create_share(
        title,
        problem,
        solution_type,
        tags,
        created=created,
        shares_dir=_shares_dir(),
    )
    if "error" in result:
        code = 409 if result["error"].startswith("Share already exists") else 400
        return jsonify(result), code
    return jsonify(result), 201


@bp.route("/api/shares/<slug>", methods=["GET"])
def shares_get(slug):
    result = read_share(slug, _shares_dir())
    if "error" in result:
        code = 404 if result["error"] == "Share not found" else 400
        return jsonify(result), code
    return jsonify(result)


@bp.route("/api/shares/<slug>", methods=["POST"])
def shares_put(slug):
    """Write (create/overwrite) a share. Rejected with violations when invalid."""
    data = request.get_json(silent=True) or {}
    content = data.get("content", "")
    if not isinstance(content, str):
        return jsonify({"error": "content must be a string"}), 400

    result = write_share(slug, content, _shares_dir())
    if "error" in result:
        return jsonify(result), 400
    return jsonify(result)


@bp.route("/api/check")
def check_all():
    """Validate every share on disk. 200 regardless of outcome; see is_valid."""
    return jsonify(check_tree(_shares_dir()).to_dict())
