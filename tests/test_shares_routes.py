"""Integration tests for share API routes."""

import pytest

from app import app

SAMPLE_MD = (
    "---\ntitle: Fix X\nslug: fix-x\ntags: [bug]\nproblem: X breaks.\n"
    "solution_type: fix\ncreated: 2026-02-08\n---\n\n"
    "## Problem\n\n## Solution\n\n## Why It Works\n\n## Context\n"
)


@pytest.fixture()
def client(tmp_path):
    """Flask test client pointed at a temp shares directory."""
    app.config["TESTING"] = True
    app.config["SHARES_DIR"] = str(tmp_path)
    try:
        yield tmp_path, app.test_client()
    finally:
        app.config.pop("SHARES_DIR", None)


# ---------------------------------------------------------------------------
# POST /api/validate
# ---------------------------------------------------------------------------


def test_validate_ok(client):
    _, c = client
    resp = c.post("/api/validate", json={"content": SAMPLE_MD})
    assert resp.status_code == 200
    assert resp.get_json() == {"is_valid": True, "violations": []}


def test_validate_reports_all_violations(client):
    _, c = client
    content = SAMPLE_MD.replace("slug: fix-x", "slug: Fix_X").replace("## Context\n", "")
    data = c.post("/api/validate", json={"content": content}).get_json()
    assert data["is_valid"] is False
    assert [(v["code"], v["name"], v["reason"]) for v in data["violations"]] == [
        ("InvalidField", "slug", "pattern"),
        ("MissingSection", "Context", None),
    ]


def test_validate_requires_string(client):
    _, c = client
    resp = c.post("/api/validate", json={"content": 5})
    assert resp.status_code == 400


def test_validate_missing_body(client):
    _, c = client
    resp = c.post("/api/validate")
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# /api/shares
# ---------------------------------------------------------------------------


def test_write_then_read(client):
    tmp, c = client
    resp = c.post("/api/shares/fix-x", json={"content": SAMPLE_MD})
    assert resp.status_code == 200
    assert (tmp / "fix-x" / "SHARE.md").read_text() == SAMPLE_MD

    resp = c.get("/api/shares/fix-x")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["frontmatter"]["slug"] == "fix-x"
    assert data["validation"]["is_valid"] is True


def test_write_invalid_rejected(client):
    tmp, c = client
    resp = c.post("/api/shares/fix-x", json={"content": "no frontmatter"})
    assert resp.status_code == 400
    assert resp.get_json()["violations"][0]["code"] == "MissingFrontmatter"
    assert not (tmp / "fix-x").exists()


def test_get_missing_share(client):
    _, c = client
    assert c.get("/api/shares/nope").status_code == 404


def test_get_bad_slug(client):
    _, c = client
    assert c.get("/api/shares/Bad_Slug").status_code == 400


def test_list_shares(client):
    tmp, c = client
    (tmp / "fix-x").mkdir()
    (tmp / "fix-x" / "SHARE.md").write_text(SAMPLE_MD)
    data = c.get("/api/shares").get_json()
    assert [s["slug"] for s in data["shares"]] == ["fix-x"]
    assert data["shares"][0]["valid"] is True


def test_create_share(client):
    tmp, c = client
    resp = c.post(
        "/api/shares",
        json={
            "title": "Pin lychee version",
            "problem": "Link checks break on upgrade.",
            "solution_type": "config",
            "tags": ["ci", "lychee"],
        },
    )
    assert resp.status_code == 201
    assert resp.get_json()["slug"] == "pin-lychee-version"
    assert (tmp / "pin-lychee-version" / "SHARE.md").is_file()

    again = c.post(
        "/api/shares",
        json={"title": "Pin lychee version", "solution_type": "config", "tags": ["ci"]},
    )
    assert again.status_code == 409


def test_create_share_bad_type(client):
    _, c = client
    resp = c.post("/api/shares", json={"title": "X", "solution_type": "hack", "tags": ["a"]})
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# GET /api/check
# ---------------------------------------------------------------------------


def test_check_tree(client):
    tmp, c = client
    (tmp / "fix-x").mkdir()
    (tmp / "fix-x" / "SHARE.md").write_text(SAMPLE_MD)
    (tmp / "wrong-dir").mkdir()
    (tmp / "wrong-dir" / "SHARE.md").write_text(SAMPLE_MD)

    resp = c.get("/api/check")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["is_valid"] is False
    assert data["file_count"] == 2
    assert data["results"]["fix-x/SHARE.md"]["is_valid"] is True
    codes = [v["code"] for v in data["results"]["wrong-dir/SHARE.md"]["violations"]]
    assert codes == ["SlugMismatch"]


def test_health(client):
    _, c = client
    assert c.get("/api/health").get_json() == {"ok": True}


def test_create_share_rejects_injected_created(client):
    tmp, c = client
    resp = c.post(
        "/api/shares",
        json={
            "title": "Fix Z",
            "problem": "Z breaks.",
            "solution_type": "fix",
            "tags": ["bug"],
            "created": "2026-02-08\ninjected: true\ntitle: Hijacked",
        },
    )
    assert resp.status_code == 400
    assert [v["name"] for v in resp.get_json()["violations"]] == ["created"]
    assert not (tmp / "fix-z").exists()


def test_create_share_created_must_be_string(client):
    _, c = client
    resp = c.post(
        "/api/shares",
        json={"title": "Fix Z", "solution_type": "fix", "tags": ["bug"], "created": 20260208},
    )
    assert resp.status_code == 400


def test_get_share_with_non_json_yaml_values(client):
    tmp, c = client
    (tmp / "fix-x").mkdir()
    extra = "blob: !!binary aGVsbG8=\nkinds: !!set {a, b}\n---\n\n"
    content = SAMPLE_MD.replace("---\n\n", extra, 1)
    (tmp / "fix-x" / "SHARE.md").write_text(content)

    resp = c.get("/api/shares/fix-x")
    assert resp.status_code == 200
    fm = resp.get_json()["frontmatter"]
    assert fm["blob"] == "hello"
    assert fm["kinds"] == ["a", "b"]
    assert c.get("/api/shares").status_code == 200
