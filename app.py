#!/usr/bin/env python3
"""Shareful Server: REST API for validating and managing SHARE.md documents."""

import argparse

from flask import Flask

from config import PORT, SHARES_DIR

app = Flask(__name__)

from routes.shares import bp as shares_bp  # noqa: E402

app.register_blueprint(shares_bp)


@app.route("/api/health")
def health():
    return {"ok": True}


def main():
    """Entry point for `shareful-server` CLI command."""
    parser = argparse.ArgumentParser(description="Shareful Server")
    parser.add_argument(
        "--port", type=int, default=PORT, help=f"Port to listen on (default: {PORT})"
    )
    parser.add_argument(
        "--shares-dir",
        default=SHARES_DIR,
        help=f"Directory holding <slug>/SHARE.md (default: {SHARES_DIR})",
    )
    cli_args = parser.parse_args()

    # Routes read this per request; unset falls back to config.SHARES_DIR
    app.config["SHARES_DIR"] = cli_args.shares_dir

    print("\n  Shareful Server v0.1.0")
    print(f"  Port: {cli_args.port}")
    print(f"  Shares: {cli_args.shares_dir}\n")

    app.run(port=cli_args.port, threaded=True)


if __name__ == "__main__":
    main()
