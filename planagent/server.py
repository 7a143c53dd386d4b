"""HTTP front end: serves the page and turns chat messages into plans."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Protocol

from flask import Flask, jsonify, request, send_file

from .executor import PlanExecutor
from .llm import DeepSeekHandler, LLMError
from .planning import PlanError, PlanService

DEFAULT_INDEX_PATH = "./internal/font/index.html"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
TOKEN_ENV = "token"


class Planner(Protocol):
    """Anything that turns a task description into a formatted plan."""

    def plan(self, task: str) -> str: ...


def create_app(service: Planner, index_path: str | os.PathLike[str] = DEFAULT_INDEX_PATH) -> Flask:
    """Build the web application around a planning service."""
    app = Flask(__name__)
    index_file = Path(index_path).resolve()

    @app.get("/")
    def serve_index():
        return send_file(index_file)

    @app.post("/chat")
    def handle_chat():
        body = request.get_json(silent=True)
        if body is None and request.get_data():
            return jsonify(error="Invalid request"), 400
        if body is None:
            body = {}
        if not isinstance(body, dict):
            return jsonify(error="Invalid request"), 400
        message = body.get("message", "")
        if message is None:
            message = ""
        if not isinstance(message, str):
            return jsonify(error="Invalid request"), 400

        try:
            plan = service.plan(message)
        except (PlanError, LLMError):
            return jsonify(error="internal error"), 400
        return jsonify(response=plan), 200

    @app.post("/code")
    def handle_code():
        return "", 200

    return app


def main(argv: list[str] | None = None) -> int:
    """Start the planning web server."""
    parser = argparse.ArgumentParser(description="Serve the planning agent over HTTP.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument("--index", default=DEFAULT_INDEX_PATH, help="page served at /")
    args = parser.parse_args(argv)

    handler = DeepSeekHandler(os.environ.get(TOKEN_ENV, ""))
    executor = PlanExecutor(handler)
    service = PlanService(handler, executor)
    app = create_app(service, args.index)
    try:
        app.run(host=args.host, port=args.port)
    finally:
        handler.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())