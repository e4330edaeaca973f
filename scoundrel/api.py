"""HTTP JSON API over the session registry (Flask).

Run with ``python -m scoundrel.api`` or the ``scoundrel-api`` script.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Optional

from flask import Flask, Response, current_app, g, jsonify, request

from .config import Settings, configure_logging
from .errors import InvalidIndex, ScoundrelError, SessionNotFound
from .sessions import SessionRegistry

__all__ = ["create_app", "main"]

log = logging.getLogger(__name__)

REGISTRY_KEY = "scoundrel.registry"
_INDEX_PATTERN = re.compile(r"-?[0-9]+")


def _registry() -> SessionRegistry:
    return current_app.extensions[REGISTRY_KEY]


def _parse_index(raw: str) -> int:
    if _INDEX_PATTERN.fullmatch(raw) is None:
        raise InvalidIndex(raw)
    return int(raw)


def _error(message: str, code: str, status: int):
    return jsonify({"error": message, "code": code}), status


def create_app(
    registry: Optional[SessionRegistry] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    """Build the Flask application around ``registry``.

    A fresh registry is created when none is supplied; handlers reach it
    through ``app.extensions`` rather than a module global.
    """

    if settings is None:
        settings = Settings()
    if registry is None:
        registry = SessionRegistry(max_health=settings.max_health)
    app = Flask(__name__)
    app.extensions[REGISTRY_KEY] = registry
    cors_origin = settings.cors_origin

    @app.before_request
    def _start_timer() -> None:
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response: Response) -> Response:
        response.headers["Access-Control-Allow-Origin"] = cors_origin
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        started = g.get("request_started")
        if started is not None:
            elapsed_ms = (time.perf_counter() - started) * 1000
            log.info(
                "%s %s %s %.1fms",
                request.method,
                request.path,
                response.status_code,
                elapsed_ms,
            )
        return response

    @app.errorhandler(SessionNotFound)
    def _session_not_found(exc: SessionNotFound):
        return _error(str(exc), exc.code, 404)

    @app.errorhandler(ScoundrelError)
    def _game_error(exc: ScoundrelError):
        return _error(str(exc), exc.code, 400)

    @app.post("/api/games")
    def create_game():
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return _error("Request body must be a JSON object", "bad_request", 400)
        seed = data.get("seed")
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            return _error("seed must be an integer", "bad_request", 400)
        game_id = _registry().create(seed=seed)
        return jsonify({"game_id": game_id}), 201

    @app.get("/api/games/<game_id>")
    def get_game(game_id: str):
        return jsonify(_registry().state(game_id).to_payload())

    @app.post("/api/games/<game_id>/play/<index>")
    def play_card(game_id: str, index: str):
        snapshot = _registry().play_card(game_id, _parse_index(index))
        return jsonify(snapshot.to_payload())

    @app.post("/api/games/<game_id>/play-without-weapon/<index>")
    def play_card_without_weapon(game_id: str, index: str):
        snapshot = _registry().play_card_without_weapon(game_id, _parse_index(index))
        return jsonify(snapshot.to_payload())

    @app.post("/api/games/<game_id>/skip")
    def skip_room(game_id: str):
        return jsonify(_registry().skip_room(game_id).to_payload())

    @app.delete("/api/games/<game_id>")
    def delete_game(game_id: str):
        _registry().delete(game_id)
        return "", 204

    @app.post("/api/games/cleanup")
    def cleanup_games():
        return jsonify({"removed": _registry().cleanup()})

    @app.get("/api/ping")
    def ping():
        return jsonify({"ok": True, "sessions": _registry().count()})

    return app


def main() -> None:
    settings = Settings.load()
    configure_logging(settings.log_level)
    app = create_app(settings=settings)
    log.info("Server starting on %s:%s", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port, threaded=True)


if __name__ == "__main__":
    main()
