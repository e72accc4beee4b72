#!/usr/bin/env python3
"""
LifeBoard Server
----------------
Local JSON API over the LifeBoard store, for whatever front end renders the
dashboard. Every route is a thin call into lifeboard/.

Usage:
    python lifeboard_server.py [--config config.yaml]

API:
    GET    /api/search?q=           → all-categories view (3 per kind + counts)
    GET    /api/search/<kind>?q=    → every match of one kind
    GET    /api/matrix              → tasks grouped by quadrant
    POST   /api/matrix/<id>         → body { quadrant }
    GET    /api/<kind>              → full collection
    POST   /api/<kind>              → create (422 when rejected)
    PUT    /api/notes/<id>, /api/journals/<id>
    POST   /api/tasks/<id>/toggle, /api/reminders/<id>/toggle
    DELETE /api/<kind>/<id>
    GET    /api/dashboard, /api/quote
    GET    /api/theme?prefers_dark=1, POST /api/theme { theme } | { toggle: true }
    POST   /api/auth/signin | signup | signout   (only with a remote configured)
"""

import argparse
import logging
from typing import Optional

from flask import Flask, abort, jsonify, request

from lifeboard.config import Config
from lifeboard.dashboard import summarize
from lifeboard.preferences import Preferences
from lifeboard.quadrant import QUADRANT_ACTIONS, QuadrantBoard
from lifeboard.quotes import QuoteOfDay
from lifeboard.remote import AuthError, IdentityClient, RemoteTaskSource
from lifeboard.schema import Quadrant
from lifeboard.search import SearchIndex, SearchKind
from lifeboard.slots import SlotBackend, SqliteSlots
from lifeboard.store import EntityStore

logger = logging.getLogger(__name__)

KINDS = [k.value for k in SearchKind]


def _rejected():
    return jsonify({"error": "rejected"}), 422


def create_app(config: Optional[Config] = None, slots: Optional[SlotBackend] = None) -> Flask:
    cfg = config or Config.load()
    slots = slots if slots is not None else SqliteSlots(cfg.db_path)
    store = EntityStore(slots)
    search_index = SearchIndex(store)
    prefs = Preferences(slots)
    quotes = QuoteOfDay(slots, url=cfg.quote_url, timeout=cfg.request_timeout)

    identity = remote = None
    if cfg.remote_url:
        identity = IdentityClient(cfg.remote_url, cfg.remote_api_key, timeout=cfg.request_timeout)
        remote = RemoteTaskSource(cfg.remote_url, cfg.remote_api_key, timeout=cfg.request_timeout)

    app = Flask(__name__)
    app.config["LIFEBOARD_STORE"] = store

    def slice_for(kind: str):
        if kind not in KINDS:
            abort(404, f"unknown collection: {kind}")
        return getattr(store, kind)

    def body() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    # ── Search ───────────────────────────────────────────────────────────────

    @app.route("/api/search")
    def api_search():
        results = search_index.search(request.args.get("q", ""))
        return jsonify(results.to_dict(preview=True))

    @app.route("/api/search/<kind>")
    def api_search_kind(kind):
        if kind not in KINDS:
            abort(404, f"unknown collection: {kind}")
        results = search_index.search(request.args.get("q", ""))
        items = results.category(kind)
        return jsonify({
            "query": results.query,
            "kind":  kind,
            "count": len(items),
            "items": [r.to_dict() for r in items],
        })

    # ── Priority matrix ──────────────────────────────────────────────────────

    @app.route("/api/matrix")
    def api_matrix():
        notifications = []
        board = QuadrantBoard(
            store, identity=identity, remote=remote,
            notify=lambda title, message: notifications.append({"title": title, "message": message}),
        )
        groups = board.grouped()
        return jsonify({
            "quadrants": [
                {
                    "quadrant": q.value,
                    "title":    q.label,
                    "action":   QUADRANT_ACTIONS[q],
                    "tasks":    [t.to_dict() for t in tasks],
                }
                for q, tasks in groups.items()
            ],
            "notifications": notifications,
        })

    @app.route("/api/matrix/<task_id>", methods=["POST"])
    def api_matrix_move(task_id):
        quadrant = Quadrant.from_str(body().get("quadrant"))
        if quadrant is None:
            return jsonify({"error": "invalid quadrant"}), 400
        QuadrantBoard(store).move_task_to_quadrant(task_id, quadrant)
        return jsonify({"id": task_id, "quadrant": quadrant.value})

    # ── Collections ──────────────────────────────────────────────────────────

    @app.route("/api/<kind>", methods=["GET"])
    def api_list(kind):
        return jsonify([r.to_dict() for r in slice_for(kind).list()])

    @app.route("/api/<kind>", methods=["POST"])
    def api_create(kind):
        target = slice_for(kind)
        data = body()
        if kind == "tasks":
            record = target.add(data.get("title", ""), quadrant=data.get("quadrant"))
        elif kind == "notes":
            record = target.create(title=data.get("title", ""), content=data.get("content", ""))
        elif kind == "bookmarks":
            tags = data.get("tags")
            record = target.add(data.get("title", ""), data.get("url", ""), tags=tags if isinstance(tags, list) else [])
        elif kind == "reminders":
            record = target.add(data.get("title", ""), data.get("date", ""), time=data.get("time", ""))
        else:
            record = target.create(
                title=data.get("title"),
                content=data.get("content", ""),
                mood=data.get("mood", ""),
                date=data.get("date"),
            )
        if record is None:
            return _rejected()
        return jsonify(record.to_dict()), 201

    @app.route("/api/notes/<record_id>", methods=["PUT"])
    def api_note_edit(record_id):
        data = body()
        note = store.notes.edit(record_id, title=data.get("title"), content=data.get("content"))
        if note is None:
            abort(404)
        return jsonify(note.to_dict())

    @app.route("/api/journals/<record_id>", methods=["PUT"])
    def api_journal_edit(record_id):
        data = body()
        entry = store.journals.edit(
            record_id,
            title=data.get("title"),
            content=data.get("content"),
            mood=data.get("mood"),
            date=data.get("date"),
        )
        if entry is None:
            abort(404)
        return jsonify(entry.to_dict())

    @app.route("/api/<kind>/<record_id>/toggle", methods=["POST"])
    def api_toggle(kind, record_id):
        if kind not in ("tasks", "reminders"):
            abort(404)
        record = slice_for(kind).toggle(record_id)
        if record is None:
            abort(404)
        return jsonify(record.to_dict())

    @app.route("/api/<kind>/<record_id>", methods=["DELETE"])
    def api_delete(kind, record_id):
        return jsonify({"deleted": slice_for(kind).delete(record_id)})

    # ── Dashboard widgets ────────────────────────────────────────────────────

    @app.route("/api/dashboard")
    def api_dashboard():
        return jsonify(summarize(store).to_dict())

    @app.route("/api/quote")
    def api_quote():
        return jsonify(quotes.get().to_dict())

    @app.route("/api/theme", methods=["GET"])
    def api_theme_get():
        prefers_dark = request.args.get("prefers_dark", "") in ("1", "true")
        return jsonify({"theme": prefs.theme(prefers_dark)})

    @app.route("/api/theme", methods=["POST"])
    def api_theme_set():
        data = body()
        if data.get("toggle"):
            return jsonify({"theme": prefs.toggle_theme(bool(data.get("prefers_dark")))})
        try:
            prefs.set_theme(data.get("theme", ""))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"theme": data["theme"]})

    # ── Identity ─────────────────────────────────────────────────────────────

    @app.route("/api/auth/<action>", methods=["POST"])
    def api_auth(action):
        if identity is None:
            return jsonify({"error": "remote not configured"}), 503
        data = body()
        try:
            if action == "signin":
                session = identity.sign_in(data.get("email", ""), data.get("password", ""))
                return jsonify({"email": session.email, "user_id": session.user_id})
            if action == "signup":
                session = identity.sign_up(data.get("email", ""), data.get("password", ""))
                return jsonify({"signed_in": session is not None})
            if action == "signout":
                identity.sign_out()
                return jsonify({"signed_in": False})
        except AuthError as e:
            logger.warning("Auth %s failed: %s", action, e)
            return jsonify({"error": str(e)}), 401
        abort(404)

    return app


def main():
    parser = argparse.ArgumentParser(description="LifeBoard local API")
    parser.add_argument("--config", help="Path to config.yaml")
    args = parser.parse_args()

    cfg = Config.load(args.config)
    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(cfg)
    logger.info("LifeBoard API on http://%s:%d (db: %s)", cfg.host, cfg.port, cfg.db_path)
    app.run(host=cfg.host, port=cfg.port)


if __name__ == "__main__":
    main()
