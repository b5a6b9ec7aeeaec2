from __future__ import annotations

import logging
import os
import threading
from typing import Any, Optional

from flask import Flask, jsonify, request, send_from_directory

from game import (
    FrameLoop,
    GameSession,
    ParticleField,
    TimerScheduler,
    generate_world,
    load_settings,
)

settings = load_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
)
log = logging.getLogger(__name__)

# Serve static assets from ./static (explicit absolute path)
STATIC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "static"))
app = Flask(__name__, static_url_path="/static", static_folder=STATIC_DIR)

DEFAULT_VIEWPORT = (1280, 720)


_seeds = iter([settings.seed])


def _new_world():
    # Only the first world honours WUMPUS_SEED; restarts are always fresh.
    return generate_world(settings.grid_size, settings.pit_count, seed=next(_seeds, None))


# The one game this server hosts. Routes look it up at call time so tests can swap it.
session = GameSession(
    world_factory=_new_world,
    scheduler=TimerScheduler(),
    transient_seconds=settings.transient_seconds,
    kill_refresh_seconds=settings.kill_refresh_seconds,
)

frame_loop: Optional[FrameLoop] = None
_frame_loop_lock = threading.Lock()


def _ensure_frame_loop() -> FrameLoop:
    global frame_loop
    # Poll and resize requests can race to create the loop; only one may win.
    with _frame_loop_lock:
        if frame_loop is None:
            field = ParticleField(*DEFAULT_VIEWPORT, count=settings.particle_count)
            frame_loop = FrameLoop(field, fps=settings.particle_fps)
        if not frame_loop.running:
            frame_loop.start()
        return frame_loop


def _read_viewport(body: Any) -> Optional[tuple]:
    try:
        width = float(body["width"])
        height = float(body["height"])
    except (KeyError, TypeError, ValueError):
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


# ---------- Static routes ----------

@app.get("/")
def index() -> Any:
    return send_from_directory(app.static_folder, "index.html")


def _static_with_type(name: str, content_type: str) -> Any:
    resp = send_from_directory(app.static_folder, name)
    resp.headers["Content-Type"] = content_type
    return resp


@app.get("/main.js")
def main_js() -> Any:
    return _static_with_type("main.js", "application/javascript; charset=utf-8")


@app.get("/particles.js")
def particles_js() -> Any:
    return _static_with_type("particles.js", "application/javascript; charset=utf-8")


@app.get("/styles.css")
def styles_css() -> Any:
    return _static_with_type("styles.css", "text/css; charset=utf-8")


@app.get("/static/<path:filename>")
def static_files(filename: str) -> Any:
    return send_from_directory(app.static_folder, filename)


# ---------- Game API ----------

@app.get("/api/state")
def api_state() -> Any:
    return jsonify({"ok": True, "view": session.view()})


@app.post("/api/action/<name>")
def api_action(name: str) -> Any:
    if name not in GameSession.ACTIONS:
        return jsonify({"ok": False, "error": f"Unknown action: {name}", "actions": sorted(GameSession.ACTIONS)}), 400
    result = session.perform(name)
    log.info("Action %s -> accepted=%s %s", name, result.accepted, result.message)
    return jsonify({
        "ok": True,
        "accepted": result.accepted,
        "message": result.message,
        "view": session.view(),
    })


@app.post("/api/restart")
def api_restart() -> Any:
    result = session.restart_game()
    return jsonify({
        "ok": True,
        "accepted": result.accepted,
        "message": result.message,
        "view": session.view(),
    })


# ---------- Decorative particles ----------

@app.get("/api/particles")
def api_particles() -> Any:
    loop = _ensure_frame_loop()
    with loop.lock:
        frame = loop.field.frame()
    return jsonify({"ok": True, "frame": frame})


@app.post("/api/particles/resize")
def api_particles_resize() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    viewport = _read_viewport(body)
    if viewport is None:
        return jsonify({"ok": False, "error": "width and height must be positive numbers"}), 400
    loop = _ensure_frame_loop()
    with loop.lock:
        loop.field.resize(*viewport)
        frame = loop.field.frame()
    return jsonify({"ok": True, "frame": frame})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=settings.port, debug=settings.debug)
