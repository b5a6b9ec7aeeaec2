import json
import threading
import time
import unittest
from unittest.mock import patch

from app import app as flask_app
import app as app_mod
from game import (
    GameSession,
    ManualScheduler,
    World,
)


def _fixed_worlds():
    # First game: predator two rooms east of the start. Restarts get a calm world.
    yield World.from_layout(4, predator=(3, 1), gold=(1, 2), pits=[(4, 4)])
    while True:
        yield World.from_layout(4, predator=(4, 4), gold=(2, 1), pits=[(3, 4)])


class _SlowFrameLoop:
    """Stand-in loop whose construction is slow enough to expose racing creators."""
    created = []

    def __init__(self, field, fps):
        time.sleep(0.05)
        self.field = field
        self.running = False
        _SlowFrameLoop.created.append(self)

    def start(self):
        self.running = True

    def stop(self, timeout=None):
        self.running = False


class TestFlaskAPI(unittest.TestCase):
    def setUp(self):
        # Swap the hosted session for a deterministic one
        self._orig_session = app_mod.session
        self._orig_loop = app_mod.frame_loop
        self.clock = ManualScheduler()
        worlds = _fixed_worlds()
        app_mod.session = GameSession(world_factory=lambda: next(worlds), scheduler=self.clock)
        app_mod.frame_loop = None
        self.client = flask_app.test_client()

    def tearDown(self):
        if app_mod.frame_loop is not None:
            app_mod.frame_loop.stop()
        app_mod.session = self._orig_session
        app_mod.frame_loop = self._orig_loop

    def _post(self, url, payload=None):
        if payload is None:
            return self.client.post(url)
        return self.client.post(url, data=json.dumps(payload), content_type="application/json")

    def test_given_index_and_static_assets_when_requested_then_html_and_correct_mime(self):
        r = self.client.get("/")
        self.assertEqual(r.status_code, 200)
        self.assertIn(b"Wumpus World", r.data)

        rjs = self.client.get("/main.js")
        self.assertEqual(rjs.status_code, 200)
        self.assertIn("application/javascript", rjs.headers.get("Content-Type", ""))

        rpj = self.client.get("/particles.js")
        self.assertEqual(rpj.status_code, 200)
        self.assertIn("application/javascript", rpj.headers.get("Content-Type", ""))

        rcss = self.client.get("/styles.css")
        self.assertEqual(rcss.status_code, 200)
        self.assertIn("text/css", rcss.headers.get("Content-Type", ""))

    def test_given_new_session_when_state_requested_then_view_model_returned(self):
        r = self.client.get("/api/state")
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertTrue(d["ok"])
        view = d["view"]
        self.assertEqual(view["score"], 0)
        self.assertEqual(view["position"], [1, 1])
        self.assertEqual(view["phase"], "playing")
        self.assertIn("Welcome", view["message"])

    def test_given_predator_ahead_when_moving_twice_then_game_over_payload(self):
        r1 = self._post("/api/action/forward")
        d1 = r1.get_json()
        self.assertTrue(d1["ok"])
        self.assertTrue(d1["accepted"])
        self.assertEqual(d1["view"]["percepts"], ["stench"])

        d2 = self._post("/api/action/forward").get_json()
        self.assertEqual(d2["view"]["phase"], "lost")
        self.assertEqual(d2["view"]["score"], -1002)
        self.assertEqual(d2["view"]["outcome"]["title"], "Game Over")
        self.assertEqual(d2["view"]["outcome"]["finalScore"], -1002)
        self.assertFalse(any(d2["view"]["controls"].values()))

        # Terminal: further actions are ignored
        d3 = self._post("/api/action/turnLeft").get_json()
        self.assertTrue(d3["ok"])
        self.assertFalse(d3["accepted"])
        self.assertEqual(d3["view"]["score"], -1002)

    def test_given_shot_along_row_when_posted_then_kill_and_scream(self):
        d = self._post("/api/action/shoot").get_json()
        self.assertTrue(d["accepted"])
        self.assertIn("scream", d["view"]["percepts"])
        self.assertEqual(d["view"]["arrows"], 0)
        self.assertFalse(d["view"]["controls"]["shoot"])
        self.clock.advance(2.0)
        view = self.client.get("/api/state").get_json()["view"]
        self.assertEqual(view["percepts"], [])

    def test_given_kill_when_posted_then_view_carries_refresh_delays(self):
        self._post("/api/action/forward")
        d = self._post("/api/action/shoot").get_json()
        timers = d["view"]["timers"]
        self.assertEqual(timers, {"transientMs": 2000, "killRefreshMs": 1000})
        self.assertEqual(d["view"]["percepts"], ["stench", "scream"])
        # Stench is gone at the kill refresh, well before the scream expires
        self.clock.advance(timers["killRefreshMs"] / 1000)
        view = self.client.get("/api/state").get_json()["view"]
        self.assertEqual(view["percepts"], ["scream"])

    def test_given_wall_when_moving_then_rejected_with_bump(self):
        self._post("/api/action/turnRight")
        d = self._post("/api/action/forward").get_json()
        self.assertFalse(d["accepted"])
        self.assertEqual(d["message"], "Bump! You hit a wall.")
        self.assertIn("bump", d["view"]["percepts"])
        self.assertEqual(d["view"]["score"], -1)

    def test_given_lost_game_when_restart_posted_then_fresh_view(self):
        self._post("/api/action/forward")
        self._post("/api/action/forward")
        d = self._post("/api/restart").get_json()
        self.assertTrue(d["ok"])
        view = d["view"]
        self.assertEqual(view["phase"], "playing")
        self.assertEqual(view["score"], 0)
        self.assertEqual(view["arrows"], 1)
        self.assertFalse(view["hasGold"])
        self.assertIsNone(view["outcome"])
        self.assertEqual(view["percepts"], [])

    def test_given_unknown_action_when_posted_then_400(self):
        r = self._post("/api/action/dance")
        self.assertEqual(r.status_code, 400)
        d = r.get_json()
        self.assertFalse(d["ok"])
        self.assertIn("actions", d)

    def test_given_particles_when_requested_then_frame_and_resize(self):
        r = self.client.get("/api/particles")
        self.assertEqual(r.status_code, 200)
        frame = r.get_json()["frame"]
        self.assertEqual(len(frame["particles"]), app_mod.settings.particle_count)

        r2 = self._post("/api/particles/resize", {"width": 320, "height": 200})
        self.assertEqual(r2.status_code, 200)
        f2 = r2.get_json()["frame"]
        self.assertEqual((f2["width"], f2["height"]), (320.0, 200.0))

        r3 = self._post("/api/particles/resize", {"width": -1, "height": 200})
        self.assertEqual(r3.status_code, 400)
        self.assertFalse(r3.get_json()["ok"])

    def test_given_concurrent_first_requests_when_ensuring_loop_then_single_loop_started(self):
        _SlowFrameLoop.created = []
        barrier = threading.Barrier(4)
        loops = []

        def first_request():
            barrier.wait()
            loops.append(app_mod._ensure_frame_loop())

        with patch.object(app_mod, "FrameLoop", _SlowFrameLoop):
            workers = [threading.Thread(target=first_request) for _ in range(4)]
            for w in workers:
                w.start()
            for w in workers:
                w.join(timeout=5)

        self.assertEqual(len(_SlowFrameLoop.created), 1)
        self.assertEqual(len(loops), 4)
        self.assertTrue(all(loop is _SlowFrameLoop.created[0] for loop in loops))
        self.assertTrue(app_mod.frame_loop.running)


if __name__ == "__main__":
    unittest.main(verbosity=2)
