"""
Tests for the Flask integration
"""

import logging
import os
import tempfile
import unittest

from flask import Flask

from gateway.app import create_app
from gateway.middleware import PlaceholderDump
from placeholder_dump.config import EmitterConfig
from placeholder_dump.emitter import BASE_LOGGER_NAME
from placeholder_dump.utils.config_validator import ConfigError


class TestPlaceholderDumpExtension(unittest.TestCase):
    """Test cases for the before_request hook."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.path = os.path.join(self.tmp.name, "requests.log")

    def read(self):
        with open(self.path, "r", encoding="utf-8") as f:
            return f.read()

    def make_app(self, emitters):
        app = create_app("testing", PLACEHOLDER_DUMP=emitters)

        @app.route("/a")
        def view_a():
            return "view-a"

        @app.route("/api/items", methods=["GET", "POST"])
        def items():
            return "items"

        return app

    def test_request_line_written(self):
        app = self.make_app([{"content": "{method} {path}", "file": self.path}])

        resp = app.test_client().get("/a")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_data(as_text=True), "view-a")
        self.assertEqual(self.read(), "GET /a\n")

    def test_one_line_per_request(self):
        app = self.make_app([{"content": "{method} {uri}", "file": self.path}])
        client = app.test_client()

        client.get("/a?x=1")
        client.post("/api/items")
        client.get("/missing")

        self.assertEqual(self.read(), "GET /a?x=1\nPOST /api/items\nGET /missing\n")

    def test_match_filters_requests(self):
        app = self.make_app([
            {"content": "{method} {path}", "file": self.path, "match": {"path": "/api/*", "method": "POST"}},
        ])
        client = app.test_client()

        client.get("/a")
        client.get("/api/items")
        client.post("/api/items")

        self.assertEqual(self.read(), "POST /api/items\n")

    def test_logger_sink(self):
        app = self.make_app([{"content": "{header.X-Request-Id}", "logger_suffix": "access"}])

        with self.assertLogs(f"{BASE_LOGGER_NAME}.access", "INFO") as cm:
            app.test_client().get("/a", headers={"X-Request-Id": "req-42"})

        self.assertEqual(cm.records[0].context["content"], "req-42")

    def test_write_failure_does_not_change_response(self):
        bad = os.path.join(self.tmp.name, "missing-dir", "out.log")
        app = self.make_app([{"content": "{method}", "file": bad}])

        with self.assertLogs(BASE_LOGGER_NAME, "ERROR"):
            resp = app.test_client().get("/a")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_data(as_text=True), "view-a")

    def test_empty_content_continues(self):
        app = self.make_app([{"content": "{query.id}", "file": self.path}])

        with self.assertLogs(BASE_LOGGER_NAME, "WARNING"):
            resp = app.test_client().get("/a")

        self.assertEqual(resp.status_code, 200)
        self.assertFalse(os.path.exists(self.path))

    def test_emitters_run_in_order(self):
        app = self.make_app([
            {"content": "first {path}", "file": self.path},
            {"content": "second {path}", "file": self.path},
        ])
        app.test_client().get("/a")
        self.assertEqual(self.read(), "first /a\nsecond /a\n")

    def test_invalid_config_blocks_startup(self):
        with self.assertRaises(ConfigError):
            self.make_app([{"content": "{path}"}])

    def test_yaml_config_file(self):
        cfg = os.path.join(self.tmp.name, "emitters.yaml")
        with open(cfg, "w", encoding="utf-8") as f:
            f.write("emitters:\n  - content: '{method} {path}'\n    file: '%s'\n" % self.path)

        app = create_app("testing", PLACEHOLDER_DUMP_CONFIG=cfg)
        app.test_client().get("/api/health")

        self.assertEqual(self.read(), "GET /api/health\n")

    def test_missing_yaml_config_is_skipped(self):
        app = create_app("testing", PLACEHOLDER_DUMP_CONFIG=os.path.join(self.tmp.name, "nope.yaml"))
        self.assertEqual(app.extensions["placeholder_dump"].emitters, [])

    def test_init_app_with_explicit_emitters(self):
        app = Flask(__name__)
        ext = PlaceholderDump(emitters=[EmitterConfig(content="{path}", file=self.path)])
        ext.init_app(app)

        @app.route("/x")
        def view_x():
            return "x"

        app.test_client().get("/x")
        self.assertEqual(self.read(), "/x\n")
        self.assertIs(app.extensions["placeholder_dump"], ext)

    def test_shutdown_cleans_up(self):
        app = self.make_app([{"content": "{path}", "file": self.path}])
        ext = app.extensions["placeholder_dump"]
        ext.shutdown()
        self.assertEqual([e.provisioned for e in ext.emitters], [False])
        self.assertFalse(ext.enabled)

    def test_requests_after_shutdown_still_served(self):
        app = self.make_app([{"content": "{path}", "file": self.path}])
        app.extensions["placeholder_dump"].shutdown()

        resp = app.test_client().get("/a")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_data(as_text=True), "view-a")
        self.assertFalse(os.path.exists(self.path))

    def test_null_byte_in_resolved_path(self):
        template = os.path.join(self.tmp.name, "{query.name}.log")
        app = self.make_app([{"content": "{method}", "file": template}])

        with self.assertLogs(BASE_LOGGER_NAME, "ERROR"):
            resp = app.test_client().get("/a?name=x%00y")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_data(as_text=True), "view-a")

    def test_init_app_attaches_log_handler(self):
        app = Flask(__name__)
        app.config["PLACEHOLDER_DUMP_LOGGER"] = "gateway.tests.attached"
        PlaceholderDump(app, emitters=[{"content": "{path}", "logger_suffix": "access"}])

        base = logging.getLogger("gateway.tests.attached")
        self.assertTrue(base.handlers)
        self.assertTrue(base.isEnabledFor(logging.INFO))



class TestHealth(unittest.TestCase):
    """Test cases for the health endpoint."""

    def test_health(self):
        app = create_app("testing", PLACEHOLDER_DUMP=[{"content": "{path}", "logger_suffix": "h"}])
        data = app.test_client().get("/api/health").get_json()

        self.assertEqual(data["status"], "ok")
        self.assertEqual(data["emitters"], [{"file": "", "logger_suffix": "h", "provisioned": True}])


if __name__ == "__main__":
    unittest.main()
