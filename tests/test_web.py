import unittest
from unittest.mock import Mock, patch

from flask import Flask
from flask.testing import FlaskClient

from badge_config import ServiceConfig
from badge_service_web import create_app, parse_badge_request, BadRequest
from badge_templates import get_template
from fonts import FontSettings


class ParseBadgeRequestTests(unittest.TestCase):
    def test_strips_fields(self) -> None:
        parsed = parse_badge_request({"name": "  Ada ", "company": " Acme "})
        self.assertEqual((parsed.name, parsed.company), ("Ada", "Acme"))

    def test_company_optional(self) -> None:
        self.assertEqual(parse_badge_request({"name": "Ada"}).company, "")
        self.assertEqual(
            parse_badge_request({"name": "Ada", "company": None}).company, ""
        )

    def test_rejects_bad_payloads(self) -> None:
        for payload in (None, [], {"name": ""}, {"name": 3}, {"name": "Ada", "company": 4}):
            with self.assertRaises(BadRequest):
                parse_badge_request(payload)


class WebServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.config = ServiceConfig(name="badge-generator", service_id="ABC123")
        self.app: Flask = create_app(
            self.config,
            template=get_template("plain"),
            font=FontSettings(font_name="Helvetica-Bold", weight=700),
        )
        self.app.config["TESTING"] = True
        self.client: FlaskClient = self.app.test_client()

    def test_generate_pdf(self) -> None:
        response = self.client.post(
            "/generate/badge",
            json={"name": "Grace Hopper", "company": "Acme Labs"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "application/pdf")
        self.assertTrue(response.data.startswith(b"%PDF"))

    def test_generate_png(self) -> None:
        response = self.client.post(
            "/generate/badge?format=png",
            json={"name": "Ada Lovelace"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "image/png")

    def test_missing_name(self) -> None:
        response = self.client.post("/generate/badge", json={"company": "Acme"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.headers.get("Badge-Error"), "'name' is required")
        self.assertEqual(response.get_json(), {"error": "'name' is required"})

    def test_not_json(self) -> None:
        response = self.client.post("/generate/badge", data="Ada")
        self.assertEqual(response.status_code, 400)

    def test_unknown_format(self) -> None:
        response = self.client.post(
            "/generate/badge?format=gif", json={"name": "Ada"}
        )
        self.assertEqual(response.status_code, 400)

    def test_newline_in_format_stays_a_bad_request(self) -> None:
        response = self.client.post(
            "/generate/badge?format=pdf%0Ax", json={"name": "Ada"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.headers.get("Badge-Error"), "unsupported format 'pdf x'"
        )
        self.assertEqual(
            response.get_json(), {"error": "unsupported format 'pdf\nx'"}
        )

    @patch("badge_service_web.generate_badge")
    def test_render_failure(self, mock_generate: Mock) -> None:
        mock_generate.side_effect = RuntimeError("disk on fire")
        with self.assertLogs("badge_service_web", level="ERROR"):
            response = self.client.post("/generate/badge", json={"name": "Ada"})
        self.assertEqual(response.status_code, 500)
        self.assertIn("disk on fire", response.headers.get("Badge-Error", ""))

    @patch("badge_service_web.generate_badge")
    def test_multiline_render_failure(self, mock_generate: Mock) -> None:
        mock_generate.side_effect = RuntimeError("disk\non fire")
        with self.assertLogs("badge_service_web", level="ERROR"):
            response = self.client.post("/generate/badge", json={"name": "Ada"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.headers.get("Badge-Error"), "badge generation failed: disk on fire"
        )
        self.assertEqual(
            response.get_json(), {"error": "badge generation failed: disk\non fire"}
        )

    def test_frequency(self) -> None:
        self.assertEqual(self.client.get("/badge/freq").get_json(), {})
        for _ in range(2):
            self.client.post("/generate/badge", json={"name": "Ada"})
        self.client.post("/generate/badge", json={"name": "Grace"})
        self.client.post("/generate/badge", json={"company": "nobody"})
        self.assertEqual(
            self.client.get("/badge/freq").get_json(),
            {"Ada": 2, "Grace": 1},
        )

    def test_ping(self) -> None:
        reply = self.client.get("/srv/ping").get_json()
        self.assertEqual(
            reply,
            {"name": "badge-generator", "id": "ABC123", "version": "0.0.1"},
        )

    def test_ping_filters_by_name_and_id(self) -> None:
        self.assertEqual(self.client.get("/srv/PING/BADGE-GENERATOR").status_code, 200)
        self.assertEqual(
            self.client.get("/srv/PING/BADGE-GENERATOR/abc123").status_code, 200
        )
        self.assertEqual(self.client.get("/srv/PING/other").status_code, 404)
        self.assertEqual(
            self.client.get("/srv/PING/BADGE-GENERATOR/zzz").status_code, 404
        )

    def test_unknown_verb(self) -> None:
        self.assertEqual(self.client.get("/srv/restart").status_code, 404)

    def test_info(self) -> None:
        reply = self.client.get("/srv/info").get_json()
        self.assertIn("/generate/badge", reply["endpoints"])
        self.assertEqual(reply["description"], self.config.description)

    def test_status_counts_requests(self) -> None:
        self.client.post("/generate/badge", json={"name": "Ada"})
        self.client.post("/generate/badge", json={})
        reply = self.client.get("/srv/status").get_json()
        stats = reply["stats"][0]
        self.assertEqual(stats["name"], "generate")
        self.assertEqual(stats["num_requests"], 2)
        self.assertEqual(stats["num_errors"], 1)
        self.assertIn("started", reply)


if __name__ == "__main__":
    unittest.main()
