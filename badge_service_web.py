"""HTTP service that renders badges on request."""

from __future__ import annotations

import argparse
import logging
import os
import time
from typing import Any

from flask import Flask, Response, jsonify, request
from flask.typing import ResponseReturnValue

from badge_config import (
    ERROR_HEADER,
    FREQUENCY_ENDPOINT,
    GENERATE_ENDPOINT,
    ServiceConfig,
    configure_logging,
)
from badge_generation import OUTPUT_FORMATS, generate_badge
from badge_stats import FrequencyCounter, ServiceStats
from badge_templates import BadgeTemplate, get_template
from badge_types import BadgeRequest
from fonts import FontSettings, build_badge_font

__all__ = ["run_web_app", "create_app", "create_app_from_env"]

logger = logging.getLogger(__name__)

SERVICE_VERBS = ("ping", "info", "status")


class BadRequest(ValueError):
    """Raised when a request body cannot be turned into a badge."""


def parse_badge_request(payload: Any) -> BadgeRequest:
    if not isinstance(payload, dict):
        raise BadRequest("request body must be a JSON object")
    name = payload.get("name")
    company = payload.get("company") or ""
    if not isinstance(name, str) or not name.strip():
        raise BadRequest("'name' is required")
    if not isinstance(company, str):
        raise BadRequest("'company' must be a string")
    return BadgeRequest(name=name.strip(), company=company.strip())


def _error(message: str, status: int) -> Response:
    response = jsonify({"error": message})
    response.status_code = status
    # header values must stay on one line
    response.headers[ERROR_HEADER] = " ".join(message.split())
    return response


def create_app(
    config: ServiceConfig,
    template: BadgeTemplate | None = None,
    font: FontSettings | None = None,
) -> Flask:
    """Create the Flask app serving badges for ``config``."""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key

    badge_template = template or get_template(config.template, config.template_path)
    badge_font = font or build_badge_font(config.font_family, config.font_weight)
    width, height = badge_template.surface_size
    logger.info(
        "using %s template (%gx%g) with font %s",
        badge_template.name,
        width,
        height,
        badge_font.font_name,
    )
    frequency = FrequencyCounter()
    stats = ServiceStats()

    def _service_matches(name: str | None, service_id: str | None) -> bool:
        if name and name.upper() != config.name.upper():
            return False
        if service_id and service_id.upper() != config.service_id.upper():
            return False
        return True

    def _ping() -> dict[str, Any]:
        return {
            "name": config.name,
            "id": config.service_id,
            "version": config.version,
        }

    def _info() -> dict[str, Any]:
        return {
            **_ping(),
            "description": config.description,
            "endpoints": [GENERATE_ENDPOINT, FREQUENCY_ENDPOINT],
        }

    def _status() -> dict[str, Any]:
        return {
            **_ping(),
            "started": stats.started.isoformat(),
            "stats": [
                {"name": "generate", **stats.snapshot().as_dict()},
            ],
        }

    @app.route(GENERATE_ENDPOINT, methods=["POST"])
    def generate() -> ResponseReturnValue:  # pyright: ignore[reportUnusedFunction]
        start = time.perf_counter()
        output = (request.args.get("format") or "pdf").lower()
        highres = (request.args.get("highres") or "").lower() in {"1", "true", "yes", "on"}
        try:
            if output not in OUTPUT_FORMATS:
                raise BadRequest(f"unsupported format '{output}'")
            badge_request = parse_badge_request(request.get_json(silent=True))
        except BadRequest as exc:
            logger.warning("rejected badge request: %s", exc)
            stats.record(time.perf_counter() - start, str(exc))
            return _error(str(exc), 400)

        try:
            data = generate_badge(
                badge_request,
                badge_template,
                badge_font,
                output=output,
                highres=highres,
            )
        except Exception as exc:
            logger.exception("badge generation failed for %r", badge_request.name)
            stats.record(time.perf_counter() - start, str(exc))
            return _error(f"badge generation failed: {exc}", 500)

        frequency.record(badge_request.name)
        stats.record(time.perf_counter() - start)
        logger.info(
            "generated %s badge for %r (%d bytes)",
            output,
            badge_request.name,
            len(data),
        )
        return Response(data, mimetype=OUTPUT_FORMATS[output])

    @app.route(FREQUENCY_ENDPOINT, methods=["GET"])
    def badge_frequency() -> ResponseReturnValue:  # pyright: ignore[reportUnusedFunction]
        return jsonify(frequency.snapshot())

    @app.route("/srv/<verb>", methods=["GET"])
    @app.route("/srv/<verb>/<name>", methods=["GET"])
    @app.route("/srv/<verb>/<name>/<service_id>", methods=["GET"])
    def service_query(  # pyright: ignore[reportUnusedFunction]
        verb: str,
        name: str | None = None,
        service_id: str | None = None,
    ) -> ResponseReturnValue:
        verb = verb.lower()
        if verb not in SERVICE_VERBS:
            return _error(f"unknown verb '{verb}'", 404)
        if not _service_matches(name, service_id):
            return _error("no matching service", 404)
        if verb == "ping":
            return jsonify(_ping())
        if verb == "info":
            return jsonify(_info())
        return jsonify(_status())

    return app


def create_app_from_env() -> Flask:
    """Create the Flask app using BADGE_* environment variables."""
    config = ServiceConfig.from_env()
    configure_logging(config.log_level)
    return create_app(config)


def run_web_app(config: ServiceConfig, host: str, port: int) -> None:
    """Launch the badge service on ``host``:``port``."""
    app = create_app(config)

    use_reloader_env = os.getenv("USE_RELOADER")
    use_reloader = (
        str(use_reloader_env).lower() in {"1", "true", "yes", "on"}
        if use_reloader_env is not None
        else False
    )
    logger.info(
        "starting %s %s (%s) on %s:%d",
        config.name,
        config.version,
        config.service_id,
        host,
        port,
    )
    app.run(host=host, port=port, debug=False, use_reloader=use_reloader)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the badge service."""
    parser = argparse.ArgumentParser(description="Badge generator service")
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host/IP to listen on (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=4000,
        help="Port to listen on (default: 4000).",
    )

    args = parser.parse_args(argv)

    config = ServiceConfig.from_env()
    configure_logging(config.log_level)
    run_web_app(config, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
